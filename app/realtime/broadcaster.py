# 게시글 변경을 WebSocket 구독자에게 실시간으로 전달
# fire-and-forget: 응답 확인, 재시도, 나중에 접속한 클라이언트에 대한 재전송 없음.
# 전송에 실패한 구독자는 목록에서 뺌.

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import Future
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger(__name__)

CHANNEL = "posts"


class Broadcaster:
    def __init__(self) -> None:
        self._subscribers: set[WebSocket] = set()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._pending: set[asyncio.Task] = set()

    @property
    def started(self) -> bool:
        return self._loop is not None and not self._loop.is_closed()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def start(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        # WebSocket 연결을 가진 이벤트 루프에 묶음
        self._loop = loop or asyncio.get_running_loop()
        logger.info("Broadcaster started")

    async def stop(self) -> None:
        subscribers = list(self._subscribers)
        self._subscribers.clear()
        for websocket in subscribers:
            try:
                await websocket.close(code=1001)
            except Exception as e:
                logger.debug("Error closing subscriber during shutdown: %s", e)
        self._loop = None
        logger.info("Broadcaster stopped (%d subscribers closed)", len(subscribers))

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._subscribers.add(websocket)
        logger.info("Subscriber connected (%d total)", len(self._subscribers))

    def disconnect(self, websocket: WebSocket) -> None:
        if websocket in self._subscribers:
            self._subscribers.discard(websocket)
            logger.info("Subscriber disconnected (%d total)", len(self._subscribers))

    async def broadcast(self, event: dict[str, Any]) -> int:
        # 현재 구독자 전원에게 전송, 성공한 수를 돌려줌
        message = {"event": CHANNEL, "data": event}
        delivered = 0
        for websocket in list(self._subscribers):
            try:
                await websocket.send_json(message)
                delivered += 1
            except Exception as e:
                logger.warning("Dropping subscriber after failed send: %s", e)
                self.disconnect(websocket)
        return delivered

    def publish(self, event: dict[str, Any]) -> None:
        # 전송을 예약만 하고 기다리지 않음.
        # 이벤트 루프에서도, sync 핸들러의 워커 스레드에서도 호출 가능.
        # 시작 전이거나 구독자가 없으면 아무것도 하지 않음
        if not self.started:
            logger.debug("Broadcaster not started; dropping %s event", event.get("action"))
            return
        if not self._subscribers:
            return

        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is self._loop:
            task = self._loop.create_task(self.broadcast(event))
            self._pending.add(task)
            task.add_done_callback(self._task_done)
        else:
            future = asyncio.run_coroutine_threadsafe(self.broadcast(event), self._loop)
            future.add_done_callback(self._future_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Broadcast failed: %s", task.exception())

    @staticmethod
    def _future_done(future: Future) -> None:
        if not future.cancelled() and future.exception() is not None:
            logger.error("Broadcast failed: %s", future.exception())
