
from fastapi import APIRouter, WebSocket, WebSocketDisconnect


router = APIRouter(tags=["realtime"])


# 클라이언트는 듣기만 함. 보내는 메시지는 무시
@router.websocket("/ws")
async def posts_socket(websocket: WebSocket):
    broadcaster = websocket.app.state.broadcaster
    await broadcaster.connect(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        broadcaster.disconnect(websocket)
