# REST 와 GraphQL 이 같이 쓰는 오류 종류
# 핸들러는 실패를 모두 아래 중 하나로 바꿔서 응답합니다.
#   ValidationFailed  422  필드별 메시지를 data 에 담음
#   Unauthenticated   401
#   Forbidden         403  작성자가 아님
#   NotFound          404
#   Internal          500  그 외 전부

import logging
from typing import Any

from fastapi import HTTPException, status

logger = logging.getLogger(__name__)


class FeedError(HTTPException):
    # 생성될 때 스스로 로그를 남김
    log_level = logging.WARNING

    def __init__(
        self,
        status_code: int,
        message: str,
        data: list[dict[str, Any]] | None = None,
        headers: dict[str, str] | None = None,
    ):
        logger.log(self.log_level, "%s (%s)", message, status_code)
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.data = data

    @property
    def message(self) -> str:
        return self.detail

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"message": self.message}
        if self.data:
            body["data"] = self.data
        return body


class ValidationFailed(FeedError):
    def __init__(self, data: list[dict[str, Any]] | None = None, message: str = "Validation failed, entered data is incorrect."):
        super().__init__(422, message, data=data or [])


class Unauthenticated(FeedError):
    def __init__(self, message: str = "Not authenticated!"):
        super().__init__(
            status.HTTP_401_UNAUTHORIZED,
            message,
            headers={"WWW-Authenticate": "Bearer"},
        )


class Forbidden(FeedError):
    def __init__(self, message: str = "Not authorized!"):
        super().__init__(status.HTTP_403_FORBIDDEN, message)


class NotFound(FeedError):
    def __init__(self, entity: str = "Resource"):
        super().__init__(status.HTTP_404_NOT_FOUND, f"Could not find {entity.lower()}.")


class Internal(FeedError):
    log_level = logging.ERROR

    def __init__(self, message: str = "An internal error occurred."):
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, message)
