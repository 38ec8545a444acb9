# JWT 토큰 발급/검증
# 토큰에는 사용자 id와 이메일이 들어가고, 1시간 뒤에 만료됩니다.

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from app.config import ACCESS_TOKEN_EXPIRE_MINUTES, ALGORITHM, SECRET_KEY

logger = logging.getLogger(__name__)


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def issue_token(user) -> str:
    user_id = str(user.id)
    return create_access_token(data={"sub": user_id, "userId": user_id, "email": user.email})


# 서명 오류, 만료, 형식 오류 모두 None 을 돌려줌 (예외를 던지지 않음)
def verify_access_token(token: str) -> dict | None:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.debug("Token rejected: %s", e)
        return None

    sub = payload.get("sub")
    if sub is None:
        return None
    try:
        payload["user_id"] = int(sub)
    except (TypeError, ValueError):
        logger.debug("Token rejected: malformed subject %r", sub)
        return None
    return payload
