# 인증 게이트
# 모든 요청에서 Authorization 헤더를 읽어 request.state.auth 에 인증 결과를 붙입니다.
# 게이트 자체는 요청을 막지 않습니다. 로그인이 필요한 핸들러가 require_identity 로 직접 확인합니다.

from dataclasses import dataclass

from fastapi import Request

from app.auth.auth import verify_access_token
from app.errors import Unauthenticated


@dataclass(frozen=True)
class AuthResult:
    authenticated: bool = False
    user_id: int | None = None


ANONYMOUS = AuthResult()


def authenticate(authorization: str | None) -> AuthResult:
    # Authorization 헤더 값을 AuthResult 로 바꿈
    if not authorization:
        return ANONYMOUS

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return ANONYMOUS

    payload = verify_access_token(parts[1])
    if payload is None:
        return ANONYMOUS
    return AuthResult(authenticated=True, user_id=payload["user_id"])


async def auth_gate(request: Request, call_next):
    request.state.auth = authenticate(request.headers.get("Authorization"))
    return await call_next(request)


def get_auth(request: Request) -> AuthResult:
    return getattr(request.state, "auth", ANONYMOUS)


def require_identity(auth: AuthResult) -> int:
    if not auth.authenticated or auth.user_id is None:
        raise Unauthenticated()
    return auth.user_id
