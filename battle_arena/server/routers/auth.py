"""Authentication endpoints: register, login, logout.

JWT 는 stateless 이므로 logout 은 클라이언트 측 토큰 삭제가 전부이며,
API 일관성을 위해 엔드포인트만 제공합니다.

레포지토리가 동기(pymongo)이므로 핸들러는 `def` 로 선언하여 threadpool 에서 실행됩니다.
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse

from battle_arena.server.deps import get_auth_service
from battle_arena.server.schemas import (
    AuthResponse,
    ErrorResponse,
    LoginRequest,
    LogoutResponse,
    RegisterRequest,
    RegisterResponse,
)
from battle_arena.services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.get("/test", response_class=PlainTextResponse)
async def test() -> str:
    return "Auth service is working!"


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def register(
    request: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> RegisterResponse:
    """새 사용자 등록.

    Returns:
        201 - 생성된 사용자 id / username / email

    Raises:
        409 - username 또는 email 중복
        400 - 입력 검증 실패
    """
    user = auth_service.register(request)
    return RegisterResponse(id=user.id, username=user.username, email=user.email)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
def login(
    request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """자격 증명 확인 후 서명된 JWT 발급."""
    user = auth_service.login(request)
    token = auth_service.generate_token_for_user(user)
    return AuthResponse(
        token=token,
        id=user.id,
        username=user.username,
        email=user.email,
        expires_in=auth_service.jwt_util.expires_in_seconds,
    )


@router.post("/logout", response_model=LogoutResponse)
async def logout() -> LogoutResponse:
    return LogoutResponse()
