"""Registration and login."""
from __future__ import annotations

import logging

from battle_arena.models.user import User, utcnow
from battle_arena.repositories.user_repo import UserRepository
from battle_arena.server.errors import InvalidCredentialsError, UserAlreadyExistsError
from battle_arena.server.schemas import LoginRequest, RegisterRequest
from battle_arena.server.security import JwtTokenUtil, PasswordEncoder

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid username or password"


class AuthService:
    """사용자 등록 / 로그인 / 토큰 발급을 담당합니다."""

    def __init__(
        self,
        user_repo: UserRepository,
        password_encoder: PasswordEncoder,
        jwt_util: JwtTokenUtil,
    ) -> None:
        self.user_repo = user_repo
        self.password_encoder = password_encoder
        self.jwt_util = jwt_util

    def register(self, request: RegisterRequest) -> User:
        """Create a new standard account.

        Raises:
            UserAlreadyExistsError: username 또는 email 이 이미 존재 (username 먼저 검사)
        """
        if self.user_repo.exists_by_username(request.username):
            raise UserAlreadyExistsError(f"Username already exists: {request.username}")

        if self.user_repo.exists_by_email(request.email):
            raise UserAlreadyExistsError(f"Email already exists: {request.email}")

        user = User(
            username=request.username,
            email=request.email,
            password_hash=self.password_encoder.encode(request.password),
            auth_type="standard",
            xp=0,
            level=1,
            avatar="default",
            skins=[],
        )
        saved = self.user_repo.save(user)
        logger.info("Registered user %s (id=%s)", saved.username, saved.id)
        return saved

    def login(self, request: LoginRequest) -> User:
        """Verify credentials and stamp the login time.

        Raises:
            InvalidCredentialsError: 사용자 없음 또는 비밀번호 불일치 (같은 메시지)
        """
        user = self.user_repo.find_by_username(request.username)
        if user is None:
            logger.warning("Login failed: unknown username")
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)

        if not self.password_encoder.matches(request.password, user.password_hash):
            logger.warning("Login failed: bad password for %s", user.username)
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)

        now = utcnow()
        user = user.model_copy(update={"last_login_at": now, "updated_at": now})
        user = self.user_repo.save(user)
        logger.info("User %s logged in", user.username)
        return user

    def generate_token_for_user(self, user: User) -> str:
        return self.jwt_util.generate_token(user.username, user.id)
