"""Security utilities: bcrypt password hashing and HS256 JWT issuing/verification.

모든 서비스가 같은 JWT_SECRET 을 공유하므로 auth 서비스에서 발급한 토큰을
profile / leaderboard 서비스에서 그대로 검증할 수 있습니다.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt
from jwt import InvalidTokenError

from battle_arena.server.settings import settings

logger = logging.getLogger(__name__)

BCRYPT_MAX_PASSWORD_BYTES = 72


class JWTVerificationError(Exception):
    """Raised when a JWT cannot be verified."""


class PasswordEncoder:
    """BCrypt password encoder."""

    def __init__(self, rounds: Optional[int] = None) -> None:
        self.rounds = rounds or settings.BCRYPT_ROUNDS

    def encode(self, raw_password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(raw_password.encode("utf-8"), salt).decode("utf-8")

    def matches(self, raw_password: str, password_hash: Optional[str]) -> bool:
        """Check a raw password against a stored hash.

        저장된 해시가 비어 있거나 bcrypt 형식이 아니면 예외 대신 False 를 반환합니다.
        """
        if not password_hash:
            return False
        if len(raw_password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
            logger.warning("Password exceeds the bcrypt %d-byte limit", BCRYPT_MAX_PASSWORD_BYTES)
            return False
        try:
            return bcrypt.checkpw(raw_password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash is not a valid bcrypt hash")
            return False


class JwtTokenUtil:
    """Issue and verify HMAC-signed user tokens.

    Claims:
        sub: username
        userId: 사용자 ID (Mongo ObjectId 문자열)
        iat / exp: 발급 / 만료 시각
    """

    def __init__(
        self,
        secret: Optional[str] = None,
        expiration_ms: Optional[int] = None,
        algorithm: Optional[str] = None,
    ) -> None:
        self.secret = secret or settings.JWT_SECRET
        self.expiration_ms = expiration_ms if expiration_ms is not None else settings.JWT_EXPIRATION
        self.algorithm = algorithm or settings.JWT_ALGORITHM

    @property
    def expires_in_seconds(self) -> int:
        return self.expiration_ms // 1000

    def generate_token(self, username: str, user_id: Optional[str]) -> str:
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "sub": username,
            "userId": user_id,
            "iat": now,
            "exp": now + timedelta(milliseconds=self.expiration_ms),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_token(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"]},
            )
        except InvalidTokenError as exc:
            logger.warning("JWT verification failed: %s", exc)
            raise JWTVerificationError(str(exc)) from exc

    def get_username_from_token(self, token: str) -> str:
        return self.decode_token(token)["sub"]

    def get_user_id_from_token(self, token: str) -> Optional[str]:
        return self.decode_token(token).get("userId")

    def validate_token(self, token: str, username: str) -> bool:
        """True if the token verifies, is not expired, and belongs to ``username``."""
        try:
            return self.get_username_from_token(token) == username
        except JWTVerificationError:
            return False
