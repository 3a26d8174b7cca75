"""Pydantic schemas for request/response models.

이 파일은 FastAPI 엔드포인트의 요청/응답 모델(DTO)을 정의합니다.
JSON 필드는 camelCase 로 주고받으며, 요청에서는 snake_case 이름도 허용합니다.
"""
from typing import Dict, List, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from battle_arena.server.security import BCRYPT_MAX_PASSWORD_BYTES

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20
PASSWORD_MIN_LENGTH = 8
# users / profiles 의 xp, level 은 32bit 정수 범위로 제한
MAX_PROGRESSION_VALUE = 2**31 - 1


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True


# ============================================================================
# Auth 관련 스키마
# ============================================================================

class RegisterRequest(BaseModel):
    """회원가입 요청 모델.

    Attributes:
        username: 3~20자 사용자명
        email: 유효한 이메일
        password: 8자 이상 비밀번호 (로그/응답에 절대 포함하지 않음)
    """
    username: str
    email: str
    password: str

    @field_validator("username")
    @classmethod
    def _check_username(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Username is required")
        if not USERNAME_MIN_LENGTH <= len(value) <= USERNAME_MAX_LENGTH:
            raise ValueError("Username must be between 3 and 20 characters")
        return value

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Email is required")
        try:
            return validate_email(value, check_deliverability=False).normalized
        except EmailNotValidError:
            raise ValueError("Email must be valid") from None

    @field_validator("password")
    @classmethod
    def _check_password(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Password is required")
        if len(value) < PASSWORD_MIN_LENGTH:
            raise ValueError("Password must be at least 8 characters")
        # bcrypt 는 72 바이트를 넘는 입력을 해싱하지 못함
        if len(value.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValueError("Password must be at most 72 bytes")
        return value

    class Config:
        json_schema_extra = {
            "example": {
                "username": "player1",
                "email": "player1@example.com",
                "password": "s3cretPass!",
            }
        }


class RegisterResponse(BaseModel):
    id: str
    username: str
    email: str
    message: str = "Registration successful"


class LoginRequest(BaseModel):
    """로그인 요청 모델. 두 필드 모두 공백이 아니어야 합니다."""
    username: str
    password: str

    @field_validator("username")
    @classmethod
    def _username_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Username is required")
        return value

    @field_validator("password")
    @classmethod
    def _password_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Password is required")
        return value


class AuthResponse(CamelModel):
    """로그인 성공 응답.

    Example:
        {"token": "eyJ...", "id": "...", "username": "player1",
         "email": "player1@example.com", "expiresIn": 86400, "message": "Login successful"}
    """
    token: str
    id: str
    username: str
    email: str
    expires_in: int
    message: str = "Login successful"


class LogoutResponse(BaseModel):
    message: str = "Logout successful"


# ============================================================================
# Profile 관련 스키마
# ============================================================================

class UpdateUserProfileRequest(CamelModel):
    """계정(users 문서) 진행 정보 부분 수정 요청.

    None 인 필드는 변경하지 않습니다. 범위 검증(xp >= 0, level >= 1)은 서비스 계층에서 수행합니다.
    """
    xp: Optional[int] = None
    level: Optional[int] = None
    avatar: Optional[str] = None
    skins: Optional[List[str]] = None


class UserProfileResponse(CamelModel):
    xp: int
    level: int
    avatar: str
    skins: List[str]


class UpdateProfileRequest(UpdateUserProfileRequest):
    """프로필(profiles 문서) 부분 수정 요청."""
    display_name: Optional[str] = Field(None, max_length=50)
    bio: Optional[str] = Field(None, max_length=500)
    preferred_game_mode: Optional[str] = None


# ============================================================================
# Leaderboard 관련 스키마
# ============================================================================

class LeaderboardEntry(CamelModel):
    rank: int
    username: str
    display_name: Optional[str] = None
    level: int
    xp: int
    wins: int
    losses: int
    win_rate: float


class LeaderboardResponse(CamelModel):
    entries: List[LeaderboardEntry]
    count: int


# ============================================================================
# Error 스키마 (문서화용)
# ============================================================================

class ErrorResponse(CamelModel):
    timestamp: str
    status: int
    error: str
    message: str
    field_errors: Optional[Dict[str, str]] = None
