"""Dependency injection for FastAPI routes.

레포지토리 / 서비스 / 보안 유틸은 모두 여기의 함수로 주입되므로
테스트에서는 `app.dependency_overrides` 로 교체할 수 있습니다.
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from battle_arena.db.mongo import PROFILES_COLLECTION, USERS_COLLECTION, get_collection
from battle_arena.repositories.profile_repo import ProfileRepository
from battle_arena.repositories.user_repo import UserRepository
from battle_arena.server.security import JWTVerificationError, JwtTokenUtil, PasswordEncoder
from battle_arena.services.auth_service import AuthService
from battle_arena.services.leaderboard_service import LeaderboardService
from battle_arena.services.profile_service import ProfileService
from battle_arena.services.user_profile_service import UserProfileService

logger = logging.getLogger(__name__)

# auto_error=False: 헤더 누락도 401 로 직접 처리
security = HTTPBearer(auto_error=False)


def get_user_repo() -> UserRepository:
    return UserRepository(get_collection(USERS_COLLECTION))


def get_profile_repo() -> ProfileRepository:
    return ProfileRepository(get_collection(PROFILES_COLLECTION))


def get_password_encoder() -> PasswordEncoder:
    return PasswordEncoder()


def get_jwt_util() -> JwtTokenUtil:
    return JwtTokenUtil()


def get_auth_service(
    user_repo: UserRepository = Depends(get_user_repo),
    password_encoder: PasswordEncoder = Depends(get_password_encoder),
    jwt_util: JwtTokenUtil = Depends(get_jwt_util),
) -> AuthService:
    return AuthService(user_repo, password_encoder, jwt_util)


def get_user_profile_service(
    user_repo: UserRepository = Depends(get_user_repo),
) -> UserProfileService:
    return UserProfileService(user_repo)


def get_profile_service(
    profile_repo: ProfileRepository = Depends(get_profile_repo),
) -> ProfileService:
    return ProfileService(profile_repo)


def get_leaderboard_service(
    profile_repo: ProfileRepository = Depends(get_profile_repo),
) -> LeaderboardService:
    return LeaderboardService(profile_repo)


def get_current_username(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    jwt_util: JwtTokenUtil = Depends(get_jwt_util),
) -> str:
    """Bearer JWT 로 현재 사용자명(principal)을 확인합니다.

    Returns:
        토큰의 `sub` 클레임 (username)

    Raises:
        HTTPException: 401 - 토큰 누락, 서명 불일치, 만료
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return jwt_util.get_username_from_token(credentials.credentials)
    except JWTVerificationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
