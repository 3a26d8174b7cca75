"""Player profile lookup (with lazy creation) and partial updates."""
from __future__ import annotations

import logging

from battle_arena.models.profile import Profile
from battle_arena.models.user import utcnow
from battle_arena.repositories.profile_repo import ProfileRepository
from battle_arena.server.schemas import UpdateProfileRequest
from battle_arena.services.user_profile_service import provided_fields, validate_progression

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, profile_repo: ProfileRepository) -> None:
        self.profile_repo = profile_repo

    def get_profile(self, username: str) -> Profile:
        """저장된 프로필을 반환하고, 없으면 기본 프로필을 생성해 저장합니다."""
        profile = self.profile_repo.find_by_username(username)
        if profile is not None:
            return profile

        logger.info("Creating default profile for %s", username)
        return self.profile_repo.create_if_absent(Profile.default_for(username))

    def update_profile(self, username: str, request: UpdateProfileRequest) -> Profile:
        validate_progression(request)

        profile = self.get_profile(username)
        updates = provided_fields(request)
        updates["updated_at"] = utcnow()
        return self.profile_repo.save(profile.model_copy(update=updates))
