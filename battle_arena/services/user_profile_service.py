"""Account-level progression updates on the `users` document."""
from __future__ import annotations

import logging
from typing import Any, Dict

from battle_arena.models.user import User, utcnow
from battle_arena.repositories.user_repo import UserRepository
from battle_arena.server.errors import ProfileValidationError, UserNotFoundError
from battle_arena.server.schemas import MAX_PROGRESSION_VALUE, UpdateUserProfileRequest

logger = logging.getLogger(__name__)


def validate_progression(request: UpdateUserProfileRequest) -> None:
    """Reject out-of-range xp/level before anything is applied."""
    if request.xp is not None:
        if request.xp < 0:
            raise ProfileValidationError("XP must be >= 0")
        if request.xp > MAX_PROGRESSION_VALUE:
            raise ProfileValidationError(f"XP must be <= {MAX_PROGRESSION_VALUE}")
    if request.level is not None:
        if request.level < 1:
            raise ProfileValidationError("Level must be >= 1")
        if request.level > MAX_PROGRESSION_VALUE:
            raise ProfileValidationError(f"Level must be <= {MAX_PROGRESSION_VALUE}")


def provided_fields(request: UpdateUserProfileRequest) -> Dict[str, Any]:
    # None 이 아닌 필드만 반영 (부분 수정)
    return {
        name: value
        for name, value in request.model_dump(by_alias=False).items()
        if value is not None
    }


class UserProfileService:
    def __init__(self, user_repo: UserRepository) -> None:
        self.user_repo = user_repo

    def update_profile(self, username: str, request: UpdateUserProfileRequest) -> User:
        user = self.user_repo.find_by_username(username)
        if user is None:
            raise UserNotFoundError("User not found")

        validate_progression(request)

        updates = provided_fields(request)
        updates["updated_at"] = utcnow()
        updated = self.user_repo.save(user.model_copy(update=updates))
        logger.info("Updated account progression for %s: %s", username, sorted(updates))
        return updated
