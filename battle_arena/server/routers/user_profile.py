"""Account progression endpoint served by the auth service."""
from fastapi import APIRouter, Depends

from battle_arena.server.deps import get_current_username, get_user_profile_service
from battle_arena.server.schemas import ErrorResponse, UpdateUserProfileRequest, UserProfileResponse
from battle_arena.services.user_profile_service import UserProfileService

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.put(
    "/me",
    response_model=UserProfileResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
def update_my_account(
    request: UpdateUserProfileRequest,
    username: str = Depends(get_current_username),
    service: UserProfileService = Depends(get_user_profile_service),
) -> UserProfileResponse:
    """현재 사용자의 xp / level / avatar / skins 중 전달된 값만 수정합니다."""
    user = service.update_profile(username, request)
    return UserProfileResponse(xp=user.xp, level=user.level, avatar=user.avatar, skins=user.skins)
