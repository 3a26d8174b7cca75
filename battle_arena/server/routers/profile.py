"""Player profile endpoints served by the profile service."""
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from battle_arena.models.profile import Profile
from battle_arena.server.deps import get_current_username, get_profile_service
from battle_arena.server.schemas import ErrorResponse, UpdateProfileRequest
from battle_arena.services.profile_service import ProfileService

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("/test", response_class=PlainTextResponse)
async def test() -> str:
    return "Profile service is working!"


@router.get("/me", response_model=Profile, responses={401: {"model": ErrorResponse}})
def get_my_profile(
    username: str = Depends(get_current_username),
    service: ProfileService = Depends(get_profile_service),
) -> Profile:
    """현재 사용자의 프로필. 처음 조회하면 기본 프로필이 생성됩니다."""
    return service.get_profile(username)


@router.put(
    "/me",
    response_model=Profile,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
def update_my_profile(
    request: UpdateProfileRequest,
    username: str = Depends(get_current_username),
    service: ProfileService = Depends(get_profile_service),
) -> Profile:
    return service.update_profile(username, request)
