"""Leaderboard endpoints (public)."""
from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from battle_arena.server.deps import get_leaderboard_service
from battle_arena.server.schemas import LeaderboardResponse
from battle_arena.services.leaderboard_service import DEFAULT_LIMIT, LeaderboardService

router = APIRouter(prefix="/api/leaderboard", tags=["leaderboard"])


@router.get("/test", response_class=PlainTextResponse)
async def test() -> str:
    return "Leaderboard service is working!"


@router.get("", response_model=LeaderboardResponse)
def top_players(
    limit: int = Query(DEFAULT_LIMIT, description="Number of entries (clamped to 1..100)"),
    service: LeaderboardService = Depends(get_leaderboard_service),
) -> LeaderboardResponse:
    entries = service.top_players(limit)
    return LeaderboardResponse(entries=entries, count=len(entries))
