"""Read-only ranking over player profiles."""
from __future__ import annotations

from typing import List

from battle_arena.repositories.profile_repo import ProfileRepository
from battle_arena.server.schemas import LeaderboardEntry

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


class LeaderboardService:
    def __init__(self, profile_repo: ProfileRepository) -> None:
        self.profile_repo = profile_repo

    def top_players(self, limit: int = DEFAULT_LIMIT) -> List[LeaderboardEntry]:
        limit = max(1, min(limit, MAX_LIMIT))
        profiles = self.profile_repo.find_top(limit)
        return [
            LeaderboardEntry(
                rank=rank,
                username=profile.username,
                display_name=profile.display_name,
                level=profile.level,
                xp=profile.xp,
                wins=profile.wins,
                losses=profile.losses,
                win_rate=profile.win_rate,
            )
            for rank, profile in enumerate(profiles, start=1)
        ]
