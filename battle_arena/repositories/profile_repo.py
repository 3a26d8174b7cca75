"""Profile repository backed by the MongoDB `profiles` collection."""
from __future__ import annotations

import logging
from typing import List, Optional

from pymongo import ASCENDING, DESCENDING
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from battle_arena.models.profile import Profile

logger = logging.getLogger(__name__)

# 리더보드 정렬 기준: 레벨 > XP > 승리 수
RANKING_SORT = [("level", DESCENDING), ("xp", DESCENDING), ("wins", DESCENDING)]


class ProfileRepository:
    """MongoDB profile repository."""

    def __init__(self, collection: Collection) -> None:
        self.collection = collection

    def ensure_indexes(self) -> None:
        self.collection.create_index([("username", ASCENDING)], unique=True, name="idx_username_unique")
        self.collection.create_index(RANKING_SORT, name="idx_ranking_desc")

    def find_by_username(self, username: str) -> Optional[Profile]:
        doc = self.collection.find_one({"username": username})
        if doc is None:
            return None
        return Profile.from_document(doc)

    def save(self, profile: Profile) -> Profile:
        doc = profile.to_document()
        if profile.id is None:
            result = self.collection.insert_one(doc)
            return profile.model_copy(update={"id": str(result.inserted_id)})

        self.collection.replace_one({"_id": doc["_id"]}, doc)
        return profile

    def create_if_absent(self, profile: Profile) -> Profile:
        """Insert ``profile`` unless one already exists for its username.

        첫 조회가 동시에 들어와 unique 인덱스 위반이 나면 먼저 저장된 문서를 반환합니다.
        """
        try:
            return self.save(profile)
        except DuplicateKeyError:
            logger.info("Profile for %s was created concurrently", profile.username)
            existing = self.find_by_username(profile.username)
            if existing is None:
                raise
            return existing

    def find_top(self, limit: int) -> List[Profile]:
        cursor = self.collection.find({}).sort(RANKING_SORT).limit(limit)
        return [Profile.from_document(doc) for doc in cursor]
