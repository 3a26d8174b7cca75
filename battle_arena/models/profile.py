"""Player profile model.

`profiles` 컬렉션의 문서를 표현합니다. username 으로 users 문서를 값 참조하지만
참조 무결성은 강제하지 않습니다.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from battle_arena.models.user import utcnow


class Profile(BaseModel):
    """Player profile with progression, match stats and social lists."""
    id: Optional[str] = None
    username: str

    xp: int = 0
    level: int = 1
    avatar: str = "default"
    skins: List[str] = Field(default_factory=list)

    display_name: Optional[str] = None
    bio: Optional[str] = None
    achievements: List[str] = Field(default_factory=list)

    total_matches: int = 0
    wins: int = 0
    losses: int = 0
    win_rate: float = 0.0
    preferred_game_mode: Optional[str] = None

    friends: List[str] = Field(default_factory=list)
    blocked_users: List[str] = Field(default_factory=list)
    is_online: bool = False
    last_seen: Optional[datetime] = None

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @classmethod
    def default_for(cls, username: str) -> "Profile":
        return cls(username=username)

    def to_document(self) -> Dict[str, Any]:
        doc = self.model_dump(by_alias=True, exclude={"id"})
        if self.id is not None:
            doc["_id"] = ObjectId(self.id)
        return doc

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Profile":
        data = dict(doc)
        raw_id = data.pop("_id", None)
        if raw_id is not None:
            data["id"] = str(raw_id)
        return cls.model_validate(data)
