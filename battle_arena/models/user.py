"""User model and schema.

사용자 계정 정보를 표현하는 모델입니다.
MongoDB `users` 컬렉션에 camelCase 키로 저장됩니다.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from bson import ObjectId
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(BaseModel):
    """사용자 모델.

    Attributes:
        id: MongoDB ObjectId 문자열 (저장 전에는 None)
        username: 사용자명 (고유)
        email: 이메일 (고유)
        password_hash: bcrypt 해시. 응답 DTO 에는 절대 포함하지 않음
        google_id: Google OAuth ID (optional)
        guest_token: 게스트 로그인 토큰 (optional)
        xp / level / avatar / skins: 게임 진행 정보
        auth_type: "standard", "google", "guest"
        created_at / updated_at / last_login_at: 감사(audit) 필드
    """
    id: Optional[str] = None
    username: str = Field(..., description="Unique username")
    email: str = Field(..., description="Unique email")
    password_hash: Optional[str] = Field(None, description="BCrypt password hash")
    google_id: Optional[str] = None
    guest_token: Optional[str] = None
    xp: int = 0
    level: int = 1
    avatar: str = "default"
    skins: List[str] = Field(default_factory=list)
    auth_type: Literal["standard", "google", "guest"] = "standard"
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    last_login_at: Optional[datetime] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "id": "665f1c2e9b1e8a3d4c2b1a00",
                "username": "player1",
                "email": "player1@example.com",
                "xp": 0,
                "level": 1,
                "avatar": "default",
                "skins": [],
                "authType": "standard",
            }
        }

    def to_document(self) -> Dict[str, Any]:
        """Serialize to a MongoDB document (`_id` instead of `id`)."""
        doc = self.model_dump(by_alias=True, exclude={"id"})
        if self.id is not None:
            doc["_id"] = ObjectId(self.id)
        return doc

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "User":
        data = dict(doc)
        raw_id = data.pop("_id", None)
        if raw_id is not None:
            data["id"] = str(raw_id)
        return cls.model_validate(data)
