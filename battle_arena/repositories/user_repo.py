"""User repository backed by the MongoDB `users` collection."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from battle_arena.models.user import User
from battle_arena.server.errors import UserAlreadyExistsError

logger = logging.getLogger(__name__)


class UserRepository:
    """MongoDB user repository."""

    def __init__(self, collection: Collection) -> None:
        self.collection = collection

    def ensure_indexes(self) -> None:
        self.collection.create_index([("username", ASCENDING)], unique=True, name="idx_username_unique")
        self.collection.create_index([("email", ASCENDING)], unique=True, name="idx_email_unique")
        # OAuth 사용자만 googleId 를 가지므로 sparse
        self.collection.create_index(
            [("googleId", ASCENDING)], unique=True, sparse=True, name="idx_googleId_unique"
        )

    def _find_one(self, query: Dict[str, Any]) -> Optional[User]:
        doc = self.collection.find_one(query)
        if doc is None:
            return None
        return User.from_document(doc)

    def find_by_id(self, user_id: str) -> Optional[User]:
        try:
            object_id = ObjectId(user_id)
        except (InvalidId, TypeError):
            return None
        return self._find_one({"_id": object_id})

    def find_by_username(self, username: str) -> Optional[User]:
        return self._find_one({"username": username})

    def find_by_email(self, email: str) -> Optional[User]:
        return self._find_one({"email": email})

    def find_by_google_id(self, google_id: str) -> Optional[User]:
        return self._find_one({"googleId": google_id})

    def find_by_guest_token(self, guest_token: str) -> Optional[User]:
        return self._find_one({"guestToken": guest_token})

    def exists_by_username(self, username: str) -> bool:
        return self.collection.count_documents({"username": username}, limit=1) > 0

    def exists_by_email(self, email: str) -> bool:
        return self.collection.count_documents({"email": email}, limit=1) > 0

    def save(self, user: User) -> User:
        """Insert a new user or replace an existing one.

        동시 가입으로 exists 검사를 통과하더라도 unique 인덱스 위반은
        UserAlreadyExistsError 로 변환됩니다.
        """
        # None 값 키는 저장하지 않아야 sparse 인덱스가 동작함
        doc = {key: value for key, value in user.to_document().items() if value is not None}
        try:
            if user.id is None:
                result = self.collection.insert_one(doc)
                return user.model_copy(update={"id": str(result.inserted_id)})

            self.collection.replace_one({"_id": doc["_id"]}, doc)
            return user
        except DuplicateKeyError as exc:
            logger.info("Duplicate key while saving user %s: %s", user.username, exc)
            raise UserAlreadyExistsError(
                f"Username or email already exists: {user.username}"
            ) from exc
