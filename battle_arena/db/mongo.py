"""MongoDB client management.

프로세스 당 하나의 MongoClient 를 지연 생성하여 커넥션 풀을 공유합니다.
"""
from __future__ import annotations

import logging
from typing import Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from battle_arena.server.settings import settings

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
PROFILES_COLLECTION = "profiles"

_client: Optional[MongoClient] = None


def get_client() -> MongoClient:
    global _client
    if _client is None:
        logger.info("Connecting to MongoDB database '%s'", settings.MONGO_DATABASE)
        _client = MongoClient(
            settings.MONGO_URI,
            tz_aware=True,
            serverSelectionTimeoutMS=settings.MONGO_SERVER_SELECTION_TIMEOUT_MS,
        )
    return _client


def get_database() -> Database:
    return get_client()[settings.MONGO_DATABASE]


def get_collection(name: str) -> Collection:
    return get_database()[name]


def close_client() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None
        logger.info("MongoDB connection closed")
