"""Pytest configuration and fixtures.

이 모듈은 모든 테스트에서 공유되는 pytest fixture들을 정의합니다.

주요 Fixture:
- users_collection / profiles_collection: MongoDB 컬렉션을 흉내내는 인메모리 컬렉션
- user_repo / profile_repo: 인메모리 컬렉션 위의 실제 레포지토리
- auth_client / profile_client / leaderboard_client: 서비스별 FastAPI 테스트 클라이언트
- jwt_util / auth_headers: Bearer 토큰 생성 헬퍼
- registered_user: 미리 가입된 사용자

실제 MongoDB 없이 레포지토리 코드까지 그대로 실행되도록
pymongo Collection 의 필요한 부분만 구현한 `InMemoryCollection` 을 사용합니다.
"""
import copy
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import bson
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError

from battle_arena.repositories.profile_repo import ProfileRepository
from battle_arena.repositories.user_repo import UserRepository
from battle_arena.server import deps
from battle_arena.server.main import create_app
from battle_arena.server.schemas import RegisterRequest
from battle_arena.server.security import JwtTokenUtil, PasswordEncoder
from battle_arena.server.settings import settings
from battle_arena.services.auth_service import AuthService

TEST_PASSWORD = "correct-horse-battery"


class _Cursor:
    def __init__(self, docs: List[Dict[str, Any]]) -> None:
        self._docs = docs

    def sort(self, keys):
        # 뒤쪽 키부터 안정 정렬하면 다중 키 정렬이 됨
        for field, direction in reversed(keys):
            self._docs.sort(key=lambda doc: doc.get(field, 0), reverse=direction < 0)
        return self

    def limit(self, n: int):
        self._docs = self._docs[:n]
        return self

    def __iter__(self):
        return iter(self._docs)


class InMemoryCollection:
    """Minimal stand-in for a pymongo Collection (equality queries, unique indexes)."""

    def __init__(self) -> None:
        self.docs: List[Dict[str, Any]] = []
        self.unique_fields: List[tuple] = []
        self.indexes: List[Dict[str, Any]] = []

    @staticmethod
    def _matches(doc: Dict[str, Any], query: Dict[str, Any]) -> bool:
        return all(doc.get(key) == value for key, value in query.items())

    def _check_unique(self, doc: Dict[str, Any], ignore_id: Optional[ObjectId] = None) -> None:
        for field, sparse in self.unique_fields:
            if sparse and field not in doc:
                continue
            value = doc.get(field)
            for other in self.docs:
                if other["_id"] == ignore_id:
                    continue
                if sparse and field not in other:
                    continue
                if other.get(field) == value:
                    raise DuplicateKeyError(f"E11000 duplicate key error: {field}={value!r}")

    def create_index(self, keys, unique: bool = False, sparse: bool = False, name: str = None):
        self.indexes.append({"keys": keys, "unique": unique, "sparse": sparse, "name": name})
        if unique and len(keys) == 1:
            self.unique_fields.append((keys[0][0], sparse))
        return name

    def find_one(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        for doc in self.docs:
            if self._matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query: Dict[str, Any]) -> _Cursor:
        return _Cursor([copy.deepcopy(doc) for doc in self.docs if self._matches(doc, query)])

    def count_documents(self, query: Dict[str, Any], limit: int = 0) -> int:
        count = sum(1 for doc in self.docs if self._matches(doc, query))
        return min(count, limit) if limit else count

    def insert_one(self, doc: Dict[str, Any]):
        stored = copy.deepcopy(doc)
        stored.setdefault("_id", ObjectId())
        # 실제 드라이버처럼 BSON 인코딩이 불가능한 값(8바이트 초과 정수 등)은 거부
        bson.encode(stored)
        self._check_unique(stored)
        self.docs.append(stored)
        return SimpleNamespace(inserted_id=stored["_id"])

    def replace_one(self, query: Dict[str, Any], doc: Dict[str, Any]):
        for index, existing in enumerate(self.docs):
            if self._matches(existing, query):
                stored = copy.deepcopy(doc)
                stored["_id"] = existing["_id"]
                bson.encode(stored)
                self._check_unique(stored, ignore_id=existing["_id"])
                self.docs[index] = stored
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)


@pytest.fixture(autouse=True)
def _fast_bcrypt(monkeypatch):
    """bcrypt 비용을 최소로 낮춰 테스트 속도를 확보합니다."""
    monkeypatch.setattr(settings, "BCRYPT_ROUNDS", 4)


@pytest.fixture
def users_collection():
    return InMemoryCollection()


@pytest.fixture
def profiles_collection():
    return InMemoryCollection()


@pytest.fixture
def user_repo(users_collection):
    repo = UserRepository(users_collection)
    repo.ensure_indexes()
    return repo


@pytest.fixture
def profile_repo(profiles_collection):
    repo = ProfileRepository(profiles_collection)
    repo.ensure_indexes()
    return repo


@pytest.fixture
def password_encoder():
    return PasswordEncoder(rounds=4)


@pytest.fixture
def jwt_util():
    return JwtTokenUtil(secret="test-secret-key-that-is-at-least-32-bytes-long", expiration_ms=3600000)


@pytest.fixture
def auth_headers(jwt_util):
    """사용자명으로 Bearer 헤더를 만드는 팩토리.

    사용법:
        def test_me(profile_client, auth_headers):
            response = profile_client.get("/api/profile/me", headers=auth_headers("player1"))
    """
    def _make(username: str, user_id: Optional[str] = None) -> Dict[str, str]:
        token = jwt_util.generate_token(username, user_id)
        return {"Authorization": f"Bearer {token}"}
    return _make


def _provide(value: Any):
    # FastAPI 가 시그니처를 해석하므로 인자 없는 함수여야 함
    def _dependency():
        return value
    return _dependency


def _client_for(service_name: str, overrides: Dict[Any, Any]) -> TestClient:
    app = create_app(service_name)
    for dependency, value in overrides.items():
        app.dependency_overrides[dependency] = _provide(value)
    return TestClient(app)


@pytest.fixture
def auth_client(user_repo, jwt_util):
    """auth 서비스 테스트 클라이언트 (인메모리 users 컬렉션 사용)."""
    return _client_for("auth", {deps.get_user_repo: user_repo, deps.get_jwt_util: jwt_util})


@pytest.fixture
def profile_client(profile_repo, jwt_util):
    return _client_for("profile", {deps.get_profile_repo: profile_repo, deps.get_jwt_util: jwt_util})


@pytest.fixture
def leaderboard_client(profile_repo):
    return _client_for("leaderboard", {deps.get_profile_repo: profile_repo})


@pytest.fixture
def auth_service(user_repo, password_encoder, jwt_util):
    return AuthService(user_repo, password_encoder, jwt_util)


@pytest.fixture
def registered_user(auth_service):
    """미리 가입된 사용자 (username=player1, password=TEST_PASSWORD)."""
    return auth_service.register(
        RegisterRequest(username="player1", email="player1@example.com", password=TEST_PASSWORD)
    )
