"""Tests for the profile service endpoints.

이 모듈은 프로필 서비스를 테스트합니다:
1. 첫 조회 시 기본 프로필 지연 생성 (한 번만)
2. 부분 수정 시 지정하지 않은 필드 유지
3. xp / level 범위 검증
4. Bearer 토큰 필수
"""


def test_profile_test_endpoint(profile_client):
    response = profile_client.get("/api/profile/test")
    assert response.status_code == 200
    assert response.text == "Profile service is working!"


def test_get_profile_creates_default_once(profile_client, auth_headers, profiles_collection):
    """첫 조회 시 기본 프로필이 생성되고, 재조회 시 같은 문서를 반환하는지 테스트.

    Given: profiles 컬렉션이 비어 있고
    When: GET /api/profile/me 를 두 번 호출하면
    Then: 기본값 프로필이 한 번만 저장되고 두 응답의 id 가 같아야 함
    """
    headers = auth_headers("player1")

    first = profile_client.get("/api/profile/me", headers=headers)
    second = profile_client.get("/api/profile/me", headers=headers)

    assert first.status_code == 200
    data = first.json()
    assert data["username"] == "player1"
    assert data["xp"] == 0
    assert data["level"] == 1
    assert data["avatar"] == "default"
    assert data["skins"] == []
    assert data["achievements"] == []
    assert data["totalMatches"] == 0
    assert data["winRate"] == 0.0
    assert data["isOnline"] is False

    assert second.json()["id"] == data["id"]
    assert len(profiles_collection.docs) == 1


def test_partial_update_keeps_unspecified_fields(profile_client, auth_headers):
    headers = auth_headers("player1")
    profile_client.put(
        "/api/profile/me",
        json={"xp": 500, "level": 4, "bio": "hello"},
        headers=headers,
    )

    # When: displayName 만 수정
    response = profile_client.put(
        "/api/profile/me",
        json={"displayName": "The Player"},
        headers=headers,
    )

    # Then: 이전 값 유지
    assert response.status_code == 200
    data = response.json()
    assert data["displayName"] == "The Player"
    assert data["xp"] == 500
    assert data["level"] == 4
    assert data["bio"] == "hello"
    assert data["avatar"] == "default"


def test_update_accepts_snake_case_names(profile_client, auth_headers):
    response = profile_client.put(
        "/api/profile/me",
        json={"display_name": "Snake", "preferred_game_mode": "ranked"},
        headers=auth_headers("player1"),
    )

    assert response.status_code == 200
    assert response.json()["displayName"] == "Snake"
    assert response.json()["preferredGameMode"] == "ranked"


def test_update_rejects_negative_xp(profile_client, auth_headers, profiles_collection):
    response = profile_client.put(
        "/api/profile/me",
        json={"xp": -5},
        headers=auth_headers("player1"),
    )

    assert response.status_code == 400
    assert response.json()["message"] == "XP must be >= 0"
    assert profiles_collection.docs == []


def test_update_rejects_level_zero(profile_client, auth_headers):
    response = profile_client.put(
        "/api/profile/me",
        json={"level": 0},
        headers=auth_headers("player1"),
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Level must be >= 1"


def test_update_allows_xp_zero(profile_client, auth_headers):
    headers = auth_headers("player1")
    profile_client.put("/api/profile/me", json={"xp": 40}, headers=headers)

    response = profile_client.put("/api/profile/me", json={"xp": 0}, headers=headers)

    assert response.status_code == 200
    assert response.json()["xp"] == 0


def test_profile_requires_token(profile_client):
    assert profile_client.get("/api/profile/me").status_code == 401
    assert profile_client.put("/api/profile/me", json={}).status_code == 401


def test_profile_rejects_expired_token(profile_client):
    from battle_arena.server.security import JwtTokenUtil

    expired = JwtTokenUtil(
        secret="test-secret-key-that-is-at-least-32-bytes-long", expiration_ms=-1000
    ).generate_token("player1", None)

    response = profile_client.get("/api/profile/me", headers={"Authorization": f"Bearer {expired}"})

    assert response.status_code == 401


def test_update_rejects_xp_beyond_storable_range(profile_client, auth_headers, profiles_collection):
    """8바이트를 넘는 xp 는 저장 단계까지 가지 않고 400 으로 거부되어야 함."""
    response = profile_client.put(
        "/api/profile/me",
        json={"xp": 2**64},
        headers=auth_headers("player1"),
    )

    assert response.status_code == 400
    assert response.json()["message"] == "XP must be <= 2147483647"
    assert profiles_collection.docs == []


def test_update_accepts_int32_max(profile_client, auth_headers):
    response = profile_client.put(
        "/api/profile/me",
        json={"xp": 2**31 - 1, "level": 2**31 - 1},
        headers=auth_headers("player1"),
    )

    assert response.status_code == 200
    assert response.json()["xp"] == 2**31 - 1
