"""Contract tests for profile, leaderboard and feed endpoints"""

from dailydare.core.service.auth.jwt_service import JWTService


def test_profile_not_found_before_first_visit(client, auth_headers):
    response = client.get("/api/v1/profile", headers=auth_headers)

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "USER_NOT_FOUND"


def test_onboarding_contract(client, auth_headers):
    response = client.post(
        "/api/v1/profile/onboarding",
        json={"interests": ["Fitness", "Social"], "display_name": "Sam"},
        headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["onboarding_complete"] is True

    profile = client.get("/api/v1/profile", headers=auth_headers).json()
    assert profile["user_id"] == "user-1"
    assert profile["interests"] == ["Fitness", "Social"]
    assert profile["display_name"] == "Sam"


def test_leaderboard_contract(client, auth_headers):
    client.post("/api/v1/profile/onboarding", json={"interests": [], "display_name": "Sam"}, headers=auth_headers)
    client.get("/api/v1/dares/daily", headers=auth_headers)
    client.post("/api/v1/dares/bonus/complete", json={"dare_id": "ai_1", "difficulty": "Hard"}, headers=auth_headers)

    response = client.get("/api/v1/leaderboard", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == [{"rank": 1, "user_id": "user-1", "display_name": "Sam", "score": 75}]
    assert client.get("/api/v1/leaderboard?search=zzz", headers=auth_headers).json() == []


def test_feed_and_double_dare_contract(client, auth_headers):
    created = client.post(
        "/api/v1/feed",
        json={
            "dare": {"dare_id": "d1", "title": "Plank", "difficulty": "Easy", "points": 50},
            "image_url": "https://example.com/p.jpg"
        },
        headers=auth_headers
    )
    assert created.status_code == 201
    post_id = created.json()["post_id"]

    posts = client.get("/api/v1/feed", headers=auth_headers).json()
    assert [p["post_id"] for p in posts] == [post_id]

    challenger = {"Authorization": f"Bearer {JWTService().create_access_token('user-2').access_token}"}
    client.get("/api/v1/dares/daily", headers=challenger)

    broke = client.post(f"/api/v1/feed/{post_id}/double-dare", headers=challenger)
    assert broke.status_code == 402

    client.post("/api/v1/dares/bonus/complete", json={"dare_id": "ai_9", "difficulty": "Hard"}, headers=challenger)
    response = client.post(f"/api/v1/feed/{post_id}/double-dare", headers=challenger)
    assert response.status_code == 200
    assert response.json()["double_dares"] == 1
    assert response.json()["score"] == 25

    missing = client.post("/api/v1/feed/nope/double-dare", headers=challenger)
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "POST_NOT_FOUND"
