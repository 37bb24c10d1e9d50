"""Contract tests for the dare economy endpoints"""


def error_code(response):
    body = response.json()
    assert body["success"] is False
    return body["error"]["code"]


def daily(client, auth_headers):
    response = client.get("/api/v1/dares/daily", headers=auth_headers)
    assert response.status_code == 200
    return response.json()


def test_daily_dares_contract(client, auth_headers):
    data = daily(client, auth_headers)

    assert data["assigned_date"] == "2025-03-10"
    assert [d["difficulty"] for d in data["dares"]] == ["Easy", "Medium", "Hard"]
    assert data["reroll_tokens"] == 2
    assert data["score"] == 0
    assert data["onboarding_complete"] is False
    for dare in data["dares"]:
        assert set(dare) >= {"dare_id", "title", "description", "points", "difficulty", "assigned_date", "completed"}

    assert daily(client, auth_headers)["dares"] == data["dares"]


def test_complete_dare_contract(client, auth_headers):
    easy = daily(client, auth_headers)["dares"][0]

    response = client.post(f"/api/v1/dares/{easy['dare_id']}/complete", headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["points_awarded"] == easy["points"]
    assert body["score"] == easy["points"]

    again = client.post(f"/api/v1/dares/{easy['dare_id']}/complete", headers=auth_headers)
    assert again.status_code == 409
    assert error_code(again) == "ALREADY_COMPLETED"


def test_client_points_are_ignored(client, auth_headers):
    easy = daily(client, auth_headers)["dares"][0]

    response = client.post(
        f"/api/v1/dares/{easy['dare_id']}/complete", json={"points": 1000000}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json()["points_awarded"] == easy["points"]
    assert response.json()["score"] == easy["points"]
    assert daily(client, auth_headers)["score"] == easy["points"]


def test_complete_unknown_dare(client, auth_headers):
    daily(client, auth_headers)

    response = client.post("/api/v1/dares/nope/complete", headers=auth_headers)

    assert response.status_code == 404
    assert error_code(response) == "DARE_NOT_FOUND"


def test_bonus_id_rejected_on_daily_completion(client, auth_headers):
    daily(client, auth_headers)

    response = client.post("/api/v1/dares/ai_123/complete", json={"points": 500}, headers=auth_headers)

    assert response.status_code == 400
    assert error_code(response) == "INVALID_INPUT"


def test_reroll_contract(client, auth_headers):
    medium = daily(client, auth_headers)["dares"][1]

    response = client.post(f"/api/v1/dares/{medium['dare_id']}/reroll", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["paid_with"] == "token"
    assert body["remaining_tokens"] == 1
    assert body["new_dare"]["difficulty"] == "Medium"


def test_reroll_without_currency(client, auth_headers):
    dare_id = daily(client, auth_headers)["dares"][0]["dare_id"]
    for _ in range(2):
        dare_id = client.post(f"/api/v1/dares/{dare_id}/reroll", headers=auth_headers).json()["new_dare"]["dare_id"]

    response = client.post(f"/api/v1/dares/{dare_id}/reroll", headers=auth_headers)

    assert response.status_code == 402
    assert error_code(response) == "INSUFFICIENT_CURRENCY"
    assert response.json()["error"]["details"]["remaining_tokens"] == 0


def test_completed_dare_cannot_be_rerolled(client, auth_headers):
    hard = daily(client, auth_headers)["dares"][2]
    client.post(f"/api/v1/dares/{hard['dare_id']}/complete", headers=auth_headers)

    response = client.post(f"/api/v1/dares/{hard['dare_id']}/reroll", headers=auth_headers)

    assert response.status_code == 409
    assert error_code(response) == "ALREADY_COMPLETED"
    data = daily(client, auth_headers)
    assert data["reroll_tokens"] == 2
    assert data["score"] == hard["points"]
    assert data["dares"][2]["completed"] is True


def test_purchase_token_contract(client, auth_headers):
    daily(client, auth_headers)

    poor = client.post("/api/v1/dares/tokens", headers=auth_headers)
    assert poor.status_code == 402

    hard = daily(client, auth_headers)["dares"][2]
    client.post(f"/api/v1/dares/{hard['dare_id']}/complete", headers=auth_headers)

    response = client.post("/api/v1/dares/tokens", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["new_token_count"] == 3
    assert response.json()["score"] == hard["points"] - 50


def test_bonus_generate_and_complete(client, auth_headers):
    daily(client, auth_headers)

    generated = client.post("/api/v1/dares/bonus", json={"history": ["Moonwalk"]}, headers=auth_headers)
    assert generated.status_code == 200
    dare = generated.json()
    assert dare["dare_id"].startswith("ai_")
    assert dare["title"] == "Robot Dance"
    assert dare["tags"] == ["AI Dare", "Overtime"]

    completed = client.post(
        "/api/v1/dares/bonus/complete",
        json={"dare_id": dare["dare_id"], "difficulty": dare["difficulty"]},
        headers=auth_headers
    )
    assert completed.status_code == 200
    assert completed.json()["is_bonus"] is True
    assert completed.json()["points_awarded"] == dare["points"]


def test_validation_error_envelope(client, auth_headers):
    response = client.post("/api/v1/dares/bonus/complete", json={"dare_id": "ai_1"}, headers=auth_headers)

    assert response.status_code == 422
    assert error_code(response) == "INVALID_INPUT"
