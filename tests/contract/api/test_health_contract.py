from unittest.mock import AsyncMock, MagicMock, patch


def test_health_check_contract(client):
    fake_redis = MagicMock()
    fake_redis.ping = AsyncMock(return_value=True)

    with patch("dailydare.api.router.health.get_redis", new=AsyncMock(return_value=fake_redis)):
        response = client.get("/api/v1/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["services"]["redis"] == "healthy"
    assert data["services"]["activity_log"] == "disabled"
    assert isinstance(data["version"], str)


def test_health_reports_redis_outage(client):
    with patch("dailydare.api.router.health.get_redis", new=AsyncMock(side_effect=ConnectionError("down"))):
        response = client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json()["status"] == "unhealthy"
