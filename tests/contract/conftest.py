import asyncio
import random
from datetime import date

import fakeredis
import httpx
import pytest
from fastapi.testclient import TestClient

from dailydare.app import create_app
from dailydare.core.dependencies import get_bonus_service, get_clock, get_redis_client
from dailydare.core.service.auth.jwt_service import JWTService
from dailydare.core.service.bonus.bonus_dare_service import BonusDareService
from dailydare.core.service.bonus.gemini_client import GeminiClient
from dailydare.core.service.dare.cache.catalog_store import DareCatalogStore
from dailydare.core.service.dare.catalog_service import DareCatalogService

TODAY = date(2025, 3, 10)


class ContractClock:
    def today(self) -> date:
        return TODAY


def gemini_handler(request: httpx.Request) -> httpx.Response:
    text = '{"title": "Robot Dance", "description": "Dance like a robot for 30 seconds.", "difficulty": "Medium"}'
    return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]})


@pytest.fixture
def fake_server():
    """One in-memory Redis shared by every request of a test"""
    server = fakeredis.FakeServer()

    async def seed():
        redis_client = fakeredis.aioredis.FakeRedis(server=server, decode_responses=True)
        await DareCatalogService(DareCatalogStore(redis_client)).seed_dares()
        await redis_client.aclose()

    asyncio.run(seed())
    return server


@pytest.fixture
def app(fake_server):
    app = create_app()

    # TestClient runs each request on its own loop, so clients are per request
    async def override_redis():
        return fakeredis.aioredis.FakeRedis(server=fake_server, decode_responses=True)

    def override_bonus_service():
        client = GeminiClient(api_key="test-key", transport=httpx.MockTransport(gemini_handler))
        return BonusDareService(client, rng=random.Random(0))

    app.dependency_overrides[get_redis_client] = override_redis
    app.dependency_overrides[get_clock] = ContractClock
    app.dependency_overrides[get_bonus_service] = override_bonus_service
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def auth_headers():
    token = JWTService().create_access_token("user-1").access_token
    return {"Authorization": f"Bearer {token}"}
