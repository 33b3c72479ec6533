"""Tests for gamification endpoints (award points, summary, health)"""
from datetime import datetime, timedelta

import pytest
import pytest_asyncio
import httpx
from unittest.mock import AsyncMock

from zikir_rewards.api.middleware import limiter
from zikir_rewards.api.models import ErrorResponse
from zikir_rewards.api.server import create_api_application, status_code_for
from zikir_rewards.db.repository import InMemoryPlayerRepository
from zikir_rewards.exceptions import (
    ConfigurationError,
    ConnectionError,
    DatabaseError,
    QueryError,
    ValidationError,
    ZikirRewardsError,
)
from zikir_rewards.gamification.rules import GamificationRules
from zikir_rewards.services.container import ServiceContainer

API_KEY = "test_key_123"


@pytest.fixture(autouse=True)
def api_environment(monkeypatch):
    """Valid API key configured, rate limiting off"""
    monkeypatch.setenv("API_KEYS", f"{API_KEY},other_key")
    monkeypatch.setattr(limiter, "enabled", False)


@pytest.fixture
def repository():
    return InMemoryPlayerRepository()


@pytest.fixture
def container(repository):
    return ServiceContainer(
        repository=repository,
        rules=GamificationRules(),
        special_status_level=31,
    )


@pytest_asyncio.fixture
async def client(container):
    app = create_api_application(container)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def headers(user_id: str = "user_001") -> dict:
    return {"Authorization": f"Bearer {API_KEY}", "X-User-Id": user_id}


@pytest.mark.asyncio
async def test_award_points(client):
    """Test awarding points for a batch of zikir"""
    response = await client.post("/api/user/award-points", json={"zikirCount": 10}, headers=headers())

    assert response.status_code == 200
    data = response.json()
    assert data["pointsAwarded"] == {"amalScore": 10, "barakahCoins": 5, "noorTokens": 0}
    assert data["leveledUp"] is False
    assert data["newLevel"]["level"] == 1
    assert data["newBadges"] == []
    assert data["milestone"] is None
    assert data["achievement"]["type"] == "points"


@pytest.mark.asyncio
async def test_award_points_first_badge(client):
    """Test that First Steps is unlocked and announced"""
    response = await client.post("/api/user/award-points", json={"zikirCount": 50}, headers=headers())

    assert response.status_code == 200
    data = response.json()
    assert [badge["id"] for badge in data["newBadges"]] == ["first_steps"]
    assert data["pointsAwarded"]["amalScore"] == 75
    assert data["achievement"]["type"] == "badge"
    assert data["achievement"]["titleAr"] == "تم كسب الخطوات الأولى!"


@pytest.mark.asyncio
async def test_badge_rewards_level_up_wins_notification(client):
    """Two badges in a room push the player to level 2, which outranks the badges"""
    # 50 + 25 + 100 badge points + 20 level 2 bonus
    response = await client.post("/api/user/award-points", json={"zikirCount": 50, "roomId": 3}, headers=headers())

    data = response.json()
    assert [badge["id"] for badge in data["newBadges"]] == ["first_steps", "community_member"]
    assert data["pointsAwarded"]["amalScore"] == 195
    assert data["leveledUp"] is True
    assert data["newLevel"]["level"] == 2
    assert data["achievement"]["type"] == "level_up"


@pytest.mark.asyncio
async def test_award_points_rejects_zero_count(client, repository):
    """Test that a non-positive count is a 400 and nothing is stored"""
    response = await client.post("/api/user/award-points", json={"zikirCount": 0}, headers=headers())

    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "ValidationError"
    assert "request_id" in data
    assert (await repository.get_player_state("user_001")).total_lifetime_count == 0


@pytest.mark.asyncio
async def test_award_points_requires_count(client):
    response = await client.post("/api/user/award-points", json={}, headers=headers())

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_invalid_api_key(client):
    """Test request with invalid API key"""
    response = await client.post(
        "/api/user/award-points",
        json={"zikirCount": 1},
        headers={"Authorization": "Bearer invalid_key", "X-User-Id": "user_001"}
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_missing_user_header(client):
    response = await client.get(
        "/api/user/gamification",
        headers={"Authorization": f"Bearer {API_KEY}"}
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_no_api_keys_configured(client, monkeypatch):
    monkeypatch.setenv("API_KEYS", "")

    response = await client.get("/api/user/gamification", headers=headers())

    assert response.status_code == 503


@pytest.mark.asyncio
async def test_storage_failure_maps_to_503(container, client):
    container.gamification_service.repository = AsyncMock()
    container.gamification_service.repository.apply_accrual.side_effect = ConnectionError(operation="apply_accrual")

    response = await client.post("/api/user/award-points", json={"zikirCount": 1}, headers=headers())

    assert response.status_code == 503
    assert response.json()["error"] == "ConnectionError"


@pytest.mark.asyncio
async def test_gamification_summary(client):
    """Test the summary after a few accruals"""
    for _ in range(3):
        await client.post("/api/user/award-points", json={"zikirCount": 40}, headers=headers())

    response = await client.get("/api/user/gamification", headers=headers())

    assert response.status_code == 200
    data = response.json()
    assert data["amalScore"] == 165
    assert data["barakahCoins"] == 95
    assert data["noorTokens"] == 1
    assert data["totalLifetimeCount"] == 120
    assert data["userLevel"] == 2
    assert data["currentLevel"]["title"] == "Seeker 2"
    assert data["nextLevel"]["level"] == 3
    assert data["nextLevel"]["pointsNeeded"] == 235
    assert [badge["id"] for badge in data["badges"]] == ["first_steps"]
    assert data["totalBadges"] == 1
    assert data["hasSpecialStatus"] is False


@pytest.mark.asyncio
async def test_summary_is_per_user(client):
    await client.post("/api/user/award-points", json={"zikirCount": 5}, headers=headers("alice"))

    response = await client.get("/api/user/gamification", headers=headers("bob"))

    assert response.json()["totalLifetimeCount"] == 0


@pytest.mark.asyncio
async def test_health_check(client):
    """Test health check endpoint"""
    response = await client.get("/api/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["storage"] == "memory:connected"
    assert "timestamp" in data


@pytest.mark.asyncio
async def test_health_timestamp_is_utc(client):
    response = await client.get("/api/health")

    timestamp = datetime.fromisoformat(response.json()["timestamp"].replace("Z", "+00:00"))
    assert timestamp.utcoffset() == timedelta(0)


def test_error_response_timestamp_is_utc():
    assert ErrorResponse(error="QueryError", message="failed").timestamp.utcoffset() == timedelta(0)


@pytest.mark.asyncio
@pytest.mark.parametrize("path, method", [
    ("/api/user/award-points", "post"),
    ("/api/user/gamification", "get"),
])
async def test_openapi_documents_error_responses(client, path, method):
    """Server errors are documented alongside client errors"""
    response = await client.get("/openapi.json")

    responses = response.json()["paths"][path][method]["responses"]
    assert {"500", "503"} <= set(responses)


@pytest.mark.parametrize("error, expected", [
    (ValidationError("bad count", field="zikir_count", value=0), 400),
    (ConnectionError(), 503),
    (QueryError("failed"), 500),
    (DatabaseError("unreadable row"), 500),
    (ConfigurationError("bad rules", config_key="rules"), 500),
    (ZikirRewardsError("boom"), 500),
])
def test_status_code_for(error, expected):
    assert status_code_for(error) == expected
