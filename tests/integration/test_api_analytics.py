"""Integration tests for analytics API."""

import pytest
from unittest.mock import AsyncMock
from httpx import ASGITransport, AsyncClient

from callboard_core.analytics import RepositoryError, SessionRepository
from callboard_core.api.dependencies import get_session_repository


JANUARY = {"date_from": "2024-01-01", "date_to": "2024-01-02T23:59:59"}


class TestAnalyticsAPI:
    """Tests for tenant-wide analytics endpoint."""

    @pytest.mark.asyncio
    async def test_get_analytics(self, client: AsyncClient):
        """Test analytics over an explicit window."""
        response = await client.get("/api/v1/analytics", params=JANUARY)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True

        data = body["data"]
        assert data["dateRange"] == {
            "start": "2024-01-01T00:00:00",
            "end": "2024-01-02T23:59:59",
        }
        assert data["metrics"]["totalCalls"] == 3
        assert data["metrics"]["successfulCalls"] == 2
        assert data["metrics"]["failedCalls"] == 1
        assert data["metrics"]["successRate"] == 66.7
        assert data["metrics"]["averageDuration"] == 150
        assert data["metrics"]["averageSatisfaction"] == 4.5
        assert data["callVolume"] == [
            {"date": "2024-01-01", "calls": 2, "successful": 2},
            {"date": "2024-01-02", "calls": 1, "successful": 0},
        ]
        assert [p["averageDuration"] for p in data["durationTrends"]] == [150, 0]
        assert [p["successRate"] for p in data["successRateTrends"]] == [100.0, 0.0]
        assert [a["agentId"] for a in data["agentPerformance"]] == ["agt_support", "agt_sales"]
        assert [(s["name"], s["value"], s["color"]) for s in data["statusDistribution"]] == [
            ("Completed", 2, "#10B981"),
            ("Failed", 1, "#EF4444"),
        ]

    @pytest.mark.asyncio
    async def test_get_analytics_for_agent(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/analytics",
            params={**JANUARY, "agent_id": "agt_sales"},
        )

        assert response.status_code == 200
        metrics = response.json()["data"]["metrics"]
        assert metrics["totalCalls"] == 1
        assert metrics["successRate"] == 0.0

    @pytest.mark.asyncio
    async def test_agent_filter_keeps_full_agent_breakdown(self, client: AsyncClient):
        """Test filtering by agent leaves other agents' performance intact."""
        unfiltered = await client.get("/api/v1/analytics", params=JANUARY)
        filtered = await client.get(
            "/api/v1/analytics",
            params={**JANUARY, "agent_id": "agt_sales"},
        )

        performance = filtered.json()["data"]["agentPerformance"]
        assert performance == unfiltered.json()["data"]["agentPerformance"]
        support = next(p for p in performance if p["agentId"] == "agt_support")
        assert support["totalCalls"] == 2
        assert support["successRate"] == 100.0

    @pytest.mark.asyncio
    async def test_all_agents(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/analytics",
            params={**JANUARY, "agent_id": "all"},
        )

        assert response.json()["data"]["metrics"]["totalCalls"] == 3

    @pytest.mark.asyncio
    async def test_empty_window(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/analytics",
            params={"date_from": "2023-06-01", "date_to": "2023-06-30"},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["metrics"]["totalCalls"] == 0
        assert data["metrics"]["firstCall"] is None
        assert data["callVolume"] == []

    @pytest.mark.asyncio
    async def test_malformed_date(self, client: AsyncClient):
        response = await client.get("/api/v1/analytics", params={"date_from": "last-week"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VAL_2005"
        assert error["field"] == "date_from"

    @pytest.mark.asyncio
    async def test_inverted_range(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/analytics",
            params={"date_from": "2024-02-01", "date_to": "2024-01-01"},
        )

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["error"]["code"] == "VAL_2005"

    @pytest.mark.asyncio
    async def test_missing_organization(self, app, seeded_database):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            response = await ac.get("/api/v1/analytics")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_1001"

    @pytest.mark.asyncio
    async def test_other_tenant_isolated(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/analytics",
            params=JANUARY,
            headers={"X-Organization-ID": "org_other"},
        )

        data = response.json()["data"]
        assert data["metrics"]["totalCalls"] == 1
        assert data["metrics"]["averageDuration"] == 300

    @pytest.mark.asyncio
    async def test_repository_failure(self, app, client: AsyncClient):
        """Test storage failures return a generic 500."""
        repository = AsyncMock(spec=SessionRepository)
        repository.query.side_effect = RepositoryError(
            "query_sessions", cause=RuntimeError("connection refused to 10.0.0.5")
        )
        app.dependency_overrides[get_session_repository] = lambda: repository

        try:
            response = await client.get("/api/v1/analytics")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "SRV_5003"
        assert error["message"] == "Failed to fetch analytics data"
        assert "10.0.0.5" not in response.text


class TestAgentAnalyticsAPI:
    """Tests for single-agent analytics endpoint."""

    @pytest.mark.asyncio
    async def test_get_agent_analytics(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/analytics/agent/agt_support",
            params={"date_from": "2024-01-01", "date_to": "2024-01-31"},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["agent"] == {
            "id": "agt_support",
            "name": "Support Bot",
            "description": "Answers support calls",
        }
        assert data["metrics"]["totalCalls"] == 3
        assert data["metrics"]["successfulCalls"] == 2
        assert [c["id"] for c in data["recentCalls"]] == ["ses_4", "ses_2", "ses_1"]
        assert data["recentCalls"][0]["agentName"] == "Support Bot"
        assert data["recentCalls"][0]["status"] == "in_progress"
        assert "agentPerformance" not in data

    @pytest.mark.asyncio
    async def test_unknown_agent(self, client: AsyncClient):
        response = await client.get("/api/v1/analytics/agent/unknown-id")

        assert response.status_code == 404
        body = response.json()
        assert body["data"] is None
        assert body["error"]["code"] == "RES_3001"

    @pytest.mark.asyncio
    async def test_deleted_agent(self, client: AsyncClient):
        response = await client.get("/api/v1/analytics/agent/agt_retired")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_foreign_agent(self, client: AsyncClient):
        response = await client.get("/api/v1/analytics/agent/agt_foreign")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_malformed_date(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/analytics/agent/agt_support",
            params={"date_to": "2024-99-99"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["field"] == "date_to"


class TestRealtimeAPI:
    """Tests for realtime counters endpoint."""

    @pytest.mark.asyncio
    async def test_get_realtime(self, client: AsyncClient):
        response = await client.get("/api/v1/analytics/realtime")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["currentHour"] == {"calls": 0, "active": 0}
        assert data["last24Hours"]["calls"] == 0


class TestServiceAPI:
    """Tests for health and request tracking."""

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["checks"]["database"] == "ok"

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/analytics",
            params=JANUARY,
            headers={"X-Request-ID": "req_from_client"},
        )

        assert response.headers["X-Request-ID"] == "req_from_client"
        assert response.json()["request_id"] == "req_from_client"

    @pytest.mark.asyncio
    async def test_request_id_generated(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.headers["X-Request-ID"].startswith("req_")
