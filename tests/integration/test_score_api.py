"""
Integration Tests for the NexoScore API.

These tests exercise the full request path against an in-memory database:
routing, validation, services, repositories and error mapping.
"""

import pytest
from httpx import AsyncClient

from nexoscore.application.services import BatchState
from nexoscore.core.config import settings


# =============================================================================
# Calculate
# =============================================================================

class TestCalculateEndpoint:
    """Tests for POST /v1/score/calculate/{merchant_id}."""

    @pytest.mark.asyncio
    async def test_calculate_returns_full_breakdown(self, client: AsyncClient, seed):
        merchant = await seed.merchant()
        await seed.activity(merchant.id)

        response = await client.post(f"/v1/score/calculate/{merchant.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["merchant_id"] == merchant.id
        assert 0 <= data["score"] <= 1000
        assert len(data["components"]) == 15
        assert data["tier"]["grade"] in {"A", "B", "C", "D", "F"}
        assert data["monthly_sales"] > 0
        assert data["calculated_at"].endswith("Z")
        for component in data["components"].values():
            assert 0.0 <= component["normalized"] <= 1.0

    @pytest.mark.asyncio
    async def test_calculate_persists_snapshot_and_score(self, client: AsyncClient, seed):
        merchant = await seed.merchant()
        await seed.activity(merchant.id)

        calculated = (await client.post(f"/v1/score/calculate/{merchant.id}")).json()
        lookup = (await client.get("/v1/score/+595981234567")).json()

        assert lookup["score"] == calculated["score"]
        assert len(lookup["history"]) == 1
        assert lookup["history"][0]["score"] == calculated["score"]
        assert set(lookup["components"]) == set(calculated["components"])

    @pytest.mark.asyncio
    async def test_idle_merchant_gets_low_tier(self, client: AsyncClient, seed):
        merchant = await seed.merchant(age_days=0)

        response = await client.post(f"/v1/score/calculate/{merchant.id}")

        data = response.json()
        assert data["tier"]["grade"] == "F"
        assert data["credit_limit"] == 0
        codes = {alert["code"] for alert in data["alerts"]}
        assert "LOW_ACTIVITY" in codes

    @pytest.mark.asyncio
    async def test_unknown_merchant_returns_404(self, client: AsyncClient):
        response = await client.post("/v1/score/calculate/00000000-0000-4000-8000-000000000000")

        assert response.status_code == 404
        assert response.json()["error"] == "MERCHANT_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_malformed_id_returns_422(self, client: AsyncClient):
        response = await client.post("/v1/score/calculate/not-a-uuid")
        assert response.status_code == 422


# =============================================================================
# Lookup
# =============================================================================

class TestLookupEndpoint:
    """Tests for GET /v1/score/{identifier}."""

    @pytest.mark.asyncio
    async def test_lookup_by_phone_returns_history_newest_first(self, client: AsyncClient, seed):
        merchant = await seed.merchant(nexo_score=650)
        await seed.snapshots(merchant.id, [600, 610, 620, 640, 650])

        response = await client.get("/v1/score/+595981234567")

        assert response.status_code == 200
        data = response.json()
        assert data["score"] == 650
        assert data["tier"] == "B"
        assert data["tier_info"]["min"] == 600
        assert [point["score"] for point in data["history"]] == [650, 640, 620, 610, 600]
        assert data["trend"] == 10
        assert data["merchant"]["business_name"] == "Despensa Rosa"
        assert "phone" not in data["merchant"]

    @pytest.mark.asyncio
    async def test_lookup_by_national_id(self, client: AsyncClient, seed):
        await seed.merchant(nexo_score=480)

        response = await client.get("/v1/score/4523871")

        assert response.status_code == 200
        assert response.json()["tier"] == "C"

    @pytest.mark.asyncio
    async def test_short_identifier_returns_400(self, client: AsyncClient):
        response = await client.get("/v1/score/12")

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "INVALID_IDENTIFIER"
        assert "request_id" in data

    @pytest.mark.asyncio
    async def test_unknown_identifier_returns_404(self, client: AsyncClient):
        response = await client.get("/v1/score/+595999000000")
        assert response.status_code == 404


# =============================================================================
# Batch
# =============================================================================

class TestBatchEndpoints:
    """Tests for the batch recalculation endpoints."""

    @pytest.mark.asyncio
    async def test_recalculate_scores_active_merchants_only(self, client: AsyncClient, seed):
        active = await seed.merchant(phone="+595981000001", national_id="1000001")
        await seed.activity(active.id)
        await seed.merchant(phone="+595981000002", national_id="1000002")
        await seed.merchant(phone="+595981000003", national_id="1000003", status="inactive")

        response = await client.post("/v1/score/batch/recalculate")

        assert response.status_code == 200
        summary = response.json()
        assert summary["processed"] == 2
        assert summary["errors"] == 0
        assert summary["skipped"] == 0
        assert summary["avg_score"] > 0

        inactive = (await client.get("/v1/score/1000003")).json()
        assert inactive["history"] == []

    @pytest.mark.asyncio
    async def test_status_reports_last_run(self, client: AsyncClient, seed):
        await seed.merchant()

        before = (await client.get("/v1/score/batch/status")).json()
        assert before == {"state": "idle", "last_run": None}

        await client.post("/v1/score/batch/recalculate")
        after = (await client.get("/v1/score/batch/status")).json()

        assert after["state"] == "idle"
        assert after["last_run"]["processed"] == 1

    @pytest.mark.asyncio
    async def test_overlapping_trigger_returns_409(self, client: AsyncClient, batch_runner):
        batch_runner._state = BatchState.RUNNING

        response = await client.post("/v1/score/batch/recalculate")

        assert response.status_code == 409
        assert response.json()["error"] == "BATCH_ALREADY_RUNNING"
        status = (await client.get("/v1/score/batch/status")).json()
        assert status["state"] == "running"


# =============================================================================
# Board and Stats
# =============================================================================

class TestBoardAndStats:
    """Tests for the leaderboard and distribution endpoints."""

    @pytest.mark.asyncio
    async def test_leaderboard(self, client: AsyncClient, seed):
        await seed.merchant(phone="+595981000001", business_name="Kiosco Uno", nexo_score=520)
        await seed.merchant(phone="+595981000002", business_name="Almacén Dos", nexo_score=790)
        await seed.merchant(phone="+595981000003", business_name="Nuevo", nexo_score=0)

        response = await client.get("/v1/score/board/top", params={"limit": 10})

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert [(m["rank"], m["name"], m["tier"]) for m in data["merchants"]] == [
            (1, "Almacén Dos", "A"),
            (2, "Kiosco Uno", "C"),
        ]

    @pytest.mark.asyncio
    async def test_leaderboard_limit_is_clamped(self, client: AsyncClient):
        assert (await client.get("/v1/score/board/top", params={"limit": 5000})).status_code == 200
        assert (await client.get("/v1/score/board/top", params={"limit": 0})).status_code == 422

    @pytest.mark.asyncio
    async def test_distribution(self, client: AsyncClient, seed):
        await seed.merchant(phone="+595981000001", nexo_score=800)
        await seed.merchant(phone="+595981000002", nexo_score=610)
        await seed.merchant(phone="+595981000003", nexo_score=200)

        response = await client.get("/v1/score/stats/distribution")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert data["average"] == 537
        assert data["by_tier"] == {"A": 1, "B": 1, "C": 0, "D": 0, "F": 1}


# =============================================================================
# Authentication and Health
# =============================================================================

class TestApiKey:
    """Tests for optional API key enforcement."""

    @pytest.mark.asyncio
    async def test_missing_key_rejected_when_configured(self, client: AsyncClient, monkeypatch):
        monkeypatch.setattr(settings, "api_key", "s3cret")

        response = await client.get("/v1/score/stats/distribution")

        assert response.status_code == 401
        assert response.json()["error"] == "UNAUTHORIZED"

    @pytest.mark.asyncio
    async def test_header_key_accepted(self, client: AsyncClient, monkeypatch):
        monkeypatch.setattr(settings, "api_key", "s3cret")

        response = await client.get(
            "/v1/score/stats/distribution",
            headers={"X-API-Key": "s3cret"},
        )
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_query_key_accepted(self, client: AsyncClient, monkeypatch):
        monkeypatch.setattr(settings, "api_key", "s3cret")

        response = await client.get(
            "/v1/score/stats/distribution",
            params={"api_key": "s3cret"},
        )
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_no_key_configured_allows_all(self, client: AsyncClient):
        response = await client.get("/v1/score/stats/distribution")
        assert response.status_code == 200


class TestHealth:
    """Tests for GET /health."""

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["batch_state"] == "idle"
