"""
Unit Tests for LookupService.

These tests verify:
1. Identifier resolution (phone vs. national id, cleaning)
2. History ordering, limit and trend
3. Leaderboard and distribution statistics
"""

from datetime import datetime, timedelta

import pytest

from nexoscore.application.services import LookupService
from nexoscore.application.services.lookup_service import clean_identifier, looks_like_phone
from nexoscore.domain.entities import Merchant, MerchantStatus, ScoreSnapshot
from nexoscore.domain.exceptions import InvalidIdentifierException


NOW = datetime(2026, 3, 15, 2, 0, 0)


def make_merchant(**overrides) -> Merchant:
    fields = {
        "phone": "+595981234567",
        "national_id": "4523871",
        "name": "Doña Rosa",
        "business_name": "Despensa Rosa",
        "business_type": "despensa",
        "city": "Asunción",
        "created_at": NOW - timedelta(days=200),
    }
    fields.update(overrides)
    return Merchant(**fields)


def make_snapshot(merchant_id: str, score: int, days_ago: int) -> ScoreSnapshot:
    return ScoreSnapshot(
        merchant_id=merchant_id,
        score=score,
        tier="B",
        components={"tx_frequency": {"raw": 5.1, "label": "5.1 tx/week", "normalized": 0.73}},
        alerts=[],
        credit_limit=100_000,
        monthly_sales=500_000,
        created_at=NOW - timedelta(days=days_ago),
    )


@pytest.fixture
def lookup_service(merchant_repo, score_repo) -> LookupService:
    return LookupService(merchant_repo, score_repo, history_limit=30)


class TestIdentifierParsing:
    """Tests for clean_identifier() and looks_like_phone()."""

    def test_strips_formatting(self):
        assert clean_identifier("+595 981-234.567") == "+595981234567"

    def test_plus_prefix_is_a_phone(self):
        assert looks_like_phone("+5959")

    def test_ten_digits_is_a_phone(self):
        assert looks_like_phone("0981234567")

    def test_short_number_is_a_national_id(self):
        assert not looks_like_phone("4523871")


class TestGetScore:
    """Tests for LookupService.get_score()."""

    @pytest.mark.asyncio
    async def test_phone_lookup_with_five_snapshots(self, lookup_service, merchant_repo, score_repo):
        merchant = merchant_repo.add(make_merchant(current_score=640))
        for days_ago, score in [(4, 600), (3, 610), (2, 620), (1, 630), (0, 640)]:
            score_repo.snapshots.append(make_snapshot(merchant.id, score, days_ago))

        lookup = await lookup_service.get_score("+595981234567")

        assert lookup is not None
        assert len(lookup.history) == 5
        assert [point.score for point in lookup.history] == [640, 630, 620, 610, 600]
        assert lookup.score == 640
        assert lookup.tier == "B"
        assert lookup.tier_info["label"] == "Good"
        assert lookup.trend == 10
        assert lookup.last_calculated == (NOW).isoformat() + "Z"
        assert "tx_frequency" in lookup.components

    @pytest.mark.asyncio
    async def test_phone_without_plus(self, lookup_service, merchant_repo):
        merchant_repo.add(make_merchant())
        assert await lookup_service.get_score("595981234567") is not None

    @pytest.mark.asyncio
    async def test_national_id_lookup(self, lookup_service, merchant_repo):
        merchant_repo.add(make_merchant())
        lookup = await lookup_service.get_score("4523871")

        assert lookup is not None
        assert lookup.merchant["name"] == "Doña Rosa"
        assert "phone" not in lookup.merchant

    @pytest.mark.asyncio
    async def test_unresolved_phone_falls_back_to_national_id(self, lookup_service, merchant_repo):
        merchant_repo.add(make_merchant(national_id="1234567890"))
        assert await lookup_service.get_score("1234567890") is not None

    @pytest.mark.asyncio
    async def test_never_scored_merchant(self, lookup_service, merchant_repo):
        merchant_repo.add(make_merchant())
        lookup = await lookup_service.get_score("+595981234567")

        assert lookup.score == 0
        assert lookup.tier == "F"
        assert lookup.history == []
        assert lookup.trend is None
        assert lookup.last_calculated is None

    @pytest.mark.asyncio
    async def test_single_snapshot_has_no_trend(self, lookup_service, merchant_repo, score_repo):
        merchant = merchant_repo.add(make_merchant(current_score=500))
        score_repo.snapshots.append(make_snapshot(merchant.id, 500, 0))

        lookup = await lookup_service.get_score("+595981234567")
        assert lookup.trend is None

    @pytest.mark.asyncio
    async def test_history_is_capped(self, merchant_repo, score_repo):
        merchant = merchant_repo.add(make_merchant(current_score=500))
        for days_ago in range(40):
            score_repo.snapshots.append(make_snapshot(merchant.id, 500, days_ago))

        service = LookupService(merchant_repo, score_repo, history_limit=30)
        lookup = await service.get_score("+595981234567")
        assert len(lookup.history) == 30

    @pytest.mark.asyncio
    async def test_unknown_identifier(self, lookup_service):
        assert await lookup_service.get_score("+595999999999") is None

    @pytest.mark.asyncio
    async def test_too_short_identifier(self, lookup_service):
        with pytest.raises(InvalidIdentifierException):
            await lookup_service.get_score("12")

    @pytest.mark.asyncio
    async def test_formatting_does_not_count_toward_length(self, lookup_service):
        with pytest.raises(InvalidIdentifierException):
            await lookup_service.get_score("1-2-3")


class TestBoardAndStats:
    """Tests for get_leaderboard() and get_distribution()."""

    @pytest.mark.asyncio
    async def test_leaderboard_order_and_rank(self, lookup_service, merchant_repo):
        merchant_repo.add(make_merchant(phone="+1", business_name="Kiosco Uno", current_score=480))
        merchant_repo.add(make_merchant(phone="+2", business_name="Almacén Dos", current_score=810))
        merchant_repo.add(make_merchant(phone="+3", business_name="Sin Score", current_score=0))
        merchant_repo.add(make_merchant(
            phone="+4",
            business_name="Cerrado",
            current_score=900,
            status=MerchantStatus.INACTIVE,
        ))

        board = await lookup_service.get_leaderboard(limit=10)

        assert [(e.rank, e.name, e.tier) for e in board] == [
            (1, "Almacén Dos", "A"),
            (2, "Kiosco Uno", "C"),
        ]

    @pytest.mark.asyncio
    async def test_distribution(self, lookup_service, merchant_repo):
        for i, score in enumerate([800, 760, 610, 455, 100]):
            merchant_repo.add(make_merchant(phone=f"+{i}", current_score=score))

        stats = await lookup_service.get_distribution()

        assert stats.total == 5
        assert stats.average == 545
        assert stats.by_tier == {"A": 2, "B": 1, "C": 1, "D": 0, "F": 1}

    @pytest.mark.asyncio
    async def test_empty_distribution(self, lookup_service):
        stats = await lookup_service.get_distribution()
        assert stats.total == 0
        assert stats.average == 0
