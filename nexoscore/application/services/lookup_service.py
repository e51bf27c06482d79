"""Lookup service - public score queries by phone or national id."""

import re
from typing import List, Optional

import structlog

from nexoscore.application.dto import LeaderboardEntry, ScoreDistribution, ScoreLookup
from nexoscore.domain.entities import Merchant
from nexoscore.domain.exceptions import InvalidIdentifierException
from nexoscore.domain.interfaces import MerchantRepository, ScoreRepository
from nexoscore.service.scoring import (
    ScoringSettings,
    classify_tier,
    round_half_up,
    scoring_settings,
)

logger = structlog.get_logger(__name__)

MIN_IDENTIFIER_LENGTH = 4
MIN_PHONE_DIGITS = 10

_NON_IDENTIFIER_CHARS = re.compile(r"[^\d+]")


def clean_identifier(identifier: str) -> str:
    """Keep only digits and '+'."""
    return _NON_IDENTIFIER_CHARS.sub("", identifier or "")


def looks_like_phone(cleaned: str) -> bool:
    return cleaned.startswith("+") or len(cleaned) >= MIN_PHONE_DIGITS


class LookupService:
    """
    Application service for read-only score queries.

    Lookups only expose the limited public profile of a merchant, never
    contact details.
    """

    def __init__(
        self,
        merchant_repository: MerchantRepository,
        score_repository: ScoreRepository,
        history_limit: int = 30,
        settings: ScoringSettings = scoring_settings,
    ):
        self._merchant_repo = merchant_repository
        self._score_repo = score_repository
        self._history_limit = history_limit
        self._settings = settings

    async def resolve_merchant(self, identifier: str) -> Optional[Merchant]:
        """
        Find a merchant by phone or national id.

        Raises:
            InvalidIdentifierException: If the cleaned identifier is too short
        """
        cleaned = clean_identifier(identifier)
        if len(cleaned) < MIN_IDENTIFIER_LENGTH:
            raise InvalidIdentifierException(identifier)

        merchant = None
        if looks_like_phone(cleaned):
            phone = "+" + cleaned.lstrip("+")
            merchant = await self._merchant_repo.get_by_phone(phone)

        if merchant is None:
            merchant = await self._merchant_repo.get_by_national_id(cleaned.lstrip("+"))

        return merchant

    async def get_score(self, identifier: str) -> Optional[ScoreLookup]:
        """
        Look up a merchant's score, components, alerts and history.

        Args:
            identifier: Phone number (E.164, with or without '+') or national id

        Returns:
            The lookup view, or None if no merchant matches

        Raises:
            InvalidIdentifierException: If the identifier is too short
        """
        merchant = await self.resolve_merchant(identifier)
        if merchant is None:
            logger.info("score_lookup_not_found")
            return None

        history = await self._score_repo.get_history(merchant.id, limit=self._history_limit)
        tier = classify_tier(merchant.current_score, self._settings)

        logger.info(
            "score_lookup",
            merchant_id=merchant.id,
            score=merchant.current_score,
            history_points=len(history),
        )

        return ScoreLookup.build(merchant, tier.to_dict(), history)

    async def get_leaderboard(self, limit: int = 50) -> List[LeaderboardEntry]:
        """Top scored active merchants, best first."""
        merchants = await self._merchant_repo.get_top_scored(limit=limit)
        return [
            LeaderboardEntry(
                rank=rank,
                name=merchant.business_name or merchant.name or "Merchant",
                business_type=merchant.business_type,
                city=merchant.city,
                score=merchant.current_score,
                tier=classify_tier(merchant.current_score, self._settings).grade,
            )
            for rank, merchant in enumerate(merchants, start=1)
        ]

    async def get_distribution(self) -> ScoreDistribution:
        """Count scored active merchants per tier, with the average score."""
        scores = await self._merchant_repo.get_active_scores()
        by_tier = {tier.grade: 0 for tier in self._settings.tiers}
        for score in scores:
            by_tier[classify_tier(score, self._settings).grade] += 1

        average = round_half_up(sum(scores) / len(scores)) if scores else 0
        return ScoreDistribution(total=len(scores), average=average, by_tier=by_tier)
