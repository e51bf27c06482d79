"""
Commercial Network Components for the NexoScore engine.

Scores the breadth and stability of the merchant's customer base, and how
many of its customers are themselves registered merchants.
"""

import asyncio
from typing import Optional, Set

import structlog

from nexoscore.core.metrics import record_network_lookup_failure
from nexoscore.domain.interfaces import MerchantDirectory

from .models import AggregatedData, ComponentScore
from .settings import ScoringSettings, scoring_settings
from .windows import in_trailing_window, in_window_range

logger = structlog.get_logger(__name__)

NETWORK_FALLBACK = 0.3


def _customer_ids(transactions) -> Set[str]:
    return {t.customer_id for t in transactions if t.customer_id}


def calculate_customer_diversity(
    data: AggregatedData,
    settings: ScoringSettings = scoring_settings,
) -> ComponentScore:
    """
    Distinct customers transacting in the trailing window.

    Returns:
        Component with raw = number of distinct customers
    """
    recent = in_trailing_window(data.transactions, data.as_of, settings.window_days)
    count = len(_customer_ids(recent))

    if count >= 20:
        normalized = 1.0
    elif count >= 10:
        normalized = 0.7 + (count - 10) / 10 * 0.3
    elif count >= 5:
        normalized = 0.5 + (count - 5) / 5 * 0.2
    elif count >= 1:
        normalized = 0.2 + (count - 1) / 4 * 0.3
    else:
        normalized = 0.05

    return ComponentScore.of(raw=count, label=f"{count} customers", normalized=normalized)


def calculate_customer_retention(
    data: AggregatedData,
    settings: ScoringSettings = scoring_settings,
) -> ComponentScore:
    """
    Share of the prior window's customers who came back this window.

    With no customers in the prior window there is nothing to retain, and
    the component defaults to 0.4.

    Returns:
        Component with raw = retention rate (2 decimals)
    """
    days = settings.window_days
    current = _customer_ids(in_trailing_window(data.transactions, data.as_of, days))
    prior = _customer_ids(in_window_range(data.transactions, data.as_of, days, days * 2))

    if not prior:
        return ComponentScore.of(raw=None, label="No prior period", normalized=0.4)

    rate = len(prior & current) / len(prior)
    if rate >= 0.8:
        normalized = 0.9 + (rate - 0.8) / 0.2 * 0.1
    elif rate >= 0.6:
        normalized = 0.6 + (rate - 0.6) / 0.2 * 0.3
    elif rate >= 0.4:
        normalized = 0.3 + (rate - 0.4) / 0.2 * 0.3
    else:
        normalized = rate * 0.75

    return ComponentScore.of(
        raw=round(rate, 2),
        label=f"{rate * 100:.0f}% returning",
        normalized=normalized,
    )


def score_network_matches(matches: int) -> float:
    """Map the number of customers who are registered merchants to [0, 1]."""
    if matches >= 5:
        return 1.0
    elif matches >= 3:
        return 0.7 + (matches - 3) / 2 * 0.3
    elif matches >= 1:
        return 0.45 + (matches - 1) / 2 * 0.25
    return NETWORK_FALLBACK


async def calculate_network_validation(
    data: AggregatedData,
    directory: Optional[MerchantDirectory],
    timeout: float,
) -> ComponentScore:
    """
    Cross-reference customer phones against registered merchant phones.

    The lookup is bounded by ``timeout``. A timeout or lookup error is
    logged and resolves to the 0.3 fallback; it never fails the score.

    Args:
        data: Aggregated merchant data
        directory: Registered-merchant lookup (None disables the check)
        timeout: Seconds to wait for the directory

    Returns:
        Component with raw = number of customers that are merchants
    """
    phones = sorted({c.phone for c in data.customers if c.phone})
    if not phones or directory is None:
        return ComponentScore.of(raw=0, label="No network data", normalized=NETWORK_FALLBACK)

    try:
        matches = await asyncio.wait_for(
            directory.count_registered_phones(phones),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        logger.warning(
            "network_lookup_failed",
            merchant_id=data.merchant.id,
            error_type="timeout",
            timeout=timeout,
        )
        record_network_lookup_failure("timeout")
        return ComponentScore.of(raw=0, label="Not verified", normalized=NETWORK_FALLBACK)
    except Exception as e:
        logger.warning(
            "network_lookup_failed",
            merchant_id=data.merchant.id,
            error_type="error",
            error=str(e),
        )
        record_network_lookup_failure("error")
        return ComponentScore.of(raw=0, label="Not verified", normalized=NETWORK_FALLBACK)

    return ComponentScore.of(
        raw=matches,
        label=f"{matches} customers are merchants",
        normalized=score_network_matches(matches),
    )
