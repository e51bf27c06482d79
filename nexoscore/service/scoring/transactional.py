"""
Transactional Components for the NexoScore engine.

This module scores how a merchant actually sells, from the transactions
logged through the messaging channel:
- Transaction Frequency (tx per week)
- Transaction Consistency (active days and daily variability)
- Revenue Trend (trailing vs. prior window)
- Average Ticket (against the norm for the business type)
- Multi Currency (more than one currency in use)

Every calculator is a pure function of the aggregated data and the
evaluation instant, and returns a default instead of raising when data is
missing.
"""

import statistics
from datetime import timedelta
from typing import Dict, Tuple

from .models import AggregatedData, ComponentScore
from .settings import ScoringSettings, scoring_settings
from .windows import format_compact, in_trailing_window, in_window_range, total_sales


# (minimum acceptable ticket, ideal ticket) per business type, in PYG
TICKET_BANDS: Dict[str, Tuple[int, int]] = {
    "almacen": (50_000, 200_000),
    "despensa": (30_000, 150_000),
    "distribuidora": (200_000, 1_000_000),
    "kiosco": (10_000, 50_000),
    "ferretería": (100_000, 500_000),
    "farmacia": (50_000, 200_000),
    "restaurante": (30_000, 150_000),
    "taller / servicio": (100_000, 500_000),
}
DEFAULT_TICKET_BAND: Tuple[int, int] = (30_000, 200_000)


def calculate_tx_frequency(
    data: AggregatedData,
    settings: ScoringSettings = scoring_settings,
) -> ComponentScore:
    """
    Score how often the merchant logs transactions.

    Algorithm:
        1. Count all transactions in the trailing window
        2. Convert to transactions per week
        3. Map through a piecewise curve saturating at 14/week

    Args:
        data: Aggregated merchant data
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        Component with raw = tx per week (1 decimal)
    """
    recent = in_trailing_window(data.transactions, data.as_of, settings.window_days)
    per_week = len(recent) / settings.weeks_per_window

    if per_week >= 14:
        normalized = 1.0
    elif per_week >= 7:
        normalized = 0.85 + (per_week - 7) / 7 * 0.15
    elif per_week >= 3:
        normalized = 0.6 + (per_week - 3) / 4 * 0.25
    elif per_week >= 1:
        normalized = 0.3 + (per_week - 1) / 2 * 0.3
    else:
        normalized = per_week * 0.3

    return ComponentScore.of(
        raw=round(per_week, 1),
        label=f"{per_week:.1f} tx/week",
        normalized=normalized,
    )


def calculate_tx_consistency(
    data: AggregatedData,
    settings: ScoringSettings = scoring_settings,
) -> ComponentScore:
    """
    Score how evenly activity is spread across the trailing window.

    Algorithm:
        1. Bucket trailing-window transactions by calendar day, over the
           window's days ending at ``as_of`` (days with no activity count 0)
        2. Count active days and compute the coefficient of variation
           (population stdev / mean) of the daily counts
        3. Many active days with low variability score highest

    Business Rationale:
        A merchant selling a little every day is a steadier business than
        one logging a burst once a month, even at the same volume.

    Args:
        data: Aggregated merchant data
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        Component with raw = active days in the window
    """
    recent = in_trailing_window(data.transactions, data.as_of, settings.window_days)
    if len(recent) < settings.min_consistency_transactions:
        return ComponentScore.of(raw=0, label="Insufficient data", normalized=0.1)

    end = data.as_of.date()
    counts = {end - timedelta(days=i): 0 for i in range(settings.window_days)}
    for txn in recent:
        day = txn.created_at.date()
        if day in counts:
            counts[day] += 1

    daily = list(counts.values())
    active_days = sum(1 for count in daily if count > 0)
    mean = statistics.fmean(daily)
    cv = statistics.pstdev(daily) / mean if mean > 0 else 999.0

    if active_days >= 20 and cv < 1:
        normalized = 1.0
    elif active_days >= 15:
        normalized = 0.7 + (active_days - 15) / 10 * 0.3
    elif active_days >= 8:
        normalized = 0.4 + (active_days - 8) / 7 * 0.3
    else:
        normalized = active_days / 8 * 0.4

    return ComponentScore.of(
        raw=active_days,
        label=f"{active_days}/{settings.window_days} active days",
        normalized=normalized,
    )


def calculate_revenue_trend(
    data: AggregatedData,
    settings: ScoringSettings = scoring_settings,
) -> ComponentScore:
    """
    Compare sales in the trailing window with the window before it.

    Edge Cases:
        - No sales in either window: 0.1 (nothing to compare)
        - Sales only in the trailing window: 0.6, raw reported as 999
          (a new merchant is neither growing nor shrinking yet)

    Args:
        data: Aggregated merchant data
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        Component with raw = trailing/prior sales ratio (2 decimals)
    """
    days = settings.window_days
    current = total_sales(in_trailing_window(data.transactions, data.as_of, days))
    prior = total_sales(in_window_range(data.transactions, data.as_of, days, days * 2))

    if current == 0 and prior == 0:
        return ComponentScore.of(raw=0, label="No sales", normalized=0.1)
    if prior == 0:
        return ComponentScore.of(raw=999, label="New (no prior period)", normalized=0.6)

    ratio = current / prior
    if ratio >= 1.2:
        normalized = 1.0
    elif ratio >= 1.0:
        normalized = 0.7 + (ratio - 1) / 0.2 * 0.3
    elif ratio >= 0.8:
        normalized = 0.4 + (ratio - 0.8) / 0.2 * 0.3
    elif ratio >= 0.5:
        normalized = 0.2 + (ratio - 0.5) / 0.3 * 0.2
    else:
        normalized = ratio * 0.4

    change = (ratio - 1) * 100
    sign = "+" if change >= 0 else ""
    return ComponentScore.of(
        raw=round(ratio, 2),
        label=f"{sign}{change:.0f}% vs prior period",
        normalized=normalized,
    )


def calculate_avg_ticket(
    data: AggregatedData,
    settings: ScoringSettings = scoring_settings,
) -> ComponentScore:
    """
    Score the average sale amount against the norm for the business type.

    Unknown business types fall back to a generic band.

    Args:
        data: Aggregated merchant data
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        Component with raw = average ticket (rounded, minor units)
    """
    recent = in_trailing_window(data.transactions, data.as_of, settings.window_days)
    sales = [t for t in recent if t.is_sale]
    if not sales:
        return ComponentScore.of(raw=0, label="No sales", normalized=0.1)

    ticket = total_sales(sales) / len(sales)
    minimum, ideal = TICKET_BANDS.get(
        (data.merchant.business_type or "").lower(), DEFAULT_TICKET_BAND
    )

    if ticket >= ideal:
        normalized = 0.9
    elif ticket >= minimum:
        normalized = 0.5 + (ticket - minimum) / (ideal - minimum) * 0.4
    else:
        normalized = max(0.1, ticket / minimum * 0.5)

    return ComponentScore.of(
        raw=round(ticket),
        label=f"{format_compact(ticket)} avg",
        normalized=normalized,
    )


def calculate_multi_currency(
    data: AggregatedData,
    settings: ScoringSettings = scoring_settings,
) -> ComponentScore:
    """Reward merchants operating in more than one currency."""
    currencies = sorted({t.currency or "PYG" for t in data.transactions})
    if len(currencies) > 1:
        return ComponentScore.of(raw=currencies, label=" + ".join(currencies), normalized=1.0)
    return ComponentScore.of(
        raw=currencies or ["PYG"],
        label=f"{currencies[0] if currencies else 'PYG'} only",
        normalized=0.5,
    )
