"""
Collection Components for the NexoScore engine.

Scores how well the merchant collects on the credit (fiado) it extends,
from the per-customer running totals.
"""

import statistics

from .models import AggregatedData, ComponentScore
from .settings import ScoringSettings, scoring_settings


def calculate_collection_ratio(
    data: AggregatedData,
    settings: ScoringSettings = scoring_settings,
) -> ComponentScore:
    """
    Share of extended credit that has been collected.

    ratio = total_paid / (total_paid + total_debt) across all customers.
    A merchant that never sold on credit gets 0.8: no evidence of bad
    collection, but no evidence of good collection either.

    Returns:
        Component with raw = ratio (2 decimals)
    """
    total_paid = sum(c.total_paid for c in data.customers)
    total_debt = sum(c.total_debt for c in data.customers)
    extended = total_paid + total_debt

    if extended <= 0:
        return ComponentScore.of(raw=None, label="No credit extended", normalized=0.8)

    ratio = total_paid / extended
    if ratio >= 0.9:
        normalized = 1.0
    elif ratio >= 0.75:
        normalized = 0.7 + (ratio - 0.75) / 0.15 * 0.3
    elif ratio >= 0.5:
        normalized = 0.4 + (ratio - 0.5) / 0.25 * 0.3
    else:
        normalized = ratio * 0.8

    return ComponentScore.of(
        raw=round(ratio, 2),
        label=f"{ratio * 100:.0f}% collected",
        normalized=normalized,
    )


def calculate_avg_days_to_collect(
    data: AggregatedData,
    settings: ScoringSettings = scoring_settings,
) -> ComponentScore:
    """
    Average days customers take to pay back credit.

    Only customers with a positive ``avg_days_to_pay`` take part.

    Returns:
        Component with raw = average days (1 decimal)
    """
    samples = [c.avg_days_to_pay for c in data.customers if c.avg_days_to_pay > 0]
    if not samples:
        return ComponentScore.of(raw=None, label="No data", normalized=0.5)

    days = statistics.fmean(samples)
    if days <= 3:
        normalized = 1.0
    elif days <= 7:
        normalized = 0.8 + (7 - days) / 4 * 0.2
    elif days <= 15:
        normalized = 0.5 + (15 - days) / 8 * 0.3
    elif days <= 30:
        normalized = 0.2 + (30 - days) / 15 * 0.3
    else:
        normalized = max(0.05, 0.2 - (days - 30) / 60 * 0.15)

    return ComponentScore.of(
        raw=round(days, 1),
        label=f"{days:.0f} days avg",
        normalized=normalized,
    )


def calculate_delinquency_rate(
    data: AggregatedData,
    settings: ScoringSettings = scoring_settings,
) -> ComponentScore:
    """
    Share of customers flagged high risk.

    Lower is better; zero delinquent customers scores 1.0.

    Returns:
        Component with raw = rate (3 decimals)
    """
    if not data.customers:
        return ComponentScore.of(raw=None, label="No customers", normalized=0.5)

    high_risk = sum(1 for c in data.customers if c.is_high_risk)
    rate = high_risk / len(data.customers)

    if rate == 0:
        normalized = 1.0
    elif rate <= 0.05:
        normalized = 0.8 + (0.05 - rate) / 0.05 * 0.2
    elif rate <= 0.10:
        normalized = 0.6 + (0.10 - rate) / 0.05 * 0.2
    elif rate <= 0.20:
        normalized = 0.3 + (0.20 - rate) / 0.10 * 0.3
    else:
        normalized = max(0.05, 0.3 - rate)

    return ComponentScore.of(
        raw=round(rate, 3),
        label=f"{high_risk}/{len(data.customers)} high-risk customers",
        normalized=normalized,
    )
