"""
Engagement and Identity Components for the NexoScore engine.

These components measure how established the merchant is on the service
and how much of the product it actually uses.
"""

from datetime import timedelta

from .models import AggregatedData, ComponentScore
from .settings import ScoringSettings, scoring_settings


IDENTITY_FIELDS = (
    "name",
    "national_id",
    "address",
    "city",
    "business_name",
    "business_type",
    "monthly_volume",
    "onboarded_at",
)

# Placeholders written during onboarding when the merchant skips a question
UNSET_VALUES = {
    "business_type": "general",
    "monthly_volume": "no_especificado",
}

MEANINGFUL_INTENTS = frozenset({
    "SALE_CREDIT",
    "SALE_CASH",
    "PAYMENT",
    "DEBT_QUERY",
    "SALES_QUERY",
    "INVENTORY_IN",
    "REMINDER",
})


def calculate_days_active(
    data: AggregatedData,
    settings: ScoringSettings = scoring_settings,
) -> ComponentScore:
    """
    Days since the merchant registered.

    Returns:
        Component with raw = whole days since registration
    """
    days = max(0, (data.as_of - data.merchant.created_at).days)

    if days >= 180:
        normalized = 1.0
    elif days >= 90:
        normalized = 0.75 + (days - 90) / 90 * 0.25
    elif days >= 60:
        normalized = 0.6 + (days - 60) / 30 * 0.15
    elif days >= 30:
        normalized = 0.35 + (days - 30) / 30 * 0.25
    elif days >= 7:
        normalized = 0.1 + (days - 7) / 23 * 0.25
    else:
        normalized = days / 7 * 0.1

    return ComponentScore.of(raw=days, label=f"{days} days", normalized=normalized)


def calculate_identity_complete(
    data: AggregatedData,
    settings: ScoringSettings = scoring_settings,
) -> ComponentScore:
    """Fraction of the eight onboarding profile fields that are filled in."""
    merchant = data.merchant
    completed = 0
    for name in IDENTITY_FIELDS:
        value = getattr(merchant, name)
        if not value or value == UNSET_VALUES.get(name):
            continue
        completed += 1

    total = len(IDENTITY_FIELDS)
    return ComponentScore.of(
        raw=completed,
        label=f"{completed}/{total} fields",
        normalized=completed / total,
    )


def calculate_feature_adoption(
    data: AggregatedData,
    settings: ScoringSettings = scoring_settings,
) -> ComponentScore:
    """
    Share of the meaningful product features the merchant has used.

    Greetings and help requests are logged intents too, but say nothing
    about how the merchant runs the business.
    """
    used = sorted(set(data.intents) & MEANINGFUL_INTENTS)
    total = len(MEANINGFUL_INTENTS)
    return ComponentScore.of(
        raw=used,
        label=f"{len(used)}/{total} features",
        normalized=len(used) / total,
    )


def calculate_reminder_efficacy(
    data: AggregatedData,
    settings: ScoringSettings = scoring_settings,
) -> ComponentScore:
    """
    Share of sent reminders followed by a payment from the same customer.

    A reminder is effective when a PAYMENT from its customer is logged
    within ``reminder_effect_days`` after it was sent.

    Returns:
        Component with raw = efficacy rate (2 decimals)
    """
    sent = [r for r in data.reminders if r.was_sent]
    if not sent:
        return ComponentScore.of(raw=None, label="No reminders sent", normalized=0.5)

    effect_window = timedelta(days=settings.reminder_effect_days)
    payments = [t for t in data.transactions if t.is_payment and t.customer_id]

    effective = 0
    for reminder in sent:
        deadline = reminder.sent_at + effect_window
        if any(
            p.customer_id == reminder.customer_id
            and reminder.sent_at <= p.created_at <= deadline
            for p in payments
        ):
            effective += 1

    rate = effective / len(sent)
    if rate >= 0.5:
        normalized = 0.9 + (rate - 0.5) / 0.5 * 0.1
    elif rate >= 0.3:
        normalized = 0.65 + (rate - 0.3) / 0.2 * 0.25
    elif rate >= 0.1:
        normalized = 0.4 + (rate - 0.1) / 0.2 * 0.25
    else:
        normalized = 0.3 + rate

    return ComponentScore.of(
        raw=round(rate, 2),
        label=f"{effective}/{len(sent)} effective",
        normalized=normalized,
    )
