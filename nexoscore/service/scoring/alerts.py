"""
Alert Generation for the NexoScore engine.

Alerts are independent threshold rules over normalized components. Each
rule fires on its own; a snapshot can carry any subset of them.
"""

from typing import Callable, List, Mapping, NamedTuple

from .models import Alert, ComponentScore
from .settings import ScoringSettings, scoring_settings


class AlertRule(NamedTuple):
    code: str
    severity: str
    component: str
    threshold: Callable[[ScoringSettings], float]
    message: str


ALERT_RULES: tuple[AlertRule, ...] = (
    AlertRule(
        code="REVENUE_DECLINE",
        severity="warning",
        component="revenue_trend",
        threshold=lambda s: s.alert_revenue_decline_threshold,
        message="Sales dropped compared to the previous period",
    ),
    AlertRule(
        code="LOW_COLLECTION",
        severity="critical",
        component="collection_ratio",
        threshold=lambda s: s.alert_low_collection_threshold,
        message="Collection rate on credit sales is low",
    ),
    AlertRule(
        code="HIGH_DELINQUENCY",
        severity="warning",
        component="delinquency_rate",
        threshold=lambda s: s.alert_high_delinquency_threshold,
        message="High share of delinquent customers",
    ),
    AlertRule(
        code="LOW_ACTIVITY",
        severity="info",
        component="tx_frequency",
        threshold=lambda s: s.alert_low_activity_threshold,
        message="Log more sales to improve your score",
    ),
    AlertRule(
        code="INCOMPLETE_PROFILE",
        severity="info",
        component="identity_complete",
        threshold=lambda s: s.alert_incomplete_profile_threshold,
        message="Complete your profile to improve your score",
    ),
)


def generate_alerts(
    components: Mapping[str, ComponentScore],
    settings: ScoringSettings = scoring_settings,
) -> List[Alert]:
    """
    Evaluate every alert rule against the components.

    A rule whose component is absent does not fire.

    Returns:
        Alerts in rule order
    """
    alerts: List[Alert] = []
    for rule in ALERT_RULES:
        component = components.get(rule.component)
        if component is None:
            continue
        if component.normalized < rule.threshold(settings):
            alerts.append(Alert(severity=rule.severity, code=rule.code, message=rule.message))
    return alerts
