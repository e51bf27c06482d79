"""Data transfer objects for score lookup and batch operations."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from nexoscore.domain.entities import Merchant, ScoreSnapshot


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() + "Z" if value else None


@dataclass(frozen=True)
class HistoryPoint:
    """One point of a merchant's score history."""

    score: int
    tier: str
    date: str

    @classmethod
    def from_snapshot(cls, snapshot: ScoreSnapshot) -> "HistoryPoint":
        return cls(score=snapshot.score, tier=snapshot.tier, date=_iso(snapshot.created_at))


@dataclass(frozen=True)
class ScoreLookup:
    """Public risk view of a merchant, for third-party lookups."""

    merchant: Dict[str, Any]
    score: int
    tier: str
    tier_info: Dict[str, Any]
    components: Dict[str, Dict[str, Any]]
    alerts: List[Dict[str, str]]
    history: List[HistoryPoint]
    last_calculated: Optional[str]
    trend: Optional[int]

    @classmethod
    def build(
        cls,
        merchant: Merchant,
        tier_info: Dict[str, Any],
        history: List[ScoreSnapshot],
    ) -> "ScoreLookup":
        """
        Assemble the lookup from the merchant and its snapshots.

        Args:
            merchant: The resolved merchant
            tier_info: Tier the current score falls into
            history: Snapshots, newest first
        """
        latest = history[0] if history else None
        trend = history[0].score - history[1].score if len(history) >= 2 else None

        return cls(
            merchant=merchant.public_profile(),
            score=merchant.current_score,
            tier=tier_info["grade"],
            tier_info=tier_info,
            components=latest.components if latest else {},
            alerts=latest.alerts if latest else [],
            history=[HistoryPoint.from_snapshot(s) for s in history],
            last_calculated=_iso(latest.created_at) if latest else None,
            trend=trend,
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class BatchSummary:
    """Outcome of one batch recalculation run."""

    processed: int
    errors: int
    skipped: int
    avg_score: int
    started_at: datetime
    finished_at: datetime
    duration_ms: int

    @property
    def total(self) -> int:
        return self.processed + self.errors + self.skipped

    def to_dict(self) -> dict:
        return {
            "processed": self.processed,
            "errors": self.errors,
            "skipped": self.skipped,
            "avg_score": self.avg_score,
            "started_at": _iso(self.started_at),
            "finished_at": _iso(self.finished_at),
            "duration_ms": self.duration_ms,
        }


@dataclass(frozen=True)
class LeaderboardEntry:
    """A merchant on the public top-scores board."""

    rank: int
    name: str
    business_type: str
    city: Optional[str]
    score: int
    tier: str


@dataclass(frozen=True)
class ScoreDistribution:
    """Score statistics over active, scored merchants."""

    total: int
    average: int
    by_tier: Dict[str, int] = field(default_factory=dict)
