"""Score-related Pydantic schemas."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ComponentSchema(BaseModel):
    """One component of the score breakdown."""

    raw: Any = Field(None, description="Measured signal", examples=[4.2])
    label: str = Field(..., description="Human-readable summary", examples=["4.2 tx/week"])
    normalized: float = Field(..., ge=0.0, le=1.0, description="Signal rescaled to [0, 1]")


class AlertSchema(BaseModel):
    """Alert raised by a score computation."""

    type: str = Field(..., description="Severity: info, warning or critical", examples=["warning"])
    code: str = Field(..., examples=["REVENUE_DECLINE"])
    message: str


class TierSchema(BaseModel):
    grade: str = Field(..., examples=["B"])
    label: str = Field(..., examples=["Good"])
    color: str = Field(..., examples=["#48DBFB"])


class TierInfoSchema(TierSchema):
    min: int = Field(..., description="Minimum score of the tier", examples=[600])
    credit_factor: float = Field(..., description="Share of monthly sales offered as credit")


class ScoreResultSchema(BaseModel):
    """Schema for POST /v1/score/calculate/{merchant_id} response."""

    merchant_id: str
    score: int = Field(..., ge=0, le=1000, examples=[642])
    tier: TierSchema
    components: Dict[str, ComponentSchema]
    credit_limit: int = Field(..., ge=0, description="Suggested credit limit in PYG")
    monthly_sales: int = Field(..., ge=0, description="Trailing 30-day sales in PYG")
    alerts: List[AlertSchema]
    calculated_at: str
    processing_time_ms: float


class MerchantProfileSchema(BaseModel):
    """Limited public merchant profile."""

    name: Optional[str] = None
    business_name: Optional[str] = None
    city: Optional[str] = None
    business_type: str
    member_since: str


class HistoryPointSchema(BaseModel):
    score: int
    tier: str
    date: str


class ScoreLookupSchema(BaseModel):
    """Schema for GET /v1/score/{identifier} response."""

    merchant: MerchantProfileSchema
    score: int = Field(..., ge=0, le=1000)
    tier: str
    tier_info: TierInfoSchema
    components: Dict[str, ComponentSchema]
    alerts: List[AlertSchema]
    history: List[HistoryPointSchema] = Field(..., description="Most recent first")
    last_calculated: Optional[str] = None
    trend: Optional[int] = Field(
        None,
        description="Latest minus previous snapshot score; null with fewer than two",
    )


class BatchSummarySchema(BaseModel):
    """Outcome of a batch recalculation."""

    processed: int
    errors: int
    skipped: int
    avg_score: int
    started_at: str
    finished_at: str
    duration_ms: int


class BatchStatusSchema(BaseModel):
    state: str = Field(..., examples=["idle"])
    last_run: Optional[BatchSummarySchema] = None


class LeaderboardEntrySchema(BaseModel):
    rank: int
    name: str
    business_type: str
    city: Optional[str] = None
    score: int
    tier: str


class LeaderboardSchema(BaseModel):
    merchants: List[LeaderboardEntrySchema]
    count: int


class DistributionSchema(BaseModel):
    """Score statistics over active, scored merchants."""

    total: int
    average: int
    by_tier: Dict[str, int]
