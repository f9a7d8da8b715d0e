"""
Pydantic schemas for due-diligence responses.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

from diligence.services.verification.aggregator import RiskSummary
from diligence.services.verification.models import CheckState


class CheckStateOut(BaseModel):
    """One check as shown to clients."""
    id: str
    category: str
    title: str
    description: str
    automated: bool
    status: Literal["pending", "running", "completed", "failed"]
    result: Optional[Literal["pass", "fail", "warning", "inconclusive"]] = None
    risk_level: Optional[Literal["low", "medium", "high"]] = None
    details: Optional[str] = None
    last_checked: Optional[datetime] = None

    @classmethod
    def from_state(cls, state: CheckState) -> "CheckStateOut":
        return cls(**state.to_dict())


class RiskSummaryOut(BaseModel):
    """Progress and risk-distribution counts."""
    overall: Literal["unknown", "low", "medium", "high"]
    total: int
    completed: int
    failed: int
    automated: int
    manual: int
    low: int
    medium: int
    high: int

    @classmethod
    def from_summary(cls, summary: RiskSummary) -> "RiskSummaryOut":
        return cls(
            overall=summary.overall.value,
            total=summary.total,
            completed=summary.completed,
            failed=summary.failed,
            automated=summary.automated,
            manual=summary.manual,
            low=summary.low,
            medium=summary.medium,
            high=summary.high,
        )


class DueDiligenceReport(BaseModel):
    """Complete due-diligence run response."""
    # Identification
    run_id: str
    subject_name: str
    subject_type: str

    # Status
    status: Literal["pending", "running", "completed", "cancelled", "failed"]

    # Timestamps
    started_at: datetime
    completed_at: Optional[datetime] = None
    duration_seconds: float = 0

    # Risk
    overall_risk: Literal["unknown", "low", "medium", "high"] = "unknown"
    summary: Optional[RiskSummaryOut] = None

    # Details
    checks: list[CheckStateOut] = []

    # Error (if failed)
    error: Optional[str] = None
