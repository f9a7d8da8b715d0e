"""
Risk Aggregator - Overall risk classification from completed checks.

Rules (first match wins):
- any completed check at high risk → high
- more than 2 at medium risk → high
- any at medium risk → medium
- otherwise → low
With no completed check carrying a result the aggregate is unknown.
"""

from dataclasses import dataclass
from typing import Iterable

from diligence.services.verification.models import (
    AggregateRisk,
    CheckState,
    CheckStatus,
    RiskLevel,
)


@dataclass
class RiskSummary:
    """Counts shown alongside the overall risk."""
    overall: AggregateRisk
    total: int
    completed: int
    failed: int
    automated: int
    manual: int
    low: int
    medium: int
    high: int


class RiskAggregator:
    """Pure, order-independent reduction over check states."""

    MEDIUM_ESCALATION_THRESHOLD = 2  # more than this many medium → high

    def classify(self, states: Iterable[CheckState]) -> AggregateRisk:
        completed = [
            s for s in states
            if s.status == CheckStatus.COMPLETED and s.result is not None
        ]
        if not completed:
            return AggregateRisk.UNKNOWN

        high_count = sum(1 for s in completed if s.risk_level == RiskLevel.HIGH)
        medium_count = sum(1 for s in completed if s.risk_level == RiskLevel.MEDIUM)

        if high_count > 0:
            return AggregateRisk.HIGH
        if medium_count > self.MEDIUM_ESCALATION_THRESHOLD:
            return AggregateRisk.HIGH
        if medium_count > 0:
            return AggregateRisk.MEDIUM
        return AggregateRisk.LOW

    def summarize(self, states: Iterable[CheckState]) -> RiskSummary:
        states = list(states)
        return RiskSummary(
            overall=self.classify(states),
            total=len(states),
            completed=sum(1 for s in states if s.status == CheckStatus.COMPLETED),
            failed=sum(1 for s in states if s.status == CheckStatus.FAILED),
            automated=sum(1 for s in states if s.automated),
            manual=sum(1 for s in states if not s.automated),
            low=sum(1 for s in states if s.risk_level == RiskLevel.LOW),
            medium=sum(1 for s in states if s.risk_level == RiskLevel.MEDIUM),
            high=sum(1 for s in states if s.risk_level == RiskLevel.HIGH),
        )
