"""
Core types for the verification pipeline.

Definitions and outcomes are immutable; ``CheckState`` is the one mutable
record per check and is written only through ``PipelineState``.
"""
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Optional


class CheckCategory(str, Enum):
    """Closed set of due-diligence categories."""
    LEGAL = "legal"
    FINANCIAL = "financial"
    REPUTATIONAL = "reputational"
    OPERATIONAL = "operational"
    COMPLIANCE = "compliance"


class CheckStatus(str, Enum):
    """Lifecycle of a single check."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class CheckResult(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    WARNING = "warning"
    INCONCLUSIVE = "inconclusive"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AggregateRisk(str, Enum):
    """Overall classification derived from completed checks."""
    UNKNOWN = "unknown"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RunStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass(frozen=True)
class CheckDefinition:
    """One catalog entry. Only ``automated`` checks are executed by the runner."""
    id: str
    category: CheckCategory
    title: str
    description: str = ""
    automated: bool = True

    def __post_init__(self):
        object.__setattr__(self, "category", CheckCategory(self.category))


@dataclass(frozen=True)
class Outcome:
    """What a verification source says about one check."""
    result: CheckResult
    risk_level: RiskLevel
    details: str = ""

    def __post_init__(self):
        object.__setattr__(self, "result", CheckResult(self.result))
        object.__setattr__(self, "risk_level", RiskLevel(self.risk_level))


FALLBACK_OUTCOME = Outcome(
    result=CheckResult.INCONCLUSIVE,
    risk_level=RiskLevel.MEDIUM,
    details="Unable to complete automated verification",
)


@dataclass
class CheckState:
    """Mutable status of one check.

    ``result``, ``risk_level``, ``details`` and ``last_checked`` stay unset
    while the check is pending or running.
    """
    definition: CheckDefinition
    status: CheckStatus = CheckStatus.PENDING
    result: Optional[CheckResult] = None
    risk_level: Optional[RiskLevel] = None
    details: Optional[str] = None
    last_checked: Optional[datetime] = None

    @property
    def id(self) -> str:
        return self.definition.id

    @property
    def category(self) -> CheckCategory:
        return self.definition.category

    @property
    def automated(self) -> bool:
        return self.definition.automated

    @property
    def is_settled(self) -> bool:
        return self.status in (CheckStatus.COMPLETED, CheckStatus.FAILED)

    def copy(self) -> "CheckState":
        return replace(self)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "category": self.category.value,
            "title": self.definition.title,
            "description": self.definition.description,
            "automated": self.automated,
            "status": self.status.value,
            "result": self.result.value if self.result else None,
            "risk_level": self.risk_level.value if self.risk_level else None,
            "details": self.details,
            "last_checked": self.last_checked,
        }
