"""
Pydantic schemas for due-diligence requests.
"""

from pydantic import BaseModel, Field

from diligence.services.verification.models import CheckResult, RiskLevel


class DueDiligenceRequest(BaseModel):
    """Request to start a due-diligence run."""
    subject_name: str = Field("Sample Partner", min_length=1, description="Partner being vetted")
    subject_type: str = Field("organization", min_length=1, description="Kind of partner")

    class Config:
        json_schema_extra = {
            "example": {
                "subject_name": "Acme Regional Holdings",
                "subject_type": "organization"
            }
        }


class ManualReviewRequest(BaseModel):
    """Outcome of an out-of-band review of a manual check."""
    result: CheckResult
    risk_level: RiskLevel
    details: str = Field("", description="Reviewer notes")
