"""
Due diligence API endpoints.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional
import uuid

from fastapi import APIRouter, BackgroundTasks, HTTPException
from pydantic import BaseModel

from diligence.logger import logger
from diligence.schemas.due_diligence_request import DueDiligenceRequest, ManualReviewRequest
from diligence.schemas.due_diligence_result import CheckStateOut, DueDiligenceReport
from diligence.services.due_diligence_runner import DueDiligenceRunner
from diligence.services.verification.errors import InvalidTransitionError, RunInProgressError
from diligence.services.verification.models import CheckCategory, Outcome
from diligence.services.verification.runner import CancellationToken, utc_now
from diligence.services.verification.state import PipelineState

router = APIRouter(tags=["Due Diligence"])


@dataclass
class RunRecord:
    """In-memory bookkeeping for one run."""
    run_id: str
    subject_name: str
    subject_type: str
    runner: DueDiligenceRunner
    state: PipelineState
    started_at: datetime
    cancel_token: CancellationToken = field(default_factory=CancellationToken)
    status: str = "pending"
    completed_at: Optional[datetime] = None
    error: Optional[str] = None


# In-memory run storage
_runs: Dict[str, RunRecord] = {}


class RunResponse(BaseModel):
    """Response for a started or cancelled run."""
    run_id: str
    status: str
    subject_name: str


def _get_run(run_id: str) -> RunRecord:
    if run_id not in _runs:
        raise HTTPException(status_code=404, detail="Due diligence run not found")
    return _runs[run_id]


@router.post("", response_model=RunResponse)
async def start_due_diligence(request: DueDiligenceRequest, background_tasks: BackgroundTasks):
    """Start a new due-diligence run."""
    run_id = str(uuid.uuid4())
    runner = DueDiligenceRunner()

    _runs[run_id] = RunRecord(
        run_id=run_id,
        subject_name=request.subject_name,
        subject_type=request.subject_type,
        runner=runner,
        state=runner.new_state(),
        started_at=utc_now(),
    )

    # Run pipeline in background
    background_tasks.add_task(_run_due_diligence, run_id)

    logger.info(f"Started due diligence {run_id} for {request.subject_name}")
    return RunResponse(run_id=run_id, status="pending", subject_name=request.subject_name)


async def _run_due_diligence(run_id: str):
    """Background task to run the pipeline."""
    record = _runs[run_id]
    try:
        record.status = "running"

        report = await record.runner.run(
            subject_name=record.subject_name,
            subject_type=record.subject_type,
            run_id=run_id,
            state=record.state,
            cancel_token=record.cancel_token,
        )

        record.status = report.status
        record.completed_at = report.completed_at
        record.error = report.error

        logger.info(f"Finished due diligence {run_id} ({report.status})")

    except Exception as e:
        logger.exception(f"Due diligence {run_id} failed: {e}")
        record.status = "failed"
        record.completed_at = utc_now()
        record.error = str(e)


@router.get("/{run_id}", response_model=DueDiligenceReport)
async def get_due_diligence(run_id: str, category: str = "all"):
    """Get live run status, overall risk and check states."""
    record = _get_run(run_id)

    if category != "all" and category not in {c.value for c in CheckCategory}:
        raise HTTPException(status_code=400, detail=f"Unknown category: {category}")

    report = record.runner.build_report(
        run_id,
        record.subject_name,
        record.subject_type,
        record.state,
        record.status,
        record.started_at,
        record.completed_at,
        error=record.error,
    )
    if category != "all":
        report.checks = [CheckStateOut.from_state(s) for s in record.state.filter(category)]
    return report


@router.post("/{run_id}/cancel", response_model=RunResponse)
async def cancel_due_diligence(run_id: str):
    """Stop a run before its next check."""
    record = _get_run(run_id)
    if record.status not in ("pending", "running"):
        raise HTTPException(status_code=409, detail=f"Run already {record.status}")

    record.cancel_token.cancel()
    logger.info(f"Cancellation requested for due diligence {run_id}")
    return RunResponse(run_id=run_id, status="cancelling", subject_name=record.subject_name)


@router.post("/{run_id}/checks/{check_id}/review", response_model=CheckStateOut)
async def review_check(run_id: str, check_id: str, review: ManualReviewRequest):
    """Record the outcome of a manual review."""
    record = _get_run(run_id)

    try:
        record.state.record_manual_review(
            check_id,
            Outcome(result=review.result, risk_level=review.risk_level, details=review.details),
            utc_now(),
        )
    except KeyError:
        raise HTTPException(status_code=404, detail="Check not found")
    except RunInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidTransitionError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Recorded manual review of {check_id} for due diligence {run_id}")
    return CheckStateOut.from_state(record.state.get(check_id))
