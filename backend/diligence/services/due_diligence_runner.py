"""
Due Diligence Runner - Main orchestrator for partner due diligence.

Coordinates the check registry, the verification pipeline and risk
aggregation for one subject, and packages the outcome as a report.
"""
from datetime import datetime
from typing import Optional

from diligence.config import settings
from diligence.logger import logger
from diligence.schemas.due_diligence_result import CheckStateOut, DueDiligenceReport, RiskSummaryOut
from diligence.services.circuit_breaker import ProviderCircuitBreaker, get_circuit_breaker
from diligence.services.verification.aggregator import RiskAggregator
from diligence.services.verification.errors import RunInProgressError
from diligence.services.verification.executor import CheckExecutor
from diligence.services.verification.providers import MockOutcomeProvider, OutcomeProvider
from diligence.services.verification.registry import CheckRegistry, default_registry
from diligence.services.verification.runner import (
    CancellationToken,
    CompletionCallback,
    PipelineRunner,
    utc_now,
)
from diligence.services.verification.state import PipelineState


class DueDiligenceRunner:
    """Orchestrates a complete due-diligence run."""

    def __init__(
        self,
        provider: Optional[OutcomeProvider] = None,
        registry: Optional[CheckRegistry] = None,
        breaker: Optional[ProviderCircuitBreaker] = None,
        timeout: Optional[float] = None,
    ):
        self.registry = registry or default_registry()
        self.provider = provider or MockOutcomeProvider()
        self.breaker = breaker if breaker is not None else get_circuit_breaker()
        self.executor = CheckExecutor(
            self.provider,
            timeout=settings.CHECK_TIMEOUT_SECONDS if timeout is None else timeout,
            breaker=self.breaker,
        )
        self.aggregator = RiskAggregator()

    def new_state(self) -> PipelineState:
        return PipelineState.from_registry(self.registry)

    async def run(
        self,
        subject_name: str = "Sample Partner",
        subject_type: str = "organization",
        run_id: str = "",
        state: Optional[PipelineState] = None,
        cancel_token: Optional[CancellationToken] = None,
        on_complete: Optional[CompletionCallback] = None,
    ) -> DueDiligenceReport:
        """
        Run due diligence on a subject.

        Args:
            subject_name: Display name of the partner
            subject_type: Kind of partner (organization, government, ...)
            run_id: The unique ID of the run
            state: Live state to drive, shared with readers; built if omitted
            cancel_token: Stop signal checked between checks
            on_complete: Called once with the final snapshot of a finished run

        Returns:
            DueDiligenceReport with overall risk, summary and checks
        """
        started_at = utc_now()
        state = state if state is not None else self.new_state()
        token = cancel_token or CancellationToken()
        runner = PipelineRunner(self.registry, self.executor, on_complete=on_complete)

        try:
            logger.info(f"Starting due diligence for {subject_name} ({subject_type}) (run_id={run_id})")
            await runner.run(state, token)
        except RunInProgressError:
            raise
        except Exception as e:
            logger.exception(f"Due diligence failed: {e}")
            return self.build_report(
                run_id, subject_name, subject_type, state, "failed", started_at, utc_now(), error=str(e)
            )

        cancelled = not runner.finished
        report = self.build_report(
            run_id,
            subject_name,
            subject_type,
            state,
            "cancelled" if cancelled else "completed",
            started_at,
            utc_now(),
        )
        logger.info(
            f"Due diligence {report.status} for {subject_name}: overall risk {report.overall_risk} "
            f"({report.duration_seconds}s)"
        )
        return report

    def build_report(
        self,
        run_id: str,
        subject_name: str,
        subject_type: str,
        state: PipelineState,
        status: str,
        started_at: datetime,
        completed_at: Optional[datetime] = None,
        error: Optional[str] = None,
    ) -> DueDiligenceReport:
        """Report from the current state; usable mid-run for progress."""
        snapshot = state.snapshot()
        summary = self.aggregator.summarize(snapshot)
        duration = (completed_at or utc_now()) - started_at
        return DueDiligenceReport(
            run_id=run_id,
            subject_name=subject_name,
            subject_type=subject_type,
            status=status,
            started_at=started_at,
            completed_at=completed_at,
            duration_seconds=round(duration.total_seconds(), 2),
            overall_risk=summary.overall.value,
            summary=RiskSummaryOut.from_summary(summary),
            checks=[CheckStateOut.from_state(s) for s in snapshot],
            error=error,
        )
