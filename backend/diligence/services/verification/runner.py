"""
Pipeline Runner - Executes the registry's automated checks in order.

Each automated check is marked running, awaited to completion, then marked
completed (or failed on an executor fault) before the next one starts.
Manual checks are left untouched. The completion callback fires once per
finished run with the full ordered snapshot.
"""
import asyncio
import inspect
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional, Union

from diligence.logger import get_logger
from diligence.services.verification.errors import RunInProgressError
from diligence.services.verification.executor import CheckExecutor
from diligence.services.verification.models import CheckState, CheckStatus, RunStatus
from diligence.services.verification.registry import CheckRegistry
from diligence.services.verification.state import PipelineState

logger = get_logger("runner")

CompletionCallback = Callable[[List[CheckState]], Union[None, Awaitable[None]]]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CancellationToken:
    """Cooperative stop signal, checked between checks."""

    def __init__(self):
        self._cancelled = False

    def cancel(self):
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class PipelineRunner:
    """Sequential driver of one verification run at a time."""

    def __init__(
        self,
        registry: CheckRegistry,
        executor: CheckExecutor,
        on_complete: Optional[CompletionCallback] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.registry = registry
        self.executor = executor
        self.on_complete = on_complete
        self._clock = clock
        self._status = RunStatus.IDLE
        # False while a run is active or when the last run was cancelled
        self.finished = False

    @property
    def status(self) -> RunStatus:
        return self._status

    async def run(
        self,
        state: Optional[PipelineState] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> PipelineState:
        """Run every pending automated check.

        Args:
            state: State to drive; a fresh one is built from the registry if omitted
            cancel_token: Optional stop signal checked before each check

        Returns:
            The same (now updated) PipelineState

        Raises:
            RunInProgressError: if this runner or the state is already in a run
            ValueError: if the state was not built from this registry
        """
        if self._status == RunStatus.RUNNING:
            raise RunInProgressError("A verification run is already in progress")

        if state is None:
            state = PipelineState.from_registry(self.registry)
        elif state.ids() != self.registry.ids():
            raise ValueError("Pipeline state does not match the check registry")

        state.acquire(self)
        self._status = RunStatus.RUNNING
        self.finished = False
        logger.info(f"Verification run started ({len(self.registry.automated())} automated checks)")

        try:
            self.finished = await self._run_checks(state, cancel_token)
        finally:
            state.release(self)
            self._status = RunStatus.IDLE

        if not self.finished:
            logger.info("Verification run cancelled")
            return state

        logger.info("Verification run completed")
        if self.on_complete is not None:
            result = self.on_complete(state.snapshot())
            if inspect.isawaitable(result):
                await result
        return state

    async def _run_checks(self, state: PipelineState, cancel_token: Optional[CancellationToken]) -> bool:
        for definition in self.registry:
            if not definition.automated:
                continue
            if state.get(definition.id).status == CheckStatus.COMPLETED:
                continue
            if cancel_token is not None and cancel_token.cancelled:
                return False

            state.mark_running(definition.id)
            logger.info(f"Running check {definition.id}")

            try:
                outcome = await self.executor.execute(definition)
            except asyncio.CancelledError:
                state.reset(definition.id)
                raise
            except Exception as e:
                logger.error(f"Check {definition.id} failed: {e}")
                state.mark_failed(definition.id, str(e), self._clock())
                continue

            state.mark_completed(definition.id, outcome, self._clock())
            logger.info(
                f"Check {definition.id} completed: {outcome.result.value} "
                f"(risk: {outcome.risk_level.value})"
            )
        return True
