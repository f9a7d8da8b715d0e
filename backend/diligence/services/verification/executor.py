"""
Check Executor - Runs one automated check against an outcome provider.

Handles:
- Sync and async providers
- Unknown check ids (deterministic inconclusive/medium fallback)
- Per-check timeout
- Circuit breaker short-circuiting
"""
import asyncio
import inspect
from typing import Optional

from diligence.logger import get_logger
from diligence.services.circuit_breaker import ProviderCircuitBreaker
from diligence.services.verification.errors import (
    CheckTimeoutError,
    InvalidOutcomeError,
    ProviderUnavailableError,
)
from diligence.services.verification.models import FALLBACK_OUTCOME, CheckDefinition, Outcome
from diligence.services.verification.providers import OutcomeProvider

logger = get_logger("executor")


class CheckExecutor:
    """Maps a check to its outcome through the injected provider."""

    def __init__(
        self,
        provider: OutcomeProvider,
        timeout: Optional[float] = None,
        breaker: Optional[ProviderCircuitBreaker] = None,
    ):
        self.provider = provider
        self.timeout = timeout if timeout else None
        self.breaker = breaker

    async def execute(self, check: CheckDefinition) -> Outcome:
        """Resolve the outcome for an automated check.

        Args:
            check: Definition of the check to verify

        Returns:
            The provider's Outcome, or FALLBACK_OUTCOME when it has none

        Raises:
            ValueError: if the check is manual
            CheckTimeoutError: if the provider exceeds the timeout
            ProviderUnavailableError: if the circuit breaker is open
            InvalidOutcomeError: if the provider answers with a non-Outcome
        """
        if not check.automated:
            raise ValueError(f"Check '{check.id}' requires manual review and cannot be executed")

        if self.breaker is not None:
            allowed, reason = self.breaker.can_call()
            if not allowed:
                logger.warning(f"Skipping provider call for {check.id}: {reason}")
                raise ProviderUnavailableError(check.id, reason)

        try:
            outcome = await self._call_provider(check.id)
            if outcome is not None and not isinstance(outcome, Outcome):
                raise InvalidOutcomeError(check.id, outcome)
        except asyncio.CancelledError:
            if self.breaker is not None:
                self.breaker.release_trial()
            raise
        except Exception:
            if self.breaker is not None:
                self.breaker.record_failure()
            raise

        if self.breaker is not None:
            self.breaker.record_success()

        if outcome is None:
            logger.info(f"No outcome registered for {check.id}, using fallback")
            return FALLBACK_OUTCOME
        return outcome

    async def _call_provider(self, check_id: str) -> Optional[Outcome]:
        result = self.provider(check_id)
        if not inspect.isawaitable(result):
            return result
        if self.timeout is None:
            return await result
        try:
            return await asyncio.wait_for(result, timeout=self.timeout)
        except asyncio.TimeoutError:
            raise CheckTimeoutError(check_id, self.timeout) from None
