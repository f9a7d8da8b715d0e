"""
Tests for the check executor.
"""

import asyncio

import pytest

from diligence.services.circuit_breaker import CircuitBreakerConfig, CircuitState, ProviderCircuitBreaker
from diligence.services.verification.errors import (
    CheckTimeoutError,
    InvalidOutcomeError,
    ProviderUnavailableError,
)
from diligence.services.verification.executor import CheckExecutor
from diligence.services.verification.models import (
    FALLBACK_OUTCOME,
    CheckResult,
    Outcome,
    RiskLevel,
)
from diligence.services.verification.providers import (
    MOCK_OUTCOMES,
    MappingOutcomeProvider,
    MockOutcomeProvider,
)


class TestOutcomeResolution:
    """Test provider lookups and the fallback."""

    @pytest.mark.asyncio
    async def test_sync_provider(self, make_check, low_outcome):
        executor = CheckExecutor(MappingOutcomeProvider({"a": low_outcome}))

        assert await executor.execute(make_check("a")) == low_outcome

    @pytest.mark.asyncio
    async def test_async_provider(self, make_check, low_outcome):
        async def provider(check_id):
            await asyncio.sleep(0)
            return low_outcome

        assert await CheckExecutor(provider).execute(make_check("a")) == low_outcome

    @pytest.mark.asyncio
    async def test_unknown_id_falls_back_to_inconclusive(self, make_check):
        """Unmapped checks resolve instead of erroring."""
        outcome = await CheckExecutor(MappingOutcomeProvider({})).execute(make_check("unmapped"))

        assert outcome == FALLBACK_OUTCOME
        assert outcome.result == CheckResult.INCONCLUSIVE
        assert outcome.risk_level == RiskLevel.MEDIUM
        assert outcome.details == "Unable to complete automated verification"

    @pytest.mark.asyncio
    async def test_manual_check_is_never_executed(self, make_check):
        calls = []

        def provider(check_id):
            calls.append(check_id)

        with pytest.raises(ValueError, match="manual review"):
            await CheckExecutor(provider).execute(make_check("m", automated=False))

        assert calls == []

    @pytest.mark.asyncio
    async def test_mock_provider_table(self, make_check):
        """The mock provider answers from the built-in table."""
        executor = CheckExecutor(MockOutcomeProvider(min_delay=0, max_delay=0))

        outcome = await executor.execute(make_check("financial-health"))

        assert outcome == MOCK_OUTCOMES["financial-health"]
        assert outcome.result == CheckResult.WARNING

    def test_mock_provider_rejects_inverted_delays(self):
        with pytest.raises(ValueError):
            MockOutcomeProvider(min_delay=2, max_delay=1)


class TestExecutorFaults:
    """Test timeout and breaker handling."""

    @pytest.mark.asyncio
    async def test_timeout(self, make_check):
        async def slow(check_id):
            await asyncio.sleep(5)

        executor = CheckExecutor(slow, timeout=0.05)

        with pytest.raises(CheckTimeoutError) as exc_info:
            await executor.execute(make_check("slow"))

        assert exc_info.value.check_id == "slow"

    @pytest.mark.asyncio
    async def test_zero_timeout_disables_limit(self, make_check, low_outcome):
        executor = CheckExecutor(MappingOutcomeProvider({"a": low_outcome}), timeout=0)

        assert executor.timeout is None
        assert await executor.execute(make_check("a")) == low_outcome

    @pytest.mark.asyncio
    async def test_provider_error_propagates_and_is_recorded(self, make_check):
        breaker = ProviderCircuitBreaker(CircuitBreakerConfig(failure_threshold=3))

        def broken(check_id):
            raise ConnectionError("registry offline")

        with pytest.raises(ConnectionError):
            await CheckExecutor(broken, breaker=breaker).execute(make_check("a"))

        assert breaker.consecutive_failures == 1

    @pytest.mark.asyncio
    async def test_open_breaker_short_circuits(self, make_check):
        breaker = ProviderCircuitBreaker(CircuitBreakerConfig(failure_threshold=1))
        breaker.record_failure()
        calls = []

        def provider(check_id):
            calls.append(check_id)

        with pytest.raises(ProviderUnavailableError):
            await CheckExecutor(provider, breaker=breaker).execute(make_check("a"))

        assert calls == []
        assert breaker.state == CircuitState.OPEN

    @pytest.mark.asyncio
    async def test_fallback_counts_as_success(self, make_check):
        breaker = ProviderCircuitBreaker(CircuitBreakerConfig(failure_threshold=3))
        breaker.record_failure()

        await CheckExecutor(MappingOutcomeProvider({}), breaker=breaker).execute(make_check("a"))

        assert breaker.consecutive_failures == 0

    @pytest.mark.asyncio
    async def test_timeout_is_recorded_as_failure(self, make_check):
        breaker = ProviderCircuitBreaker(CircuitBreakerConfig(failure_threshold=3))

        async def slow(check_id):
            await asyncio.sleep(5)
            return Outcome(CheckResult.PASS, RiskLevel.LOW)

        with pytest.raises(CheckTimeoutError):
            await CheckExecutor(slow, timeout=0.05, breaker=breaker).execute(make_check("a"))

        assert breaker.consecutive_failures == 1

    @pytest.mark.asyncio
    async def test_non_outcome_answer_rejected(self, make_check):
        breaker = ProviderCircuitBreaker(CircuitBreakerConfig(failure_threshold=3))

        def provider(check_id):
            return {"result": "pass", "risk_level": "low"}

        with pytest.raises(InvalidOutcomeError) as exc_info:
            await CheckExecutor(provider, breaker=breaker).execute(make_check("a"))

        assert exc_info.value.check_id == "a"
        assert breaker.consecutive_failures == 1

    @pytest.mark.asyncio
    async def test_cancelled_half_open_trial_returns_its_slot(self, make_check):
        breaker = ProviderCircuitBreaker(
            CircuitBreakerConfig(failure_threshold=1, cooldown_seconds=0, half_open_max_calls=1)
        )
        breaker.record_failure()
        started = asyncio.Event()

        async def provider(check_id):
            started.set()
            await asyncio.Event().wait()

        task = asyncio.create_task(CheckExecutor(provider, breaker=breaker).execute(make_check("a")))
        await started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert breaker.state == CircuitState.HALF_OPEN
        assert breaker.half_open_calls == 0
        assert breaker.can_call() == (True, "circuit_half_open_testing")


class TestOutcomeValues:
    """Test that outcomes only hold known result and risk values."""

    def test_plain_strings_become_enums(self):
        outcome = Outcome("pass", "low")

        assert outcome.result is CheckResult.PASS
        assert outcome.risk_level is RiskLevel.LOW

    def test_unknown_values_rejected(self):
        with pytest.raises(ValueError):
            Outcome("maybe", RiskLevel.LOW)
        with pytest.raises(ValueError):
            Outcome(CheckResult.PASS, "severe")
