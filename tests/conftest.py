"""Pytest configuration and shared fixtures for the due-diligence tests."""

from datetime import datetime, timezone

import pytest

from diligence.services.circuit_breaker import CircuitBreakerConfig, ProviderCircuitBreaker
from diligence.services.verification.models import (
    CheckCategory,
    CheckDefinition,
    CheckResult,
    CheckState,
    CheckStatus,
    Outcome,
    RiskLevel,
)

FIXED_NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_check():
    """Factory for check definitions."""

    def _make(check_id: str, automated: bool = True, category: CheckCategory = CheckCategory.LEGAL):
        return CheckDefinition(
            id=check_id,
            category=category,
            title=check_id.replace("-", " ").title(),
            description=f"Verify {check_id}",
            automated=automated,
        )

    return _make


@pytest.fixture
def make_completed(make_check):
    """Factory for completed check states at a given risk level."""
    counter = [0]

    def _make(risk: RiskLevel, result: CheckResult = CheckResult.PASS):
        counter[0] += 1
        return CheckState(
            definition=make_check(f"check-{counter[0]}"),
            status=CheckStatus.COMPLETED,
            result=result,
            risk_level=risk,
            details="done",
            last_checked=FIXED_NOW,
        )

    return _make


@pytest.fixture
def low_outcome():
    return Outcome(CheckResult.PASS, RiskLevel.LOW, "clean")


@pytest.fixture
def breaker():
    """Isolated breaker that never trips in ordinary tests."""
    return ProviderCircuitBreaker(CircuitBreakerConfig(failure_threshold=100))
