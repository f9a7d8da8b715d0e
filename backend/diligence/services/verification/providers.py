"""
Outcome providers - Sources of verification outcomes keyed by check id.

A provider is any callable ``check_id -> Outcome | None`` (or an awaitable of
it). ``None`` means the source knows nothing about the check. Real
verification backends plug in here without touching the runner.
"""
import asyncio
import random
from typing import Awaitable, Callable, Mapping, Optional, Union

from diligence.config import settings
from diligence.logger import get_logger
from diligence.services.verification.models import CheckResult, Outcome, RiskLevel

logger = get_logger("providers")

OutcomeProvider = Callable[[str], Union[Optional[Outcome], Awaitable[Optional[Outcome]]]]


MOCK_OUTCOMES = {
    "legal-registration": Outcome(
        CheckResult.PASS, RiskLevel.LOW, "Valid registration confirmed with current status"
    ),
    "financial-health": Outcome(
        CheckResult.WARNING, RiskLevel.MEDIUM, "Stable financial position with moderate debt levels"
    ),
    "reputational-review": Outcome(
        CheckResult.PASS, RiskLevel.LOW, "Positive industry reputation with no major controversies"
    ),
    "compliance-record": Outcome(
        CheckResult.PASS, RiskLevel.LOW, "All required licenses and certifications current"
    ),
    "ownership-structure": Outcome(
        CheckResult.PASS, RiskLevel.LOW, "Clear ownership structure with transparent governance"
    ),
    "litigation-history": Outcome(
        CheckResult.WARNING, RiskLevel.MEDIUM, "Minor historical disputes, all resolved favorably"
    ),
}


class MappingOutcomeProvider:
    """Synchronous lookup in a fixed id -> Outcome table."""

    def __init__(self, outcomes: Mapping[str, Outcome]):
        self.outcomes = dict(outcomes)

    def __call__(self, check_id: str) -> Optional[Outcome]:
        return self.outcomes.get(check_id)


class MockOutcomeProvider:
    """Stand-in for network-bound verification services.

    Waits a random delay in ``[min_delay, max_delay]`` seconds, then answers
    from ``MOCK_OUTCOMES``.
    """

    def __init__(
        self,
        outcomes: Optional[Mapping[str, Outcome]] = None,
        min_delay: Optional[float] = None,
        max_delay: Optional[float] = None,
    ):
        self.outcomes = dict(MOCK_OUTCOMES if outcomes is None else outcomes)
        self.min_delay = settings.MOCK_DELAY_MIN_SECONDS if min_delay is None else min_delay
        self.max_delay = settings.MOCK_DELAY_MAX_SECONDS if max_delay is None else max_delay
        if self.max_delay < self.min_delay:
            raise ValueError("max_delay must not be smaller than min_delay")

    async def __call__(self, check_id: str) -> Optional[Outcome]:
        delay = random.uniform(self.min_delay, self.max_delay)
        if delay > 0:
            logger.debug(f"Simulating verification of {check_id} ({delay:.2f}s)")
            await asyncio.sleep(delay)
        return self.outcomes.get(check_id)
