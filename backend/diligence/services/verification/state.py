"""
Pipeline State - Externally owned, live-readable check states.

The state outlives a single run: callers create it, hand it to the runner and
read it at any time for progress. While a run holds it (``acquire``), the run
is its only writer.
"""
from datetime import datetime
from typing import Dict, Iterator, List, Optional, Sequence, Union

from diligence.services.verification.errors import InvalidTransitionError, RunInProgressError
from diligence.services.verification.models import (
    CheckCategory,
    CheckDefinition,
    CheckState,
    CheckStatus,
    Outcome,
)
from diligence.services.verification.registry import CheckRegistry


class PipelineState:
    """Ordered collection of CheckState, one per definition."""

    def __init__(self, definitions: Sequence[CheckDefinition]):
        self._order: List[str] = []
        self._states: Dict[str, CheckState] = {}
        for definition in definitions:
            if definition.id in self._states:
                raise ValueError(f"Duplicate check id in state: {definition.id}")
            self._order.append(definition.id)
            self._states[definition.id] = CheckState(definition=definition)
        self._owner: Optional[object] = None

    @classmethod
    def from_registry(cls, registry: CheckRegistry) -> "PipelineState":
        return cls(list(registry))

    def __iter__(self) -> Iterator[CheckState]:
        return (self._states[check_id] for check_id in self._order)

    def __len__(self) -> int:
        return len(self._order)

    def ids(self) -> List[str]:
        return list(self._order)

    def get(self, check_id: str) -> CheckState:
        try:
            return self._states[check_id]
        except KeyError:
            raise KeyError(f"Unknown check id: {check_id}") from None

    def snapshot(self) -> List[CheckState]:
        """Copies of every state, in registry order."""
        return [state.copy() for state in self]

    def filter(self, category: Union[CheckCategory, str]) -> List[CheckState]:
        if category == "all":
            return self.snapshot()
        category = CheckCategory(category)
        return [state.copy() for state in self if state.category == category]

    # --- single-writer lock ---

    @property
    def is_locked(self) -> bool:
        return self._owner is not None

    def acquire(self, owner: object):
        if self._owner is not None and self._owner is not owner:
            raise RunInProgressError("Pipeline state is held by another run")
        if self._owner is owner:
            raise RunInProgressError("Pipeline state is already held by this run")
        self._owner = owner

    def release(self, owner: object):
        if self._owner is owner:
            self._owner = None

    # --- transitions ---

    def mark_running(self, check_id: str):
        state = self.get(check_id)
        if state.status not in (CheckStatus.PENDING, CheckStatus.FAILED):
            raise InvalidTransitionError(f"Cannot start '{check_id}' from status {state.status.value}")
        state.status = CheckStatus.RUNNING
        state.result = None
        state.risk_level = None
        state.details = None
        state.last_checked = None

    def mark_completed(self, check_id: str, outcome: Outcome, checked_at: datetime):
        state = self.get(check_id)
        if state.status != CheckStatus.RUNNING:
            raise InvalidTransitionError(f"Cannot complete '{check_id}' from status {state.status.value}")
        self._apply_outcome(state, outcome, checked_at)

    def mark_failed(self, check_id: str, error: str, checked_at: datetime):
        state = self.get(check_id)
        if state.status != CheckStatus.RUNNING:
            raise InvalidTransitionError(f"Cannot fail '{check_id}' from status {state.status.value}")
        state.status = CheckStatus.FAILED
        state.details = error
        state.last_checked = checked_at

    def reset(self, check_id: str):
        """Return an interrupted check to pending."""
        state = self.get(check_id)
        if state.status != CheckStatus.RUNNING:
            raise InvalidTransitionError(f"Cannot reset '{check_id}' from status {state.status.value}")
        state.status = CheckStatus.PENDING

    def record_manual_review(self, check_id: str, outcome: Outcome, checked_at: datetime):
        """Record the out-of-band review of a manual check."""
        if self.is_locked:
            raise RunInProgressError("Cannot record a review while a run is in progress")
        state = self.get(check_id)
        if state.automated:
            raise InvalidTransitionError(f"Check '{check_id}' is automated and is set by the pipeline")
        if state.status != CheckStatus.PENDING:
            raise InvalidTransitionError(f"Check '{check_id}' was already reviewed")
        self._apply_outcome(state, outcome, checked_at)

    @staticmethod
    def _apply_outcome(state: CheckState, outcome: Outcome, checked_at: datetime):
        # status last, so a bad outcome leaves the check untouched
        result, risk_level, details = outcome.result, outcome.risk_level, outcome.details
        state.result = result
        state.risk_level = risk_level
        state.details = details
        state.last_checked = checked_at
        state.status = CheckStatus.COMPLETED
