"""
Exceptions raised by the verification pipeline.
"""


class DiligenceError(Exception):
    """Base class for pipeline errors."""


class RunInProgressError(DiligenceError):
    """A run already holds the pipeline state."""


class InvalidTransitionError(DiligenceError):
    """A check was moved through its lifecycle out of order."""


class CheckTimeoutError(DiligenceError):
    """A verification call exceeded its time budget."""

    def __init__(self, check_id: str, timeout: float):
        super().__init__(f"Verification of '{check_id}' timed out after {timeout:g}s")
        self.check_id = check_id
        self.timeout = timeout


class ProviderUnavailableError(DiligenceError):
    """The verification provider is short-circuited by the breaker."""

    def __init__(self, check_id: str, reason: str):
        super().__init__(f"Verification provider unavailable for '{check_id}' ({reason})")
        self.check_id = check_id
        self.reason = reason


class InvalidOutcomeError(DiligenceError):
    """A provider answered with something other than an Outcome."""

    def __init__(self, check_id: str, value: object):
        super().__init__(
            f"Provider returned {type(value).__name__} instead of an Outcome for '{check_id}'"
        )
        self.check_id = check_id
