"""
Error taxonomy for the feed and hiring workflow.

Guard violations abort an operation before anything is written. A
PartialFailure means some hire steps were committed; retrying ``hire`` resumes
from the first incomplete step. TransientIOError means the store could not be
reached and nothing was changed.
"""


class WorkflowError(Exception):
    """Base class for all domain errors surfaced to callers."""

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__


class ValidationError(WorkflowError):
    """Malformed input (filter values, message bodies, events)."""


class InvalidEvent(ValidationError):
    pass


class GuardViolation(WorkflowError):
    pass


class NotFound(GuardViolation):
    pass


class NotOwner(GuardViolation):
    pass


class DuplicateApplication(GuardViolation):
    pass


class InvalidApplicant(GuardViolation):
    pass


class JobClosed(GuardViolation):
    pass


class AlreadyDecided(GuardViolation):
    pass


class TransientIOError(WorkflowError):
    """Store unavailable; eligible for a user-triggered retry."""


class PartialFailure(WorkflowError):
    """A multi-step operation stopped after committing some of its steps."""

    def __init__(self, message: str, completed_steps: list[str], failed_step: str):
        super().__init__(message)
        self.completed_steps = list(completed_steps)
        self.failed_step = failed_step

    def to_dict(self) -> dict:
        return {
            "detail": self.message,
            "completed_steps": self.completed_steps,
            "failed_step": self.failed_step,
            "retryable": True,
        }
