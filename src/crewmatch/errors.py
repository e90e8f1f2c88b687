"""Exception hierarchy for the matching and application-lifecycle engine."""

from typing import Optional


class CrewMatchError(Exception):
    """Base class for all engine errors."""


class TransitionError(CrewMatchError):
    """A requested status change was refused. State is never mutated."""

    def __init__(self, message: str, current_status: Optional[str] = None, requested_status: Optional[str] = None):
        super().__init__(message)
        self.current_status = current_status
        self.requested_status = requested_status


class InvalidTransitionError(TransitionError):
    """Requested status is not a direct successor, or the actor may not take that edge."""


class TerminalStateError(TransitionError):
    """The application is accepted, rejected or withdrawn and accepts no further changes."""


class ConcurrentModificationError(CrewMatchError):
    """The stored application changed between read and conditional write."""

    def __init__(self, application_id: str, expected_status: str, actual_status: Optional[str]):
        super().__init__(
            f"Application {application_id} changed concurrently: "
            f"expected status {expected_status!r}, found {actual_status!r}"
        )
        self.application_id = application_id
        self.expected_status = expected_status
        self.actual_status = actual_status


class ApplicationNotFoundError(CrewMatchError, LookupError):
    """No application exists with the given id."""


class ProfileNotFoundError(CrewMatchError, LookupError):
    """No candidate profile exists with the given id."""
