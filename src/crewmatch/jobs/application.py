"""Application lifecycle state machine."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, FrozenSet, Optional

from crewmatch.core.models import (
    ActorRole,
    Application,
    ApplicationStatus,
    FeedbackEntry,
    InterviewDetails,
    NotificationKind,
    NotificationRequest,
)
from crewmatch.errors import InvalidTransitionError, TerminalStateError
from crewmatch.utils.logging import get_logger, log_transition
from crewmatch.utils.timeutil import to_instant

logger = get_logger(__name__)


TERMINAL_STATUSES: FrozenSet[ApplicationStatus] = frozenset({
    ApplicationStatus.ACCEPTED,
    ApplicationStatus.REJECTED,
    ApplicationStatus.WITHDRAWN,
})

# Employer-driven edges. Withdrawal is handled separately and is not listed here.
EMPLOYER_TRANSITIONS: Dict[ApplicationStatus, FrozenSet[ApplicationStatus]] = {
    ApplicationStatus.PENDING: frozenset({ApplicationStatus.REVIEWING, ApplicationStatus.REJECTED}),
    ApplicationStatus.REVIEWING: frozenset({ApplicationStatus.INTERVIEW_SCHEDULED, ApplicationStatus.REJECTED}),
    ApplicationStatus.INTERVIEW_SCHEDULED: frozenset({ApplicationStatus.INTERVIEW_COMPLETED, ApplicationStatus.REJECTED}),
    ApplicationStatus.INTERVIEW_COMPLETED: frozenset({ApplicationStatus.OFFER_SENT, ApplicationStatus.REJECTED}),
    ApplicationStatus.OFFER_SENT: frozenset({ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED}),
}


def _raw(value: Any) -> str:
    """Plain string form of an enum member or raw input."""
    return str(getattr(value, "value", value))


def is_terminal(status: ApplicationStatus) -> bool:
    return ApplicationStatus(status) in TERMINAL_STATUSES


def allowed_transitions(status: ApplicationStatus) -> FrozenSet[ApplicationStatus]:
    """Statuses an employer may move an application to from ``status``."""
    return EMPLOYER_TRANSITIONS.get(ApplicationStatus(status), frozenset())


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of an accepted status change."""
    application: Application
    notification: NotificationRequest
    previous_status: ApplicationStatus


class ApplicationLifecycle:
    """
    Validates and applies application status changes.

    The lifecycle never mutates its input: an accepted change returns a new
    Application together with the NotificationRequest the caller should
    dispatch. Persisting the new state is the caller's responsibility.
    """

    def __init__(self):
        self.logger = logger.bind(component="application_lifecycle")

    def transition(
        self,
        application: Application,
        actor_role: ActorRole,
        requested_status: ApplicationStatus,
        feedback_text: Optional[str] = None,
        now: Optional[datetime] = None,
        interview: Optional[InterviewDetails] = None
    ) -> TransitionResult:
        """
        Move an application one step along the employer workflow.

        Args:
            application: Current application state
            actor_role: Role of the user requesting the change
            requested_status: Target status
            feedback_text: Feedback to append to the log
            now: Time of the change (defaults to the current time)
            interview: Interview metadata, stored when scheduling an interview

        Returns:
            Updated application and the notification to dispatch

        Raises:
            TerminalStateError: If the application is already accepted, rejected or withdrawn
            InvalidTransitionError: If the actor is not an employer, the edge does not exist,
                or the role or status is not recognised
        """
        current = application.status

        self._ensure_not_terminal(application, _raw(requested_status))

        actor = self._parse(ActorRole, actor_role, application, requested_status)
        requested = self._parse(ApplicationStatus, requested_status, application, requested_status)

        if actor != ActorRole.EMPLOYER:
            self.logger.warning(
                "Transition refused: actor not authorized",
                actor_role=actor.value,
                **log_transition(application.id, current.value, requested.value)
            )
            raise InvalidTransitionError(
                f"Only an employer may move an application to {requested.value!r}",
                current_status=current.value,
                requested_status=requested.value
            )

        if requested not in allowed_transitions(current):
            self.logger.warning(
                "Transition refused: not a direct successor",
                **log_transition(application.id, current.value, requested.value)
            )
            raise InvalidTransitionError(
                f"Cannot move application from {current.value!r} to {requested.value!r}",
                current_status=current.value,
                requested_status=requested.value
            )

        update = {}
        if interview is not None and requested == ApplicationStatus.INTERVIEW_SCHEDULED:
            update["interview"] = interview

        return self._apply(
            application,
            requested,
            actor,
            feedback_text,
            now,
            recipient_id=application.candidate_id,
            extra_update=update
        )

    def withdraw(
        self,
        application: Application,
        actor_role: ActorRole,
        reason: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> TransitionResult:
        """
        Withdraw an application on the candidate's behalf.

        Allowed from any non-terminal status. The employer is notified.

        Raises:
            TerminalStateError: If the application is already in a terminal status
            InvalidTransitionError: If the actor is not the candidate or the role is not recognised
        """
        current = application.status

        self._ensure_not_terminal(application, ApplicationStatus.WITHDRAWN.value)

        actor = self._parse(ActorRole, actor_role, application, ApplicationStatus.WITHDRAWN)

        if actor != ActorRole.CANDIDATE:
            self.logger.warning(
                "Withdrawal refused: actor not authorized",
                actor_role=actor.value,
                **log_transition(application.id, current.value, ApplicationStatus.WITHDRAWN.value)
            )
            raise InvalidTransitionError(
                "Only the candidate may withdraw an application",
                current_status=current.value,
                requested_status=ApplicationStatus.WITHDRAWN.value
            )

        return self._apply(
            application,
            ApplicationStatus.WITHDRAWN,
            actor,
            reason,
            now,
            recipient_id=application.employer_id
        )

    def _ensure_not_terminal(self, application: Application, requested: str) -> None:
        if is_terminal(application.status):
            self.logger.warning(
                "Transition refused: terminal status",
                **log_transition(application.id, application.status.value, requested)
            )
            raise TerminalStateError(
                f"Application {application.id} is {application.status.value!r} and cannot change",
                current_status=application.status.value,
                requested_status=requested
            )

    def _parse(self, enum_cls, value, application: Application, requested_status) -> Any:
        try:
            return enum_cls(value)
        except ValueError as e:
            self.logger.warning(
                "Transition refused: unknown value",
                value=_raw(value),
                **log_transition(application.id, application.status.value, _raw(requested_status))
            )
            raise InvalidTransitionError(
                f"{_raw(value)!r} is not a valid {enum_cls.__name__}",
                current_status=application.status.value,
                requested_status=_raw(requested_status)
            ) from e

    def _apply(
        self,
        application: Application,
        new_status: ApplicationStatus,
        actor: ActorRole,
        feedback_text: Optional[str],
        now: Optional[datetime],
        recipient_id: str,
        extra_update: Optional[Dict[str, object]] = None
    ) -> TransitionResult:
        timestamp = to_instant(now if now is not None else datetime.now().astimezone())
        text = feedback_text or ""

        entry = FeedbackEntry(status=new_status, text=text, actor_role=actor, at=timestamp)
        update = {
            "status": new_status,
            "updated_at": timestamp,
            "feedback_log": application.feedback_log + (entry,),
        }
        if text:
            update["feedback"] = text
        update.update(extra_update or {})

        updated = application.model_copy(update=update)

        notification = NotificationRequest(
            recipient_id=recipient_id,
            kind=NotificationKind.STATUS_CHANGED,
            payload={
                "application_id": application.id,
                "posting_id": application.posting_id,
                "previous_status": application.status.value,
                "new_status": new_status.value,
            }
        )

        self.logger.info(
            "Application status changed",
            actor_role=actor.value,
            **log_transition(application.id, application.status.value, new_status.value)
        )

        return TransitionResult(
            application=updated,
            notification=notification,
            previous_status=application.status
        )


def create_application_lifecycle() -> ApplicationLifecycle:
    """Factory function to create an application lifecycle."""
    return ApplicationLifecycle()
