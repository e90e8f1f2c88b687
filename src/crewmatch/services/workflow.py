"""Application workflow: read, transition, conditional write, notify."""

import asyncio
from datetime import datetime
from typing import Callable, Optional

from crewmatch.config import settings
from crewmatch.core.models import ActorRole, Application, ApplicationStatus, InterviewDetails
from crewmatch.errors import ApplicationNotFoundError, ConcurrentModificationError
from crewmatch.jobs.application import ApplicationLifecycle, TransitionResult
from crewmatch.services.ports import ApplicationStore, NotificationDispatcher
from crewmatch.utils.logging import get_logger

logger = get_logger(__name__)


class ApplicationWorkflow:
    """
    Drives status changes against an application store.

    Each attempt reads the current application, validates the change with
    ApplicationLifecycle and writes it back with a compare-and-set on the
    status that was read. A write that loses a race is retried from a fresh
    read up to ``max_retries`` times before the conflict is surfaced.
    Lifecycle rejections are never retried.
    """

    def __init__(
        self,
        store: ApplicationStore,
        dispatcher: Optional[NotificationDispatcher] = None,
        lifecycle: Optional[ApplicationLifecycle] = None,
        max_retries: Optional[int] = None,
        retry_backoff: Optional[float] = None
    ):
        """
        Initialize the workflow.

        Args:
            store: Application store supporting conditional writes
            dispatcher: Receives the notification produced by each change
            lifecycle: State machine used to validate changes
            max_retries: Write attempts before a conflict is surfaced
            retry_backoff: Base delay in seconds between attempts
        """
        self.store = store
        self.dispatcher = dispatcher
        self.lifecycle = lifecycle or ApplicationLifecycle()
        self.max_retries = max(1, max_retries if max_retries is not None else settings.max_transition_retries)
        self.retry_backoff = retry_backoff if retry_backoff is not None else settings.retry_backoff_seconds
        self.logger = logger.bind(component="application_workflow")

    async def update_status(
        self,
        application_id: str,
        actor_role: ActorRole,
        requested_status: ApplicationStatus,
        feedback_text: Optional[str] = None,
        now: Optional[datetime] = None,
        interview: Optional[InterviewDetails] = None
    ) -> TransitionResult:
        """
        Apply an employer status change and persist it.

        Raises:
            ApplicationNotFoundError: If the application does not exist
            InvalidTransitionError: If the change is not allowed
            TerminalStateError: If the application is in a terminal status
            ConcurrentModificationError: If every write attempt lost a race
        """
        return await self._run_with_retry(
            application_id,
            lambda application: self.lifecycle.transition(
                application, actor_role, requested_status, feedback_text, now, interview
            )
        )

    async def withdraw(
        self,
        application_id: str,
        actor_role: ActorRole,
        reason: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> TransitionResult:
        """Withdraw an application on the candidate's behalf and persist it."""
        return await self._run_with_retry(
            application_id,
            lambda application: self.lifecycle.withdraw(application, actor_role, reason, now)
        )

    async def _run_with_retry(
        self,
        application_id: str,
        change: Callable[[Application], TransitionResult]
    ) -> TransitionResult:
        last_error: Optional[ConcurrentModificationError] = None

        for attempt in range(self.max_retries):
            application = await self.store.get_application(application_id)
            if application is None:
                raise ApplicationNotFoundError(f"No application {application_id}")

            result = change(application)

            try:
                stored = await self.store.compare_and_set(
                    application_id, result.previous_status, result.application
                )
            except ConcurrentModificationError as e:
                last_error = e
                self.logger.warning(
                    "Status write lost a race, retrying",
                    application_id=application_id,
                    attempt=attempt + 1,
                    max_retries=self.max_retries,
                    actual_status=e.actual_status
                )
                if attempt < self.max_retries - 1 and self.retry_backoff > 0:
                    await asyncio.sleep(self.retry_backoff * (2 ** attempt))
                continue

            if self.dispatcher is not None:
                await self.dispatcher.dispatch(result.notification)

            self.logger.info(
                "Status change persisted",
                application_id=application_id,
                new_status=stored.status.value,
                attempt=attempt + 1
            )
            return TransitionResult(
                application=stored,
                notification=result.notification,
                previous_status=result.previous_status
            )

        self.logger.error(
            "Status change abandoned after repeated conflicts",
            application_id=application_id,
            max_retries=self.max_retries
        )
        raise last_error


def create_application_workflow(
    store: ApplicationStore,
    dispatcher: Optional[NotificationDispatcher] = None,
    max_retries: Optional[int] = None
) -> ApplicationWorkflow:
    """Factory function to create an application workflow."""
    return ApplicationWorkflow(store=store, dispatcher=dispatcher, max_retries=max_retries)
