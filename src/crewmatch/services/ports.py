"""Interfaces the engine expects from its external collaborators."""

from typing import AbstractSet, List, Optional, Protocol, runtime_checkable

from crewmatch.core.models import (
    Application,
    ApplicationStatus,
    EvaluationRecord,
    NotificationRequest,
    PostingSnapshot,
    ProfileSnapshot,
)


@runtime_checkable
class ProfileRepository(Protocol):
    async def get_profile(self, candidate_id: str) -> Optional[ProfileSnapshot]:
        ...


@runtime_checkable
class PostingRepository(Protocol):
    async def list_active_postings(self) -> List[PostingSnapshot]:
        ...

    async def applied_posting_ids(self, candidate_id: str) -> AbstractSet[str]:
        ...


@runtime_checkable
class ApplicationStore(Protocol):
    async def get_application(self, application_id: str) -> Optional[Application]:
        ...

    async def compare_and_set(
        self,
        application_id: str,
        expected_status: ApplicationStatus,
        updated: Application
    ) -> Application:
        """
        Atomically replace the stored application if its status is still
        ``expected_status``.

        Raises:
            ConcurrentModificationError: If the stored status differs
        """
        ...


@runtime_checkable
class EvaluationRepository(Protocol):
    async def evaluations_for(self, user_id: str) -> List[EvaluationRecord]:
        ...


@runtime_checkable
class NotificationDispatcher(Protocol):
    async def dispatch(self, request: NotificationRequest) -> None:
        ...
