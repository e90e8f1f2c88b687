"""In-memory implementations of the repository and dispatcher interfaces."""

import asyncio
from typing import AbstractSet, Dict, Iterable, List, Optional, Set

from crewmatch.core.models import (
    Application,
    ApplicationStatus,
    EvaluationRecord,
    NotificationRequest,
    PostingSnapshot,
    ProfileSnapshot,
)
from crewmatch.errors import ConcurrentModificationError
from crewmatch.utils.logging import get_logger

logger = get_logger(__name__)


class InMemoryProfileRepository:
    """Profiles keyed by candidate id."""

    def __init__(self, profiles: Optional[Iterable[ProfileSnapshot]] = None):
        self._profiles: Dict[str, ProfileSnapshot] = {}
        for profile in profiles or ():
            self.add(profile)

    def add(self, profile: ProfileSnapshot) -> None:
        if not profile.candidate_id:
            raise ValueError("Stored profiles need a candidate_id")
        self._profiles[profile.candidate_id] = profile

    async def get_profile(self, candidate_id: str) -> Optional[ProfileSnapshot]:
        return self._profiles.get(candidate_id)


class InMemoryPostingRepository:
    """Postings plus a record of which candidate applied where."""

    def __init__(self, postings: Optional[Iterable[PostingSnapshot]] = None):
        self._postings: Dict[str, PostingSnapshot] = {}
        self._applied: Dict[str, Set[str]] = {}
        for posting in postings or ():
            self.add(posting)

    def add(self, posting: PostingSnapshot) -> None:
        self._postings[posting.id] = posting

    def record_application(self, candidate_id: str, posting_id: str) -> None:
        self._applied.setdefault(candidate_id, set()).add(posting_id)

    async def list_active_postings(self) -> List[PostingSnapshot]:
        return [p for p in self._postings.values() if p.active]

    async def applied_posting_ids(self, candidate_id: str) -> AbstractSet[str]:
        return frozenset(self._applied.get(candidate_id, ()))


class InMemoryApplicationStore:
    """
    Application documents with an atomic status compare-and-set.

    The lock makes the status check and the replacement a single step, the
    way a document store transaction would.
    """

    def __init__(self, applications: Optional[Iterable[Application]] = None):
        self._applications: Dict[str, Application] = {}
        self._lock = asyncio.Lock()
        self.logger = logger.bind(component="application_store")
        for application in applications or ():
            self._applications[application.id] = application

    def add(self, application: Application) -> None:
        self._applications[application.id] = application

    async def get_application(self, application_id: str) -> Optional[Application]:
        return self._applications.get(application_id)

    async def compare_and_set(
        self,
        application_id: str,
        expected_status: ApplicationStatus,
        updated: Application
    ) -> Application:
        async with self._lock:
            current = self._applications.get(application_id)
            actual = current.status if current is not None else None
            if actual != expected_status:
                self.logger.debug(
                    "Conditional write rejected",
                    application_id=application_id,
                    expected_status=ApplicationStatus(expected_status).value,
                    actual_status=actual.value if actual is not None else None
                )
                raise ConcurrentModificationError(
                    application_id,
                    ApplicationStatus(expected_status).value,
                    actual.value if actual is not None else None
                )
            self._applications[application_id] = updated
            return updated


class InMemoryEvaluationRepository:
    """Evaluation records, queried by the evaluated user."""

    def __init__(self, evaluations: Optional[Iterable[EvaluationRecord]] = None):
        self._evaluations: List[EvaluationRecord] = list(evaluations or ())

    def add(self, evaluation: EvaluationRecord) -> None:
        self._evaluations.append(evaluation)

    async def evaluations_for(self, user_id: str) -> List[EvaluationRecord]:
        return [e for e in self._evaluations if e.evaluated_id == user_id]


class RecordingDispatcher:
    """Collects notification requests instead of delivering them."""

    def __init__(self):
        self.sent: List[NotificationRequest] = []

    async def dispatch(self, request: NotificationRequest) -> None:
        self.sent.append(request)
