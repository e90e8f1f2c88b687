"""In-memory adapters for the service ports."""

from .store import (
    InMemoryApplicationStore,
    InMemoryEvaluationRepository,
    InMemoryPostingRepository,
    InMemoryProfileRepository,
    RecordingDispatcher,
)

__all__ = [
    "InMemoryApplicationStore",
    "InMemoryEvaluationRepository",
    "InMemoryPostingRepository",
    "InMemoryProfileRepository",
    "RecordingDispatcher",
]
