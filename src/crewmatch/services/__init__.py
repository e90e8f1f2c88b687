"""Async services wiring the pure engine to external repositories."""

from .ports import (
    ApplicationStore,
    EvaluationRepository,
    NotificationDispatcher,
    PostingRepository,
    ProfileRepository
)
from .recommendations import RecommendationService
from .trust import TrustService
from .workflow import ApplicationWorkflow, create_application_workflow

__all__ = [
    "ApplicationStore",
    "EvaluationRepository",
    "NotificationDispatcher",
    "PostingRepository",
    "ProfileRepository",
    "RecommendationService",
    "TrustService",
    "ApplicationWorkflow",
    "create_application_workflow"
]
