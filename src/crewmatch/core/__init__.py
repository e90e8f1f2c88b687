"""Core data models."""

from .models import (
    ActorRole,
    Application,
    ApplicationStatus,
    Availability,
    EvaluationRecord,
    FeedbackEntry,
    InterviewDetails,
    NotificationKind,
    NotificationRequest,
    PostingSnapshot,
    ProfileSnapshot,
    TimeSlot,
    TrustLevel,
    TrustStats,
    WageRange,
)

__all__ = [
    "ActorRole",
    "Application",
    "ApplicationStatus",
    "Availability",
    "EvaluationRecord",
    "FeedbackEntry",
    "InterviewDetails",
    "NotificationKind",
    "NotificationRequest",
    "PostingSnapshot",
    "ProfileSnapshot",
    "TimeSlot",
    "TrustLevel",
    "TrustStats",
    "WageRange",
]
