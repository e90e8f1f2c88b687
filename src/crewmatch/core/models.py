"""Core data models for the matching and application-lifecycle engine."""

from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from crewmatch.utils.timeutil import Instant


class ApplicationStatus(str, Enum):
    """Lifecycle status of an application."""
    PENDING = "pending"
    REVIEWING = "reviewing"
    INTERVIEW_SCHEDULED = "interview_scheduled"
    INTERVIEW_COMPLETED = "interview_completed"
    OFFER_SENT = "offer_sent"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class ActorRole(str, Enum):
    """Role of the user requesting a status change."""
    EMPLOYER = "employer"
    CANDIDATE = "candidate"
    ADMIN = "admin"


class TrustLevel(str, Enum):
    """Coarse reputation tier derived from received evaluations."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very_high"


class NotificationKind(str, Enum):
    """Kinds of notifications the engine can request."""
    STATUS_CHANGED = "status_changed"


class WageRange(BaseModel):
    """Hourly wage range offered by a posting."""
    model_config = ConfigDict(frozen=True)

    min: Optional[float] = Field(None, description="Minimum hourly wage")
    max: Optional[float] = Field(None, description="Maximum hourly wage")


class TimeSlot(BaseModel):
    """A block of hours on one weekday that a posting needs covered."""
    model_config = ConfigDict(frozen=True)

    day: int = Field(..., ge=0, le=6, description="Weekday, 0 = Sunday")
    start: int = Field(..., ge=0, le=23, description="First hour of the block")
    end: int = Field(..., ge=1, le=24, description="Hour the block ends (exclusive)")

    @model_validator(mode="after")
    def _check_order(self) -> "TimeSlot":
        if self.end <= self.start:
            raise ValueError("time slot must end after it starts")
        return self


class Availability(BaseModel):
    """One hour on one weekday a worker can cover."""
    model_config = ConfigDict(frozen=True)

    day: int = Field(..., ge=0, le=6, description="Weekday, 0 = Sunday")
    hour: int = Field(..., ge=0, le=23, description="Hour of the day")
    priority: int = Field(1, ge=1, le=2, description="1 = preferred, 2 = possible")


class ProfileSnapshot(BaseModel):
    """Structured subset of a candidate's resume used for matching."""
    model_config = ConfigDict(frozen=True)

    candidate_id: Optional[str] = Field(None, description="Candidate identifier")
    desired_categories: FrozenSet[str] = Field(default_factory=frozenset, description="Desired job categories")
    desired_wage: Optional[float] = Field(None, description="Desired hourly wage")
    customer_service_exp: bool = Field(False, description="Has customer-service experience")
    restaurant_exp: bool = Field(False, description="Has food-service experience")
    languages: FrozenSet[str] = Field(default_factory=frozenset, description="Spoken languages")
    address_text: Optional[str] = Field(None, description="Home address as free text")
    availabilities: Tuple[Availability, ...] = Field(default=(), description="Weekly hourly availability")


class PostingSnapshot(BaseModel):
    """An open job listing a candidate can apply to."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Posting identifier")
    created_at: Instant = Field(..., description="Posting creation time")
    title: str = Field("", description="Job title")
    description: str = Field("", description="Free-text job description")
    location: str = Field("", description="Work location as free text")
    wage: WageRange = Field(default_factory=WageRange, description="Offered wage range")
    active: bool = Field(True, description="Whether the posting accepts applications")
    employer_id: Optional[str] = Field(None, description="Posting owner")
    shifts: Tuple[TimeSlot, ...] = Field(default=(), description="Weekly shifts to be covered")


class InterviewDetails(BaseModel):
    """Interview metadata attached when an interview is scheduled."""
    model_config = ConfigDict(frozen=True)

    date: Optional[str] = Field(None, description="Interview date as entered by the employer")
    contact_info: Optional[str] = Field(None, description="How the candidate should get in touch")
    notes: Optional[str] = Field(None, description="Free-text interview notes")


class FeedbackEntry(BaseModel):
    """One line of the append-only feedback log of an application."""
    model_config = ConfigDict(frozen=True)

    status: ApplicationStatus = Field(..., description="Status the application moved to")
    text: str = Field("", description="Feedback supplied with the change")
    actor_role: ActorRole = Field(..., description="Who made the change")
    at: Instant = Field(..., description="When the change was made")


class Application(BaseModel):
    """One candidate's submission against one posting."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Application identifier")
    posting_id: str = Field(..., description="Posting applied to")
    candidate_id: str = Field(..., description="Applying candidate")
    employer_id: str = Field(..., description="Employer owning the posting")
    status: ApplicationStatus = Field(ApplicationStatus.PENDING, description="Lifecycle status")
    applied_at: Instant = Field(..., description="Submission time")
    updated_at: Optional[Instant] = Field(None, description="Time of the last status change")
    feedback: str = Field("", description="Most recent feedback text")
    feedback_log: Tuple[FeedbackEntry, ...] = Field(default=(), description="Every status change with its feedback")
    interview: Optional[InterviewDetails] = Field(None, description="Interview metadata")


class EvaluationRecord(BaseModel):
    """A rating one user left for another after working together."""
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = Field(None, description="Evaluation identifier")
    evaluator_id: str = Field(..., description="User who wrote the evaluation")
    evaluated_id: str = Field(..., description="User being evaluated")
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5")
    created_at: Instant = Field(..., description="Evaluation time")


class TrustStats(BaseModel):
    """Trust metrics derived from a user's received evaluations."""
    model_config = ConfigDict(frozen=True)

    user_id: str = Field(..., description="User the stats describe")
    average_rating: float = Field(0.0, description="Mean rating")
    total_evaluations: int = Field(0, description="Number of evaluations")
    rehire_rate: float = Field(0.0, description="Percentage of ratings >= 4")
    last_work_date: Optional[datetime] = Field(None, description="Most recent evaluation time")
    trust_level: TrustLevel = Field(TrustLevel.LOW, description="Coarse trust tier")


class NotificationRequest(BaseModel):
    """A notification to be dispatched by the caller."""
    model_config = ConfigDict(frozen=True)

    recipient_id: str = Field(..., description="User to notify")
    kind: NotificationKind = Field(NotificationKind.STATUS_CHANGED, description="Notification kind")
    payload: Dict[str, str] = Field(default_factory=dict, description="Kind-specific data")
