"""Posting scoring, recommendation ranking and application lifecycle."""

from .matcher import (
    ScoringEngine,
    ScoreBreakdown,
    create_scoring_engine,
    fit_level
)
from .ranker import (
    RecommendationRanker,
    RankedRecommendations,
    ScoredPosting,
    create_recommendation_ranker
)
from .schedule import ScheduleRecommendation, recommend_by_schedule, schedule_match, schedule_score
from .application import (
    ApplicationLifecycle,
    TransitionResult,
    allowed_transitions,
    create_application_lifecycle,
    is_terminal
)

__all__ = [
    "ScoringEngine",
    "ScoreBreakdown",
    "create_scoring_engine",
    "fit_level",
    "RecommendationRanker",
    "RankedRecommendations",
    "ScoredPosting",
    "create_recommendation_ranker",
    "ApplicationLifecycle",
    "TransitionResult",
    "allowed_transitions",
    "create_application_lifecycle",
    "is_terminal",
    "ScheduleRecommendation",
    "recommend_by_schedule",
    "schedule_match",
    "schedule_score"
]
