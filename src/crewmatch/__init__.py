"""
crewmatch: matching and application-lifecycle engine for hourly job postings.

This package scores and ranks open postings for a job seeker, governs how a
submitted application moves to a hiring decision, and aggregates received
evaluations into trust levels.
"""

__version__ = "0.1.0"

from crewmatch.evaluation.stats import EvaluationStatsEngine
from crewmatch.jobs.application import ApplicationLifecycle
from crewmatch.jobs.matcher import ScoringEngine
from crewmatch.jobs.ranker import RecommendationRanker
from crewmatch.services.workflow import ApplicationWorkflow

__all__ = [
    "ScoringEngine",
    "RecommendationRanker",
    "ApplicationLifecycle",
    "EvaluationStatsEngine",
    "ApplicationWorkflow",
]
