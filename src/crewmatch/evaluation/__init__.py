"""Evaluation aggregation."""

from .stats import EvaluationStatsEngine, compute_stats, trust_level_for

__all__ = ["EvaluationStatsEngine", "compute_stats", "trust_level_for"]
