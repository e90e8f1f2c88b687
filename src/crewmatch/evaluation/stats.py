"""Trust metrics aggregated from received evaluations."""

from typing import Iterable

from crewmatch.core.models import EvaluationRecord, TrustLevel, TrustStats
from crewmatch.utils.logging import get_logger

logger = get_logger(__name__)

REHIRE_RATING = 4

# (minimum average rating, minimum evaluation count, level), first match wins
TRUST_TIERS = (
    (4.5, 10, TrustLevel.VERY_HIGH),
    (4.0, 5, TrustLevel.HIGH),
    (3.5, 0, TrustLevel.MEDIUM),
)


def trust_level_for(average_rating: float, total_evaluations: int) -> TrustLevel:
    for min_rating, min_count, level in TRUST_TIERS:
        if average_rating >= min_rating and total_evaluations >= min_count:
            return level
    return TrustLevel.LOW


class EvaluationStatsEngine:
    """Aggregates a user's received evaluations into TrustStats."""

    def __init__(self):
        self.logger = logger.bind(component="evaluation_stats")

    def compute_stats(self, user_id: str, evaluations: Iterable[EvaluationRecord]) -> TrustStats:
        """
        Compute trust metrics for a user.

        Evaluations addressed to other users are ignored. An empty history
        yields zero-valued stats at trust level ``low``.

        Args:
            user_id: User whose received evaluations are aggregated
            evaluations: Evaluation records, in any order

        Returns:
            Freshly computed trust stats
        """
        received = [e for e in evaluations if e.evaluated_id == user_id]

        if not received:
            return TrustStats(user_id=user_id)

        total = len(received)
        average_rating = sum(e.rating for e in received) / total
        rehire_rate = 100 * sum(1 for e in received if e.rating >= REHIRE_RATING) / total
        last_work_date = max(e.created_at for e in received)

        stats = TrustStats(
            user_id=user_id,
            average_rating=average_rating,
            total_evaluations=total,
            rehire_rate=rehire_rate,
            last_work_date=last_work_date,
            trust_level=trust_level_for(average_rating, total)
        )

        self.logger.debug(
            "Trust stats computed",
            user_id=user_id,
            total_evaluations=total,
            average_rating=average_rating,
            trust_level=stats.trust_level.value
        )

        return stats


def compute_stats(user_id: str, evaluations: Iterable[EvaluationRecord]) -> TrustStats:
    """Module-level shortcut for EvaluationStatsEngine().compute_stats."""
    return EvaluationStatsEngine().compute_stats(user_id, evaluations)
