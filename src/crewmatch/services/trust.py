"""Trust service: fetch evaluations, then aggregate."""

from typing import Optional

from crewmatch.core.models import TrustStats
from crewmatch.evaluation.stats import EvaluationStatsEngine
from crewmatch.services.ports import EvaluationRepository


class TrustService:
    """Recomputes a user's trust stats from their evaluation history on every call."""

    def __init__(self, evaluations: EvaluationRepository, engine: Optional[EvaluationStatsEngine] = None):
        self.evaluations = evaluations
        self.engine = engine or EvaluationStatsEngine()

    async def stats_for(self, user_id: str) -> TrustStats:
        records = await self.evaluations.evaluations_for(user_id)
        return self.engine.compute_stats(user_id, records)
