"""Recommendation ranking of open postings for a candidate."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import AbstractSet, Any, Dict, Iterable, List, Optional, Tuple

from crewmatch.config import settings
from crewmatch.core.models import PostingSnapshot, ProfileSnapshot
from crewmatch.jobs.matcher import ScoringEngine, fit_level
from crewmatch.utils.logging import get_logger
from crewmatch.utils.timeutil import to_instant

logger = get_logger(__name__)


@dataclass(frozen=True)
class ScoredPosting:
    """A posting with its match score attached for ranking."""
    posting: PostingSnapshot
    score: int

    @property
    def fit_level(self) -> str:
        return fit_level(self.score)


@dataclass(frozen=True)
class RankedRecommendations:
    """Full ordered recommendation list plus a bounded preview of it."""
    items: Tuple[ScoredPosting, ...] = ()
    preview_size: int = 5
    excluded_inactive: int = 0
    excluded_applied: int = 0

    @property
    def preview(self) -> Tuple[ScoredPosting, ...]:
        return self.items[:self.preview_size]

    @property
    def has_more(self) -> bool:
        return len(self.items) > self.preview_size

    def __len__(self) -> int:
        return len(self.items)

    def posting_ids(self) -> List[str]:
        return [item.posting.id for item in self.items]

    def get_summary(self) -> Dict[str, Any]:
        """Summary statistics for logging and display."""
        if not self.items:
            return {"total_postings": 0, "top_matches": []}

        return {
            "total_postings": len(self.items),
            "average_score": sum(item.score for item in self.items) / len(self.items),
            "excluded_inactive": self.excluded_inactive,
            "excluded_applied": self.excluded_applied,
            "top_matches": [
                {
                    "posting_id": item.posting.id,
                    "title": item.posting.title,
                    "score": item.score,
                    "fit_level": item.fit_level
                }
                for item in self.preview
            ]
        }


def _sort_key(item: ScoredPosting) -> Tuple[int, float, str]:
    # Score descending, then newest first, then id ascending.
    return (-item.score, -item.posting.created_at.timestamp(), item.posting.id)


@dataclass
class RecommendationRanker:
    """Filters out inactive and already-applied postings and orders the rest by score."""
    scoring_engine: ScoringEngine = field(default_factory=ScoringEngine)
    preview_size: int = field(default_factory=lambda: settings.preview_size)

    def __post_init__(self):
        if self.preview_size < 0:
            raise ValueError(f"preview_size must be non-negative, got {self.preview_size}")
        self.logger = logger.bind(component="recommendation_ranker")

    def rank(
        self,
        profile: ProfileSnapshot,
        postings: Iterable[PostingSnapshot],
        applied_posting_ids: Optional[AbstractSet[str]] = None,
        now: Optional[datetime] = None
    ) -> RankedRecommendations:
        """
        Rank postings for a candidate.

        Args:
            profile: Candidate profile snapshot
            postings: Candidate postings to rank
            applied_posting_ids: Ids of postings the candidate already applied to
            now: Reference time for recency scoring (defaults to the current time)

        Returns:
            Deterministically ordered recommendations
        """
        applied = applied_posting_ids or frozenset()
        reference_time = to_instant(now if now is not None else datetime.now().astimezone())

        scored: List[ScoredPosting] = []
        excluded_inactive = 0
        excluded_applied = 0

        for posting in postings:
            if not posting.active:
                excluded_inactive += 1
                continue
            if posting.id in applied:
                excluded_applied += 1
                continue
            scored.append(ScoredPosting(
                posting=posting,
                score=self.scoring_engine.score(profile, posting, reference_time)
            ))

        scored.sort(key=_sort_key)

        result = RankedRecommendations(
            items=tuple(scored),
            preview_size=self.preview_size,
            excluded_inactive=excluded_inactive,
            excluded_applied=excluded_applied
        )

        self.logger.info(
            "Postings ranked",
            candidate_id=profile.candidate_id,
            ranked=len(scored),
            excluded_inactive=excluded_inactive,
            excluded_applied=excluded_applied
        )

        return result


def create_recommendation_ranker(
    scoring_engine: Optional[ScoringEngine] = None,
    preview_size: Optional[int] = None
) -> RecommendationRanker:
    """
    Factory function to create a recommendation ranker.

    Args:
        scoring_engine: Engine used to score postings
        preview_size: Size of the preview slice (defaults to settings)

    Returns:
        Configured RecommendationRanker instance
    """
    return RecommendationRanker(
        scoring_engine=scoring_engine or ScoringEngine(),
        preview_size=settings.preview_size if preview_size is None else preview_size
    )
