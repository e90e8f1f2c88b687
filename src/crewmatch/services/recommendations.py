"""Recommendation service: fetch snapshots, then rank."""

from datetime import datetime
from typing import List, Optional

from crewmatch.errors import ProfileNotFoundError
from crewmatch.jobs.ranker import RankedRecommendations, RecommendationRanker
from crewmatch.jobs.schedule import ScheduleRecommendation, recommend_by_schedule
from crewmatch.services.ports import PostingRepository, ProfileRepository
from crewmatch.utils.logging import get_logger

logger = get_logger(__name__)


class RecommendationService:
    """Produces ranked posting recommendations for a candidate."""

    def __init__(
        self,
        profiles: ProfileRepository,
        postings: PostingRepository,
        ranker: Optional[RecommendationRanker] = None
    ):
        self.profiles = profiles
        self.postings = postings
        self.ranker = ranker or RecommendationRanker()
        self.logger = logger.bind(component="recommendation_service")

    async def recommend(self, candidate_id: str, now: Optional[datetime] = None) -> RankedRecommendations:
        """
        Rank the active postings for a candidate.

        Raises:
            ProfileNotFoundError: If the candidate has no profile
        """
        profile = await self.profiles.get_profile(candidate_id)
        if profile is None:
            raise ProfileNotFoundError(f"No profile for candidate {candidate_id}")

        postings = await self.postings.list_active_postings()
        applied = await self.postings.applied_posting_ids(candidate_id)

        self.logger.info(
            "Building recommendations",
            candidate_id=candidate_id,
            posting_count=len(postings),
            applied_count=len(applied)
        )

        return self.ranker.rank(profile, postings, applied, now)

    async def recommend_by_schedule(self, candidate_id: str, limit: Optional[int] = 10) -> List[ScheduleRecommendation]:
        """
        Postings whose shifts the candidate's weekly availability covers, best first.

        Raises:
            ProfileNotFoundError: If the candidate has no profile
        """
        profile = await self.profiles.get_profile(candidate_id)
        if profile is None:
            raise ProfileNotFoundError(f"No profile for candidate {candidate_id}")

        postings = await self.postings.list_active_postings()
        applied = await self.postings.applied_posting_ids(candidate_id)

        results = recommend_by_schedule(profile, postings, applied, limit)

        self.logger.info(
            "Schedule recommendations built",
            candidate_id=candidate_id,
            availability_hours=len(profile.availabilities),
            matched=len(results)
        )

        return results
