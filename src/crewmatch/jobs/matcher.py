"""Heuristic scoring of job postings against a candidate profile."""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, Optional, Tuple

from crewmatch.core.models import PostingSnapshot, ProfileSnapshot
from crewmatch.utils.logging import get_logger
from crewmatch.utils.timeutil import to_instant

logger = get_logger(__name__)

MAX_SCORE = 100
MIN_SCORE = 0

BASE_BONUS = 10
CATEGORY_BONUS = 25
EXPERIENCE_BONUS = 15
LANGUAGE_BONUS = 10
LOCATION_BONUS = 20

# (max days since posting, bonus), checked in order
RECENCY_TIERS: Tuple[Tuple[float, int], ...] = ((7, 30), (14, 15))

# (max distance from desired wage, bonus), checked in order
WAGE_TIERS: Tuple[Tuple[float, int], ...] = ((1000, 20), (2000, 10), (5000, 5))

CUSTOMER_SERVICE_KEYWORDS: Tuple[str, ...] = (
    "customer service",
    "front desk",
    "reception",
    "concierge",
    "guest",
    "고객",
    "서비스",
    "프론트",
    "안내",
)

FOOD_SERVICE_KEYWORDS: Tuple[str, ...] = (
    "restaurant",
    "kitchen",
    "food",
    "server",
    "barista",
    "cafe",
    "식당",
    "주방",
    "서빙",
    "레스토랑",
    "카페",
)

_SECONDS_PER_DAY = 86400.0


@dataclass(frozen=True)
class ScoreBreakdown:
    """Per-rule contributions to a match score."""
    recency: int = 0
    wage: int = 0
    category: int = 0
    experience: int = 0
    language: int = 0
    location: int = 0
    base: int = BASE_BONUS

    @property
    def raw_total(self) -> int:
        return (
            self.recency + self.wage + self.category + self.experience
            + self.language + self.location + self.base
        )

    @property
    def total(self) -> int:
        """Sum of all rules, clamped to [0, 100]."""
        return max(MIN_SCORE, min(MAX_SCORE, self.raw_total))

    def to_dict(self) -> Dict[str, int]:
        return {
            "recency": self.recency,
            "wage": self.wage,
            "category": self.category,
            "experience": self.experience,
            "language": self.language,
            "location": self.location,
            "base": self.base,
            "total": self.total,
        }


def _clean(text: Optional[str]) -> str:
    return (text or "").strip().lower()


def _contains_any(haystack: str, needles: Iterable[str]) -> bool:
    return any(needle and needle in haystack for needle in needles)


def _substring_either_way(a: str, b: str) -> bool:
    if not a or not b:
        return False
    return a in b or b in a


def recency_bonus(posting: PostingSnapshot, now: datetime) -> int:
    """Bonus for freshly created postings."""
    days_since_posted = (now - posting.created_at).total_seconds() / _SECONDS_PER_DAY
    for max_days, bonus in RECENCY_TIERS:
        if days_since_posted <= max_days:
            return bonus
    return 0


def wage_bonus(profile: ProfileSnapshot, posting: PostingSnapshot) -> int:
    """Bonus when the posting's minimum wage is close to the desired wage."""
    if profile.desired_wage is None or posting.wage.min is None:
        return 0

    distance = abs(profile.desired_wage - posting.wage.min)
    for max_distance, bonus in WAGE_TIERS:
        if distance <= max_distance:
            return bonus
    return 0


def category_bonus(profile: ProfileSnapshot, posting: PostingSnapshot) -> int:
    """Bonus when a desired category and the job title contain one another."""
    title = _clean(posting.title)
    for category in profile.desired_categories:
        if _substring_either_way(_clean(category), title):
            return CATEGORY_BONUS
    return 0


def experience_bonus(profile: ProfileSnapshot, posting: PostingSnapshot) -> int:
    """Independent bonuses for customer-service and food-service experience."""
    description = _clean(posting.description)
    bonus = 0
    if profile.customer_service_exp and _contains_any(description, CUSTOMER_SERVICE_KEYWORDS):
        bonus += EXPERIENCE_BONUS
    if profile.restaurant_exp and _contains_any(description, FOOD_SERVICE_KEYWORDS):
        bonus += EXPERIENCE_BONUS
    return bonus


def language_bonus(profile: ProfileSnapshot, posting: PostingSnapshot) -> int:
    description = _clean(posting.description)
    if _contains_any(description, (_clean(lang) for lang in profile.languages)):
        return LANGUAGE_BONUS
    return 0


def location_bonus(profile: ProfileSnapshot, posting: PostingSnapshot) -> int:
    if _substring_either_way(_clean(profile.address_text), _clean(posting.location)):
        return LOCATION_BONUS
    return 0


class ScoringEngine:
    """
    Computes a 0-100 match score for a (profile, posting) pair.

    Every rule is independently skippable: a missing or empty field makes
    the rule contribute zero instead of raising. The engine holds no state
    and performs no I/O, so the same inputs always produce the same score.
    """

    def __init__(self):
        self.logger = logger.bind(component="scoring_engine")

    def breakdown(
        self,
        profile: ProfileSnapshot,
        posting: PostingSnapshot,
        now: datetime
    ) -> ScoreBreakdown:
        """
        Score a posting rule by rule.

        Args:
            profile: Candidate profile snapshot
            posting: Posting snapshot
            now: Reference time for recency

        Returns:
            Contribution of each rule and the clamped total
        """
        result = ScoreBreakdown(
            recency=recency_bonus(posting, to_instant(now)),
            wage=wage_bonus(profile, posting),
            category=category_bonus(profile, posting),
            experience=experience_bonus(profile, posting),
            language=language_bonus(profile, posting),
            location=location_bonus(profile, posting),
        )

        self.logger.debug(
            "Posting scored",
            posting_id=posting.id,
            candidate_id=profile.candidate_id,
            **result.to_dict()
        )

        return result

    def score(self, profile: ProfileSnapshot, posting: PostingSnapshot, now: datetime) -> int:
        """Return the match score in [0, 100]."""
        return self.breakdown(profile, posting, now).total


def fit_level(score: int) -> str:
    """Map a match score to a coarse label."""
    if score >= 80:
        return "very_high"
    elif score >= 60:
        return "high"
    elif score >= 40:
        return "medium"
    elif score >= 20:
        return "low"
    else:
        return "very_low"


def create_scoring_engine() -> ScoringEngine:
    """Factory function to create a scoring engine."""
    return ScoringEngine()
