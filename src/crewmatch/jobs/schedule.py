"""Matching of worker availability against posting shift schedules."""

from dataclasses import dataclass
from typing import AbstractSet, Any, Dict, Iterable, List, Optional, Sequence, Tuple

from crewmatch.core.models import Availability, PostingSnapshot, ProfileSnapshot, TimeSlot

PREFERRED_WEIGHT = 2
POSSIBLE_WEIGHT = 1

DAYS_PER_WEEK = 7


def schedule_score(availabilities: Sequence[Availability], shifts: Sequence[TimeSlot]) -> int:
    """
    Weighted count of shift hours the worker can cover.

    Each hour of each shift adds 2 when the worker marked it as preferred
    (priority 1) and 1 when marked as possible (priority 2).
    """
    if not availabilities or not shifts:
        return 0

    # Keep the best (lowest) priority per hour.
    by_hour: Dict[Tuple[int, int], int] = {}
    for availability in availabilities:
        key = (availability.day, availability.hour)
        by_hour[key] = min(by_hour.get(key, availability.priority), availability.priority)

    total = 0
    for shift in shifts:
        for hour in range(shift.start, shift.end):
            priority = by_hour.get((shift.day, hour))
            if priority is None:
                continue
            total += PREFERRED_WEIGHT if priority == 1 else POSSIBLE_WEIGHT
    return total


def shift_hours(shifts: Iterable[TimeSlot]) -> int:
    return sum(shift.end - shift.start for shift in shifts)


def match_percentage(score: int, total_hours: int) -> int:
    if total_hours == 0:
        return 0
    return round(score / total_hours * 100)


def match_quality(percentage: float) -> str:
    """Map a coverage percentage to a quality label."""
    if percentage >= 90:
        return "excellent"
    elif percentage >= 75:
        return "good"
    elif percentage >= 50:
        return "fair"
    elif percentage >= 25:
        return "poor"
    else:
        return "very_poor"


def availability_summary(availabilities: Sequence[Availability]) -> Dict[str, Any]:
    """Hour counts per priority and per weekday."""
    per_day: List[int] = [0] * DAYS_PER_WEEK
    for availability in availabilities:
        per_day[availability.day] += 1

    return {
        "total_hours": len(availabilities),
        "preferred_hours": sum(1 for a in availabilities if a.priority == 1),
        "possible_hours": sum(1 for a in availabilities if a.priority == 2),
        "days_available": len({a.day for a in availabilities}),
        "day_breakdown": [{"day": day, "hours": hours} for day, hours in enumerate(per_day)],
    }


def availability_to_slots(availabilities: Iterable[Availability]) -> List[TimeSlot]:
    """Merge consecutive available hours on the same day into time slots."""
    hours_by_day: Dict[int, List[int]] = {}
    for availability in availabilities:
        hours_by_day.setdefault(availability.day, []).append(availability.hour)

    slots: List[TimeSlot] = []
    for day in sorted(hours_by_day):
        hours = sorted(set(hours_by_day[day]))
        start = previous = hours[0]
        for hour in hours[1:]:
            if hour != previous + 1:
                slots.append(TimeSlot(day=day, start=start, end=previous + 1))
                start = hour
            previous = hour
        slots.append(TimeSlot(day=day, start=start, end=previous + 1))
    return slots


def schedule_match(profile: ProfileSnapshot, posting: PostingSnapshot) -> Dict[str, Any]:
    """Score how well a candidate's availability covers a posting's shifts."""
    score = schedule_score(profile.availabilities, posting.shifts)
    # Full coverage at preferred priority is 100 percent.
    percentage = match_percentage(score, PREFERRED_WEIGHT * shift_hours(posting.shifts))
    return {
        "score": score,
        "percentage": percentage,
        "quality": match_quality(percentage),
    }


@dataclass(frozen=True)
class ScheduleRecommendation:
    """A posting whose shifts the worker can at least partly cover."""
    posting: PostingSnapshot
    score: int
    percentage: int
    quality: str


def recommend_by_schedule(
    profile: ProfileSnapshot,
    postings: Iterable[PostingSnapshot],
    applied_posting_ids: Optional[AbstractSet[str]] = None,
    limit: Optional[int] = 10
) -> List[ScheduleRecommendation]:
    """
    Rank postings by how well the worker's availability covers their shifts.

    Inactive and already-applied postings are skipped, as are postings the
    worker cannot cover at all. Ties are broken newest first, then by id.

    Args:
        profile: Candidate profile with weekly availability
        postings: Postings to consider
        applied_posting_ids: Ids of postings the candidate already applied to
        limit: Maximum number of results, or None for all

    Returns:
        Matching postings, best coverage first
    """
    if limit is not None and limit < 0:
        raise ValueError("limit must be non-negative")

    applied = applied_posting_ids or frozenset()
    results: List[ScheduleRecommendation] = []
    for posting in postings:
        if not posting.active or posting.id in applied:
            continue
        match = schedule_match(profile, posting)
        if match["score"] <= 0:
            continue
        results.append(ScheduleRecommendation(posting=posting, **match))

    results.sort(key=lambda r: (-r.score, -r.posting.created_at.timestamp(), r.posting.id))
    return results if limit is None else results[:limit]
