"""Property-based and example tests for recommendation ranking."""

from datetime import timedelta

import pytest
from hypothesis import given, settings, strategies as st

from crewmatch.core.models import PostingSnapshot, ProfileSnapshot, WageRange
from crewmatch.jobs.matcher import ScoringEngine
from crewmatch.jobs.ranker import (
    RankedRecommendations,
    RecommendationRanker,
    create_recommendation_ranker,
)
from tests.strategies import REFERENCE_NOW, posting_list_strategy, profile_strategy


def make_posting(posting_id: str, age_days: float = 30, **overrides) -> PostingSnapshot:
    data = dict(id=posting_id, created_at=REFERENCE_NOW - timedelta(days=age_days))
    data.update(overrides)
    return PostingSnapshot(**data)


@st.composite
def ranking_input_strategy(draw):
    postings = draw(posting_list_strategy())
    ids = [p.id for p in postings]
    applied = frozenset(draw(st.lists(st.sampled_from(ids), max_size=len(ids)))) if ids else frozenset()
    return postings, applied


@pytest.mark.property
class TestRankingProperties:
    """Property-based tests for the recommendation ranker."""

    @given(profile=profile_strategy(), data=ranking_input_strategy())
    @settings(max_examples=100, deadline=None)
    def test_excludes_applied_and_inactive(self, profile, data):
        postings, applied = data

        result = RecommendationRanker().rank(profile, postings, applied, REFERENCE_NOW)

        for item in result.items:
            assert item.posting.active
            assert item.posting.id not in applied

        expected_ids = {p.id for p in postings if p.active and p.id not in applied}
        assert set(result.posting_ids()) == expected_ids

    @given(profile=profile_strategy(), data=ranking_input_strategy())
    @settings(max_examples=100, deadline=None)
    def test_ordering_is_deterministic(self, profile, data):
        postings, applied = data
        ranker = RecommendationRanker()

        first = ranker.rank(profile, postings, applied, REFERENCE_NOW)
        second = ranker.rank(profile, list(reversed(postings)), applied, REFERENCE_NOW)

        assert first.posting_ids() == second.posting_ids()

    @given(profile=profile_strategy(), data=ranking_input_strategy())
    @settings(max_examples=100, deadline=None)
    def test_sorted_by_score_then_recency_then_id(self, profile, data):
        postings, applied = data

        items = RecommendationRanker().rank(profile, postings, applied, REFERENCE_NOW).items

        for earlier, later in zip(items, items[1:]):
            key_earlier = (-earlier.score, -earlier.posting.created_at.timestamp(), earlier.posting.id)
            key_later = (-later.score, -later.posting.created_at.timestamp(), later.posting.id)
            assert key_earlier <= key_later

    @given(profile=profile_strategy(), data=ranking_input_strategy())
    @settings(max_examples=50, deadline=None)
    def test_scores_match_scoring_engine(self, profile, data):
        postings, applied = data
        engine = ScoringEngine()

        for item in RecommendationRanker(scoring_engine=engine).rank(profile, postings, applied, REFERENCE_NOW).items:
            assert item.score == engine.score(profile, item.posting, REFERENCE_NOW)


class TestRanking:
    """Example-based ranking tests."""

    def test_applied_posting_is_excluded(self):
        excluded = make_posting("excluded")
        active = make_posting("active")

        result = RecommendationRanker().rank(ProfileSnapshot(), [excluded, active], {"excluded"}, REFERENCE_NOW)

        assert result.posting_ids() == ["active"]
        assert result.excluded_applied == 1

    def test_inactive_posting_is_excluded(self):
        result = RecommendationRanker().rank(
            ProfileSnapshot(),
            [make_posting("closed", active=False), make_posting("open")],
            now=REFERENCE_NOW
        )

        assert result.posting_ids() == ["open"]
        assert result.excluded_inactive == 1

    def test_empty_input_gives_empty_result(self):
        result = RecommendationRanker().rank(ProfileSnapshot(), [], set(), REFERENCE_NOW)

        assert len(result) == 0
        assert result.preview == ()
        assert not result.has_more
        assert result.get_summary() == {"total_postings": 0, "top_matches": []}

    def test_higher_score_first(self):
        profile = ProfileSnapshot(desired_wage=10000)
        close = make_posting("b-close", wage=WageRange(min=10000))
        far = make_posting("a-far", wage=WageRange(min=30000))

        result = RecommendationRanker().rank(profile, [far, close], now=REFERENCE_NOW)

        assert result.posting_ids() == ["b-close", "a-far"]

    def test_ties_broken_by_newer_then_id(self):
        # 20 and 25 days old both score the base 10 only.
        older = make_posting("a", age_days=25)
        newer = make_posting("z", age_days=20)
        same_age_b = make_posting("b", age_days=20)

        result = RecommendationRanker().rank(ProfileSnapshot(), [older, newer, same_age_b], now=REFERENCE_NOW)

        assert [item.score for item in result.items] == [10, 10, 10]
        assert result.posting_ids() == ["b", "z", "a"]

    def test_preview_is_prefix_of_full_list(self):
        postings = [make_posting(f"p{i:02d}", age_days=20 + i) for i in range(8)]

        result = create_recommendation_ranker(preview_size=5).rank(ProfileSnapshot(), postings, now=REFERENCE_NOW)

        assert len(result.items) == 8
        assert result.preview == result.items[:5]
        assert result.has_more
        assert [item["posting_id"] for item in result.get_summary()["top_matches"]] == [
            "p00", "p01", "p02", "p03", "p04"
        ]

    def test_fit_level_attached_to_items(self):
        result = RecommendationRanker().rank(ProfileSnapshot(), [make_posting("x", age_days=0)], now=REFERENCE_NOW)

        assert result.items[0].score == 40
        assert result.items[0].fit_level == "medium"

    @pytest.mark.parametrize("preview_size", [-1, -5])
    def test_negative_preview_size_rejected(self, preview_size):
        with pytest.raises(ValueError):
            create_recommendation_ranker(preview_size=preview_size)
        with pytest.raises(ValueError):
            RecommendationRanker(preview_size=preview_size)

    def test_zero_preview_size_keeps_full_list(self):
        postings = [make_posting("a"), make_posting("b")]

        result = create_recommendation_ranker(preview_size=0).rank(ProfileSnapshot(), postings, now=REFERENCE_NOW)

        assert result.preview == ()
        assert len(result.items) == 2
        assert result.has_more

    def test_default_preview_size_from_settings(self):
        assert RankedRecommendations().preview_size == 5
        assert RecommendationRanker().preview_size == 5
