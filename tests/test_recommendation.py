"""Tests for slot recommendation scoring and ranking."""

from datetime import datetime

import pytest

from src.scheduler.models import Participant, RecommendationTier, SuggestedSlot
from src.scheduler.recommendation import RecommendationRanker, hour_score


BEN = Participant("ben", "Ben", "UTC")
CHANDRA = Participant("chandra", "Chandra", "UTC+5:30")


class TestHourScore:
    """Local hour desirability."""

    @pytest.mark.parametrize("hour,score", [
        (10, 4), (11, 4), (14, 4), (15, 4),
        (9, 3), (12, 3), (13, 3), (16, 3),
        (8, 2), (17, 2),
        (18, 1),
        (7, 0), (19, 0), (0, 0), (23, 0),
    ])
    def test_scores(self, hour, score):
        assert hour_score(hour) == score


class TestScore:
    """Group averages mapped to tiers."""

    @pytest.mark.parametrize("hour,tier", [
        (10, RecommendationTier.IDEAL),
        (9, RecommendationTier.GOOD),
        (8, RecommendationTier.ACCEPTABLE),
        (18, RecommendationTier.NOT_RECOMMENDED),
        (3, RecommendationTier.NOT_RECOMMENDED),
    ])
    def test_single_participant(self, hour, tier):
        assert RecommendationRanker.score(datetime(2025, 6, 3, hour), [BEN]) == tier

    def test_group_average(self):
        # Ben 10:00 (4), Chandra 15:30 (4)
        assert RecommendationRanker.score(datetime(2025, 6, 3, 10), [BEN, CHANDRA]) == RecommendationTier.IDEAL
        # Ben 08:00 (2), Chandra 13:30 (3) averages exactly 2.5
        assert RecommendationRanker.score(datetime(2025, 6, 3, 8), [BEN, CHANDRA]) == RecommendationTier.GOOD

    def test_no_participants(self):
        assert RecommendationRanker.score(datetime(2025, 6, 3, 10), []) == RecommendationTier.NOT_RECOMMENDED


class TestRank:
    """Ordering by tier then start time."""

    def test_best_tier_first_then_earliest(self):
        def suggestion(hour, tier):
            start = datetime(2025, 6, 3, hour)
            return SuggestedSlot(start, start, "", [], tier)

        ranked = RecommendationRanker.rank([
            suggestion(8, RecommendationTier.ACCEPTABLE),
            suggestion(11, RecommendationTier.IDEAL),
            suggestion(9, RecommendationTier.GOOD),
            suggestion(10, RecommendationTier.IDEAL),
        ])

        assert [s.start_time.hour for s in ranked] == [10, 11, 9, 8]

    def test_tier_display(self):
        assert RecommendationTier.IDEAL.display() == "🎯 Ideal"
        assert RecommendationTier.NOT_RECOMMENDED.display() == "❌ Not recommended"
        assert RecommendationTier.GOOD.score == 3
