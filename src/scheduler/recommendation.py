"""
Recommendation ranking for suggested slots
"""
from datetime import datetime
from typing import List

from src.scheduler.models import Participant, RecommendationTier, SuggestedSlot
from src.scheduler.timezone_offset import to_local


def hour_score(local_hour: int) -> int:
    """How pleasant a local start hour is: 4 best, 0 outside the working day"""
    if 10 <= local_hour <= 11 or 14 <= local_hour <= 15:
        return 4
    if local_hour == 9 or 12 <= local_hour <= 13 or local_hour == 16:
        return 3
    if local_hour == 8 or local_hour == 17:
        return 2
    if 8 <= local_hour <= 18:
        return 1
    return 0


class RecommendationRanker:
    """Scores a slot for a group and orders suggestions. Never rejects a slot."""

    @staticmethod
    def score(slot_start_utc: datetime, participants: List[Participant]) -> RecommendationTier:
        if not participants:
            return RecommendationTier.NOT_RECOMMENDED

        scores = [hour_score(to_local(slot_start_utc, p.timezone).hour) for p in participants]
        average = sum(scores) / len(scores)

        if average >= 3.5:
            return RecommendationTier.IDEAL
        if average >= 2.5:
            return RecommendationTier.GOOD
        if average >= 1.5:
            return RecommendationTier.ACCEPTABLE
        return RecommendationTier.NOT_RECOMMENDED

    @staticmethod
    def rank(suggestions: List[SuggestedSlot]) -> List[SuggestedSlot]:
        """Best tier first, earlier start breaking ties"""
        return sorted(suggestions, key=lambda s: (-s.recommendation.score, s.start_time))
