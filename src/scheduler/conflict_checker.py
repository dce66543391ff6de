"""
Conflict detection between a proposed window and booked meetings
"""
from datetime import datetime
from typing import Iterable, List, Optional, Set

from src.scheduler.models import Meeting


class ConflictChecker:
    """Half-open interval overlap checks: [start, end) intersects [start, end)"""

    @staticmethod
    def overlaps(candidate_start: datetime, candidate_end: datetime,
                 meetings: Iterable[Meeting]) -> List[Meeting]:
        """Meetings whose time range intersects the candidate window"""
        return [m for m in meetings if m.start_time < candidate_end and m.end_time > candidate_start]

    @staticmethod
    def shares_participant(first: Meeting, second: Meeting,
                           participant_ids: Optional[Set[str]] = None) -> bool:
        shared = set(first.participant_ids) & set(second.participant_ids)
        if participant_ids is not None:
            shared &= participant_ids
        return bool(shared)

    def conflicts_between(self, first: Meeting, second: Meeting,
                          participant_ids: Optional[Set[str]] = None) -> bool:
        """Two meetings conflict when they overlap in time and share a participant"""
        if first.id == second.id:
            return False
        if not first.overlaps_with(second.start_time, second.end_time):
            return False
        return self.shares_participant(first, second, participant_ids)

    def conflict_groups(self, meetings: Iterable[Meeting],
                        participant_ids: Iterable[str]) -> List[List[Meeting]]:
        """
        Group meetings that double-book a requested participant.

        Groups are merged transitively: if A conflicts with B and B with C,
        all three land in one group even when A and C do not touch. Each
        meeting appears in at most one group; meetings without any conflict
        are left out.
        """
        wanted = set(participant_ids)
        unique = {}
        for meeting in meetings:
            unique.setdefault(meeting.id, meeting)
        ordered = sorted(unique.values(), key=lambda m: (m.start_time, m.end_time))

        groups: List[List[Meeting]] = []
        for meeting in ordered:
            touching = [
                group for group in groups
                if any(self.conflicts_between(meeting, other, wanted) for other in group)
            ]
            partners = [
                other for other in ordered
                if self.conflicts_between(meeting, other, wanted)
            ]
            if not touching and not partners:
                continue

            merged = [meeting]
            for group in touching:
                merged.extend(group)
                groups.remove(group)
            groups.append(merged)

        for group in groups:
            group.sort(key=lambda m: (m.start_time, m.end_time))
        groups.sort(key=lambda g: g[0].start_time)
        return groups
