#!/usr/bin/env python3
"""
Calendar Slot Analyzer - Utility to print conflict analysis reports
Shows each participant's working hours, the group overlap window, conflicts
and suggested slots for debugging
"""

import json
from datetime import timedelta
from typing import List, Dict

from config.settings import Config
from src.scheduler.models import ConflictAnalysis
from src.scheduler.scheduling_engine import SchedulingEngine
from src.scheduler.timezone_offset import to_local

class CalendarSlotAnalyzer:
    """Run and display conflict analysis for a group of participants"""

    def __init__(self, engine: SchedulingEngine):
        self.config = Config()
        self.engine = engine

    def analyze_participants(self, participant_ids: List[str], days_ahead: int = 7,
                             duration_minutes: int = None) -> ConflictAnalysis:
        """
        Analyze the next N days for the given participants and print the
        report. Returns the analysis for further use.
        """
        start_date = self.engine.clock()
        end_date = start_date + timedelta(days=days_ahead)

        print(f"\n🔍 CONFLICT ANALYSIS FOR {len(participant_ids)} PARTICIPANT(S)")
        print("=" * 60)
        print(f"📅 Date Range: {start_date:%Y-%m-%d} to {end_date:%Y-%m-%d} ({days_ahead} days)")
        print(f"🕒 Working Hours: {self.config.working_hours_label()} local time")

        analysis = self.engine.analyze_conflicts(
            participant_ids, start_date, end_date,
            duration_minutes=duration_minutes or self.config.DEFAULT_ANALYSIS_DURATION
        )
        self.display_analysis(analysis)
        return analysis

    def display_analysis(self, analysis: ConflictAnalysis):
        """Display the analysis in a readable format"""

        if not analysis.participants:
            print(f"\n❌ {analysis.summary}")
            return

        print(f"\n👥 PARTICIPANTS ({len(analysis.participants)} total):")
        for i, item in enumerate(analysis.participants, 1):
            print(f"   {i}. {item.participant.label()}")
            print(f"      🏢 Local: {item.local_working_hours}")
            print(f"      🌐 UTC: {item.utc_working_hours}")
            print(f"      📋 Meetings in period: {item.total_meetings}")

        overlap = analysis.working_hours_overlap
        if overlap.has_overlap:
            print(f"\n✅ OVERLAP WINDOW: {overlap.overlap_period} ({overlap.overlap_duration})")
        else:
            print(f"\n❌ NO WORKING HOURS OVERLAP")
        for local_time in overlap.participant_local_times:
            print(f"   • {local_time}")

        if analysis.conflicting_meetings:
            print(f"\n⚠️  CONFLICTS ({len(analysis.conflicting_meetings)} total):")
            for i, conflict in enumerate(analysis.conflicting_meetings, 1):
                marker = "🕒" if conflict.is_working_hours_conflict else "📋"
                print(f"   {i}. {marker} {conflict.title}")
                print(f"      {conflict.start_time:%Y-%m-%d %H:%M} → {conflict.end_time:%H:%M} UTC")
                for who in conflict.conflicting_participants:
                    print(f"      👤 {who}")
        else:
            print(f"\n✅ NO CONFLICTS DETECTED")

        if analysis.suggested_slots:
            print(f"\n🎯 SUGGESTED TIME SLOTS:")
            for i, slot in enumerate(analysis.suggested_slots, 1):
                print(f"   {i}. {slot.utc_time_range} - {slot.recommendation.display()}")
                for local in slot.participant_local_times:
                    print(f"      {local.name} ({local.timezone}): {local.local_time_range}")
        else:
            print(f"\n❌ NO AVAILABLE SLOTS FOUND during common working hours")

        self._display_daily_breakdown(analysis)

    def _display_daily_breakdown(self, analysis: ConflictAnalysis):
        print(f"\n📅 DAILY BREAKDOWN:")
        daily_stats: Dict[str, Dict[str, int]] = {}

        for item in analysis.participants:
            for meeting in self.engine.store.list_meetings_for_participant(item.participant.id):
                local_start = to_local(meeting.start_time, item.participant.timezone)
                stats = daily_stats.setdefault(f"{meeting.start_time:%Y-%m-%d}", {'meetings': 0, 'off_hours': 0})
                stats['meetings'] += 1
                if not self._in_working_hours(local_start.hour):
                    stats['off_hours'] += 1

        if not daily_stats:
            print("   No meetings booked")
            return

        for day, stats in sorted(daily_stats.items()):
            print(f"   {day}: {stats['meetings']} participant meeting(s), "
                  f"{stats['off_hours']} outside local working hours")

    def _in_working_hours(self, local_hour: int) -> bool:
        return self.config.WORK_DAY_START_HOUR <= local_hour < self.config.WORK_DAY_END_HOUR


def main():
    """Main function for command line usage"""
    import argparse
    from src.store.memory_store import InMemoryStore

    parser = argparse.ArgumentParser(description='Analyze meeting conflicts for participants')
    parser.add_argument('--data', help='JSON file with participants and meetings (default: demo data)')
    parser.add_argument('--participants', nargs='*', help='Participant ids to analyze (default: all)')
    parser.add_argument('--days', type=int, default=7, help='Number of days to analyze (default: 7)')
    parser.add_argument('--duration', type=int, default=Config.DEFAULT_ANALYSIS_DURATION,
                        help='Meeting duration in minutes')
    parser.add_argument('--json', action='store_true', help='Output as JSON instead of formatted text')

    args = parser.parse_args()

    if args.data:
        with open(args.data, 'r') as f:
            store = InMemoryStore.from_dict(json.load(f))
    else:
        store = InMemoryStore.with_demo_data()

    engine = SchedulingEngine(store)
    participant_ids = args.participants or [p.id for p in store.list_participants()]

    if args.json:
        start_date = engine.clock()
        analysis = engine.analyze_conflicts(
            participant_ids, start_date, start_date + timedelta(days=args.days),
            duration_minutes=args.duration
        )
        print(json.dumps(analysis.to_dict(), indent=2))
    else:
        CalendarSlotAnalyzer(engine).analyze_participants(participant_ids, args.days, args.duration)


if __name__ == "__main__":
    main()
