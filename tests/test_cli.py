"""Tests for the request-file processor and the printed analysis report."""

import json

import pytest

import main
from conftest import at
from src.scheduler.models import ConflictAnalysis, ScheduleResult
from utils.calendar_slot_analyzer import CalendarSlotAnalyzer


BEN_ID = "3f2b8c1e-9a4d-4f6b-8e2a-1c5d7e9f0a2b"
ANA_ID = "7a1c2d3e-4f5a-4b6c-9d8e-0f1a2b3c4d5e"


@pytest.fixture
def request_file_data():
    return {
        "participants": [
            {"id": BEN_ID, "name": "Ben", "timeZone": "UTC"},
            {"id": ANA_ID, "name": "Ana", "timeZone": "UTC-3:00"},
        ],
        "meetings": [{
            "id": "m1",
            "title": "Existing Meeting",
            "startTime": "2025-06-03T14:00:00Z",
            "endTime": "2025-06-03T15:00:00Z",
            "participantIds": [BEN_ID],
        }],
    }


class TestProcessRequest:
    """Running one request from a JSON document."""

    def test_schedule_conflict(self, request_file_data):
        request_file_data["request"] = {
            "type": "schedule",
            "title": "Sync",
            "startTime": "2025-06-03T14:00:00Z",
            "endTime": "2025-06-03T15:00:00Z",
            "participantIds": [BEN_ID, ANA_ID],
        }

        _, result = main.process_request(request_file_data)

        assert isinstance(result, ScheduleResult)
        assert result.success is False
        assert result.to_dict()["suggestedTimeSlots"][0]["startTime"] == "2025-06-03T15:00:00Z"

    def test_available_slots(self, request_file_data):
        request_file_data["request"] = {
            "type": "available-slots",
            "participantIds": f"{BEN_ID},{ANA_ID}",
            "startDate": "2025-06-03T00:00:00Z",
            "endDate": "2025-06-04T00:00:00Z",
            "durationMinutes": 60,
        }

        _, slots = main.process_request(request_file_data)

        assert [s.start_time.hour for s in slots] == [11, 12, 13]
        assert json.dumps(main._result_to_json(slots))

    def test_analyze(self, request_file_data):
        request_file_data["request"] = {
            "type": "analyze-conflicts",
            "participantIds": [BEN_ID, ANA_ID],
            "startDate": "2025-06-03T00:00:00Z",
            "endDate": "2025-06-04T00:00:00Z",
        }

        _, analysis = main.process_request(request_file_data)

        assert isinstance(analysis, ConflictAnalysis)
        assert analysis.working_hours_overlap.overlap_period == "11:00 - 18:00 UTC"

    def test_unknown_type(self, request_file_data):
        request_file_data["request"] = {"type": "teleport"}
        with pytest.raises(ValueError):
            main.process_request(request_file_data)


class TestCalendarSlotAnalyzer:
    """Printed report."""

    def test_report_sections(self, engine, ben, chandra, tomorrow, add_meeting, capsys):
        add_meeting("Standup", at(tomorrow, 10), at(tomorrow, 11), [ben, chandra])
        add_meeting("Overlap", at(tomorrow, 10, 30), at(tomorrow, 11, 30), [ben])

        analysis = CalendarSlotAnalyzer(engine).analyze_participants([ben.id, chandra.id], days_ahead=3)

        output = capsys.readouterr().out
        assert "🔍 CONFLICT ANALYSIS FOR 2 PARTICIPANT(S)" in output
        assert "Ben (UTC)" in output
        assert "✅ OVERLAP WINDOW: 08:00 - 12:30 UTC (4:30 hours)" in output
        assert "⚠️  CONFLICTS (2 total):" in output
        assert "🎯 SUGGESTED TIME SLOTS:" in output
        assert "📅 DAILY BREAKDOWN:" in output
        assert analysis.has_conflicts is True

    def test_report_without_participants(self, engine, capsys):
        CalendarSlotAnalyzer(engine).display_analysis(engine.analyze_conflicts([]))

        assert "No participants selected for analysis." in capsys.readouterr().out
