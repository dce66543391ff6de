#!/usr/bin/env python3
"""
Main entry point for the Meeting Scheduler

This script runs the API server, smoke-tests a running server, or processes
a single scheduling request file. It can also be used as a library.
"""

import sys
import json
import logging
from pathlib import Path
from typing import Dict, Any

# Add the project directory to the Python path
sys.path.insert(0, str(Path(__file__).parent))

from config.settings import Config
from src.api.flask_server import SchedulerAPI
from src.scheduler.models import ConflictAnalysis
from src.scheduler.scheduling_engine import SchedulingEngine
from src.store.memory_store import InMemoryStore
from utils.calendar_slot_analyzer import CalendarSlotAnalyzer
from utils.logger import SchedulerLogger
from utils.validators import RequestValidator

logger = logging.getLogger(__name__)

REQUEST_TYPES = ("schedule", "available-slots", "analyze-conflicts")

def process_request(request_data: Dict[str, Any]):
    """
    Run one request against an in-memory store built from the same file.

    Input format:

        {"participants": [{"id", "name", "timeZone"}],
         "meetings": [{"id", "title", "startTime", "endTime", "participantIds"}],
         "request": {"type": "schedule" | "available-slots" | "analyze-conflicts", ...}}

    The request body uses the same camelCase fields as the HTTP API.
    Returns (engine, result object).
    """
    store = InMemoryStore.from_dict(request_data)
    engine = SchedulingEngine(store)

    body = request_data.get("request") or {}
    request_type = body.get("type")
    if request_type not in REQUEST_TYPES:
        raise ValueError(f"Unknown request type: {request_type!r} (expected one of {', '.join(REQUEST_TYPES)})")

    participant_ids, errors = RequestValidator.parse_participant_ids(body.get("participantIds"))
    if errors:
        raise ValueError("; ".join(errors))

    logger.info(f"Processing {request_type} request for {len(participant_ids)} participant(s)")

    if request_type == "schedule":
        return engine, engine.schedule_meeting(
            body.get("title"),
            RequestValidator.parse_datetime(body["startTime"]),
            RequestValidator.parse_datetime(body["endTime"]),
            participant_ids
        )

    if request_type == "available-slots":
        duration, error = RequestValidator.parse_duration(body.get("durationMinutes"), Config.DEFAULT_SLOT_DURATION)
        if error:
            raise ValueError(error)
        return engine, engine.find_available_time_slots(
            participant_ids,
            RequestValidator.parse_datetime(body["startDate"]),
            RequestValidator.parse_datetime(body["endDate"]),
            duration
        )

    duration, error = RequestValidator.parse_duration(body.get("durationMinutes"), Config.DEFAULT_ANALYSIS_DURATION)
    if error:
        raise ValueError(error)
    return engine, engine.analyze_conflicts(
        participant_ids,
        start_date=_optional_datetime(body.get("startDate")),
        end_date=_optional_datetime(body.get("endDate")),
        meeting_start=_optional_datetime(body.get("meetingStartTime")),
        meeting_end=_optional_datetime(body.get("meetingEndTime")),
        duration_minutes=duration
    )

def _optional_datetime(value):
    return RequestValidator.parse_datetime(value) if value else None

def _result_to_json(result) -> Any:
    if isinstance(result, list):
        return [item.to_dict() for item in result]
    return result.to_dict()

def run_server(host=None, port=None, demo=False):
    """Run the Flask API server"""
    SchedulerLogger.setup_logging(log_level=Config.LOG_LEVEL, log_file=Config.LOG_FILE)

    logger.info("Starting Meeting Scheduler...")

    try:
        store = InMemoryStore.with_demo_data() if demo else InMemoryStore()
        api = SchedulerAPI(store)
        api.run(host=host, port=port)
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
    except Exception as e:
        logger.error(f"Server error: {e}")
        raise

def run_tests(api_url="http://localhost:5000"):
    """Run smoke tests against a running server"""
    from tests.test_client import SchedulerTestClient

    SchedulerLogger.setup_logging(log_level="INFO")

    logger.info(f"Running tests against {api_url}")

    client = SchedulerTestClient(api_url)
    results = client.run_test_suite()

    # Print results
    summary = results["summary"]
    print(f"\nTest Results:")
    print(f"  Total: {summary['total']}")
    print(f"  Passed: {summary['passed']}")
    print(f"  Failed: {summary['failed']}")
    print(f"  Success rate: {(summary['passed']/summary['total']*100) if summary['total'] > 0 else 0:.1f}%")
    print(f"  Avg response time: {summary['avg_response_time']:.2f}s")

    return results

def main():
    """Main CLI entry point"""
    import argparse

    parser = argparse.ArgumentParser(description='Meeting Scheduler')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Server command
    server_parser = subparsers.add_parser('server', help='Run API server')
    api_config = Config.get_api_config()
    server_parser.add_argument('--host', default=api_config["host"], help='Host to bind to')
    server_parser.add_argument('--port', type=int, default=api_config["port"], help='Port to bind to')
    server_parser.add_argument('--demo', action='store_true', help='Seed demo participants')

    # Test command
    test_parser = subparsers.add_parser('test', help='Run smoke tests against a running server')
    test_parser.add_argument('--url', default='http://localhost:5000', help='API URL to test')

    # Process command (for single request)
    process_parser = subparsers.add_parser('process', help='Process single request')
    process_parser.add_argument('input_file', help='Input JSON file')
    process_parser.add_argument('--output', help='Output JSON file')
    process_parser.add_argument('--report', action='store_true',
                                help='Print a readable report for analyze-conflicts requests')

    args = parser.parse_args()

    if args.command == 'server':
        run_server(host=args.host, port=args.port, demo=args.demo)

    elif args.command == 'test':
        results = run_tests(api_url=args.url)
        sys.exit(0 if results["summary"]["failed"] == 0 else 1)

    elif args.command == 'process':
        SchedulerLogger.setup_logging(log_level=Config.LOG_LEVEL, log_file=Config.LOG_FILE)

        with open(args.input_file, 'r') as f:
            request_data = json.load(f)

        try:
            engine, result = process_request(request_data)
        except (KeyError, ValueError) as e:
            logger.error(f"Invalid request file {args.input_file}: {e}")
            sys.exit(2)

        if args.report and isinstance(result, ConflictAnalysis):
            CalendarSlotAnalyzer(engine).display_analysis(result)
        elif args.output:
            with open(args.output, 'w') as f:
                json.dump(_result_to_json(result), f, indent=2)
        else:
            print(json.dumps(_result_to_json(result), indent=2))

    else:
        parser.print_help()

if __name__ == '__main__':
    main()
