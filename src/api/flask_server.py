"""
Flask API server for the Meeting Scheduler
"""
import logging
import time
from flask import Flask, request, jsonify, g
from flask_cors import CORS
from threading import Thread
import signal
import sys
import uuid
from datetime import timedelta

from config.settings import Config
from src.scheduler.models import format_utc
from src.scheduler.participant_service import ParticipantService
from src.scheduler.scheduling_engine import SchedulingEngine
from src.scheduler.timezone_offset import add_clamped
from src.store.base import SchedulingStore
from src.store.memory_store import InMemoryStore
from utils.logger import SchedulerLogger
from utils.validators import RequestValidator, DataSanitizer

logger = logging.getLogger(__name__)

class SchedulerAPI:
    """
    Flask API server exposing participants, meetings, slot search and
    conflict analysis
    """

    def __init__(self, store: SchedulingStore = None, engine: SchedulingEngine = None,
                 install_signal_handlers: bool = True):
        self.config = Config()
        self.api_config = self.config.get_api_config()
        self.app = Flask(__name__)
        CORS(self.app)  # Enable CORS for cross-origin requests

        self.store = store or InMemoryStore()
        self.engine = engine or SchedulingEngine(self.store)
        self.participants = ParticipantService(self.store)

        # Request counters for /status
        self.received_requests = 0
        self.failed_requests = 0
        self.start_time = None

        self._setup_request_hooks()
        self._setup_routes()

        if install_signal_handlers:
            self._setup_signal_handlers()

    def _setup_request_hooks(self):
        @self.app.before_request
        def start_timer():
            g.request_id = str(uuid.uuid4())
            g.started_at = time.time()

        @self.app.after_request
        def log_request(response):
            processing_time = time.time() - g.get("started_at", time.time())
            self.received_requests += 1
            if response.status_code >= 500:
                self.failed_requests += 1

            SchedulerLogger.log_request_response(
                g.get("request_id", "unknown"), request.method, request.path,
                response.status_code, processing_time
            )
            if processing_time > self.api_config["slow_request_seconds"]:
                logger.warning(f"⚠️  Processing time ({processing_time:.2f}s) exceeded "
                               f"limit ({self.api_config['slow_request_seconds']}s) for {request.path}")
            return response

    def _setup_routes(self):
        """Setup Flask routes"""

        @self.app.route('/health', methods=['GET'])
        def health_check():
            """Health check endpoint"""
            return jsonify({
                "status": "healthy",
                "timestamp": format_utc(self.engine.clock())
            })

        @self.app.route('/status', methods=['GET'])
        def get_status():
            """Get server status and statistics"""
            return jsonify({
                "status": "running",
                "requests_processed": self.received_requests,
                "requests_failed": self.failed_requests,
                "uptime": time.time() - self.start_time if self.start_time else 0,
                "participants": len(self.store.list_participants()),
                "meetings": len(self.store.list_meetings())
            })

        # Participants

        @self.app.route('/api/users', methods=['GET'])
        def list_users():
            return jsonify([p.to_dict() for p in self.participants.list_participants()])

        @self.app.route('/api/users', methods=['POST'])
        def create_user():
            data = request.get_json(silent=True)
            if not isinstance(data, dict):
                return _bad_request("No JSON data provided")

            errors = RequestValidator.validate_user_request(data)
            if errors:
                return _bad_request("Invalid user", errors)

            participant = self.participants.create_participant(
                DataSanitizer.sanitize_text(data["name"]),
                DataSanitizer.sanitize_timezone(data.get("timeZone"))
            )
            return jsonify(participant.to_dict()), 201

        @self.app.route('/api/users/<user_id>', methods=['GET'])
        def get_user(user_id):
            participant = self.participants.get_participant(user_id)
            if participant is None:
                return jsonify({"error": "User not found"}), 404
            return jsonify(participant.to_dict())

        @self.app.route('/api/users/<user_id>', methods=['PUT'])
        def update_user(user_id):
            data = request.get_json(silent=True)
            if not isinstance(data, dict):
                return _bad_request("No JSON data provided")

            errors = RequestValidator.validate_user_request(data)
            if errors:
                return _bad_request("Invalid user", errors)

            updated = self.participants.update_participant(
                user_id,
                DataSanitizer.sanitize_text(data["name"]),
                DataSanitizer.sanitize_timezone(data.get("timeZone"))
            )
            if not updated:
                return jsonify({"error": "User not found"}), 404
            return "", 204

        @self.app.route('/api/users/<user_id>', methods=['DELETE'])
        def delete_user(user_id):
            if not self.participants.delete_participant(user_id):
                return jsonify({"error": "User not found"}), 404
            return "", 204

        # Meetings

        @self.app.route('/api/meetings', methods=['GET'])
        def list_meetings():
            return jsonify([m.to_dict() for m in self.engine.list_meetings()])

        @self.app.route('/api/meetings/<meeting_id>', methods=['DELETE'])
        def delete_meeting(meeting_id):
            if not self.engine.delete_meeting(meeting_id):
                return jsonify({"error": "Meeting not found"}), 404
            return "", 204

        @self.app.route('/api/meetings/schedule', methods=['POST'])
        def schedule_meeting():
            """Book a meeting or return alternatives"""
            data = request.get_json(silent=True)
            if not isinstance(data, dict):
                return _bad_request("No JSON data provided")

            errors = RequestValidator.validate_schedule_request(data)
            if errors:
                return _bad_request("Invalid schedule request", errors)

            participant_ids, _ = RequestValidator.parse_participant_ids(data.get("participantIds"))
            logger.info(f"🚀 RECEIVED SCHEDULE REQUEST: {data.get('title', 'N/A')}")
            logger.info(f"   👥 Participants: {len(participant_ids)} people")

            try:
                result = self.engine.schedule_meeting(
                    DataSanitizer.sanitize_text(data.get("title")),
                    RequestValidator.parse_datetime(data["startTime"]),
                    RequestValidator.parse_datetime(data["endTime"]),
                    participant_ids
                )
            except Exception as e:
                logger.error(f"Error scheduling meeting: {e}")
                return jsonify({"error": "Internal server error"}), 500

            if result.success:
                status = 200
            elif result.suggestions:
                status = 409
            else:
                status = 400
            return jsonify(result.to_dict()), status

        @self.app.route('/api/meetings/available-slots', methods=['GET'])
        def available_slots():
            """Free slots for a group, e.g. ?participantIds=a,b&durationMinutes=45"""
            participant_ids, errors = RequestValidator.parse_participant_ids(
                request.args.getlist("participantIds")
            )
            if errors:
                return _bad_request("Invalid participant ids", errors)
            if not participant_ids:
                return _bad_request("At least one participant ID is required.")

            duration, duration_error = RequestValidator.parse_duration(
                request.args.get("durationMinutes"), self.config.DEFAULT_SLOT_DURATION
            )
            if duration_error:
                return _bad_request("Invalid duration", [duration_error])

            try:
                start_date = _optional_datetime(request.args.get("startDate")) or self.engine.clock()
                end_date = (_optional_datetime(request.args.get("endDate"))
                            or add_clamped(start_date, timedelta(days=self.config.SUGGESTION_SEARCH_DAYS)))
            except ValueError as e:
                return _bad_request("Invalid date range", [str(e)])

            try:
                slots = self.engine.find_available_time_slots(participant_ids, start_date, end_date, duration)
            except Exception as e:
                logger.error(f"Error finding available slots: {e}")
                return jsonify({"error": "Internal server error"}), 500

            return jsonify([slot.to_dict() for slot in slots])

        @self.app.route('/api/meetings/analyze-conflicts', methods=['POST'])
        def analyze_conflicts():
            """Conflict and overlap report for a group"""
            data = request.get_json(silent=True)
            if not isinstance(data, dict):
                return _bad_request("No JSON data provided")

            errors = RequestValidator.validate_analysis_request(data)
            if errors:
                return _bad_request("Invalid analysis request", errors)

            participant_ids, _ = RequestValidator.parse_participant_ids(data.get("participantIds"))
            if not participant_ids:
                return _bad_request("At least one participant ID is required.")

            duration, _ = RequestValidator.parse_duration(
                data.get("durationMinutes"), self.config.DEFAULT_ANALYSIS_DURATION
            )

            try:
                analysis = self.engine.analyze_conflicts(
                    participant_ids,
                    start_date=_optional_datetime(data.get("startDate")),
                    end_date=_optional_datetime(data.get("endDate")),
                    meeting_start=_optional_datetime(data.get("meetingStartTime")),
                    meeting_end=_optional_datetime(data.get("meetingEndTime")),
                    duration_minutes=duration
                )
            except Exception as e:
                logger.error(f"Error analyzing conflicts: {e}")
                return jsonify({"error": "Internal server error"}), 500

            return jsonify(analysis.to_dict())

        @self.app.errorhandler(404)
        def not_found(error):
            return jsonify({"error": "Endpoint not found"}), 404

        @self.app.errorhandler(405)
        def method_not_allowed(error):
            return jsonify({"error": "Method not allowed"}), 405

        @self.app.errorhandler(500)
        def internal_error(error):
            logger.error(f"Unhandled error: {getattr(error, 'original_exception', error)}")
            return jsonify({"error": "Internal server error"}), 500

    def _setup_signal_handlers(self):
        """Setup graceful shutdown handlers"""
        def signal_handler(signum, frame):
            logger.info(f"Received signal {signum}, shutting down gracefully...")
            self.shutdown()
            sys.exit(0)

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

    def run(self, host=None, port=None, debug=False):
        """Run the Flask server"""
        host = host or self.api_config["host"]
        port = port or self.api_config["port"]

        self.start_time = time.time()

        logger.info(f"Starting Meeting Scheduler API server on {host}:{port}")
        logger.info(f"Working hours: {self.config.working_hours_label()} local time")

        try:
            self.app.run(
                host=host,
                port=port,
                debug=debug,
                threaded=True,  # Enable threading for concurrent requests
                use_reloader=False  # Disable reloader in production
            )
        except Exception as e:
            logger.error(f"Failed to start server: {e}")
            raise

    def run_background(self, host=None, port=None):
        """Run the Flask server in background thread"""
        def run_server():
            self.run(host, port, debug=False)

        server_thread = Thread(target=run_server, daemon=True)
        server_thread.start()
        logger.info("Flask server started in background")
        return server_thread

    def shutdown(self):
        """Graceful shutdown"""
        logger.info(f"Shutting down Meeting Scheduler API server after "
                    f"{self.received_requests} request(s)...")


def _bad_request(message: str, details=None):
    return jsonify({"error": message, "details": list(details or [])}), 400


def _optional_datetime(value):
    if value is None or value == "":
        return None
    return RequestValidator.parse_datetime(value)


def create_app(store: SchedulingStore = None) -> Flask:
    """Factory function to create Flask app"""
    api = SchedulerAPI(store, install_signal_handlers=False)
    return api.app

def main():
    """Run the API server from the command line"""
    import argparse

    parser = argparse.ArgumentParser(description='Meeting Scheduler API Server')
    parser.add_argument('--host', help='Host to bind to')
    parser.add_argument('--port', type=int, help='Port to bind to')
    parser.add_argument('--debug', action='store_true', help='Enable debug mode')
    parser.add_argument('--demo', action='store_true', help='Seed demo participants')

    api_config = Config.get_api_config()
    parser.set_defaults(host=api_config["host"], port=api_config["port"])

    args = parser.parse_args()

    SchedulerLogger.setup_logging(Config.LOG_LEVEL, Config.LOG_FILE)
    store = InMemoryStore.with_demo_data() if args.demo else InMemoryStore()
    api = SchedulerAPI(store)
    api.run(host=args.host, port=args.port, debug=args.debug)

if __name__ == '__main__':
    main()
