"""
Logging utilities for the Meeting Scheduler
"""
import logging
import sys
from datetime import datetime
import json

class SchedulerLogger:
    """Custom logger for the Meeting Scheduler"""

    @staticmethod
    def setup_logging(log_level: str = "INFO", log_file: str = None):
        """Setup logging configuration"""

        # Create formatter
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        # Setup root logger
        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

        # Clear existing handlers
        root_logger.handlers.clear()

        # Console handler
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        # File handler (if specified)
        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

        # Suppress some noisy loggers
        logging.getLogger('urllib3').setLevel(logging.WARNING)
        logging.getLogger('werkzeug').setLevel(logging.WARNING)

        return root_logger

    @staticmethod
    def log_request_response(request_id: str, method: str, path: str,
                             status_code: int, processing_time: float):
        """Log one API request/response pair"""
        logger = logging.getLogger(__name__)

        log_entry = {
            "timestamp": datetime.now().isoformat(),
            "request_id": request_id,
            "method": method,
            "path": path,
            "status_code": status_code,
            "processing_time_seconds": round(processing_time, 4)
        }

        logger.info(f"Request processed: {json.dumps(log_entry)}")
