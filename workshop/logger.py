"""
logger.py

Logging setup shared by every workshop module.
Features:
- Color-coded console output
- Rotating file log written through a single queue listener
- Optional JSON-lines log for structured output
"""

import atexit
import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime
from queue import Queue
from typing import Optional

from .constants import LOG_DIR, LOG_JSON, LOG_LEVEL

# ANSI color codes for console output
COLORS = {
    'DEBUG': '\033[36m',    # Cyan
    'INFO': '\033[32m',     # Green
    'WARNING': '\033[33m',  # Yellow
    'ERROR': '\033[31m',    # Red
    'CRITICAL': '\033[41m'  # Red background
}
RESET = '\033[0m'

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

LOG_FILE = os.path.join(LOG_DIR, 'workshop.log')
JSON_LOG_FILE = os.path.join(LOG_DIR, 'workshop.json.log')


class ColoredFormatter(logging.Formatter):
    """Adds a color to the level name on terminals that understand ANSI codes"""

    def format(self, record):
        if not sys.platform.startswith('win') or os.getenv('WT_SESSION'):
            record = logging.makeLogRecord(record.__dict__)
            if record.levelname in COLORS:
                record.levelname = f"{COLORS[record.levelname]}{record.levelname}{RESET}"
        return super().format(record)


class JSONFormatter(logging.Formatter):
    """One JSON object per log line"""

    def format(self, record):
        payload = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        if record.exc_info:
            payload['exception'] = self.formatException(record.exc_info)
        return json.dumps(payload)


_log_queue: Optional[Queue] = None
_queue_listener: Optional[logging.handlers.QueueListener] = None


def _file_queue(max_bytes: int, backup_count: int) -> Queue:
    """Start the process-wide file listener on first use and return its queue."""
    global _log_queue, _queue_listener

    if _log_queue is None:
        os.makedirs(LOG_DIR, exist_ok=True)
        _log_queue = Queue(-1)

        handlers = []
        file_handler = logging.handlers.RotatingFileHandler(
            LOG_FILE, maxBytes=max_bytes, backupCount=backup_count, encoding='utf-8'
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        handlers.append(file_handler)

        if LOG_JSON:
            json_handler = logging.handlers.RotatingFileHandler(
                JSON_LOG_FILE, maxBytes=max_bytes, backupCount=backup_count, encoding='utf-8'
            )
            json_handler.setFormatter(JSONFormatter())
            handlers.append(json_handler)

        _queue_listener = logging.handlers.QueueListener(_log_queue, *handlers, respect_handler_level=True)
        _queue_listener.start()
        atexit.register(_queue_listener.stop)

    return _log_queue


def get_logger(
    name: str,
    level: Optional[str] = None,
    max_bytes: int = 5_242_880,  # 5MB
    backup_count: int = 3,
) -> logging.Logger:
    """
    Get a configured logger instance.

    Args:
        name: Name of the logger (usually __name__)
        level: Log level, defaults to WORKSHOP_LOG_LEVEL
        max_bytes: Max size of each log file before rotation
        backup_count: Number of rotated files to keep

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, (level or LOG_LEVEL).upper()))
    logger.handlers = []

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(console_handler)

    logger.addHandler(logging.handlers.QueueHandler(_file_queue(max_bytes, backup_count)))

    return logger
