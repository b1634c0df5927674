# skill_gomoku/services/logging_service.py

import logging
import threading
from flask import current_app

file_lock = threading.RLock()

logger = logging.getLogger(__name__)

def log_event_to_file(log_entry):
    """Appends one event line to the event log (path from app.config)."""
    log_path = current_app.config['EVENT_LOG_FILE']

    with file_lock:
        try:
            with open(log_path, 'a', encoding='utf-8') as f:
                f.write(log_entry)
        except OSError as e:
            logger.error(f"Failed to write to event log file {log_path}: {e}")
