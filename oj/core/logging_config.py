import logging
import logging.handlers
import os
from datetime import datetime, timezone
from queue import Queue
from typing import Optional, Dict, Any

from oj.core.config import settings

store_events_logger = logging.getLogger("oj.store_events")

startup_timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d_%H-%M-%S")
APP_LOG_FILENAME = f"oj_{startup_timestamp}.log"


def setup_app_logging_worker(log_queue: Queue, log_dir: str) -> logging.handlers.QueueListener:
    os.makedirs(log_dir, exist_ok=True)
    app_handler = logging.handlers.RotatingFileHandler(
        os.path.join(log_dir, APP_LOG_FILENAME), maxBytes=10 * 1024 * 1024, backupCount=5
    )
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    app_handler.setFormatter(formatter)

    listener = logging.handlers.QueueListener(log_queue, app_handler, respect_handler_level=True)
    return listener


def setup_logging(log_dir: Optional[str] = None, level: Optional[str] = None) -> logging.handlers.QueueListener:
    """
    Route every record through a queue to a rotating file in LOG_DIR.

    The returned listener is already started; callers stop it on shutdown.
    """
    log_queue: Queue = Queue(-1)

    root_logger = logging.getLogger()
    root_logger.setLevel(level or settings.LOG_LEVEL)
    root_logger.addHandler(logging.handlers.QueueHandler(log_queue))

    listener = setup_app_logging_worker(log_queue, log_dir or settings.LOG_DIR)
    listener.start()
    return listener


def log_store_event(event_type: str, details: Optional[Dict[str, Any]] = None):
    event_data = {
        "event_type": event_type,
        "details": details or {}
    }
    store_events_logger.info(event_data)
