"""
Logging for the Mixtape API.

One root configuration shared by the routes, the playlist service and the
Spotify client. Level and optional log file come from LOG_LEVEL / LOG_FILE
unless passed in explicitly.
"""

import logging
import os
import sys
from typing import Optional


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries that log every HTTP request or SQL statement at INFO/DEBUG
NOISY_LOGGERS = ("urllib3", "spotipy", "sqlalchemy.engine")


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """
    Replace the root logger's handlers with stdout (and optionally a file).

    Args:
        level: level name; falls back to LOG_LEVEL, then INFO. Unknown names mean INFO.
        log_file: path of an extra log file; falls back to LOG_FILE. Parent
            directories are created.
    """
    level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    log_file = log_file or os.getenv("LOG_FILE") or None
    log_level = getattr(logging, level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.addHandler(_handler(logging.StreamHandler(sys.stdout), log_level))

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        root_logger.addHandler(_handler(logging.FileHandler(log_file), log_level))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.info(f"Logging configured: level={level}, file={log_file or 'console only'}")
