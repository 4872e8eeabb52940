"""
Configuration - Environment-driven settings and logging setup.
"""

import logging
import os
import sys


# Environment configuration
ZOONDO_ENV = os.getenv("ZOONDO_ENV", "development")
LOG_LEVEL = os.getenv("ZOONDO_LOG_LEVEL", "INFO").upper()
COMBAT_DELAY = float(os.getenv("ZOONDO_COMBAT_DELAY", "5.0"))
TURN_TIMER = int(os.getenv("ZOONDO_TURN_TIMER", "30"))
SESSION_MAX_AGE = int(os.getenv("ZOONDO_SESSION_MAX_AGE", "3600"))
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger for console output."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
        datefmt='%H:%M:%S',
    ))

    root_logger = logging.getLogger()
    root_logger.setLevel(level or LOG_LEVEL)
    root_logger.addHandler(handler)

    # Keep access logs quiet
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
