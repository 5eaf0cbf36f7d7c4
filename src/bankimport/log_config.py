"""Logging configuration."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(log_level: str = "WARNING") -> None:
    """Configure logging for command-line use.

    Log records go to stderr so they never mix with command output.

    Args:
        log_level: Python log level string (DEBUG, INFO, WARNING, ERROR)
    """
    level = getattr(logging, log_level.upper(), logging.WARNING)
    logging.basicConfig(format=LOG_FORMAT, stream=sys.stderr, level=level)
    logging.getLogger("bankimport").setLevel(level)
