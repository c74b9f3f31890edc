"""
Logging helpers.

`setup_logging` configures the root logger once from Config; modules call
`get_logger(__name__)`.
"""

import logging
import sys

_configured = False


def setup_logging(config) -> None:
    """Configure root logging from LOG_LEVEL / LOG_FORMAT."""
    global _configured
    if _configured:
        return
    level = getattr(logging, str(config.LOG_LEVEL).upper(), logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(config.LOG_FORMAT))
    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)
    # pymongo is chatty at DEBUG
    logging.getLogger("pymongo").setLevel(max(level, logging.INFO))
    _configured = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
