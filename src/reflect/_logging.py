"""Logging configuration for reflect.

Usage in other modules:
    import logging
    log = logging.getLogger(__name__)

The log level can be configured via the REFLECT_LOG_LEVEL environment variable
(DEBUG, INFO, WARNING, ERROR). Defaults to INFO.
"""

import logging
import os
import sys

# Name given to the stderr handler installed by configure_logging()
HANDLER_NAME = "reflect-stderr"


def configure_logging(level_name: str | None = None) -> None:
    """Configure logging for the reflect package.

    Call this once at application startup (cli.py or the API server).
    Later calls only change the level, and only when `level_name` is given.

    Args:
        level_name: Overrides REFLECT_LOG_LEVEL when given.
    """
    root_logger = logging.getLogger("reflect")
    installed = [h for h in root_logger.handlers if h.get_name() == HANDLER_NAME]

    if installed and level_name is None:
        return

    level_name = (level_name or os.environ.get("REFLECT_LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    root_logger.setLevel(level)

    if installed:
        for handler in installed:
            handler.setLevel(level)
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    root_logger.addHandler(handler)

    # Avoid duplicate lines when uvicorn also configures the root logger
    root_logger.propagate = False
