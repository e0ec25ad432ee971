"""Logging setup for cower - stderr handler, excepthook, and level control."""

from __future__ import annotations

import logging
import sys
import traceback

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: int = logging.WARNING, verbose: bool = False) -> None:
    """Configure the ``cower`` logger and install the excepthook.

    ``verbose`` additionally turns on debug output from the HTTP stack.
    """
    root = logging.getLogger("cower")
    root.setLevel(level)

    # Avoid duplicate handlers
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
        root.addHandler(handler)
    else:
        # stderr may have been replaced since the first call
        for handler in root.handlers:
            if isinstance(handler, logging.StreamHandler):
                handler.setStream(sys.stderr)

    if verbose:
        http_log = logging.getLogger("urllib3")
        http_log.setLevel(logging.DEBUG)
        if not http_log.handlers:
            http_log.addHandler(root.handlers[0])

    sys.excepthook = _excepthook


def _excepthook(exc_type: type, exc_value: BaseException, exc_tb) -> None:
    """Log uncaught exceptions before handing them to the default hook."""
    lines = traceback.format_exception(exc_type, exc_value, exc_tb)
    msg = "".join(lines)
    logger = logging.getLogger("cower")
    logger.critical("Uncaught exception:\n%s", msg)
    sys.__excepthook__(exc_type, exc_value, exc_tb)


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name."""
    return logging.getLogger(f"cower.{name}")
