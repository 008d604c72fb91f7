"""Log output for applications and scripts using tissuegraph.

Library modules only create loggers under the ``tissuegraph`` namespace.
The face engine reports rebuild summaries and rejected splits at INFO and
each split, merge and pruned cell at DEBUG.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import IO, List, Optional, Union

PACKAGE_LOGGER = "tissuegraph"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_installed: List[logging.Handler] = []


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """Send tissuegraph log records to *stream* and optionally *log_file*.

    Args:
        level: Threshold for the package logger and its handlers.
        log_file: Path of a log file, overwritten on each call.
        stream: Console stream; stdout when omitted.

    Handlers from an earlier call are closed and replaced, handlers added
    by other code are left alone.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    while _installed:
        handler = _installed.pop()
        logger.removeHandler(handler)
        handler.close()

    handlers: List[logging.Handler] = [logging.StreamHandler(stream or sys.stdout)]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S")
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        _installed.append(handler)

    logger.setLevel(level)
    return logger
