"""Logging setup for the console application."""

import logging
import os
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

SIMPLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s"
)

LOG_LEVEL_ENV = "LOG_LEVEL"

# The REPL owns stdout, so only warnings reach the terminal by default
DEFAULT_LOG_LEVEL = "WARNING"


def setup_logging(level: Optional[str] = None, log_file: Optional[Path] = None) -> None:
    """Configure the root logger.

    Records go to stderr, or to log_file when one is given, so they never
    interleave with the conversation printed on stdout.

    Args:
        level: Log level override. Falls back to the LOG_LEVEL env var, then WARNING.
        log_file: Optional file that receives the log instead of stderr.
    """
    level_name = (level or os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)).upper()
    log_level = getattr(logging, level_name, logging.WARNING)
    fmt = DETAILED_FORMAT if log_level == logging.DEBUG else SIMPLE_FORMAT

    if log_file is not None:
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)

    logging.basicConfig(
        level=log_level,
        format=fmt,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[handler],
        force=True,
    )

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


@contextmanager
def log_timing(
    logger: logging.Logger, operation: str, level: int = logging.DEBUG
) -> Generator[None, None, None]:
    """Log how long the wrapped block took.

    Example:
        with log_timing(logger, "Chat turn"):
            reply = await agent.chat(...)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        duration_ms = (time.perf_counter() - start) * 1000
        logger.log(level, "%s completed in %.1fms", operation, duration_ms)
