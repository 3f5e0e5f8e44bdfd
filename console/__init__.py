"""
Console bindings: logging setup, interactive confirmation and the REPL.
"""

from .app import ConsoleApp, extract_mentions, main, main_async, parse_args
from .confirmation import ConsoleConfirmationChannel, parse_answer
from .logging_config import log_timing, setup_logging

__all__ = [
    "ConsoleApp",
    "ConsoleConfirmationChannel",
    "extract_mentions",
    "main",
    "main_async",
    "parse_answer",
    "parse_args",
    "log_timing",
    "setup_logging",
]
