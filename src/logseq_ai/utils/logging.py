"""Structured logging setup for logseq-ai.

Records are JSON lines, one per event, so they can be followed with
`tail -f ~/.cache/logseq-ai/logs/logseq-ai.log | jq .`. DEBUG covers
per-step formatting and plan detail, INFO the applied modifications,
WARNING unusable LLM output or block properties, and ERROR formatting
failures that fell back to the original text.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import structlog


LOG_LEVEL_ENV = "LOGSEQ_AI_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def default_log_file() -> Path:
    return Path.home() / ".cache" / "logseq-ai" / "logs" / "logseq-ai.log"


def _resolve_level(verbose: bool) -> int:
    """Pick the minimum level; unknown names from the environment mean INFO."""
    if verbose:
        return logging.DEBUG
    name = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).strip().upper()
    return LEVELS.get(name, LEVELS[DEFAULT_LOG_LEVEL])


def configure_logging(verbose: bool = False, log_file: Optional[Path] = None) -> None:
    """
    Send structlog output to a JSON lines file.

    Args:
        verbose: Log DEBUG records whatever LOGSEQ_AI_LOG_LEVEL says
        log_file: Destination file (default: ~/.cache/logseq-ai/logs/logseq-ai.log)
    """
    path = log_file or default_log_file()
    path.parent.mkdir(parents=True, exist_ok=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_resolve_level(verbose)),
        logger_factory=structlog.WriteLoggerFactory(file=path.open("a", encoding="utf-8")),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Return the structlog logger for a module (pass `__name__`)."""
    return structlog.get_logger(name)
