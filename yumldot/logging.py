"""Structured logging for yumldot.

Everything is written to stderr: ``yumldot compile`` prints DOT on stdout
and log lines must never end up inside a diagram.
"""

import sys
import logging
from pathlib import Path
from typing import Optional
import structlog

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def build_processors(json_format: bool = False, colors: bool = False) -> list:
    """Processor chain shared by console and file output."""
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=colors))
    return processors


def add_file_handler(log_file: str, level: int) -> Path:
    """Mirror log records into ``log_file``, creating its directory."""
    log_path = Path(log_file).expanduser()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(log_path)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logging.getLogger().addHandler(handler)
    return log_path


def setup_logging(
    level: str = "WARNING",
    log_file: Optional[str] = None,
    json_format: bool = False
):
    """Configure structlog on top of stdlib logging.

    Safe to call more than once; the CLI calls it before and after the
    config file is read.

    Args:
        level: One of LOG_LEVELS; unknown names fall back to WARNING
        log_file: Optional path that also receives every record
        json_format: Emit JSON lines instead of the console format
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    # force=True drops handlers from any earlier call
    logging.basicConfig(format="%(message)s", level=numeric_level, stream=sys.stderr, force=True)

    structlog.configure(
        processors=build_processors(json_format, colors=sys.stderr.isatty()),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    if log_file:
        add_file_handler(log_file, numeric_level)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a logger bound to ``name`` (typically __name__)."""
    return structlog.get_logger(name)
