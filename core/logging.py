"""
Logging configuration for maidr.

Two destinations:

  - Console: bare messages for DEBUG/INFO, [LEVEL] prefix for WARNING+.
    DEBUG if verbose, WARNING+ otherwise. Config ``console_format``:
      - "simple": (default) the bare/prefixed format above
      - "full":   same structured format as the file handler
      - "clean":  no console output at all
  - File (only when config ``log_file`` is true): always DEBUG level,
    one file per session in <data dir>/logs/, format
    "timestamp | level | name | render_id | message".

Records can be tagged with ``extra=tagged("layer")`` so callers can
filter on a category ("layer", "render", "fallback", "error").
"""

import logging
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Optional

import config
from config import get_data_dir


LOGGER_NAME = "maidr"

# Log directory
LOG_DIR = get_data_dir() / "logs"


def tagged(tag: str) -> dict:
    """Return ``extra`` dict for logger calls: ``logger.debug("...", extra=tagged("x"))``."""
    return {"log_tag": tag}


# Module-level state (shared across re-inits)
_render_filter: Optional["_RenderFilter"] = None
_current_log_file: Optional[Path] = None


class _RenderFilter(logging.Filter):
    """Injects the id of the document being built into every log record."""

    def __init__(self) -> None:
        super().__init__()
        self.render_id = ""

    def filter(self, record: logging.LogRecord) -> bool:
        record.render_id = self.render_id or "-"
        if not hasattr(record, "log_tag"):
            record.log_tag = ""
        return True


class _ConsoleFormatter(logging.Formatter):
    """Console formatter: shows [LEVEL] prefix only for WARNING and above."""

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno >= logging.WARNING:
            return f"  [{record.levelname}] {record.getMessage()}"
        return f"  {record.getMessage()}"


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure the maidr logger.

    Args:
        verbose: If True, show DEBUG level on console; otherwise WARNING+ only

    Returns:
        Configured logger instance
    """
    global _render_filter, _current_log_file

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)  # Capture everything, filter at handler level

    # Clear existing handlers (in case of re-init)
    logger.handlers.clear()
    logger.propagate = False

    # Reuse the filter instance so the render id survives re-inits
    if _render_filter is None:
        _render_filter = _RenderFilter()
    logger.addFilter(_render_filter)

    file_format = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(render_id)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    if config.get("log_file", config.LOG_FILE):
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        session_timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        log_file = LOG_DIR / f"maidr_{session_timestamp}.log"
        _current_log_file = log_file
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(file_format)
        logger.addHandler(file_handler)

    console_format = config.get("console_format", config.CONSOLE_FORMAT)
    if console_format != "clean":
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
        if console_format == "full":
            console_handler.setFormatter(file_format)
        else:
            console_handler.setFormatter(_ConsoleFormatter())
        logger.addHandler(console_handler)
    else:
        # Keep the "last resort" handler from printing warnings
        logger.addHandler(logging.NullHandler())

    return logger


def get_logger() -> logging.Logger:
    """Get the maidr logger instance.

    Returns:
        The maidr logger (creates with defaults if not configured)
    """
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        return setup_logging(verbose=False)
    return logger


def set_render_id(render_id: str) -> None:
    """Set the document id included in all subsequent log lines."""
    global _render_filter
    if _render_filter is None:
        _render_filter = _RenderFilter()
    _render_filter.render_id = render_id


def log_error(
    message: str,
    exc: Optional[Exception] = None,
    context: Optional[dict] = None,
) -> None:
    """Log an error with full details including stack trace.

    Args:
        message: Error description
        exc: Optional exception to include stack trace from
        context: Optional dict of additional context (layer index, type, etc.)
    """
    logger = get_logger()

    lines = [message]

    if context:
        lines.append("Context:")
        for key, value in context.items():
            lines.append(f"  {key}: {value}")

    if exc:
        lines.append(f"Exception type: {type(exc).__name__}")
        lines.append(f"Exception message: {exc}")
        lines.append("Stack trace:")
        lines.append("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))

    logger.error("\n".join(lines), extra=tagged("error"))


def get_current_log_path() -> Optional[Path]:
    """Return the path to the current session's log file, if file logging is on."""
    return _current_log_file
