"""
Logging configuration for Bundle Insight.

Terminal output goes through rich. An optional log file receives one JSON
object per record; records emitted with ``log_warning`` carry the structured
``AnalysisWarning`` payload (code, message, context) under ``"warning"``.
"""

import json
import logging
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "bundle_insight"

# LogRecord attribute holding an AnalysisWarning.to_json() payload
WARNING_ATTR = "analysis_warning"


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record, for machine-readable log files."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        warning = getattr(record, WARNING_ATTR, None)
        if warning is not None:
            payload["warning"] = warning
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure logging with rich handler for colored output.

    Args:
        verbose: Enable DEBUG level logging
        quiet: Suppress all but ERROR level logging on the terminal
        log_file: Optional file path; receives JSON lines at DEBUG level
            regardless of terminal verbosity

    Returns:
        Configured logger instance for bundle_insight
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    terminal = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        markup=False,
        show_time=True,
        show_path=verbose,
    )
    terminal.setLevel(level)
    handlers: list[logging.Handler] = [terminal]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JsonLineFormatter())
        handlers.append(file_handler)

    logging.basicConfig(format="%(message)s", datefmt="[%X]", handlers=handlers, force=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if log_file else level)

    return logger


def log_warning(logger: logging.Logger, warning: Any, level: int = logging.WARNING) -> None:
    """Log an AnalysisWarning with its structured payload attached."""
    logger.log(level, str(warning), extra={WARNING_ATTR: warning.to_json()})


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Module name (e.g., 'bundle_insight.graph.builder')
              If None, returns the root bundle_insight logger

    Returns:
        Logger instance
    """
    if name is None:
        return logging.getLogger(LOGGER_NAME)

    if not name.startswith(LOGGER_NAME):
        name = f"{LOGGER_NAME}.{name}"

    return logging.getLogger(name)
