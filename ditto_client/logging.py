"""
Logging setup for the Ditto client.

Library modules log through ``logging.getLogger(__name__)``; applications (and
the ``ditto`` CLI) call ``setup_logging`` once to install the formatter below.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any


class DittoFormatter(logging.Formatter):
    """Compact single-line formatter with level markers and ``key=value`` extras."""

    LEVEL_MARKERS = {
        "DEBUG": "🔍",
        "INFO": "ℹ️",
        "WARNING": "⚠️",
        "ERROR": "❌",
        "CRITICAL": "🚨",
    }

    COLORS = {
        "DEBUG": "\033[90m",  # Gray
        "INFO": "\033[36m",  # Cyan
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",
    }

    def __init__(self, use_color: bool | None = None):
        super().__init__()
        if use_color is None:
            use_color = hasattr(sys.stderr, "isatty") and sys.stderr.isatty()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        marker = self.LEVEL_MARKERS.get(record.levelname, "📝")
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        message = f"[{timestamp}] {marker}  {record.name}: {record.getMessage()}"

        extra_data = getattr(record, "extra_data", None)
        if extra_data:
            pairs = ", ".join(f"{key}={value}" for key, value in extra_data.items())
            message += f" ({pairs})"

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        if self.use_color:
            color = self.COLORS.get(record.levelname, "")
            message = f"{color}{message}{self.COLORS['RESET']}"

        return message


class StructuredLogger:
    """
    Thin wrapper over a stdlib logger that accepts structured keyword data.

    ``log.info("container started", name="ditto-edge")`` renders as
    ``... container started (name=ditto-edge)`` with ``DittoFormatter``.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs: Any) -> None:
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, extra_data: dict[str, Any]) -> None:
        if not self.logger.isEnabledFor(level):
            return
        record = self.logger.makeRecord(
            self.logger.name, level, __file__, 0, message, (), None
        )
        record.extra_data = extra_data
        self.logger.handle(record)


def setup_logging(level: str = "INFO", log_file: Path | None = None) -> None:
    """
    Configure root logging for an application using the client.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file to also write plain-text logs to
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(DittoFormatter())
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        root_logger.addHandler(file_handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(
        max(logging.WARNING, root_logger.level)
    )


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger for a module (typically ``__name__``)."""
    return StructuredLogger(name)
