"""
Logging utilities with contact-detail redaction.

Provides a logging setup that:
- Masks e-mail addresses that leak into log messages from submissions
- Supports both console and file output
- Configurable log levels
- Includes timestamps and module names
"""

from __future__ import annotations

import logging
import re
import sys
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from formguard.config import Config


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


class RedactionFilter(logging.Filter):
    """
    Logging filter that redacts e-mail addresses.

    Form submissions routinely carry the sender's address, and reasons or
    debug output may quote submitted text. Any address found in a record's
    message or string arguments is replaced with [REDACTED].
    """

    EMAIL_PATTERN = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")

    def _redact(self, value: str) -> str:
        return self.EMAIL_PATTERN.sub("[REDACTED]", value)

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Filter a log record, redacting e-mail addresses.

        Args:
            record: The log record to filter

        Returns:
            bool: Always True (we modify, not filter out)
        """
        if isinstance(record.msg, str):
            record.msg = self._redact(record.msg)

        if record.args:
            if isinstance(record.args, dict):
                record.args = {
                    k: self._redact(v) if isinstance(v, str) else v
                    for k, v in record.args.items()
                }
            elif isinstance(record.args, tuple):
                record.args = tuple(
                    self._redact(arg) if isinstance(arg, str) else arg
                    for arg in record.args
                )

        return True


class LevelColorFormatter(logging.Formatter):
    """
    Console formatter that colors the level name.

    Spam verdicts are logged at INFO and detector detail at DEBUG, so
    coloring the level alone keeps the reason text readable. Colors are
    only used when the target stream is a terminal.
    """

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[1;31m",
    }
    RESET = "\033[0m"

    def __init__(self, fmt: str | None = None, stream: TextIO | None = None) -> None:
        """
        Initialize the formatter.

        Args:
            fmt: Log format string
            stream: Stream the handler writes to; colors are off unless it is a TTY
        """
        super().__init__(fmt)
        stream = stream if stream is not None else sys.stderr
        self.use_colors = hasattr(stream, "isatty") and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelname) if self.use_colors else None
        if not color:
            return super().format(record)
        # Other handlers see the same record; color a copy
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def setup_logging(config: Config) -> None:
    """
    Set up logging for the classifier.

    Configures:
    - Console handler with colored level names
    - Optional file handler
    - Redaction filter on all handlers

    Args:
        config: Configuration with log settings
    """
    logger = logging.getLogger("formguard")
    logger.setLevel(getattr(logging, config.log_level, logging.INFO))

    # Remove existing handlers
    logger.handlers.clear()

    redaction_filter = RedactionFilter()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG)
    console_handler.setFormatter(LevelColorFormatter(LOG_FORMAT, console_handler.stream))
    console_handler.addFilter(redaction_filter)
    logger.addHandler(console_handler)

    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        file_handler.addFilter(redaction_filter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized with level %s", config.log_level)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Args:
        name: Module name (usually __name__)

    Returns:
        logging.Logger: Logger under the formguard namespace
    """
    if not name.startswith("formguard"):
        name = f"formguard.{name}"
    return logging.getLogger(name)
