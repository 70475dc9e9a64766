"""
System Reporter - leveled logging with context and key/value fields.

Logs to stdout always and to a file when a log directory is given.
"""

import logging
import os
import sys
from typing import Any, Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class SystemReporter:
    """
    Logger with verbose filtering and structured fields.

    Verbose Levels:
        0 = Critical only (always visible)
        1 = Important messages (default)
        2 = Detailed information
        3 = Debug/verbose

    Example:
        reporter = SystemReporter(name="api", level=logging.DEBUG)
        reporter.info("Listening", context="Startup", port=8080)
        # 2025-01-01 12:00:00 | INFO     | [Startup] Listening port=8080
    """

    def __init__(
        self,
        name: str = "regisseur",
        log_dir: Optional[str] = None,
        level: int = logging.INFO,
        verbose: int = 1,
    ) -> None:
        """
        Initialize SystemReporter.

        Args:
            name: Logger name (used for filename if log_dir provided)
            log_dir: Directory for log files. If None, logs to stdout only.
            level: Python logging level
            verbose: Verbosity filter (0-3)
        """
        self.name = name
        self.verbose = max(0, min(3, verbose))
        self.log_file: Optional[str] = None
        self._init_logger(name, log_dir, level)

    def _init_logger(
        self, name: str, log_dir: Optional[str], level: int
    ) -> None:
        """
        Initialize logger with console and optional file handlers.

        Args:
            name: Logger name
            log_dir: Log directory path (None = stdout only)
            level: Python logging level
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)
        self.logger.handlers.clear()
        self.logger.propagate = False

        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            self.log_file = os.path.join(
                os.path.abspath(log_dir), f"{name}.log"
            )
            file_handler = logging.FileHandler(self.log_file, encoding="utf-8")
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    def set_verbose(self, level: int) -> None:
        """Update verbosity level."""
        self.verbose = max(0, min(3, level))
        self.info(
            f"Verbosity set to {self.verbose}",
            context="SystemReporter",
            verbose_level=0,
        )

    def _should_log(self, verbose_level: int) -> bool:
        """Check if message should be logged."""
        return self.verbose >= verbose_level

    @staticmethod
    def _format(msg: str, context: str, fields: dict) -> str:
        formatted = f"[{context}] {msg}"
        if fields:
            pairs = " ".join(f"{key}={value}" for key, value in fields.items())
            formatted = f"{formatted} {pairs}"
        return formatted

    # Core logging methods
    def debug(
        self,
        msg: str,
        context: str = "system",
        verbose_level: int = 1,
        **fields: Any,
    ) -> None:
        """Log debug message."""
        if self._should_log(verbose_level):
            self.logger.debug(self._format(msg, context, fields))

    def info(
        self,
        msg: str,
        context: str = "system",
        verbose_level: int = 1,
        **fields: Any,
    ) -> None:
        """Log info message."""
        if self._should_log(verbose_level):
            self.logger.info(self._format(msg, context, fields))

    def warning(
        self,
        msg: str,
        context: str = "system",
        verbose_level: int = 1,
        **fields: Any,
    ) -> None:
        """Log warning message."""
        if self._should_log(verbose_level):
            self.logger.warning(self._format(msg, context, fields))

    def error(
        self,
        msg: str,
        context: str = "system",
        verbose_level: int = 0,
        **fields: Any,
    ) -> None:
        """Log error message."""
        if self._should_log(verbose_level):
            self.logger.error(self._format(msg, context, fields))

    def critical(
        self,
        msg: str,
        context: str = "system",
        verbose_level: int = 0,
        **fields: Any,
    ) -> None:
        """Log critical message."""
        if self._should_log(verbose_level):
            self.logger.critical(self._format(msg, context, fields))


def create_reporter(
    name: str = "regisseur",
    log_level: str = "info",
    log_dir: Optional[str] = None,
    verbose: int = 1,
) -> SystemReporter:
    """
    Build a reporter from textual settings.

    Args:
        name: Logger name
        log_level: One of debug/info/warning/error/critical
        log_dir: Optional directory for a log file
        verbose: Verbosity filter (0-3)

    Returns:
        Configured SystemReporter
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    return SystemReporter(
        name=name, log_dir=log_dir, level=level, verbose=verbose
    )
