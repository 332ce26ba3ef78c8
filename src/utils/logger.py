"""Centralized logging setup for the shipping label processor.

Provides a structured logging configuration with consistent formatting
across all modules, plus an optional daily process log file.
"""

import logging
import sys
from datetime import date
from pathlib import Path

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def log_file_path(log_dir: Path, day: date | None = None) -> Path:
    """Return the process log file for a given day.

    Args:
        log_dir: Directory holding the log files.
        day: Day of the log. Defaults to today.

    Returns:
        Path of the form ``<log_dir>/process-log-YYYY-MM-DD.txt``.
    """
    day = day or date.today()
    return log_dir / f"process-log-{day.isoformat()}.txt"


def setup_logging(level: str = "INFO", log_dir: str | Path | None = None) -> None:
    """Configure the root logger with a standard format.

    Args:
        level: Logging level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_dir: Directory for the daily process log. Console only if ``None``.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()

    if root.handlers:
        return

    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    root.addHandler(handler)

    if log_dir is not None:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file_path(directory), encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    root.setLevel(numeric_level)


def get_logger(name: str) -> logging.Logger:
    """Get a named logger instance.

    Args:
        name: Logger name, typically ``__name__`` of the calling module.

    Returns:
        Configured logger instance.
    """
    return logging.getLogger(name)
