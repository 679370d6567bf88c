# stock_watch/config/logging_config.py

"""Logging for one scheduled stock_watch run.

A run writes everything to ``run_<timestamp>.log`` under
``Settings.LOGS_DIR``; stderr only shows records at the console level
(``STOCK_WATCH_LOG_LEVEL``, WARNING unless overridden), so a cron job
mails nothing but the report and real problems.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from stock_watch.config.settings import Settings

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | "
    "%(message)s"
)

_CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(level: int | str) -> int:
    """Turn a level number or name such as ``"info"`` into a number."""
    if isinstance(level, int):
        return level
    number = logging.getLevelName(level.strip().upper())
    if not isinstance(number, int):
        raise ValueError(f"unknown log level '{level}'")
    return number


def _existing_log_file(logger: logging.Logger) -> Path | None:
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)
    return None


def setup_logging(console_level: int | str | None = None) -> Path:
    """Attach the run's file and stderr handlers to ``stock_watch``.

    ``console_level`` overrides ``Settings.CONSOLE_LOG_LEVEL`` for the
    stderr handler; the file always gets DEBUG. Calling again keeps the
    handlers already in place, adjusting only the console level, and
    returns the log file in use.
    """
    level = resolve_level(
        Settings.CONSOLE_LOG_LEVEL if console_level is None else console_level
    )
    project_logger = logging.getLogger("stock_watch")
    project_logger.setLevel(logging.DEBUG)

    existing = _existing_log_file(project_logger)
    if existing is not None:
        for handler in project_logger.handlers:
            if not isinstance(handler, logging.FileHandler):
                handler.setLevel(level)
        return existing

    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / f"run_{datetime.now():%Y%m%d_%H%M%S}.log"

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT))

    # stdout is reserved for the report and CSV output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))

    project_logger.addHandler(file_handler)
    project_logger.addHandler(console_handler)
    project_logger.debug(
        "Logging to %s, console level %s", log_file, logging.getLevelName(level)
    )
    return log_file
