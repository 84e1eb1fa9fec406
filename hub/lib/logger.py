"""
Centralized logging for Channel Hub.

Every module logger writes to stdout and, unless LOG_TO_FILE=false, to one
shared daily file (logs/YYYYMMDD_channel_hub.log). The file handler is opened
once per file and reused, so a process holds a single handle no matter how
many modules log.

Usage:
    from hub.lib.logger import setup_logger
    logger = setup_logger("entity_store")
    logger.info("Entry created")
"""
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
LOG_DIR = Path(os.getenv("LOG_DIR", PROJECT_ROOT / "logs"))

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
_file_handlers: Dict[Path, logging.FileHandler] = {}


def _file_logging_enabled() -> bool:
    return os.getenv("LOG_TO_FILE", "true").lower() == "true"


def log_file_path(log_dir: Optional[Path] = None, day: Optional[datetime] = None) -> Path:
    """Daily log file for the given directory (default LOG_DIR)."""
    day = day or datetime.now()
    return Path(log_dir or LOG_DIR) / f"{day.strftime('%Y%m%d')}_channel_hub.log"


def _file_handler(path: Path) -> logging.FileHandler:
    handler = _file_handlers.get(path)
    if handler is None:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(_formatter)
        _file_handlers[path] = handler
    return handler


def setup_logger(
    name: str,
    level: str = None,
    log_to_file: bool = None,
    log_dir: Path = None,
) -> logging.Logger:
    """
    Configure and return a module logger.

    Args:
        name: Logger name, usually the module's short name.
        level: Logging level (default: LOG_LEVEL env var, else INFO).
        log_to_file: Also write to the shared daily file (default: LOG_TO_FILE env var).
        log_dir: Directory for the log file (default: LOG_DIR env var, else project_root/logs).
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    level = level or os.getenv("LOG_LEVEL", "INFO")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    # Own handlers only; main.py's basicConfig would print every line twice
    logger.propagate = False

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.DEBUG)
    console.setFormatter(_formatter)
    logger.addHandler(console)

    if log_to_file is None:
        log_to_file = _file_logging_enabled()
    if log_to_file:
        logger.addHandler(_file_handler(log_file_path(log_dir)))

    return logger


def close_file_handlers() -> None:
    """Flush and close the shared file handlers (shutdown, tests)."""
    for handler in _file_handlers.values():
        for logger in logging.Logger.manager.loggerDict.values():
            if isinstance(logger, logging.Logger) and handler in logger.handlers:
                logger.removeHandler(handler)
        handler.close()
    _file_handlers.clear()
