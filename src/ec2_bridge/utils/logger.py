# utils/logger.py
"""Per-component loggers for the bridge.

Each component logs to stdout and, when given a file name, to a rotating
file under ``EC2_BRIDGE_LOG_DIR`` (``logs`` by default). Records carry the
thread name since the call bridge serves requests on worker threads.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path

from .exceptions import ConfigurationError

NAMESPACE = "ec2_bridge"
LOG_FORMAT = "%(asctime)s - %(name)s - [%(threadName)s] - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


def log_dir() -> Path:
    return Path(os.environ.get("EC2_BRIDGE_LOG_DIR", "logs"))


def resolve_level(level: str) -> int:
    """Map a level name such as ``"debug"`` to its logging constant."""
    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        raise ConfigurationError(f"Unknown log level: {level}")
    return resolved


def _file_handler(
    log_path: Path, enable_rotation: bool, max_bytes: int, backup_count: int
) -> logging.Handler:
    log_path.parent.mkdir(parents=True, exist_ok=True)
    if enable_rotation:
        return logging.handlers.RotatingFileHandler(
            log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    return logging.FileHandler(log_path, encoding="utf-8")


def setup_logger(
    name: str,
    log_file: str = "",
    level: str = "INFO",
    enable_rotation: bool = True,
    max_bytes: int = MAX_LOG_BYTES,
    backup_count: int = LOG_BACKUPS,
) -> logging.Logger:
    """Return the logger ``name``, attaching its handlers on first use.

    Console output is INFO and above until ``set_log_level`` lowers it; the
    log file receives everything.
    """
    logger = logging.getLogger(name)
    logger.setLevel(resolve_level(level))
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    console.setLevel(logging.INFO)
    logger.addHandler(console)

    if log_file:
        log_path = log_dir() / log_file
        try:
            handler = _file_handler(log_path, enable_rotation, max_bytes, backup_count)
        except OSError as e:
            logger.warning(f"Cannot write {log_path} ({e}), logging to console only")
        else:
            handler.setFormatter(formatter)
            handler.setLevel(logging.DEBUG)
            logger.addHandler(handler)

    logger.propagate = False
    return logger


def set_log_level(level: str) -> None:
    """Apply ``level`` to every bridge logger and its console output."""
    resolved = resolve_level(level)
    for name, logger in list(logging.Logger.manager.loggerDict.items()):
        if not name.startswith(NAMESPACE) or not isinstance(logger, logging.Logger):
            continue
        logger.setLevel(resolved)
        for handler in logger.handlers:
            if type(handler) is logging.StreamHandler:
                handler.setLevel(resolved)
