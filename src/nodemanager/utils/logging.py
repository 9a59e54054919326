"""Rotating logger setup for the node manager service."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path


def setup_logger(
    name: str = "nodemanager",
    log_file: str = "./logs/nodemanager.log",
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 3,
    level: int = logging.INFO,
) -> logging.Logger:
    """Setup rotating file logger with ISO 8601 timestamps.

    Component loggers (``nodemanager.pause``, ``nodemanager.orchestrator`` ...)
    propagate to the logger configured here.

    Args:
        name: Logger name
        log_file: Path to log file (created if doesn't exist)
        max_bytes: Max size before rotation
        backup_count: Number of rotated files to keep
        level: Logging level, usually from ENM_LOG_LEVEL

    Returns:
        Configured logger instance
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Level may change between calls, handlers are only attached once
    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    file_handler = RotatingFileHandler(
        log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    file_handler.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )
    file_handler.setFormatter(formatter)
    console_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger
