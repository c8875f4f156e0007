"""Shared utility functions for the ledger metrics exporter."""

import logging
from datetime import datetime
from pathlib import Path

import colorlog

LOGGER_ROOT = "ledger-exporter"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Get a logger with a colorized format for the project.

    Loggers below ``ledger-exporter`` propagate to it, so handlers added to the
    root exporter logger (such as the log file) see every module's records.
    """
    logger = logging.getLogger(name)
    if name.startswith(f"{LOGGER_ROOT}."):
        get_logger(LOGGER_ROOT)
        return logger
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = colorlog.ColoredFormatter(
            f"%(log_color)s{LOG_FORMAT}",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "bold_red",
            },
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.propagate = False
    return logger


def add_file_handler(logger: logging.Logger, log_file: str | Path) -> None:
    """Attach a plain-text file handler to a logger once."""
    path = Path(log_file)
    ensure_dir(path.parent)
    target = str(path.resolve())
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == target:
            return
    file_handler = logging.FileHandler(path)
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(file_handler)


def ensure_dir(path: str | Path) -> None:
    """Ensure a directory exists (like mkdir -p)."""
    Path(path).mkdir(parents=True, exist_ok=True)


def local_now() -> datetime:
    """Get the current wall-clock time as an aware datetime in the host timezone."""
    return datetime.now().astimezone()
