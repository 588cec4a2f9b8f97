"""Logger setup shared by the storage layer and the app."""

from __future__ import annotations

import logging
import os
from pathlib import Path


def _get_log_path() -> Path:
    """Get log path from environment variable or default location."""
    if env_path := os.environ.get("OVERWORK_LOG"):
        return Path(env_path)
    data_path = Path(os.environ.get("OVERWORK_DATA") or ".overwork_data.json")
    return data_path.parent / ".overwork.log"


LOG_PATH = _get_log_path()


def setup_logger(name: str) -> logging.Logger:
    """Configure and return a module-level file logger.

    Handlers are only attached once per logger name. The file is opened
    lazily, so importing a module never touches the disk. Nothing is logged
    to the console, which belongs to the menu.
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)

    if not logger.handlers:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        file_handler = logging.FileHandler(LOG_PATH, delay=True)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
