"""
Helpers shared by the app and the headless tools that belong to neither
the simulation nor the display.
"""

import logging
import logging.handlers
import os
from typing import Optional

from config import swarm as config


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """
    Configure the root logger with a console handler and a rotating file handler.

    Args:
        level: Overrides config.LOGGING["level"]
        log_file: Overrides config.LOGGING["log_file"]; empty string disables the file
    """
    log_level = (level or config.LOGGING["level"]).upper()
    log_format = config.LOGGING["format"]
    log_file_path = config.LOGGING["log_file"] if log_file is None else log_file

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file_path:
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        # Rotates at 1MB, keeps 5 backups
        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=1024 * 1024, backupCount=5
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logging.getLogger(__name__).debug(f"Logging initialized at {log_level} (file: {log_file_path or 'none'})")
