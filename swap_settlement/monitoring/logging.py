"""
Logging setup: console plus a file under the configured log directory.
"""

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s %(message)s"


def setup_logging(level: str = "INFO", log_dir: str = "logs") -> logging.Logger:
    """
    Configure the root logger.

    Args:
        level: Log level name
        log_dir: Directory for settlement.log (created if missing)

    Returns:
        The package logger
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)

    file_handler = logging.FileHandler(log_path / "settlement.log", encoding="utf-8")
    file_handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level.upper())
    root.addHandler(console)
    root.addHandler(file_handler)

    return logging.getLogger("swap_settlement")
