import logging
import json
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

LOG_FILE = "batch_transcriber.log"


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[Union[str, Path]] = LOG_FILE
) -> None:
    """
    Set up structured logging for a transcription run.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path of the JSON log file. ``None`` disables file logging.
    """
    # Convert string level to actual level
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    # Format for console output
    fmt = "%(asctime)s %(levelname)s %(name)s %(message)s"

    # Configure root logger
    root = logging.getLogger()
    root.setLevel(numeric_level)

    # Remove existing handlers
    while root.handlers:
        root.handlers.pop()

    # Human-readable console output
    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(fmt))
    root.addHandler(console)

    # Keep HTTP connection chatter out of INFO output
    logging.getLogger("urllib3").setLevel(max(numeric_level, logging.WARNING))

    if log_file is None:
        return

    # JSON-structured file logging
    file_h = RotatingFileHandler(
        str(log_file),
        maxBytes=5_000_000,
        backupCount=3,
        encoding="utf-8"
    )
    file_h.setFormatter(
        logging.Formatter(
            json.dumps({
                "time": "%(asctime)s",
                "lvl": "%(levelname)s",
                "src": "%(name)s",
                "msg": "%(message)s"
            })
        )
    )
    root.addHandler(file_h)
