"""
Command-line entry point.

Drop media files into ./media (or $MEDIA_DIR) and run with no arguments to
get ``<name>.txt`` speaker-labelled transcripts next to each file.
"""

import logging
import sys

from .config import ConfigError, load_config
from .logging_config import setup_logging
from .runner import process_media_files

logger = logging.getLogger(__name__)


def main() -> int:
    try:
        config = load_config()
    except ConfigError as e:
        setup_logging(log_file=None)
        logger.error(f"Configuration error: {e}")
        return 1

    setup_logging(log_level=config.log_level)
    logger.debug(f"API key loaded: ...{config.api_key[-4:]}")

    try:
        process_media_files(config)
    except KeyboardInterrupt:
        logger.info("Interrupted, stopping")
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
