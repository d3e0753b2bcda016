"""
Shared logging setup for the server and the CLI.
"""

import logging

import config

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


def setup_logging(level_name: str | None = None) -> None:
    """
    Configure logging once using config.LOG_LEVEL (or an explicit override).
    Safe to call multiple times.
    """
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    level_name = str(level_name or config.LOG_LEVEL).upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))
