"""Logging configuration for the application."""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(debug: bool = False) -> None:
    """Configure application-wide logging.

    Level is DEBUG when debug is True, otherwise INFO. Output goes to stdout.
    Safe to call more than once; later calls only adjust the level.
    """
    log_level = logging.DEBUG if debug else logging.INFO
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=log_level,
            format=LOG_FORMAT,
            handlers=[logging.StreamHandler(sys.stdout)],
        )
    root.setLevel(log_level)
