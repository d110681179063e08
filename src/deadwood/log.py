"""Logging configuration."""

import logging
import sys

DEBUG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_FORMAT = "[%(name)s] %(message)s"


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure the root logger.

    Log records go to stderr so they never mix with the interactive
    transcript on stdout.

    Args:
        verbose: Show INFO level messages
        debug: Show DEBUG level messages with timestamps
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    if debug:
        handler.setFormatter(logging.Formatter(fmt=DEBUG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    else:
        handler.setFormatter(logging.Formatter(fmt=DEFAULT_FORMAT))
    root_logger.addHandler(handler)

