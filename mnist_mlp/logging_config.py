"""Logger setup for the 'mnist_mlp' namespace."""
from __future__ import annotations
import logging
import os
import sys


def setup_logging(level: int | str | None = None, log_file: str | None = None) -> None:
    """
    Configure the package logger.

    `level` may be a logging constant or a name such as "DEBUG"; when omitted
    the LOG_LEVEL environment variable is used, falling back to INFO.
    TensorFlow's own C++ and Python chatter is kept at WARNING.
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger("mnist_mlp")
    logger.setLevel(level)
    # Avoid duplicate handlers when called twice (tests, notebooks)
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logging.getLogger("tensorflow").setLevel(logging.WARNING)
    logger.debug("Logging initialized.")
