"""Logging utilities for the Telegraph relay."""

import logging


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: int | str = logging.INFO) -> None:
    """Configure the root logger with a consistent format if unset."""

    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        level = resolved if isinstance(resolved, int) else logging.INFO

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)

    root_logger.setLevel(level)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a named logger; the root handler is installed on first use."""

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        configure_logging()
    return logging.getLogger(name or "telegraph_relay")
