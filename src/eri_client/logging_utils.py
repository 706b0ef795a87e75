"""Logging helpers."""

from __future__ import annotations

import logging

LOGGER_NAME = "eri_client"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Configure logging for CLI runs; library use leaves handlers to the application."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)


def get_logger() -> logging.Logger:
    """Return the logger shared by the client, transport and CLI."""
    return logging.getLogger(LOGGER_NAME)
