"""Logging utilities."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Parent of every logger handed out by get_logger()
ROOT_LOGGER = "profqc"


def setup_logging(
    level: int = logging.INFO,
    log_file: str | None = None,
) -> logging.Logger:
    """Attach handlers to the ``profqc`` logger.

    Handlers installed by an earlier call are replaced, so the CLI can be
    invoked repeatedly in one process. Records still propagate to the
    root logger.

    Args:
        level: Logging level.
        log_file: Optional file path for logging.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module.

    Args:
        name: Short module name, e.g. "qc.engine".

    Returns:
        Logger under the ``profqc`` namespace.
    """
    if name.startswith(f"{ROOT_LOGGER}."):
        name = name[len(ROOT_LOGGER) + 1:]
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
