from __future__ import annotations

import logging

PACKAGE_LOGGER = "link_library"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """Logger for a module of the package.

    Under uvicorn the root logger already has handlers and records propagate
    to them. Run standalone (scripts, tests), a single stream handler is
    installed on first use.
    """
    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    return logging.getLogger(name)


def configure_logging(level: str) -> logging.Logger:
    """Set the level of every ``link_library.*`` logger at once."""
    package_logger = get_logger(PACKAGE_LOGGER)
    package_logger.setLevel(level.upper())
    return package_logger
