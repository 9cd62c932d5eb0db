"""Logging helpers for the feasibility analysis package."""

import logging
from typing import Optional, Union

ROOT_LOGGER_NAME = "feasibility"


def configure_logger(
    name: str = ROOT_LOGGER_NAME, level: Union[int, str] = logging.WARNING
) -> logging.Logger:
    """Configure and return the project-wide logger.

    Handlers are installed only once, so repeated calls from the driver and
    from tests just adjust the level.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level}")

    logger = logging.getLogger(name)
    if logger.handlers:
        logger.setLevel(level)
        return logger

    handler = logging.StreamHandler()
    formatter = logging.Formatter(
        "[%(levelname)s] %(asctime)s - %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)

    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a child of the project logger.

    The parent is not configured here; call configure_logger() from entry
    points so library use stays silent.
    """
    parent = logging.getLogger(ROOT_LOGGER_NAME)
    if name is None:
        return parent
    return parent.getChild(name)
