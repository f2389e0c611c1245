"""Logging helpers shared by the integrity_tool modules."""

import logging
from typing import Optional, Union

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

base_logger = logging.getLogger('integrity_tool')


def set_logger(
    name: str,
    level: Union[int, str] = 'INFO',
    fmt: Optional[str] = None,
    datefmt: Optional[str] = None,
    remove_handlers: bool = False,
) -> logging.Logger:
    """
    Configure a named logger with a stream handler.

    Args:
        name: Logger name, e.g. 'integrity_tool'
        level: Logging level name or number
        fmt: Log record format (defaults to DEFAULT_FORMAT)
        datefmt: Date format for the handler
        remove_handlers: Drop handlers already attached to the logger

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    if isinstance(level, str):
        level = level.upper()
    logger.setLevel(level)

    if remove_handlers:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT, datefmt=datefmt))
        logger.addHandler(handler)

    return logger
