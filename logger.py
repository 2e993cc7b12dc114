"""Logging configuration for GiftBank.

Application code logs to the "giftbank" logger. The GIFT core modules log
under their module names ("gift.parser", ...) and never configure handlers
themselves; `setup_logging` routes both into the same dated log file and the
console.
"""

import logging
from datetime import date
from typing import Iterable
from config import Config

LOGGER_NAME = "giftbank"
CORE_LOGGER_NAMES = ("gift",)


def _attach(logger: logging.Logger, level: str, handlers: Iterable[logging.Handler]) -> None:
    logger.setLevel(level)
    # setup_logging may run more than once per process (tests, CLI re-entry)
    logger.handlers.clear()
    for handler in handlers:
        logger.addHandler(handler)
    logger.propagate = False


def setup_logging(config: Config, console: bool = True) -> logging.Logger:
    """Send application and GIFT core logs to a dated file and the console.

    Args:
        config: Application configuration containing log settings.
        console: Also log to stderr. The CLI turns this off for commands
            that print GIFT text to stdout.

    Returns:
        The configured application logger.
    """
    config.log_dir.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(
        config.log_dir / f"giftbank-{date.today().isoformat()}.log"
    )
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    handlers = [file_handler]

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter("%(levelname)s - %(message)s"))
        handlers.append(console_handler)

    for handler in handlers:
        handler.setLevel(config.log_level)

    logger = logging.getLogger(LOGGER_NAME)
    _attach(logger, config.log_level, handlers)
    for name in CORE_LOGGER_NAMES:
        _attach(logging.getLogger(name), config.log_level, handlers)

    return logger


def get_logger() -> logging.Logger:
    """Get the application logger.

    Returns:
        The giftbank logger instance.
    """
    return logging.getLogger(LOGGER_NAME)
