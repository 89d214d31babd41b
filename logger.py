"""Logging configuration for Accountbook.

Application records go to a dated log file and to the console. Flask's
request log (the ``werkzeug`` logger) is routed to the same file so API
traffic and service errors can be read side by side.
"""

import logging
from datetime import date
from config import Config

LOGGER_NAME = "accountbook"
REQUEST_LOGGER_NAME = "werkzeug"

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
CONSOLE_FORMAT = "%(levelname)s - %(message)s"


def _file_handler(config: Config) -> logging.Handler:
    log_path = config.log_dir / f"{LOGGER_NAME}-{date.today().isoformat()}.log"
    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(config: Config) -> logging.Logger:
    """Attach file and console handlers to the application logger.

    Safe to call more than once; existing handlers are replaced.

    Args:
        config: Application configuration containing log settings.

    Returns:
        The configured application logger.
    """
    config.log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = _file_handler(config)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(config.log_level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    # werkzeug only adds its own console handler when none is attached
    request_logger = logging.getLogger(REQUEST_LOGGER_NAME)
    request_logger.setLevel(logging.INFO)
    request_logger.handlers = [file_handler, logging.StreamHandler()]

    return logger


def get_logger() -> logging.Logger:
    """Get the application logger.

    Returns:
        The accountbook logger instance.
    """
    return logging.getLogger(LOGGER_NAME)
