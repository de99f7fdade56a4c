import logging
import sys
from levels_curve.config import settings # Use absolute import

# Map string level names to logging constants
LOG_LEVEL_MAP = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL
}

# Get the desired level from settings, default to INFO if invalid or not found
log_level_str = getattr(settings, 'LOGGING_LEVEL', 'INFO').upper()
log_level = LOG_LEVEL_MAP.get(log_level_str, logging.INFO)

log_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

# Console Handler
console_handler = logging.StreamHandler(sys.stdout) # Use stdout for console output
console_handler.setFormatter(log_formatter)

# Loggers handed out so far, so set_log_level can retune them
_loggers = {}


def get_logger(name):
    """
    Gets a logger instance configured with the application's settings.
    """
    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # Prevent adding handlers multiple times if get_logger is called repeatedly for the same name
    if not logger.handlers:
        logger.addHandler(console_handler)

    # Prevent messages from propagating to the root logger if handlers are added
    logger.propagate = False

    _loggers[name] = logger
    return logger


def set_log_level(level_name):
    """
    Changes the level of every logger created through get_logger.

    Unknown names fall back to INFO, mirroring the settings lookup above.
    """
    global log_level
    log_level = LOG_LEVEL_MAP.get(str(level_name).upper(), logging.INFO)
    for logger in _loggers.values():
        logger.setLevel(log_level)
    return log_level
