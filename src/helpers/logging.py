"""Logger module."""

import logging
import os
import sys

import colorlog

loggers: dict[str, logging.Logger] = {}

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(
    name: str,
    log_handler: str = "stdout",
    log_level: str | None = None,
    log_color: bool | None = None,
) -> logging.Logger:
    """Get logger.

    Args:
        name: The name of the logger.
        log_handler: The log handler type ('stdout' or 'stderr').
        log_level: The logging level ('DEBUG', 'INFO', 'WARNING', 'ERROR',
            'CRITICAL'). Falls back to the LOG_LEVEL environment variable,
            then INFO.
        log_color: Whether to use colored output. Falls back to the
            LOG_COLOR environment variable.

    Returns:
        logging.Logger: Configured logger instance.

    Raises:
        ValueError: If invalid handler or log level is provided.
    """
    if name in loggers:
        return loggers[name]

    streams = {"stdout": sys.stdout, "stderr": sys.stderr}
    if log_handler not in streams:
        err_msg = f"Invalid handler: {log_handler}"
        raise ValueError(err_msg)

    level_name = (log_level or os.getenv("LOG_LEVEL") or "INFO").upper()
    if level_name not in LOG_LEVELS:
        err_msg = f"Invalid log level: {level_name}"
        raise ValueError(err_msg)
    level = LOG_LEVELS[level_name]

    if log_color is None:
        log_color = os.getenv("LOG_COLOR", "").lower() in {"1", "true", "yes"}

    if log_color:
        logger = colorlog.getLogger(name)
        handler: logging.Handler = colorlog.StreamHandler(streams[log_handler])
        formatter: logging.Formatter = colorlog.ColoredFormatter(
            f"%(log_color)s {LOG_FORMAT}",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "red,bg_white",
            },
        )
    else:
        logger = logging.getLogger(name)
        handler = logging.StreamHandler(streams[log_handler])
        formatter = logging.Formatter(LOG_FORMAT)

    logger.setLevel(level)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    loggers[name] = logger
    return logger
