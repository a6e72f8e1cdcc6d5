"""
Logging configuration for the notifier command line.

The library modules only create loggers. Handlers are installed here,
and only by the CLI.
"""

import logging
import sys

DEFAULT_LOG_LEVEL = logging.WARNING
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(threadName)s - %(message)s"


def setup_logging(
    log_level: int = DEFAULT_LOG_LEVEL,
    log_format: str = DEFAULT_LOG_FORMAT,
    log_file: str | None = None,
) -> None:
    """
    Configure the root logger.

    Args:
        log_level: minimum level, e.g. logging.DEBUG
        log_format: format string for every handler
        log_file: optional path of an additional log file
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(log_format)

    # stderr keeps stdout free for drill output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logging.getLogger(__name__).debug(
        "Logging configured. Level=%s", logging.getLevelName(log_level)
    )


def parse_log_level(name: str) -> int:
    """Translate a level name such as 'debug' into a logging constant."""
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name}")
    return level
