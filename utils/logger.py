"""
Script contains logger for the batch fetcher
"""

import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(name="pokefetch")

log_formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

# handler -> logger level to put back when the handler is removed
_previous_levels = {}


def add_file_handler(log_file: Path, level: int = logging.INFO) -> logging.FileHandler:
    """Append every project log line at ``level`` or above to ``log_file``.

    The project logger is only lowered when it would otherwise drop those
    lines, so a more verbose console setup (``-v``) keeps its DEBUG output.
    """
    log_file = Path(log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(log_formatter)
    logger.addHandler(handler)
    _previous_levels[handler] = logger.level
    if logger.getEffectiveLevel() > level:
        logger.setLevel(level)
    return handler


def remove_handler(handler: logging.Handler) -> None:
    logger.removeHandler(handler)
    handler.close()
    if handler in _previous_levels:
        logger.setLevel(_previous_levels.pop(handler))
