import logging
import sys

from energy_token.settings import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def set_logger_and_children_level(logger_instance: logging.Logger, level: int) -> None:
    """Set the level on a logger, its handlers and every child logger."""
    logger_instance.setLevel(level)
    for handler in logger_instance.handlers:
        handler.setLevel(level)

    if not logger_instance.name or logger_instance.name == "root":
        return

    prefix = logger_instance.name + "."
    for name in list(logging.root.manager.loggerDict):
        if name.startswith(prefix):
            child_logger = logging.getLogger(name)
            child_logger.setLevel(level)
            for handler in child_logger.handlers:
                handler.setLevel(level)


def _configure_logger(name: str) -> logging.Logger:
    package_logger = logging.getLogger(name)

    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)

    numeric_level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    set_logger_and_children_level(package_logger, numeric_level)
    package_logger.propagate = True

    return package_logger


logger = _configure_logger("energy_token")
