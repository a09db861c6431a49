import sys
from typing import Optional

from loguru import logger

from inventory_health.config import get_config

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)

DEFAULT_LOGGER_NAME = "inventory_health"


class AppLogger:
    """Single loguru sink shared by the service, the dashboard and the seed CLI.

    The sink is (re)installed only when get_config().log_level differs from the
    level it was installed with, so loggers handed out earlier keep working
    after a config override.
    """
    _sink_id: Optional[int] = None
    _level: Optional[str] = None

    def __init__(self) -> None:
        level = get_config().log_level.upper()
        if AppLogger._level != level:
            if AppLogger._sink_id is None:
                logger.remove()
            else:
                logger.remove(AppLogger._sink_id)
            AppLogger._sink_id = logger.add(sys.stderr, level=level, format=LOG_FORMAT)
            AppLogger._level = level
        self.logger = logger

    def get_logger(self, name: Optional[str] = None):
        """Get the configured logger bound to `name`.

        Args:
            name (str, optional): Component name shown in each line. Defaults to the package name.
        Returns:
            loguru.Logger: The bound logger.
        """
        return self.logger.bind(name=name or DEFAULT_LOGGER_NAME)


def get_logger(name: Optional[str] = None):
    """Get an application logger using the latest config."""
    return AppLogger().get_logger(name)
