"""Base service class with common functionality."""

from abc import ABC
from logging import getLogger, Logger


class BaseService(ABC):
    """Base class for all services with logging support."""

    def __init__(self) -> None:
        """Initialize base service with a per-class logger."""
        self._logger: Logger = getLogger(f"wallhub.{self.__class__.__name__}")

    @property
    def logger(self) -> Logger:
        """Get logger instance."""
        return self._logger

    def log_debug(self, message: str) -> None:
        self._logger.debug(message)

    def log_info(self, message: str) -> None:
        self._logger.info(message)

    def log_warning(self, message: str) -> None:
        self._logger.warning(message)

    def log_error(self, message: str, exc_info: bool = False) -> None:
        """Log error message, optionally with the active traceback."""
        self._logger.error(message, exc_info=exc_info)
