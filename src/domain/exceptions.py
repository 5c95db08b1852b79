"""Custom exceptions for Wallhub domain."""


class WallhubError(Exception):
    """Base exception for Wallhub domain errors."""

    pass


class ConfigError(WallhubError):
    """Configuration-related errors."""

    pass


class ServiceError(WallhubError):
    """Service layer errors."""

    pass


class CacheError(ServiceError):
    """Record cache read/write errors."""

    pass


class TransportError(WallhubError):
    """Upstream transport failure, optionally carrying an HTTP status."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        if self.status is None:
            return self.message
        return f"HTTP {self.status}: {self.message}"
