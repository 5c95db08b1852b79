"""Tests for domain exceptions."""

import pytest

from domain.exceptions import (
    CacheError,
    ConfigError,
    ServiceError,
    TransportError,
    WallhubError,
)


def test_wallhub_error():
    """Test base WallhubError."""
    with pytest.raises(WallhubError):
        raise WallhubError("Test error")


def test_config_error_is_wallhub_error():
    """Test ConfigError is subclass of WallhubError."""
    with pytest.raises(WallhubError):
        raise ConfigError("Config error")


def test_cache_error_is_service_error():
    """Test CacheError is subclass of ServiceError."""
    with pytest.raises(ServiceError):
        raise CacheError("Cache error")


def test_config_error_message():
    """Test ConfigError with message."""
    error = ConfigError("max_retries must not be negative")
    assert str(error) == "max_retries must not be negative"
    with pytest.raises(ConfigError, match="max_retries"):
        raise error


def test_transport_error_with_status():
    """Test TransportError carries its HTTP status."""
    error = TransportError("Service Unavailable", status=503)
    assert error.status == 503
    assert error.message == "Service Unavailable"
    assert str(error) == "HTTP 503: Service Unavailable"


def test_transport_error_without_status():
    error = TransportError("connection reset")
    assert error.status is None
    assert str(error) == "connection reset"
