"""Tests for Config domain model."""

from pathlib import Path

import pytest

from domain.config import Config, ConfigError
from domain.provider import ProviderId
from domain.usage import DEFAULT_QUOTAS


def test_config_default_values():
    """Test Config with default values."""
    config = Config()
    assert config.api_keys == {}
    assert config.quotas == DEFAULT_QUOTAS
    assert config.max_retries == 2
    assert config.backoff_base_ms == 1000
    assert config.reset_window_seconds == 3600.0
    assert config.cache_file is None


def test_config_quotas_are_not_shared():
    """Each Config gets its own quota table."""
    first = Config()
    first.quotas[ProviderId.UNSPLASH] = 1
    assert Config().quotas[ProviderId.UNSPLASH] == 50


def test_config_validation_valid():
    """Test Config validation with valid data."""
    Config(cache_file=Path("/tmp/wallhub/cache.json")).validate()


@pytest.mark.parametrize(
    "kwargs,match",
    [
        ({"max_retries": -1}, "max_retries"),
        ({"backoff_base_ms": -5}, "backoff_base_ms"),
        ({"reset_window_seconds": 0}, "reset_window_seconds"),
        ({"request_timeout_seconds": -1}, "request_timeout_seconds"),
        ({"quotas": {ProviderId.PEXELS: 0}}, "Quota"),
        ({"cache_file": "/tmp/cache.json"}, "cache_file"),
    ],
)
def test_config_validation_invalid(kwargs, match):
    """Test Config validation rejects invalid values."""
    with pytest.raises(ConfigError, match=match):
        Config(**kwargs).validate()


def test_api_key_lookup():
    config = Config(api_keys={ProviderId.PEXELS: "px-key", ProviderId.PIXABAY: ""})
    assert config.api_key(ProviderId.PEXELS) == "px-key"
    assert config.api_key(ProviderId.PIXABAY) is None
    assert config.api_key(ProviderId.UNSPLASH) is None


def test_rate_limit_policy_from_config():
    config = Config(rate_limit_cooldown_seconds=120)
    policy = config.rate_limit_policy()
    assert policy.cooldown_seconds == 120
    assert policy.quota_for(ProviderId.WALLHAVEN) == 45


def test_config_to_dict():
    """Test Config serialization."""
    config = Config(
        api_keys={ProviderId.UNSPLASH: "u-key"},
        cache_file=Path("/tmp/cache.json"),
    )
    data = config.to_dict()
    assert data["api_keys"] == {"unsplash": "u-key"}
    assert data["quotas"]["pexels"] == 200
    assert data["cache_file"] == "/tmp/cache.json"


def test_config_from_dict_merges_default_quotas():
    """Test Config deserialization fills quotas missing from the file."""
    config = Config.from_dict(
        {"api_keys": {"wallhaven": "w-key"}, "quotas": {"unsplash": 10}, "max_retries": 4}
    )
    assert config.api_keys == {ProviderId.WALLHAVEN: "w-key"}
    assert config.quotas[ProviderId.UNSPLASH] == 10
    assert config.quotas[ProviderId.PEXELS] == 200
    assert config.max_retries == 4


def test_config_from_dict_round_trip():
    config = Config(
        api_keys={ProviderId.PIXABAY: "p-key"},
        backoff_base_ms=250,
        cache_file=Path("/tmp/cache.json"),
    )
    assert Config.from_dict(config.to_dict()) == config


def test_config_from_dict_unknown_provider():
    """Test unknown provider names raise ConfigError."""
    with pytest.raises(ConfigError):
        Config.from_dict({"quotas": {"flickr": 10}})
