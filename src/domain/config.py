"""Config domain model with validation."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .exceptions import ConfigError
from .provider import ProviderId
from .usage import DEFAULT_QUOTAS, RateLimitPolicy


@dataclass
class Config:
    """Application configuration domain model."""

    api_keys: dict[ProviderId, str] = field(default_factory=dict)
    quotas: dict[ProviderId, int] = field(default_factory=lambda: dict(DEFAULT_QUOTAS))
    max_retries: int = 2
    backoff_base_ms: int = 1000
    reset_window_seconds: float = 3600.0
    rate_limit_cooldown_seconds: float = 600.0
    request_timeout_seconds: float = 30.0
    cache_ttl_seconds: float = 3600.0
    cache_file: Optional[Path] = None

    def validate(self) -> None:
        """Validate configuration state."""
        if self.max_retries < 0:
            raise ConfigError("max_retries must not be negative")
        if self.backoff_base_ms < 0:
            raise ConfigError("backoff_base_ms must not be negative")
        for name in ("reset_window_seconds", "request_timeout_seconds"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive")
        for provider, quota in self.quotas.items():
            if not isinstance(provider, ProviderId):
                raise ConfigError(f"Unknown provider in quotas: {provider!r}")
            if quota <= 0:
                raise ConfigError(f"Quota for {provider.value} must be positive")
        if self.cache_file is not None and not isinstance(self.cache_file, Path):
            raise ConfigError("cache_file must be a Path object")

    def api_key(self, provider: ProviderId) -> str | None:
        """API key for a provider, None when not configured."""
        return self.api_keys.get(provider) or None

    def rate_limit_policy(self) -> RateLimitPolicy:
        """Rate-limit policy derived from the quota table."""
        return RateLimitPolicy(
            quotas=dict(self.quotas),
            cooldown_seconds=self.rate_limit_cooldown_seconds,
        )

    def to_dict(self) -> dict:
        """Convert to dict for JSON serialization."""
        return {
            "api_keys": {p.value: key for p, key in self.api_keys.items()},
            "quotas": {p.value: quota for p, quota in self.quotas.items()},
            "max_retries": self.max_retries,
            "backoff_base_ms": self.backoff_base_ms,
            "reset_window_seconds": self.reset_window_seconds,
            "rate_limit_cooldown_seconds": self.rate_limit_cooldown_seconds,
            "request_timeout_seconds": self.request_timeout_seconds,
            "cache_ttl_seconds": self.cache_ttl_seconds,
            "cache_file": str(self.cache_file) if self.cache_file else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Create from dict for JSON deserialization.

        Raises:
            ConfigError: If a provider name is not recognised
        """
        try:
            api_keys = {
                ProviderId(name): key
                for name, key in (data.get("api_keys") or {}).items()
                if key
            }
            quotas = dict(DEFAULT_QUOTAS)
            quotas.update(
                {ProviderId(name): int(q) for name, q in (data.get("quotas") or {}).items()}
            )
        except ValueError as e:
            raise ConfigError(f"Invalid provider configuration: {e}") from e

        cache_file = data.get("cache_file")
        defaults = cls()
        return cls(
            api_keys=api_keys,
            quotas=quotas,
            max_retries=data.get("max_retries", defaults.max_retries),
            backoff_base_ms=data.get("backoff_base_ms", defaults.backoff_base_ms),
            reset_window_seconds=data.get(
                "reset_window_seconds", defaults.reset_window_seconds
            ),
            rate_limit_cooldown_seconds=data.get(
                "rate_limit_cooldown_seconds", defaults.rate_limit_cooldown_seconds
            ),
            request_timeout_seconds=data.get(
                "request_timeout_seconds", defaults.request_timeout_seconds
            ),
            cache_ttl_seconds=data.get("cache_ttl_seconds", defaults.cache_ttl_seconds),
            cache_file=Path(cache_file) if cache_file else None,
        )
