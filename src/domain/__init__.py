"""Domain models for Wallhub."""

from .config import Config
from .exceptions import CacheError, ConfigError, ServiceError, TransportError, WallhubError
from .provider import ProviderId
from .result import LOADING, CallOutcome, Error, Loading, Success
from .usage import DEFAULT_QUOTAS, QuotaUsage, RateLimitPolicy, UsageCounters
from .wallpaper import Collection, Resolution, Wallpaper

__all__ = [
    "Wallpaper",
    "Collection",
    "Resolution",
    "ProviderId",
    "CallOutcome",
    "Success",
    "Error",
    "Loading",
    "LOADING",
    "UsageCounters",
    "QuotaUsage",
    "RateLimitPolicy",
    "DEFAULT_QUOTAS",
    "Config",
    "ConfigError",
    "WallhubError",
    "ServiceError",
    "CacheError",
    "TransportError",
]
