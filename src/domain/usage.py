"""Usage counters, quota snapshots and the rate-limit policy."""

from dataclasses import dataclass, field

from .provider import ProviderId

# Calls per provider per reset window (one hour).
DEFAULT_QUOTAS: dict[ProviderId, int] = {
    ProviderId.UNSPLASH: 50,
    ProviderId.PEXELS: 200,
    ProviderId.PIXABAY: 100,
    ProviderId.WALLHAVEN: 45,
}


@dataclass(frozen=True)
class UsageCounters:
    """Snapshot of one provider's call bookkeeping."""

    call_count: int = 0
    error_count: int = 0
    success_count: int = 0

    @property
    def success_rate(self) -> float:
        """Success percentage, 100 when no calls were made."""
        if self.call_count == 0:
            return 100.0
        return self.success_count / self.call_count * 100

    @property
    def error_rate(self) -> float:
        """Error percentage, 0 when no calls were made."""
        if self.call_count == 0:
            return 0.0
        return self.error_count / self.call_count * 100


@dataclass(frozen=True)
class QuotaUsage:
    """Load balancer reservations against a provider quota."""

    current: int
    limit: int

    @property
    def usage_rate(self) -> float:
        return self.current / self.limit * 100 if self.limit else 100.0

    @property
    def is_limit_reached(self) -> bool:
        return self.current >= self.limit


@dataclass(frozen=True)
class RateLimitPolicy:
    """Decides when a provider counts as rate limited.

    A provider is limited while an explicit cooldown is active, or, with
    ``enforce_quota`` on, once its call count in the current window reaches
    its quota.
    """

    quotas: dict[ProviderId, int] = field(default_factory=lambda: dict(DEFAULT_QUOTAS))
    cooldown_seconds: float = 600.0
    short_cooldown_seconds: float = 60.0
    low_remaining_threshold: int = 5
    enforce_quota: bool = True

    def quota_for(self, provider: ProviderId) -> int | None:
        return self.quotas.get(provider)

    def is_over_quota(self, provider: ProviderId, call_count: int) -> bool:
        if not self.enforce_quota:
            return False
        quota = self.quota_for(provider)
        return quota is not None and call_count >= quota
