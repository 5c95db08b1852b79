"""Per-provider call bookkeeping and rate-limit state."""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from domain.provider import ProviderId
from domain.usage import RateLimitPolicy, UsageCounters
from services.base import BaseService


@dataclass
class _ProviderState:
    """Mutable counters for one provider, guarded by its own lock."""

    lock: threading.Lock
    calls: int = 0
    errors: int = 0
    successes: int = 0
    limited_until: float = 0.0

    def snapshot(self) -> UsageCounters:
        return UsageCounters(
            call_count=self.calls,
            error_count=self.errors,
            success_count=self.successes,
        )


class UsageTracker(BaseService):
    """Tracks calls, successes and errors per provider.

    Each provider mutates under its own lock so concurrent calls to different
    providers never contend. None of the public methods raise.
    """

    def __init__(
        self,
        policy: RateLimitPolicy | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__()
        self.policy = policy or RateLimitPolicy()
        self._clock = clock
        self._states: dict[ProviderId, _ProviderState] = {
            provider: _ProviderState(lock=threading.Lock()) for provider in ProviderId
        }

    def record_call(self, provider: ProviderId) -> None:
        state = self._states[provider]
        with state.lock:
            state.calls += 1
            total = state.calls
        self.log_debug(f"API call to {provider.name}, total: {total}")

    def record_success(self, provider: ProviderId) -> None:
        state = self._states[provider]
        with state.lock:
            state.successes += 1
            total = state.successes
        self.log_debug(f"API success from {provider.name}, total successes: {total}")

    def record_error(
        self, provider: ProviderId, message: str | None = None, code: int | None = None
    ) -> None:
        """Count an error; 403/429 or a "rate limit" message starts a cooldown."""
        state = self._states[provider]
        with state.lock:
            state.errors += 1
            total = state.errors
        self.log_warning(
            f"API error from {provider.name}: {message}, status code: {code}, "
            f"total errors: {total}"
        )
        if code in (403, 429) or "rate limit" in (message or "").lower():
            self.mark_rate_limited(provider)

    def mark_rate_limited(self, provider: ProviderId, duration: float | None = None) -> None:
        """Put a provider into cooldown for ``duration`` seconds."""
        duration = self.policy.cooldown_seconds if duration is None else duration
        state = self._states[provider]
        with state.lock:
            state.limited_until = max(state.limited_until, self._clock() + duration)
        self.log_warning(f"API {provider.name} is rate limited for {duration:.0f}s")

    def observe_rate_limit_headers(
        self, provider: ProviderId, limit: int | None, remaining: int | None
    ) -> None:
        """Start a cooldown when upstream reports a nearly exhausted quota."""
        if remaining is None or remaining > self.policy.low_remaining_threshold:
            return
        self.log_warning(
            f"API {provider.name} rate limit almost reached: {remaining}/{limit} remaining"
        )
        if remaining <= 0:
            self.mark_rate_limited(provider, self.policy.cooldown_seconds)
        else:
            self.mark_rate_limited(provider, self.policy.short_cooldown_seconds)

    def is_rate_limited(self, provider: ProviderId) -> bool:
        state = self._states[provider]
        with state.lock:
            if state.limited_until:
                if self._clock() < state.limited_until:
                    return True
                state.limited_until = 0.0
                self.log_info(f"API {provider.name} rate limit has expired")
            return self.policy.is_over_quota(provider, state.calls)

    def stats_for(self, provider: ProviderId) -> UsageCounters:
        state = self._states[provider]
        with state.lock:
            return state.snapshot()

    def all_stats(self) -> dict[ProviderId, UsageCounters]:
        return {provider: self.stats_for(provider) for provider in ProviderId}

    def reset_all(self) -> None:
        """Zero every counter as one snapshot; cooldowns are kept."""
        locks = [self._states[provider].lock for provider in ProviderId]
        for lock in locks:
            lock.acquire()
        try:
            for state in self._states.values():
                state.calls = state.errors = state.successes = 0
        finally:
            for lock in reversed(locks):
                lock.release()
        self.log_info("All API usage statistics have been reset")

    def reset(self, provider: ProviderId) -> None:
        """Zero one provider's counters and clear its cooldown."""
        state = self._states[provider]
        with state.lock:
            state.calls = state.errors = state.successes = 0
            state.limited_until = 0.0
        self.log_info(f"API usage statistics for {provider.name} have been reset")

    def reset_rate_limits(self) -> None:
        for state in self._states.values():
            with state.lock:
                state.limited_until = 0.0
        self.log_info("All API rate limits have been reset")
