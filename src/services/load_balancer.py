"""Quota-aware provider selection."""

import threading
from collections.abc import Iterable

from domain.provider import ProviderId
from domain.usage import DEFAULT_QUOTAS, QuotaUsage
from services.base import BaseService
from services.usage_tracker import UsageTracker


class LoadBalancer(BaseService):
    """Spreads calls across providers in proportion to their quotas.

    Selection and the reservation it makes happen under one lock, so two
    concurrent selections always see each other's increments. A daemon timer
    thread started with :meth:`start` resets the reservations once per window.
    """

    def __init__(
        self,
        tracker: UsageTracker | None = None,
        quotas: dict[ProviderId, int] | None = None,
        reset_window_seconds: float = 3600.0,
    ) -> None:
        super().__init__()
        self._tracker = tracker
        self._quotas = dict(quotas or DEFAULT_QUOTAS)
        self.reset_window_seconds = reset_window_seconds
        self._lock = threading.Lock()
        self._counts: dict[ProviderId, int] = {provider: 0 for provider in ProviderId}
        self._stop_event = threading.Event()
        self._reset_thread: threading.Thread | None = None

    def _limit(self, provider: ProviderId) -> int:
        return self._quotas.get(provider, 0)

    def next_provider(self, candidates: Iterable[ProviderId] | None = None) -> ProviderId:
        """Pick the least loaded provider and reserve one call on it.

        Only ``candidates`` are considered when given. Ties resolve in enum
        order. When every candidate is at quota, the one with the highest
        quota is returned.

        Raises:
            ValueError: If ``candidates`` is empty.
        """
        allowed = set(ProviderId if candidates is None else candidates)
        pool = [provider for provider in ProviderId if provider in allowed]
        if not pool:
            raise ValueError("No candidate providers to choose from")

        with self._lock:
            available = [
                provider
                for provider in pool
                if self._limit(provider) > 0 and self._counts[provider] < self._limit(provider)
            ]
            if not available:
                selected = max(pool, key=self._limit)
                self.log_warning(
                    f"All APIs have reached their limits, using {selected.name}"
                )
            else:
                selected = min(
                    available, key=lambda p: self._counts[p] / self._limit(p)
                )
            self._counts[selected] += 1
            current = self._counts[selected]

        self.log_debug(
            f"Selected API: {selected.name}, usage: {current}/{self._limit(selected)}"
        )
        return selected

    def reserve(self, provider: ProviderId) -> None:
        """Count an explicitly pinned call against a provider's quota."""
        with self._lock:
            self._counts[provider] += 1

    def usage(self) -> dict[ProviderId, QuotaUsage]:
        with self._lock:
            return {
                provider: QuotaUsage(self._counts[provider], self._limit(provider))
                for provider in ProviderId
            }

    def reset_usage_counts(self) -> None:
        """Replace the reservation table and restart the tracker's window."""
        fresh = {provider: 0 for provider in ProviderId}
        with self._lock:
            self._counts = fresh
        if self._tracker is not None:
            self._tracker.reset_all()
        self.log_info("API usage counts have been reset")

    def _reset_loop(self) -> None:
        while not self._stop_event.wait(self.reset_window_seconds):
            self.reset_usage_counts()

    def start(self) -> None:
        """Start the periodic reset timer (idempotent)."""
        if self._reset_thread is not None and self._reset_thread.is_alive():
            return
        self._stop_event.clear()
        self._reset_thread = threading.Thread(
            target=self._reset_loop, name="wallhub-quota-reset", daemon=True
        )
        self._reset_thread.start()
        self.log_debug(f"Quota reset timer started ({self.reset_window_seconds}s window)")

    def stop(self) -> None:
        self._stop_event.set()
        if self._reset_thread is not None:
            self._reset_thread.join(timeout=1.0)
            self._reset_thread = None
