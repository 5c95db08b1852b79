"""Retry-aware wrapper around a single upstream call."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import aiohttp

from domain.exceptions import TransportError
from domain.provider import ProviderId
from domain.result import CallOutcome, Error, Success
from services.base import BaseService
from services.usage_tracker import UsageTracker

T = TypeVar("T")

RATE_LIMIT_STATUSES = (403, 429)
RATE_LIMIT_MESSAGE = "rate limit exceeded"
EXHAUSTED_MESSAGE = "network error after retries"


def _transport_status(exc: BaseException) -> int | None:
    """HTTP status carried by a transport failure, if any."""
    if isinstance(exc, TransportError):
        return exc.status
    if isinstance(exc, aiohttp.ClientResponseError):
        return exc.status
    return None


def _is_transport_failure(exc: BaseException) -> bool:
    return isinstance(
        exc, (TransportError, aiohttp.ClientError, asyncio.TimeoutError, OSError)
    )


def _describe(exc: BaseException) -> str:
    if isinstance(exc, aiohttp.ClientResponseError):
        return f"HTTP {exc.status}: {exc.message}"
    return str(exc) or exc.__class__.__name__


class ResilientCaller(BaseService):
    """Runs provider operations with rate-limit short-circuiting and retries.

    Transient transport failures are retried with a linear backoff of
    ``backoff_base_ms * attempt``; 403/429 and non-transport exceptions end the
    call immediately. Every outcome is reported to the usage tracker.
    """

    def __init__(
        self,
        tracker: UsageTracker,
        max_retries: int = 2,
        backoff_base_ms: int = 1000,
    ) -> None:
        super().__init__()
        self.tracker = tracker
        self.max_retries = max_retries
        self.backoff_base_ms = backoff_base_ms

    async def call(
        self,
        provider: ProviderId,
        operation: Callable[[], Awaitable[T]],
        max_retries: int | None = None,
    ) -> CallOutcome[T]:
        """Execute ``operation`` and wrap its result in a CallOutcome.

        Args:
            provider: Provider the operation talks to
            operation: Zero-argument coroutine function doing one upstream call
            max_retries: Override for the configured retry count

        Returns:
            Success with the operation result, or Error; never raises
        """
        if self.tracker.is_rate_limited(provider):
            self.log_warning(f"API {provider.name} is rate limited, skipping call")
            return Error(message=RATE_LIMIT_MESSAGE, provider=provider, code=429)

        retries = self.max_retries if max_retries is None else max_retries
        retry_count = 1
        last_message: str | None = None
        last_status: int | None = None

        while True:
            self.tracker.record_call(provider)
            try:
                result = await operation()
            except Exception as e:
                message = _describe(e)
                status = _transport_status(e)
                self.tracker.record_error(provider, message, status)

                if not _is_transport_failure(e):
                    self.log_error(f"{provider.name} call failed: {message}", exc_info=True)
                    return Error(message=message, provider=provider)

                if status in RATE_LIMIT_STATUSES:
                    self.log_warning(f"{provider.name} refused call with HTTP {status}")
                    return Error(message=message, provider=provider, code=status)

                last_message, last_status = message, status
                if retry_count > retries:
                    break

                delay_ms = self.backoff_base_ms * retry_count
                self.log_info(
                    f"{provider.name} transient failure ({message}), "
                    f"retry {retry_count}/{retries} in {delay_ms}ms"
                )
                await asyncio.sleep(delay_ms / 1000)
                retry_count += 1
                continue

            self.tracker.record_success(provider)
            return Success(result)

        self.log_error(f"{provider.name} call failed after {retries + 1} attempts")
        return Error(
            message=last_message or EXHAUSTED_MESSAGE,
            provider=provider,
            code=last_status,
        )
