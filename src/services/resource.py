"""Offline-first reconciliation of a local cache with one remote fetch."""

import inspect
from collections.abc import AsyncIterator, Awaitable, Callable, Sized
from logging import getLogger
from typing import Any, TypeVar, Union

from domain.provider import ProviderId
from domain.result import LOADING, CallOutcome, Error, Loading, Success

T = TypeVar("T")
R = TypeVar("R")

MaybeAwaitable = Union[T, Awaitable[T]]

DEFAULT_ERROR_PROVIDER = ProviderId.UNSPLASH
FETCH_FAILED_MESSAGE = "network request failed"

logger = getLogger(__name__)


async def _resolve(value: Any) -> Any:
    """Await coroutine results so collaborators may be sync or async."""
    if inspect.isawaitable(value):
        return await value
    return value


def _is_empty(data: Any) -> bool:
    if data is None:
        return True
    return isinstance(data, Sized) and not isinstance(data, str) and len(data) == 0


async def network_bound_resource(
    read_cache: Callable[[], MaybeAwaitable[T | None]],
    fetch_remote: Callable[[], MaybeAwaitable[CallOutcome[R]]],
    write_cache: Callable[[R], MaybeAwaitable[None]],
    map_to_local: Callable[[R], T],
    should_fetch: Callable[[T | None], bool] | None = None,
    on_fetch_failed: Callable[[Exception], MaybeAwaitable[None]] | None = None,
    provider: ProviderId | None = None,
) -> AsyncIterator[CallOutcome[T]]:
    """Yield cached data first, then at most one remote refresh.

    Sequence:

    1. read the cache once and yield ``Success(cached)``, or ``LOADING`` when
       the cache is empty;
    2. stop if ``should_fetch(cached)`` is false;
    3. otherwise fetch once: a remote Success is written to the cache, mapped
       and yielded; a remote Error is yielded unchanged (already yielded
       cached data stands); an exception calls ``on_fetch_failed`` and yields
       a generic Error tagged with ``provider``.

    Each invocation is independent and re-reads the cache.
    """
    cached = await _resolve(read_cache())

    if _is_empty(cached):
        yield LOADING
    else:
        yield Success(cached)

    if should_fetch is not None and not should_fetch(cached):
        return

    final: CallOutcome[T] | None
    try:
        remote = await _resolve(fetch_remote())
        if isinstance(remote, Success):
            await _resolve(write_cache(remote.data))
            final = Success(map_to_local(remote.data))
        elif isinstance(remote, Error):
            final = remote
        elif isinstance(remote, Loading):
            final = None
        else:
            raise TypeError(f"fetch_remote returned {type(remote).__name__}, not an outcome")
    except Exception as e:
        logger.warning(f"Remote fetch failed: {e}", exc_info=True)
        if on_fetch_failed is not None:
            await _resolve(on_fetch_failed(e))
        final = Error(
            message=str(e) or FETCH_FAILED_MESSAGE,
            provider=provider or DEFAULT_ERROR_PROVIDER,
        )

    if final is not None:
        yield final
