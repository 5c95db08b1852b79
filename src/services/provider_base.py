"""Uniform adapter contract over upstream wallpaper providers."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any, ClassVar, TypeVar

import aiohttp

from domain.provider import ProviderId
from domain.result import CallOutcome, Error, Success
from domain.wallpaper import Collection, Wallpaper
from services.base import BaseService
from services.mappers import WallpaperMapper
from services.safe_call import ResilientCaller

T = TypeVar("T")

_MALFORMED_ERRORS = (AttributeError, KeyError, OverflowError, TypeError, ValueError)


def _header_int(headers: Mapping, name: str) -> int | None:
    value = headers.get(name)
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


class WallpaperProvider(BaseService, ABC):
    """Base adapter: owns the HTTP session and the call/map pipeline.

    Subclasses build provider-specific requests and hand them to
    :meth:`_fetch_many` / :meth:`_fetch_one`, which run them through the
    :class:`ResilientCaller` and map native records with the provider's
    schema mapper. No public method raises; failures come back as ``Error``.
    """

    provider_id: ClassVar[ProviderId]
    BASE_URL: ClassVar[str]

    def __init__(
        self,
        caller: ResilientCaller,
        mapper: WallpaperMapper,
        api_key: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        super().__init__()
        self.api_key = api_key
        self.mapper = mapper
        self._caller = caller
        self._timeout = timeout
        self._session: aiohttp.ClientSession | None = None

    # Transport

    def _auth_headers(self) -> dict[str, str]:
        """Headers sent with every request."""
        return {}

    def _auth_params(self) -> dict[str, str]:
        """Query parameters sent with every request."""
        return {}

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers=self._auth_headers(),
                timeout=aiohttp.ClientTimeout(total=self._timeout),
            )
        return self._session

    def _observe_headers(self, headers: Any) -> None:
        """Feed upstream quota headers to the usage tracker."""
        if not isinstance(headers, Mapping):
            return
        lowered = {str(k).lower(): v for k, v in headers.items()}
        remaining = _header_int(lowered, "x-ratelimit-remaining")
        if remaining is not None:
            self._caller.tracker.observe_rate_limit_headers(
                self.provider_id, _header_int(lowered, "x-ratelimit-limit"), remaining
            )

    async def _get_json(
        self, path: str, params: dict[str, Any] | None = None, base_url: str | None = None
    ) -> Any:
        """GET a JSON document; non-2xx statuses raise ClientResponseError."""
        query = {
            key: str(value).lower() if isinstance(value, bool) else value
            for key, value in (params or {}).items()
            if value is not None and value != ""
        }
        query.update(self._auth_params())

        session = await self._get_session()
        url = f"{base_url or self.BASE_URL}/{path}"
        async with session.get(url, params=query) as response:
            self._observe_headers(response.headers)
            response.raise_for_status()
            return await response.json()

    # Call/map pipeline

    def _map_records(
        self, records: Iterable[Any], to_model: Callable[[dict], T]
    ) -> list[T]:
        items: list[T] = []
        for record in records:
            try:
                items.append(to_model(record))
            except _MALFORMED_ERRORS as e:
                self.log_warning(f"Failed to parse {self.provider_id.value} record: {e}")
        return items

    async def _fetch_many(
        self,
        request: Callable[[], Awaitable[Any]],
        extract: Callable[[Any], Iterable[Any]] = lambda data: data,
        to_model: Callable[[dict], T] | None = None,
    ) -> CallOutcome[list[T]]:
        outcome = await self._caller.call(self.provider_id, request)
        if not isinstance(outcome, Success):
            return outcome
        try:
            records = extract(outcome.data) or []
            items = self._map_records(records, to_model or self.mapper.to_wallpaper)
        except _MALFORMED_ERRORS as e:
            self.log_error(f"Malformed {self.provider_id.value} response: {e}")
            return Error(message=f"Malformed response: {e}", provider=self.provider_id)
        self.log_debug(f"Mapped {len(items)} {self.provider_id.value} records")
        return Success(items)

    async def _fetch_one(
        self,
        request: Callable[[], Awaitable[Any]],
        extract: Callable[[Any], Any] = lambda data: data,
        to_model: Callable[[dict], T] | None = None,
    ) -> CallOutcome[T | None]:
        outcome = await self._caller.call(self.provider_id, request)
        if not isinstance(outcome, Success):
            return outcome
        try:
            record = extract(outcome.data)
            item = (to_model or self.mapper.to_wallpaper)(record) if record else None
        except _MALFORMED_ERRORS as e:
            self.log_error(f"Malformed {self.provider_id.value} response: {e}")
            return Error(message=f"Malformed response: {e}", provider=self.provider_id)
        return Success(item)

    # Adapter contract

    @abstractmethod
    async def get_featured(self, page: int, page_size: int) -> CallOutcome[list[Wallpaper]]:
        """Editorial / curated wallpapers, 1-indexed pages."""

    @abstractmethod
    async def search(
        self,
        query: str,
        page: int,
        page_size: int,
        filters: dict[str, str] | None = None,
    ) -> CallOutcome[list[Wallpaper]]:
        """Search wallpapers; ``filters`` keys are provider specific."""

    @abstractmethod
    async def get_by_id(self, native_id: str) -> CallOutcome[Wallpaper | None]:
        """Fetch one wallpaper by its provider-native id."""

    @abstractmethod
    async def get_random(
        self, count: int, category: str | None = None
    ) -> CallOutcome[list[Wallpaper]]:
        """Random selection, optionally narrowed to a category or query."""

    async def get_collections(self, page: int, page_size: int) -> CallOutcome[list[Collection]]:
        return Success([])

    async def get_by_collection(
        self, collection_id: str, page: int, page_size: int
    ) -> CallOutcome[list[Wallpaper]]:
        return Success([])

    async def track_download(self, native_id: str) -> CallOutcome[None]:
        return Success(None)

    # Lifecycle

    async def close(self) -> None:
        """Close aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self.log_debug("Closed aiohttp session")

    async def __aenter__(self) -> "WallpaperProvider":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
