"""Wallhaven adapter using async patterns and the canonical domain model."""

import asyncio
import random
import string
from typing import Any

from domain.provider import ProviderId
from domain.result import CallOutcome
from domain.wallpaper import Wallpaper
from services.mappers import WallhavenMapper
from services.provider_base import WallpaperProvider
from services.safe_call import ResilientCaller


class WallhavenService(WallpaperProvider):
    """Async adapter for searching wallpapers on the Wallhaven API."""

    provider_id = ProviderId.WALLHAVEN
    BASE_URL = "https://wallhaven.cc/api/v1"
    RATE_LIMIT = 45  # requests per minute
    REQUEST_INTERVAL = 60 / RATE_LIMIT  # seconds between requests

    # categories: [general][anime][people], purity: [sfw][sketchy][nsfw]
    PRESETS = {
        "Anime": {"purity": "100", "categories": "010"},
        "People": {"purity": "100", "categories": "001"},
        "General": {"purity": "100", "categories": "100"},
    }
    SEARCH_FILTERS = (
        "categories",
        "purity",
        "sorting",
        "order",
        "atleast",
        "topRange",
        "ratios",
        "colors",
        "resolutions",
        "seed",
    )

    def __init__(
        self,
        caller: ResilientCaller,
        api_key: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize Wallhaven adapter.

        Args:
            caller: Resilient call wrapper shared by all adapters
            api_key: Wallhaven API key (optional, needed for sketchy/nsfw purity)
            timeout: Total request timeout in seconds
        """
        super().__init__(caller, WallhavenMapper(), api_key=api_key, timeout=timeout)
        self._last_request_time = 0.0

    def _auth_headers(self) -> dict[str, str]:
        return {"X-API-Key": self.api_key} if self.api_key else {}

    async def _rate_limit(self) -> None:
        """Enforce spacing between requests."""
        loop = asyncio.get_running_loop()
        time_since_last = loop.time() - self._last_request_time

        if time_since_last < self.REQUEST_INTERVAL:
            await asyncio.sleep(self.REQUEST_INTERVAL - time_since_last)

        self._last_request_time = loop.time()

    async def _request(self, path: str, params: dict[str, Any] | None = None) -> Any:
        await self._rate_limit()
        return await self._get_json(path, params)

    def _search_params(self, query: str, page: int, filters: dict[str, str]) -> dict:
        params: dict[str, Any] = {
            "q": query,
            "categories": "111",
            "purity": "100",
            "sorting": "date_added",
            "order": "desc",
            "page": page,
        }
        preset = self.PRESETS.get(filters.get("preset", ""))
        if preset:
            params.update(preset)
        params.update({key: filters[key] for key in self.SEARCH_FILTERS if filters.get(key)})
        return params

    async def _search(
        self, query: str, page: int, page_size: int, filters: dict[str, str]
    ) -> CallOutcome[list[Wallpaper]]:
        # Wallhaven pages are fixed at 24 results; trim to the requested size.
        params = self._search_params(query, page, filters)
        outcome = await self._fetch_many(
            lambda: self._request("search", params),
            extract=lambda data: data.get("data", []),
        )
        return outcome.map(lambda items: items[:page_size])

    async def get_featured(self, page: int, page_size: int) -> CallOutcome[list[Wallpaper]]:
        return await self._search(
            "", page, page_size, {"sorting": "toplist", "topRange": "1M"}
        )

    async def search(
        self,
        query: str,
        page: int,
        page_size: int,
        filters: dict[str, str] | None = None,
    ) -> CallOutcome[list[Wallpaper]]:
        """Search wallpapers with tag support (e.g. ``"+mountains -anime"``).

        Args:
            query: Search query
            page: Page number (1-indexed)
            page_size: Maximum results returned
            filters: Wallhaven parameters (categories, purity, sorting, order,
                atleast, topRange, ratios, colors, resolutions, seed) or a
                ``preset`` name from :attr:`PRESETS`
        """
        return await self._search(query, page, page_size, filters or {})

    async def get_by_id(self, native_id: str) -> CallOutcome[Wallpaper | None]:
        return await self._fetch_one(
            lambda: self._request(f"w/{native_id}"),
            extract=lambda data: data.get("data"),
        )

    async def get_random(
        self, count: int, category: str | None = None
    ) -> CallOutcome[list[Wallpaper]]:
        seed = "".join(random.choices(string.ascii_letters + string.digits, k=6))
        return await self._search(category or "", 1, count, {"sorting": "random", "seed": seed})

    async def get_by_collection(
        self, collection_id: str, page: int, page_size: int
    ) -> CallOutcome[list[Wallpaper]]:
        """Wallhaven groups wallpapers by tag; ``collection_id`` is a tag id."""
        return await self._search(f"id:{collection_id}", page, page_size, {})
