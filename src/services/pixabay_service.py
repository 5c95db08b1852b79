"""Pixabay adapter."""

import random

from domain.provider import ProviderId
from domain.result import CallOutcome
from domain.wallpaper import Wallpaper
from services.mappers import PixabayMapper
from services.provider_base import WallpaperProvider
from services.safe_call import ResilientCaller


class PixabayService(WallpaperProvider):
    """Async adapter for the Pixabay image API.

    Pixabay authenticates with a ``key`` query parameter and exposes a single
    search endpoint; featured, random and lookup-by-id are all variations of
    it. It has no collections and no download tracking.
    """

    provider_id = ProviderId.PIXABAY
    BASE_URL = "https://pixabay.com/api"
    SEARCH_FILTERS = ("orientation", "category", "colors", "image_type", "order")
    RANDOM_PAGE_RANGE = (1, 20)

    def __init__(
        self,
        caller: ResilientCaller,
        api_key: str | None = None,
        timeout: float = 30.0,
        safe_search: bool = True,
    ) -> None:
        super().__init__(caller, PixabayMapper(), api_key=api_key, timeout=timeout)
        self.safe_search = safe_search

    def _auth_params(self) -> dict[str, str]:
        return {"key": self.api_key} if self.api_key else {}

    def _search_params(self, **params) -> dict:
        return {"safesearch": self.safe_search, "image_type": "photo", **params}

    async def get_featured(self, page: int, page_size: int) -> CallOutcome[list[Wallpaper]]:
        params = self._search_params(
            editors_choice=True, order="popular", page=page, per_page=page_size
        )
        return await self._fetch_many(
            lambda: self._get_json("", params),
            extract=lambda data: data.get("hits", []),
        )

    async def search(
        self,
        query: str,
        page: int,
        page_size: int,
        filters: dict[str, str] | None = None,
    ) -> CallOutcome[list[Wallpaper]]:
        filters = filters or {}
        params = self._search_params(q=query, page=page, per_page=page_size)
        params.update({key: filters[key] for key in self.SEARCH_FILTERS if filters.get(key)})
        return await self._fetch_many(
            lambda: self._get_json("", params),
            extract=lambda data: data.get("hits", []),
        )

    async def get_by_id(self, native_id: str) -> CallOutcome[Wallpaper | None]:
        return await self._fetch_one(
            lambda: self._get_json("", {"id": native_id, "safesearch": self.safe_search}),
            extract=lambda data: next(iter(data.get("hits") or []), None),
        )

    async def get_random(
        self, count: int, category: str | None = None
    ) -> CallOutcome[list[Wallpaper]]:
        page = random.randint(*self.RANDOM_PAGE_RANGE)
        params = self._search_params(
            q=category or "wallpaper", page=page, per_page=max(count, 3)
        )
        outcome = await self._fetch_many(
            lambda: self._get_json("", params),
            extract=lambda data: data.get("hits", []),
        )
        return outcome.map(lambda items: items[:count])
