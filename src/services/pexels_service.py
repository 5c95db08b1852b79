"""Pexels adapter, including the video endpoints used for live wallpapers."""

import random

from domain.provider import ProviderId
from domain.result import CallOutcome
from domain.wallpaper import Collection, Wallpaper
from services.mappers import PexelsMapper
from services.provider_base import WallpaperProvider
from services.safe_call import ResilientCaller


def _strip_kind(native_id: str) -> str:
    """Accept ``photo_123`` / ``video_123`` as well as bare ``123``."""
    for kind in ("photo_", "video_"):
        if native_id.startswith(kind):
            return native_id[len(kind):]
    return native_id


class PexelsService(WallpaperProvider):
    """Async adapter for the Pexels photo and video APIs."""

    provider_id = ProviderId.PEXELS
    BASE_URL = "https://api.pexels.com/v1"
    VIDEO_BASE_URL = "https://api.pexels.com/videos"
    RANDOM_PAGE_RANGE = (1, 50)

    def __init__(
        self,
        caller: ResilientCaller,
        api_key: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        super().__init__(caller, PexelsMapper(), api_key=api_key, timeout=timeout)

    def _auth_headers(self) -> dict[str, str]:
        return {"Authorization": self.api_key} if self.api_key else {}

    async def get_featured(self, page: int, page_size: int) -> CallOutcome[list[Wallpaper]]:
        return await self._fetch_many(
            lambda: self._get_json("curated", {"page": page, "per_page": page_size}),
            extract=lambda data: data.get("photos", []),
        )

    async def search(
        self,
        query: str,
        page: int,
        page_size: int,
        filters: dict[str, str] | None = None,
    ) -> CallOutcome[list[Wallpaper]]:
        """Search photos; ``filters`` may carry orientation, size and color."""
        filters = filters or {}
        params = {
            "query": query,
            "page": page,
            "per_page": page_size,
            "orientation": filters.get("orientation"),
            "size": filters.get("size"),
            "color": filters.get("color"),
        }
        return await self._fetch_many(
            lambda: self._get_json("search", params),
            extract=lambda data: data.get("photos", []),
        )

    async def get_by_id(self, native_id: str) -> CallOutcome[Wallpaper | None]:
        if native_id.startswith("video_"):
            return await self._fetch_one(
                lambda: self._get_json(
                    f"videos/{_strip_kind(native_id)}", base_url=self.VIDEO_BASE_URL
                ),
                to_model=self.mapper.to_video_wallpaper,
            )
        return await self._fetch_one(
            lambda: self._get_json(f"photos/{_strip_kind(native_id)}")
        )

    async def get_random(
        self, count: int, category: str | None = None
    ) -> CallOutcome[list[Wallpaper]]:
        """Pexels has no random endpoint; pick a random curated or search page."""
        page = random.randint(*self.RANDOM_PAGE_RANGE)
        if category:
            return await self.search(category, page, count)
        return await self.get_featured(page, count)

    async def get_collections(self, page: int, page_size: int) -> CallOutcome[list[Collection]]:
        return await self._fetch_many(
            lambda: self._get_json(
                "collections/featured", {"page": page, "per_page": page_size}
            ),
            extract=lambda data: data.get("collections", []),
            to_model=self.mapper.to_collection,
        )

    async def get_by_collection(
        self, collection_id: str, page: int, page_size: int
    ) -> CallOutcome[list[Wallpaper]]:
        # Collections mix photos and videos; only photos are mapped here.
        return await self._fetch_many(
            lambda: self._get_json(
                f"collections/{collection_id}",
                {"page": page, "per_page": page_size, "type": "photos"},
            ),
            extract=lambda data: [
                item
                for item in (data.get("media") or [])
                if item.get("type") in (None, "Photo")
            ],
        )

    async def get_popular_videos(
        self, page: int, page_size: int
    ) -> CallOutcome[list[Wallpaper]]:
        """Popular videos mapped as live wallpapers."""
        return await self._fetch_many(
            lambda: self._get_json(
                "popular", {"page": page, "per_page": page_size}, base_url=self.VIDEO_BASE_URL
            ),
            extract=lambda data: data.get("videos", []),
            to_model=self.mapper.to_video_wallpaper,
        )

    async def search_videos(
        self,
        query: str,
        page: int,
        page_size: int,
        filters: dict[str, str] | None = None,
    ) -> CallOutcome[list[Wallpaper]]:
        filters = filters or {}
        params = {
            "query": query,
            "page": page,
            "per_page": page_size,
            "orientation": filters.get("orientation"),
            "size": filters.get("size"),
        }
        return await self._fetch_many(
            lambda: self._get_json("search", params, base_url=self.VIDEO_BASE_URL),
            extract=lambda data: data.get("videos", []),
            to_model=self.mapper.to_video_wallpaper,
        )
