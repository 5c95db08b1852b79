"""Unsplash adapter."""

from domain.provider import ProviderId
from domain.result import CallOutcome
from domain.wallpaper import Collection, Wallpaper
from services.mappers import UnsplashMapper
from services.provider_base import WallpaperProvider
from services.safe_call import ResilientCaller


class UnsplashService(WallpaperProvider):
    """Async adapter for the Unsplash photo API."""

    provider_id = ProviderId.UNSPLASH
    BASE_URL = "https://api.unsplash.com"

    def __init__(
        self,
        caller: ResilientCaller,
        api_key: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        super().__init__(caller, UnsplashMapper(), api_key=api_key, timeout=timeout)

    def _auth_headers(self) -> dict[str, str]:
        headers = {"Accept-Version": "v1"}
        if self.api_key:
            headers["Authorization"] = f"Client-ID {self.api_key}"
        return headers

    async def get_featured(self, page: int, page_size: int) -> CallOutcome[list[Wallpaper]]:
        return await self._fetch_many(
            lambda: self._get_json(
                "photos", {"page": page, "per_page": page_size, "order_by": "editorial"}
            )
        )

    async def search(
        self,
        query: str,
        page: int,
        page_size: int,
        filters: dict[str, str] | None = None,
    ) -> CallOutcome[list[Wallpaper]]:
        """Search photos.

        Args:
            query: Search terms
            page: Page number (1-indexed)
            page_size: Results per page
            filters: ``color`` and ``order_by`` (relevant, latest)
        """
        filters = filters or {}
        params = {
            "query": query,
            "page": page,
            "per_page": page_size,
            "order_by": filters.get("order_by", "relevant"),
            "color": filters.get("color"),
            "orientation": filters.get("orientation"),
        }
        return await self._fetch_many(
            lambda: self._get_json("search/photos", params),
            extract=lambda data: data.get("results", []),
        )

    async def get_by_id(self, native_id: str) -> CallOutcome[Wallpaper | None]:
        return await self._fetch_one(lambda: self._get_json(f"photos/{native_id}"))

    async def get_random(
        self, count: int, category: str | None = None
    ) -> CallOutcome[list[Wallpaper]]:
        return await self._fetch_many(
            lambda: self._get_json("photos/random", {"count": count, "query": category})
        )

    async def get_collections(self, page: int, page_size: int) -> CallOutcome[list[Collection]]:
        return await self._fetch_many(
            lambda: self._get_json(
                "collections/featured", {"page": page, "per_page": page_size}
            ),
            to_model=self.mapper.to_collection,
        )

    async def get_by_collection(
        self, collection_id: str, page: int, page_size: int
    ) -> CallOutcome[list[Wallpaper]]:
        return await self._fetch_many(
            lambda: self._get_json(
                f"collections/{collection_id}/photos", {"page": page, "per_page": page_size}
            )
        )

    async def track_download(self, native_id: str) -> CallOutcome[None]:
        """Report a download, as the Unsplash API guidelines require."""
        outcome = await self._caller.call(
            self.provider_id, lambda: self._get_json(f"photos/{native_id}/download")
        )
        return outcome.map(lambda _: None)
