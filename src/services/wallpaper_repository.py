"""Repository facade: one provider per request, cache-first reads."""

from collections.abc import AsyncIterator, Mapping

from domain.provider import ProviderId
from domain.result import CallOutcome, Error
from domain.wallpaper import Collection, Wallpaper
from services.base import BaseService
from services.load_balancer import LoadBalancer
from services.provider_base import WallpaperProvider
from services.resource import network_bound_resource
from services.wallpaper_cache import WallpaperCache


class WallpaperRepository(BaseService):
    """Routes requests to provider adapters and reconciles them with the cache.

    Listing reads (featured, search, single wallpaper) are async iterators of
    outcomes from :func:`network_bound_resource`; the rest return one outcome.
    Requests without a pinned provider go to the load balancer's pick.
    """

    def __init__(
        self,
        providers: Mapping[ProviderId, WallpaperProvider],
        balancer: LoadBalancer,
        cache: WallpaperCache,
        cache_ttl_seconds: float = 3600.0,
    ) -> None:
        super().__init__()
        self._providers = dict(providers)
        self._balancer = balancer
        self._cache = cache
        self.cache_ttl_seconds = cache_ttl_seconds

    def _choose(self, provider: ProviderId | None) -> WallpaperProvider | None:
        """Pick the adapter for a request, counting it against the quota.

        Returns ``None`` when no adapter is configured for the request.
        """
        if provider is None:
            if not self._providers:
                return None
            provider = self._balancer.next_provider(self._providers.keys())
        elif provider in self._providers:
            self._balancer.reserve(provider)
        return self._providers.get(provider)

    def _adapter_for_item(self, item_id: str) -> tuple[WallpaperProvider | None, str]:
        try:
            provider = ProviderId.from_item_id(item_id)
        except ValueError:
            return None, item_id
        return self._providers.get(provider), item_id.split("_", 1)[1]

    def _is_stale(self, key: str) -> bool:
        age = self._cache.query_age(key)
        return age is None or age >= self.cache_ttl_seconds

    def _listing(
        self, key: str, adapter: WallpaperProvider, fetch
    ) -> AsyncIterator[CallOutcome[list[Wallpaper]]]:
        # An empty page cached within the TTL is still fresh.
        return network_bound_resource(
            read_cache=lambda: self._cache.get_query(key),
            should_fetch=lambda cached: self._is_stale(key),
            fetch_remote=fetch,
            write_cache=lambda items: self._cache.put_query(key, items),
            map_to_local=list,
            provider=adapter.provider_id,
        )

    def featured(
        self, page: int = 1, page_size: int = 20, provider: ProviderId | None = None
    ) -> AsyncIterator[CallOutcome[list[Wallpaper]]]:
        adapter = self._choose(provider)
        if adapter is None:
            return self._failed(self._no_adapter(provider))
        key = f"{adapter.provider_id.value}:featured:{page}:{page_size}"
        self.log_debug(f"Featured page {page} from {adapter.provider_id.name}")
        return self._listing(key, adapter, lambda: adapter.get_featured(page, page_size))

    def search(
        self,
        query: str,
        page: int = 1,
        page_size: int = 20,
        filters: dict[str, str] | None = None,
        provider: ProviderId | None = None,
    ) -> AsyncIterator[CallOutcome[list[Wallpaper]]]:
        adapter = self._choose(provider)
        if adapter is None:
            return self._failed(self._no_adapter(provider))
        filter_key = ",".join(f"{k}={v}" for k, v in sorted((filters or {}).items()))
        key = f"{adapter.provider_id.value}:search:{query}:{filter_key}:{page}:{page_size}"
        self.log_debug(f"Search {query!r} page {page} on {adapter.provider_id.name}")
        return self._listing(
            key, adapter, lambda: adapter.search(query, page, page_size, filters)
        )

    async def get_wallpaper(self, wallpaper_id: str) -> AsyncIterator[CallOutcome[Wallpaper]]:
        """Cached record first; refreshed from the owning provider if missing."""
        adapter, native_id = self._adapter_for_item(wallpaper_id)
        if adapter is None:
            yield self._unknown(wallpaper_id)
            return

        def fetch():
            self._balancer.reserve(adapter.provider_id)
            return adapter.get_by_id(native_id)

        def write(item: Wallpaper | None) -> None:
            if item is not None:
                self._cache.put(item)

        async for outcome in network_bound_resource(
            read_cache=lambda: self._cache.get(wallpaper_id),
            should_fetch=lambda cached: cached is None,
            fetch_remote=fetch,
            write_cache=write,
            map_to_local=lambda item: item,
            provider=adapter.provider_id,
        ):
            if outcome.is_success and outcome.data is None:
                yield Error(
                    message=f"Wallpaper {wallpaper_id} not found",
                    provider=adapter.provider_id,
                    code=404,
                )
            else:
                yield outcome

    async def random(
        self, count: int = 10, category: str | None = None, provider: ProviderId | None = None
    ) -> CallOutcome[list[Wallpaper]]:
        adapter = self._choose(provider)
        if adapter is None:
            return self._no_adapter(provider)
        return await adapter.get_random(count, category)

    async def collections(
        self, page: int = 1, page_size: int = 20, provider: ProviderId | None = None
    ) -> CallOutcome[list[Collection]]:
        adapter = self._choose(provider)
        if adapter is None:
            return self._no_adapter(provider)
        return await adapter.get_collections(page, page_size)

    async def collection_wallpapers(
        self, collection_id: str, page: int = 1, page_size: int = 20
    ) -> CallOutcome[list[Wallpaper]]:
        adapter, native_id = self._adapter_for_item(collection_id)
        if adapter is None:
            return self._unknown(collection_id)
        self._balancer.reserve(adapter.provider_id)
        return await adapter.get_by_collection(native_id, page, page_size)

    async def track_download(self, wallpaper_id: str) -> CallOutcome[None]:
        adapter, native_id = self._adapter_for_item(wallpaper_id)
        if adapter is None:
            return self._unknown(wallpaper_id)
        self._balancer.reserve(adapter.provider_id)
        return await adapter.track_download(native_id)

    @staticmethod
    async def _failed(error: Error) -> AsyncIterator[CallOutcome[list[Wallpaper]]]:
        yield error

    def _no_adapter(self, provider: ProviderId | None) -> Error:
        target = provider or ProviderId.UNSPLASH
        self.log_warning(f"No provider adapter configured for {target.name}")
        return Error(message=f"No provider configured for {target.name}", provider=target)

    def _unknown(self, item_id: str) -> Error:
        self.log_warning(f"No provider configured for id {item_id}")
        return Error(
            message=f"No provider configured for id {item_id!r}",
            provider=ProviderId.UNSPLASH,
        )

    async def close(self) -> None:
        for adapter in self._providers.values():
            await adapter.close()
