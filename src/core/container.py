"""Dependency injection container for service management."""

from collections.abc import Callable
from logging import getLogger
from typing import Any, TypeVar

from domain.config import Config
from domain.provider import ProviderId
from services.load_balancer import LoadBalancer
from services.pexels_service import PexelsService
from services.pixabay_service import PixabayService
from services.provider_base import WallpaperProvider
from services.safe_call import ResilientCaller
from services.unsplash_service import UnsplashService
from services.usage_tracker import UsageTracker
from services.wallhaven_service import WallhavenService
from services.wallpaper_cache import WallpaperCache
from services.wallpaper_repository import WallpaperRepository

T = TypeVar("T")

ADAPTERS: dict[ProviderId, type[WallpaperProvider]] = {
    ProviderId.UNSPLASH: UnsplashService,
    ProviderId.PEXELS: PexelsService,
    ProviderId.PIXABAY: PixabayService,
    ProviderId.WALLHAVEN: WallhavenService,
}


class ServiceContainer:
    """Dependency injection container for managing service lifecycles."""

    def __init__(self, config: Config) -> None:
        """Initialize container with configuration."""
        self._config = config
        self._services: dict[type, object] = {}
        self._factories: dict[type, Callable[[], Any]] = {}
        self._logger = getLogger(__name__)

    @property
    def config(self) -> Config:
        return self._config

    def register(self, service_class: type[T], factory: Callable[[], T]) -> None:
        """Register a service factory for lazy instantiation."""
        self._factories[service_class] = factory
        self._logger.debug(f"Registered factory for {service_class.__name__}")

    def register_instance(self, service_class: type[T], instance: T) -> None:
        """Register a pre-instantiated service instance."""
        self._services[service_class] = instance
        self._logger.debug(f"Registered instance of {service_class.__name__}")

    def get(self, service_class: type[T]) -> T:
        """Get or create service instance."""
        if service_class not in self._services:
            self._create_service(service_class)
        return self._services[service_class]

    def _create_service(self, service_class: type[T]) -> T:
        """Create service instance using registered factory."""
        if service_class not in self._factories:
            raise KeyError(f"No factory registered for {service_class.__name__}")

        factory = self._factories[service_class]
        instance = factory()
        self._services[service_class] = instance
        self._logger.debug(f"Created instance of {service_class.__name__}")
        return instance

    def reset(self) -> None:
        """Clear all created services (for testing)."""
        self._services.clear()
        self._logger.debug("Container reset")


def build_adapters(
    config: Config, caller: ResilientCaller
) -> dict[ProviderId, WallpaperProvider]:
    """One adapter per provider, all sharing the same resilient caller."""
    return {
        provider: adapter_class(
            caller,
            api_key=config.api_key(provider),
            timeout=config.request_timeout_seconds,
        )
        for provider, adapter_class in ADAPTERS.items()
    }


def create_container(config: Config) -> ServiceContainer:
    """Wire the tracker, balancer, caller, adapters, cache and repository.

    Services are created lazily on first :meth:`ServiceContainer.get`; the
    tracker and caller are shared so every adapter reports to one usage table.
    """
    container = ServiceContainer(config)

    container.register(UsageTracker, lambda: UsageTracker(config.rate_limit_policy()))
    container.register(
        LoadBalancer,
        lambda: LoadBalancer(
            tracker=container.get(UsageTracker),
            quotas=config.quotas,
            reset_window_seconds=config.reset_window_seconds,
        ),
    )
    container.register(
        ResilientCaller,
        lambda: ResilientCaller(
            container.get(UsageTracker),
            max_retries=config.max_retries,
            backoff_base_ms=config.backoff_base_ms,
        ),
    )
    container.register(WallpaperCache, lambda: WallpaperCache(config.cache_file))
    container.register(
        WallpaperRepository,
        lambda: WallpaperRepository(
            build_adapters(config, container.get(ResilientCaller)),
            container.get(LoadBalancer),
            container.get(WallpaperCache),
            cache_ttl_seconds=config.cache_ttl_seconds,
        ),
    )
    return container
