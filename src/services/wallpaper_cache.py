"""JSON-backed record cache for canonical wallpapers."""

import json
import time
from collections.abc import Callable, Iterable
from pathlib import Path

from rapidfuzz import fuzz, process

from domain.exceptions import CacheError
from domain.wallpaper import Wallpaper
from services.base import BaseService


class WallpaperCache(BaseService):
    """Record store keyed by wallpaper id, plus cached request pages.

    Records live in memory and are written through to ``cache_file`` when one
    is given; without a file the cache is memory-only.
    """

    MIN_SEARCH_SCORE = 60

    def __init__(
        self,
        cache_file: Path | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize record cache.

        Args:
            cache_file: JSON file to persist to (memory-only when None)
            clock: Wall clock used to stamp cached pages
        """
        super().__init__()
        self.cache_file = cache_file
        self._clock = clock
        self._records: dict[str, Wallpaper] = {}
        self._queries: dict[str, dict] = {}
        self._loaded = cache_file is None

    def _load(self) -> None:
        if self._loaded:
            return
        self._loaded = True
        if not self.cache_file.exists():
            return
        try:
            with open(self.cache_file) as f:
                data = json.load(f)
            self._records = {
                item["id"]: Wallpaper.from_dict(item)
                for item in data.get("wallpapers", {}).values()
            }
            self._queries = data.get("queries", {})
            self.log_debug(f"Loaded {len(self._records)} cached wallpapers")
        except (json.JSONDecodeError, OSError, KeyError, ValueError) as e:
            self.log_error(f"Failed to load cache from {self.cache_file}: {e}", exc_info=True)
            raise CacheError(f"Failed to load wallpaper cache: {e}") from e

    def _save(self) -> None:
        if self.cache_file is None:
            return
        try:
            self.cache_file.parent.mkdir(parents=True, exist_ok=True)
            data = {
                "wallpapers": {wid: w.to_dict() for wid, w in self._records.items()},
                "queries": self._queries,
            }
            with open(self.cache_file, "w") as f:
                json.dump(data, f, indent=4)
            self.log_debug(f"Saved {len(self._records)} wallpapers to {self.cache_file}")
        except OSError as e:
            self.log_error(f"Failed to save cache to {self.cache_file}: {e}", exc_info=True)
            raise CacheError(f"Failed to save wallpaper cache: {e}") from e

    def __len__(self) -> int:
        self._load()
        return len(self._records)

    def get(self, wallpaper_id: str) -> Wallpaper | None:
        self._load()
        return self._records.get(wallpaper_id)

    def put(self, wallpaper: Wallpaper) -> None:
        self.put_all([wallpaper])

    def put_all(self, wallpapers: Iterable[Wallpaper]) -> None:
        """Insert or supersede records by id."""
        self._load()
        for wallpaper in wallpapers:
            self._records[wallpaper.id] = wallpaper
        self._save()

    def get_query(self, key: str) -> list[Wallpaper] | None:
        """Wallpapers cached for a request key, None when never cached."""
        self._load()
        entry = self._queries.get(key)
        if entry is None:
            return None
        return [self._records[wid] for wid in entry["ids"] if wid in self._records]

    def put_query(self, key: str, wallpapers: list[Wallpaper]) -> None:
        self._load()
        for wallpaper in wallpapers:
            self._records[wallpaper.id] = wallpaper
        self._queries[key] = {
            "ids": [w.id for w in wallpapers],
            "fetched_at": self._clock(),
        }
        self._save()
        self.log_debug(f"Cached {len(wallpapers)} wallpapers under {key}")

    def query_age(self, key: str) -> float | None:
        """Seconds since a request key was cached, None when never cached."""
        self._load()
        entry = self._queries.get(key)
        if entry is None:
            return None
        return self._clock() - entry["fetched_at"]

    def search(self, query: str, limit: int = 20) -> list[Wallpaper]:
        """Fuzzy search cached wallpapers by id, title, author and tags."""
        self._load()
        wallpapers = list(self._records.values())
        if not query:
            return wallpapers[:limit]

        search_strings = [
            f"{w.id} {w.title or ''} {w.author} {' '.join(w.tags)}" for w in wallpapers
        ]
        results = process.extract(
            query, search_strings, scorer=fuzz.WRatio, limit=limit
        )
        return [wallpapers[index] for _, score, index in results if score >= self.MIN_SEARCH_SCORE]

    def clear(self) -> None:
        self._load()
        self._records.clear()
        self._queries.clear()
        self._save()
        self.log_info("Wallpaper cache cleared")
