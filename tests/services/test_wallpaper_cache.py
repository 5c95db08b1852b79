"""Tests for WallpaperCache."""

import json

import pytest

from domain.exceptions import CacheError
from domain.provider import ProviderId
from domain.wallpaper import Resolution, Wallpaper
from services.wallpaper_cache import WallpaperCache


def make_wallpaper(wid: str, title: str = "", tags=()) -> Wallpaper:
    return Wallpaper(
        id=wid,
        url=f"https://example.com/{wid}.jpg",
        source=ProviderId.from_item_id(wid),
        resolution=Resolution(1920, 1080),
        title=title or None,
        tags=tuple(tags),
    )


def test_memory_only_cache():
    cache = WallpaperCache()
    wallpaper = make_wallpaper("pexels_photo_1")
    cache.put(wallpaper)
    assert cache.get("pexels_photo_1") == wallpaper
    assert cache.get("pexels_photo_2") is None
    assert len(cache) == 1


def test_put_supersedes_by_id():
    """Test a second record with the same id replaces the first."""
    cache = WallpaperCache()
    cache.put(make_wallpaper("unsplash_a", title="old"))
    cache.put(make_wallpaper("unsplash_a", title="new"))
    assert len(cache) == 1
    assert cache.get("unsplash_a").title == "new"


def test_query_never_cached_is_none(clock):
    cache = WallpaperCache(clock=clock)
    assert cache.get_query("pexels:featured:1:20") is None
    assert cache.query_age("pexels:featured:1:20") is None


def test_put_query_and_age(clock):
    cache = WallpaperCache(clock=clock)
    wallpapers = [make_wallpaper("pixabay_1"), make_wallpaper("pixabay_2")]

    cache.put_query("pixabay:featured:1:2", wallpapers)
    clock.advance(30)

    assert cache.get_query("pixabay:featured:1:2") == wallpapers
    assert cache.query_age("pixabay:featured:1:2") == 30
    assert cache.get("pixabay_2") == wallpapers[1]


def test_empty_query_page_is_cached(clock):
    cache = WallpaperCache(clock=clock)
    cache.put_query("wallhaven:search:none::1:20", [])
    assert cache.get_query("wallhaven:search:none::1:20") == []


def test_persists_to_file(temp_dir, clock):
    """Test records and pages survive a reload from disk."""
    cache_file = temp_dir / "cache" / "wallpapers.json"
    cache = WallpaperCache(cache_file, clock=clock)
    wallpapers = [make_wallpaper("wallhaven_abc", tags=["forest"])]
    cache.put_query("wallhaven:featured:1:20", wallpapers)

    reloaded = WallpaperCache(cache_file, clock=clock)
    assert reloaded.get("wallhaven_abc") == wallpapers[0]
    assert reloaded.get_query("wallhaven:featured:1:20") == wallpapers

    data = json.loads(cache_file.read_text())
    assert set(data) == {"wallpapers", "queries"}


def test_corrupt_file_raises_cache_error(temp_dir):
    cache_file = temp_dir / "wallpapers.json"
    cache_file.write_text("{not json")
    cache = WallpaperCache(cache_file)
    with pytest.raises(CacheError):
        cache.get("unsplash_a")


def test_fuzzy_search():
    """Test fuzzy search over titles and tags."""
    cache = WallpaperCache()
    cache.put_all(
        [
            make_wallpaper("unsplash_1", title="Misty mountain sunrise", tags=["mountain"]),
            make_wallpaper("pexels_photo_2", title="City lights", tags=["night", "city"]),
        ]
    )

    results = cache.search("mountain")
    assert results[0].id == "unsplash_1"
    assert cache.search("zzzzqqqq") == []


def test_search_without_query_returns_records():
    cache = WallpaperCache()
    cache.put_all([make_wallpaper("unsplash_1"), make_wallpaper("unsplash_2")])
    assert len(cache.search("", limit=1)) == 1


def test_clear(temp_dir):
    cache_file = temp_dir / "wallpapers.json"
    cache = WallpaperCache(cache_file)
    cache.put(make_wallpaper("unsplash_1"))
    cache.clear()
    assert len(WallpaperCache(cache_file)) == 0
