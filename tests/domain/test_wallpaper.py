"""Tests for Wallpaper domain model."""

from datetime import datetime, timezone

import pytest

from domain.provider import ProviderId
from domain.wallpaper import Collection, Resolution, Wallpaper


def test_resolution_value_object():
    """Test Resolution value object."""
    res = Resolution(width=1920, height=1080)
    assert res.width == 1920
    assert res.height == 1080
    assert res.aspect_ratio == 1920 / 1080
    assert str(res) == "1920x1080"


def test_resolution_to_dict():
    """Test Resolution serialization."""
    res = Resolution(width=1920, height=1080)
    assert res.to_dict() == {"width": 1920, "height": 1080}


def test_resolution_immutability():
    """Test Resolution is immutable."""
    res = Resolution(width=1920, height=1080)
    with pytest.raises(AttributeError):
        res.width = 3840


def test_resolution_zero_height_aspect_ratio():
    assert Resolution(1920, 0).aspect_ratio == 0.0


@pytest.mark.parametrize(
    "value,expected",
    [
        ("1920x1080", Resolution(1920, 1080)),
        ("3840 X 2160", Resolution(3840, 2160)),
        ("abcxdef", Resolution(0, 0)),
        ("1920", Resolution(0, 0)),
        ("", Resolution(0, 0)),
        (None, Resolution(0, 0)),
    ],
)
def test_resolution_parse(value, expected):
    """Malformed strings parse to an unknown resolution instead of raising."""
    assert Resolution.parse(value) == expected


def test_wallpaper_domain_model():
    """Test Wallpaper domain model."""
    wallpaper = Wallpaper(
        id="wallhaven_abc123",
        url="https://w.wallhaven.cc/full/ab/wallhaven-abc123.jpg",
        source=ProviderId.WALLHAVEN,
        resolution=Resolution(1920, 1080),
        tags=("nature", "Mountains"),
    )
    assert wallpaper.native_id == "abc123"
    assert wallpaper.is_landscape
    assert not wallpaper.is_portrait
    assert wallpaper.title is None
    assert not wallpaper.is_premium


def test_wallpaper_portrait():
    wallpaper = Wallpaper(
        id="pexels_photo_1",
        url="https://example.com/1.jpg",
        source=ProviderId.PEXELS,
        resolution=Resolution(1080, 1920),
    )
    assert wallpaper.is_portrait
    assert wallpaper.native_id == "photo_1"


def test_wallpaper_matches_query():
    """Test query matching on id, title and tags."""
    wallpaper = Wallpaper(
        id="unsplash_xyz",
        url="https://example.com/x.jpg",
        source=ProviderId.UNSPLASH,
        title="Foggy Forest",
        tags=("trees", "Mountains"),
    )
    assert wallpaper.matches_query("forest")
    assert wallpaper.matches_query("mountain")
    assert wallpaper.matches_query("XYZ")
    assert not wallpaper.matches_query("ocean")


def test_wallpaper_serialization_preserves_fields():
    """Test Wallpaper to_dict/from_dict keeps every field."""
    wallpaper = Wallpaper(
        id="pixabay_42",
        url="https://example.com/42.jpg",
        source=ProviderId.PIXABAY,
        resolution=Resolution(2560, 1440),
        title="Lake",
        thumbnail_url="https://example.com/42_t.jpg",
        author="someone",
        tags=("lake", "blue"),
        is_premium=True,
        download_count=17,
        created_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
    )
    data = wallpaper.to_dict()
    assert data["source"] == "pixabay"
    assert data["tags"] == ["lake", "blue"]
    assert Wallpaper.from_dict(data) == wallpaper


def test_collection_serialization():
    """Test Collection to_dict/from_dict."""
    collection = Collection(
        id="unsplash_317099",
        title="Wallpapers",
        source=ProviderId.UNSPLASH,
        wallpaper_count=120,
        is_featured=True,
        tags=("minimal",),
    )
    assert collection.native_id == "317099"
    assert Collection.from_dict(collection.to_dict()) == collection


def test_provider_from_item_id():
    """Test resolving provider from namespaced ids."""
    assert ProviderId.from_item_id("wallhaven_abc") is ProviderId.WALLHAVEN
    assert ProviderId.from_item_id("pexels_video_9") is ProviderId.PEXELS
    with pytest.raises(ValueError):
        ProviderId.from_item_id("flickr_1")
    with pytest.raises(ValueError):
        ProviderId.from_item_id("noprefix")


def test_provider_display_name():
    assert ProviderId.UNSPLASH.display_name == "Unsplash"
    assert ProviderId.PIXABAY.prefix == "pixabay"
