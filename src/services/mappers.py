"""Schema mappers from provider-native records to canonical models.

Every mapper is a pure, total function over the decoded JSON dict of one
provider record: missing or null fields fall back to defaults instead of
raising, so one odd record never sinks a whole page.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from domain.provider import ProviderId
from domain.wallpaper import Collection, Resolution, Wallpaper


def _dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _tag_names(tags: Any, field: str) -> tuple[str, ...]:
    names = (_str(_dict(tag).get(field)) for tag in _list(tags))
    return tuple(name for name in names if name)


def _parse_datetime(value: Any) -> datetime | None:
    """Parse ISO-8601 or ``YYYY-MM-DD HH:MM:SS`` timestamps, None if malformed."""
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _resolution(width: Any, height: Any, fallback: Any = None) -> Resolution:
    """Use numeric dimensions when present, else parse a ``"WxH"`` string."""
    w, h = _int(width), _int(height)
    if w > 0 and h > 0:
        return Resolution(w, h)
    return Resolution.parse(fallback)


class WallpaperMapper(ABC):
    """Converts one provider-native record into a Wallpaper."""

    provider: ProviderId

    @abstractmethod
    def to_wallpaper(self, record: dict) -> Wallpaper:
        """Map a single native record."""

    def to_wallpapers(self, records: Iterable[dict]) -> list[Wallpaper]:
        return [self.to_wallpaper(record) for record in records]

    def item_id(self, native_id: Any) -> str:
        return f"{self.provider.prefix}_{native_id if native_id is not None else ''}"


class UnsplashMapper(WallpaperMapper):
    provider = ProviderId.UNSPLASH

    def to_wallpaper(self, record: dict) -> Wallpaper:
        urls = _dict(record.get("urls"))
        user = _dict(record.get("user"))
        resolution = _resolution(record.get("width"), record.get("height"))
        return Wallpaper(
            id=self.item_id(record.get("id")),
            title=record.get("description") or record.get("alt_description"),
            description=record.get("description"),
            url=_str(urls.get("full")),
            thumbnail_url=_str(urls.get("small")),
            preview_url=_str(urls.get("regular")),
            author=_str(user.get("name")),
            author_url=_str(_dict(user.get("links")).get("html")),
            source=self.provider,
            source_url=_str(_dict(record.get("links")).get("html")),
            attribution_required=True,
            resolution=resolution,
            tags=_tag_names(record.get("tags"), "title"),
            download_count=_int(record.get("likes")),
            created_at=_parse_datetime(record.get("created_at")),
        )

    def to_collection(self, record: dict) -> Collection:
        cover = _dict(record.get("cover_photo"))
        return Collection(
            id=self.item_id(record.get("id")),
            title=_str(record.get("title")),
            description=record.get("description"),
            cover_url=_str(_dict(cover.get("urls")).get("regular")),
            wallpaper_count=_int(record.get("total_photos")),
            source=self.provider,
            source_url=_str(_dict(record.get("links")).get("html")),
            tags=_tag_names(record.get("tags"), "title"),
            is_featured=bool(record.get("featured", False)),
            creator=_str(_dict(record.get("user")).get("name")),
        )


class PexelsMapper(WallpaperMapper):
    """Maps Pexels photos and videos; videos are premium live content."""

    provider = ProviderId.PEXELS

    def to_wallpaper(self, record: dict) -> Wallpaper:
        src = _dict(record.get("src"))
        return Wallpaper(
            id=self.item_id(f"photo_{record.get('id')}"),
            title=record.get("alt") or None,
            url=_str(src.get("original")),
            thumbnail_url=_str(src.get("medium")),
            preview_url=_str(src.get("large")),
            author=_str(record.get("photographer")),
            author_url=_str(record.get("photographer_url")),
            source=self.provider,
            source_url=_str(record.get("url")),
            attribution_required=True,
            resolution=_resolution(record.get("width"), record.get("height")),
        )

    def to_video_wallpaper(self, record: dict) -> Wallpaper:
        mp4_files = [
            _dict(f)
            for f in _list(record.get("video_files"))
            if _dict(f).get("file_type") == "video/mp4"
        ]
        best = max(
            mp4_files,
            key=lambda f: _int(f.get("width")) * _int(f.get("height")),
            default={},
        )
        user = _dict(record.get("user"))
        return Wallpaper(
            id=self.item_id(f"video_{record.get('id')}"),
            title=f"Pexels Video {record.get('id')}",
            url=_str(best.get("link")),
            thumbnail_url=_str(record.get("image")),
            preview_url=_str(record.get("image")),
            author=_str(user.get("name")),
            author_url=_str(user.get("url")),
            source=self.provider,
            source_url=_str(record.get("url")),
            attribution_required=True,
            resolution=_resolution(record.get("width"), record.get("height")),
            is_premium=True,
            is_live=True,
        )

    def to_video_wallpapers(self, records: Iterable[dict]) -> list[Wallpaper]:
        return [self.to_video_wallpaper(record) for record in records]

    def to_collection(self, record: dict) -> Collection:
        media = _list(record.get("media"))
        cover = _dict(_dict(media[0]).get("src")).get("medium") if media else ""
        native_id = record.get("id")
        return Collection(
            id=self.item_id(native_id),
            title=_str(record.get("title")),
            description=record.get("description"),
            cover_url=_str(cover),
            wallpaper_count=_int(record.get("photos_count")),
            source=self.provider,
            source_url=f"https://www.pexels.com/collections/{native_id}",
            is_featured=True,
        )


class PixabayMapper(WallpaperMapper):
    provider = ProviderId.PIXABAY

    def to_wallpaper(self, record: dict) -> Wallpaper:
        tags = tuple(
            tag.strip() for tag in _str(record.get("tags")).split(",") if tag.strip()
        )
        return Wallpaper(
            id=self.item_id(record.get("id")),
            url=_str(record.get("largeImageURL")),
            thumbnail_url=_str(record.get("webformatURL")),
            preview_url=_str(record.get("webformatURL")),
            author=_str(record.get("user")),
            author_url=_str(record.get("userImageURL")),
            source=self.provider,
            source_url=_str(record.get("pageURL")),
            resolution=_resolution(record.get("imageWidth"), record.get("imageHeight")),
            tags=tags,
            download_count=_int(record.get("downloads")),
        )


class WallhavenMapper(WallpaperMapper):
    """Maps Wallhaven wallpapers; non-SFW "people" content is premium."""

    provider = ProviderId.WALLHAVEN

    def to_wallpaper(self, record: dict) -> Wallpaper:
        thumbs = _dict(record.get("thumbs"))
        category = _str(record.get("category")) or "general"
        purity = _str(record.get("purity")) or "sfw"
        return Wallpaper(
            id=self.item_id(record.get("id")),
            url=_str(record.get("path")),
            thumbnail_url=_str(thumbs.get("small")),
            preview_url=_str(thumbs.get("original") or thumbs.get("large")),
            author=_str(_dict(record.get("uploader")).get("username")),
            source=self.provider,
            source_url=_str(record.get("url")),
            resolution=_resolution(
                record.get("dimension_x"),
                record.get("dimension_y"),
                fallback=record.get("resolution"),
            ),
            tags=_tag_names(record.get("tags"), "name"),
            is_premium=category == "people" and purity != "sfw",
            download_count=_int(record.get("favorites")),
            created_at=_parse_datetime(record.get("created_at")),
        )
