"""Wallpaper domain models and value objects."""

from dataclasses import dataclass, field
from datetime import datetime

from .provider import ProviderId


@dataclass(frozen=True)
class Resolution:
    """Value object representing image resolution."""

    width: int
    height: int

    @property
    def aspect_ratio(self) -> float:
        """Calculate aspect ratio, 0.0 for unknown dimensions."""
        if self.height <= 0:
            return 0.0
        return self.width / self.height

    def __str__(self) -> str:
        """String representation."""
        return f"{self.width}x{self.height}"

    def to_dict(self) -> dict:
        """Convert to dict for JSON serialization."""
        return {"width": self.width, "height": self.height}

    @classmethod
    def parse(cls, value: str | None) -> "Resolution":
        """Parse a ``"1920x1080"`` style string.

        Malformed input maps to ``Resolution(0, 0)`` instead of raising.
        """
        if not value or not isinstance(value, str):
            return cls(0, 0)
        width, sep, height = value.lower().partition("x")
        if not sep:
            return cls(0, 0)
        try:
            return cls(int(width.strip()), int(height.strip()))
        except ValueError:
            return cls(0, 0)


@dataclass(frozen=True)
class Wallpaper:
    """Provider-agnostic wallpaper record produced by a schema mapper."""

    id: str
    url: str
    source: ProviderId
    resolution: Resolution = field(default_factory=lambda: Resolution(0, 0))
    title: str | None = None
    description: str | None = None
    thumbnail_url: str = ""
    preview_url: str = ""
    author: str = ""
    author_url: str = ""
    source_url: str = ""
    attribution_required: bool = False
    tags: tuple[str, ...] = ()
    is_premium: bool = False
    is_live: bool = False
    download_count: int = 0
    created_at: datetime | None = None

    @property
    def native_id(self) -> str:
        """Id as known by the upstream provider (prefix stripped)."""
        return self.id.split("_", 1)[1] if "_" in self.id else self.id

    @property
    def is_landscape(self) -> bool:
        """Check if wallpaper is landscape orientation."""
        return self.resolution.aspect_ratio >= 1

    @property
    def is_portrait(self) -> bool:
        """Check if wallpaper is portrait orientation."""
        return 0 < self.resolution.aspect_ratio < 1

    def matches_query(self, query: str) -> bool:
        """Check if wallpaper matches search query."""
        query_lower = query.lower()
        return (
            query_lower in self.id.lower()
            or query_lower in (self.title or "").lower()
            or any(query_lower in tag.lower() for tag in self.tags)
        )

    def to_dict(self) -> dict:
        """Convert to dict for JSON serialization."""
        return {
            "id": self.id,
            "url": self.url,
            "source": self.source.value,
            "resolution": self.resolution.to_dict(),
            "title": self.title,
            "description": self.description,
            "thumbnail_url": self.thumbnail_url,
            "preview_url": self.preview_url,
            "author": self.author,
            "author_url": self.author_url,
            "source_url": self.source_url,
            "attribution_required": self.attribution_required,
            "tags": list(self.tags),
            "is_premium": self.is_premium,
            "is_live": self.is_live,
            "download_count": self.download_count,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Wallpaper":
        """Create from dict for JSON deserialization."""
        resolution_data = data.get("resolution") or {}
        created_at = data.get("created_at")
        return cls(
            id=data.get("id", ""),
            url=data.get("url", ""),
            source=ProviderId(data.get("source", "unsplash")),
            resolution=Resolution(
                width=resolution_data.get("width", 0),
                height=resolution_data.get("height", 0),
            ),
            title=data.get("title"),
            description=data.get("description"),
            thumbnail_url=data.get("thumbnail_url", ""),
            preview_url=data.get("preview_url", ""),
            author=data.get("author", ""),
            author_url=data.get("author_url", ""),
            source_url=data.get("source_url", ""),
            attribution_required=data.get("attribution_required", False),
            tags=tuple(data.get("tags", [])),
            is_premium=data.get("is_premium", False),
            is_live=data.get("is_live", False),
            download_count=data.get("download_count", 0),
            created_at=datetime.fromisoformat(created_at) if created_at else None,
        )


@dataclass(frozen=True)
class Collection:
    """Curated group of wallpapers exposed by a provider."""

    id: str
    title: str
    source: ProviderId
    description: str | None = None
    cover_url: str = ""
    wallpaper_count: int = 0
    source_url: str = ""
    tags: tuple[str, ...] = ()
    is_premium: bool = False
    is_featured: bool = False
    creator: str = ""

    @property
    def native_id(self) -> str:
        return self.id.split("_", 1)[1] if "_" in self.id else self.id

    def to_dict(self) -> dict:
        """Convert to dict for JSON serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "source": self.source.value,
            "description": self.description,
            "cover_url": self.cover_url,
            "wallpaper_count": self.wallpaper_count,
            "source_url": self.source_url,
            "tags": list(self.tags),
            "is_premium": self.is_premium,
            "is_featured": self.is_featured,
            "creator": self.creator,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Collection":
        """Create from dict for JSON deserialization."""
        return cls(
            id=data.get("id", ""),
            title=data.get("title", ""),
            source=ProviderId(data.get("source", "unsplash")),
            description=data.get("description"),
            cover_url=data.get("cover_url", ""),
            wallpaper_count=data.get("wallpaper_count", 0),
            source_url=data.get("source_url", ""),
            tags=tuple(data.get("tags", [])),
            is_premium=data.get("is_premium", False),
            is_featured=data.get("is_featured", False),
            creator=data.get("creator", ""),
        )
