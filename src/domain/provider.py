"""Provider identifiers for upstream wallpaper sources."""

from enum import Enum


class ProviderId(Enum):
    """Closed set of upstream wallpaper providers."""

    UNSPLASH = "unsplash"
    PEXELS = "pexels"
    PIXABAY = "pixabay"
    WALLHAVEN = "wallhaven"

    @property
    def prefix(self) -> str:
        """Namespace prefix used in canonical item ids."""
        return self.value

    @property
    def display_name(self) -> str:
        """Human readable provider name."""
        return self.value.capitalize()

    @classmethod
    def from_item_id(cls, item_id: str) -> "ProviderId":
        """Resolve the provider owning a namespaced id like ``wallhaven_abc``.

        Raises:
            ValueError: If the id has no known provider prefix
        """
        prefix, sep, _ = item_id.partition("_")
        if not sep:
            raise ValueError(f"Not a namespaced id: {item_id!r}")
        try:
            return cls(prefix)
        except ValueError:
            raise ValueError(f"Unknown provider prefix in id: {item_id!r}") from None
