"""Wallhub - resilient multi-provider wallpaper aggregation."""

try:
    from importlib.metadata import version

    __version__ = version("wallhub")
except Exception:
    __version__ = "0.3.0"
