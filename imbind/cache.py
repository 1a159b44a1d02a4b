"""Engine cache sizes."""

from __future__ import annotations

from imbind.runtime.binding import get_runtime


class Cache:
    """Image and font cache limits, in bytes."""

    @classmethod
    def image_size(cls) -> int:
        return get_runtime().engine.cache_size()

    @classmethod
    def set_image_size(cls, size: int) -> None:
        """Shrinking the limit evicts least recently used images immediately."""
        get_runtime().engine.set_cache_size(max(0, int(size)))

    @classmethod
    def font_size(cls) -> int:
        return get_runtime().engine.font_cache_size()

    @classmethod
    def set_font_size(cls, size: int) -> None:
        get_runtime().engine.set_font_cache_size(max(0, int(size)))

    @classmethod
    def flush_font_cache(cls) -> None:
        get_runtime().engine.flush_font_cache()
