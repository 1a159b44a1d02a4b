"""Byte-bounded LRU caches for decoded images and loaded fonts."""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass

import numpy as np
from PIL import ImageFont

_LOG = logging.getLogger("imbind.engine.cache")


@dataclass(slots=True)
class CachedImage:
    stamp: tuple[int, int]
    pixels: np.ndarray
    format: str | None
    has_alpha: bool


class ImageCache:
    """Path-keyed LRU of decoded pixel buffers; entries are copied in and out."""

    def __init__(self, limit: int) -> None:
        self._limit = max(0, int(limit))
        self._entries: OrderedDict[str, CachedImage] = OrderedDict()

    @property
    def limit(self) -> int:
        return self._limit

    @limit.setter
    def limit(self, value: int) -> None:
        self._limit = max(0, int(value))
        self._evict_overflow()

    @property
    def used(self) -> int:
        return sum(entry.pixels.nbytes for entry in self._entries.values())

    def get(self, path: str, stamp: tuple[int, int]) -> CachedImage | None:
        entry = self._entries.get(path)
        if entry is None:
            return None
        if entry.stamp != stamp:
            self._entries.pop(path, None)
            return None
        self._entries.move_to_end(path)
        return CachedImage(
            stamp=entry.stamp,
            pixels=entry.pixels.copy(),
            format=entry.format,
            has_alpha=entry.has_alpha,
        )

    def put(self, path: str, entry: CachedImage) -> None:
        if entry.pixels.nbytes > self._limit:
            self._entries.pop(path, None)
            return
        self._entries[path] = CachedImage(
            stamp=entry.stamp,
            pixels=entry.pixels.copy(),
            format=entry.format,
            has_alpha=entry.has_alpha,
        )
        self._entries.move_to_end(path)
        self._evict_overflow()

    def evict(self, path: str | None) -> None:
        if path is not None:
            self._entries.pop(path, None)

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def clear(self) -> None:
        self._entries.clear()

    def _evict_overflow(self) -> None:
        while self._entries and self.used > self._limit:
            path, _ = self._entries.popitem(last=False)
            _LOG.debug("image_cache_evict path=%s", path)


@dataclass(slots=True)
class CachedFont:
    face: ImageFont.FreeTypeFont | ImageFont.ImageFont
    path: str | None
    cost: int


class FontCache:
    """Name-keyed LRU of loaded font faces, bounded by font file sizes."""

    def __init__(self, limit: int) -> None:
        self._limit = max(0, int(limit))
        self._entries: OrderedDict[str, CachedFont] = OrderedDict()

    @property
    def limit(self) -> int:
        return self._limit

    @limit.setter
    def limit(self, value: int) -> None:
        self._limit = max(0, int(value))
        self._evict_overflow()

    def get(self, name: str) -> CachedFont | None:
        entry = self._entries.get(name)
        if entry is not None:
            self._entries.move_to_end(name)
        return entry

    def put(self, name: str, entry: CachedFont) -> None:
        self._entries[name] = entry
        self._entries.move_to_end(name)
        self._evict_overflow()

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def _evict_overflow(self) -> None:
        while self._entries and sum(entry.cost for entry in self._entries.values()) > self._limit:
            name, _ = self._entries.popitem(last=False)
            _LOG.debug("font_cache_evict name=%s", name)
