# -*- coding: utf-8 -*-
"""
src/capcap/core/settings.py

Region and capture settings shared between the GUI and the scheduler.

The GUI writes settings at any time (dragging the overlay, moving a slider)
while the capture loop is running. Every write builds a new immutable
``CaptureConfig`` and swaps it in under a lock, so each tick reads one
consistent snapshot at its start instead of re-reading fields mid-tick.
"""

import threading
from dataclasses import dataclass, replace
from typing import Dict, Optional

from .similarity import DEFAULT_DEDUP_THRESHOLD

MIN_INTERVAL_SECONDS = 0.1
DEFAULT_INTERVAL_SECONDS = 1.0
DEFAULT_OVERLAY_TRANSPARENCY = 0.7


@dataclass(frozen=True)
class Rectangle:
    """An axis-aligned screen rectangle in global top-left coordinates."""
    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_points(cls, x1: int, y1: int, x2: int, y2: int) -> "Rectangle":
        """Builds a normalized rectangle from two opposite corners of a drag."""
        left, right = sorted((int(x1), int(x2)))
        top, bottom = sorted((int(y1), int(y2)))
        return cls(left, top, right - left, bottom - top)

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def intersects(self, other: "Rectangle") -> bool:
        return (self.x < other.right and other.x < self.right
                and self.y < other.bottom and other.y < self.bottom)

    def moved_to(self, x: int, y: int) -> "Rectangle":
        return replace(self, x=int(x), y=int(y))

    def resized_to(self, width: int, height: int) -> "Rectangle":
        return replace(self, width=int(width), height=int(height))

    def to_monitor(self) -> Dict[str, int]:
        """The rectangle as an mss monitor dict."""
        return {
            "top": self.y,
            "left": self.x,
            "width": self.width,
            "height": self.height,
        }


def clamp_interval(seconds: float) -> float:
    return max(MIN_INTERVAL_SECONDS, float(seconds))


def clamp_unit(value: float) -> float:
    return min(max(0.0, float(value)), 1.0)


@dataclass(frozen=True)
class CaptureConfig:
    """Immutable snapshot of the capture settings read by one tick."""
    region: Optional[Rectangle] = None
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS
    dedup_threshold: float = DEFAULT_DEDUP_THRESHOLD
    overlay_transparency: float = DEFAULT_OVERLAY_TRANSPARENCY

    @property
    def has_region(self) -> bool:
        return self.region is not None


class CaptureSettings:
    """
    The single owned, thread-safe capture configuration.

    Setters clamp their input: the interval never drops below
    ``MIN_INTERVAL_SECONDS`` and the threshold and transparency stay in
    [0, 1].
    """

    def __init__(self, region: Optional[Rectangle] = None,
                 interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
                 dedup_threshold: float = DEFAULT_DEDUP_THRESHOLD,
                 overlay_transparency: float = DEFAULT_OVERLAY_TRANSPARENCY):
        self._lock = threading.Lock()
        self._snapshot = CaptureConfig(
            region=region,
            interval_seconds=clamp_interval(interval_seconds),
            dedup_threshold=clamp_unit(dedup_threshold),
            overlay_transparency=clamp_unit(overlay_transparency),
        )

    def snapshot(self) -> CaptureConfig:
        with self._lock:
            return self._snapshot

    def _update(self, **changes) -> CaptureConfig:
        with self._lock:
            self._snapshot = replace(self._snapshot, **changes)
            return self._snapshot

    # --- Properties ---

    @property
    def region(self) -> Optional[Rectangle]:
        return self.snapshot().region

    @region.setter
    def region(self, value: Optional[Rectangle]):
        self._update(region=value)

    @property
    def interval_seconds(self) -> float:
        return self.snapshot().interval_seconds

    @interval_seconds.setter
    def interval_seconds(self, value: float):
        self._update(interval_seconds=clamp_interval(value))

    @property
    def dedup_threshold(self) -> float:
        return self.snapshot().dedup_threshold

    @dedup_threshold.setter
    def dedup_threshold(self, value: float):
        self._update(dedup_threshold=clamp_unit(value))

    @property
    def overlay_transparency(self) -> float:
        return self.snapshot().overlay_transparency

    @overlay_transparency.setter
    def overlay_transparency(self, value: float):
        self._update(overlay_transparency=clamp_unit(value))

    # --- Overlay drag support ---

    def move_region(self, x: int, y: int) -> Optional[Rectangle]:
        """Moves the region origin. Does nothing when no region is selected."""
        with self._lock:
            region = self._snapshot.region
            if region is None:
                return None
            region = region.moved_to(x, y)
            self._snapshot = replace(self._snapshot, region=region)
            return region

    def resize_region(self, width: int, height: int) -> Optional[Rectangle]:
        """Resizes the region. Does nothing when no region is selected."""
        with self._lock:
            region = self._snapshot.region
            if region is None:
                return None
            region = region.resized_to(width, height)
            self._snapshot = replace(self._snapshot, region=region)
            return region
