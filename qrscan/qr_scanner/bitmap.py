# qrscan/qr_scanner/bitmap.py

"""
In-memory RGBA bitmap and the decode result produced from it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Sequence

import numpy as np

CHANNELS = 4


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class DecodeResult:
    text: str
    top_left: Point
    top_right: Point
    bottom_left: Point
    bottom_right: Point

    def location(self) -> Dict[str, Dict[str, float]]:
        return {
            "top_left": {"x": self.top_left.x, "y": self.top_left.y},
            "top_right": {"x": self.top_right.x, "y": self.top_right.y},
            "bottom_left": {"x": self.bottom_left.x, "y": self.bottom_left.y},
            "bottom_right": {"x": self.bottom_right.x, "y": self.bottom_right.y},
        }

    @classmethod
    def from_polygon(cls, text: str, points: Iterable[Sequence[float]]) -> "DecodeResult":
        """
        Build a result from an unordered quadrilateral.

        Corners are picked by coordinate sums/differences, which is stable for
        any rotation under 45 degrees.
        """
        pts = [(float(p[0]), float(p[1])) for p in points]
        if len(pts) < 4:
            raise ValueError(f"Expected 4 corner points, got {len(pts)}")
        top_left = min(pts, key=lambda p: p[0] + p[1])
        bottom_right = max(pts, key=lambda p: p[0] + p[1])
        top_right = max(pts, key=lambda p: p[0] - p[1])
        bottom_left = min(pts, key=lambda p: p[0] - p[1])
        return cls(
            text=text,
            top_left=Point(*top_left),
            top_right=Point(*top_right),
            bottom_left=Point(*bottom_left),
            bottom_right=Point(*bottom_right),
        )


@dataclass
class Bitmap:
    """
    Row-major RGBA pixels, shape (height, width, 4), dtype uint8.

    Filters never mutate a Bitmap they receive; they return a new one.
    """

    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Invalid bitmap size: {self.width}x{self.height}")
        arr = np.asarray(self.pixels)
        expected = self.width * self.height * CHANNELS
        if arr.size != expected:
            raise ValueError(
                f"Pixel buffer has {arr.size} values, expected {expected} "
                f"for {self.width}x{self.height} RGBA"
            )
        if arr.dtype != np.uint8:
            arr = arr.astype(np.uint8)
        self.pixels = arr.reshape(self.height, self.width, CHANNELS)

    @classmethod
    def from_bytes(cls, data: bytes, width: int, height: int) -> "Bitmap":
        arr = np.frombuffer(bytes(data), dtype=np.uint8).copy()
        return cls(width=width, height=height, pixels=arr)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "Bitmap":
        """Accept (h, w) gray, (h, w, 3) RGB or (h, w, 4) RGBA arrays."""
        arr = np.asarray(arr, dtype=np.uint8)
        if arr.ndim == 2:
            rgb = np.repeat(arr[:, :, None], 3, axis=2)
            arr = np.dstack([rgb, np.full(arr.shape, 255, dtype=np.uint8)])
        elif arr.ndim == 3 and arr.shape[2] == 3:
            arr = np.dstack([arr, np.full(arr.shape[:2], 255, dtype=np.uint8)])
        elif not (arr.ndim == 3 and arr.shape[2] == CHANNELS):
            raise ValueError(f"Unsupported pixel array shape: {arr.shape}")
        height, width = arr.shape[:2]
        return cls(width=width, height=height, pixels=arr.copy())

    @property
    def data(self) -> bytes:
        return self.pixels.tobytes()

    def copy(self) -> "Bitmap":
        return Bitmap(width=self.width, height=self.height, pixels=self.pixels.copy())

    def with_pixels(self, pixels: np.ndarray) -> "Bitmap":
        return Bitmap(width=self.width, height=self.height, pixels=pixels)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Bitmap):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and np.array_equal(self.pixels, other.pixels)
        )


def corners_or_none(result: Optional[DecodeResult]) -> Optional[Dict[str, Dict[str, float]]]:
    return result.location() if result is not None else None
