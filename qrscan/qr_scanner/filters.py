# qrscan/qr_scanner/filters.py

"""
Preprocessing filters for the decode pipeline.

Every filter maps a Bitmap to a new Bitmap of the same size. Only the R, G, B
channels are touched; alpha is carried over as-is.
"""

from __future__ import annotations

import cv2
import numpy as np

from .bitmap import Bitmap

CONTRAST = 1.5
CONTRAST_FACTOR = (259 * (CONTRAST + 255)) / (255 * (259 - CONTRAST))

ERODE_KERNEL = np.ones((3, 3), dtype=np.uint8)


# ---------------------------------------------------------
# HELPERS
# ---------------------------------------------------------
def luma(pixels: np.ndarray) -> np.ndarray:
    """Rounded 0.299R + 0.587G + 0.114B, as a (h, w) uint8 array."""
    rgb = pixels[:, :, :3].astype(np.float64)
    weighted = 0.299 * rgb[:, :, 0] + 0.587 * rgb[:, :, 1] + 0.114 * rgb[:, :, 2]
    # round half up
    return np.clip(np.floor(weighted + 0.5), 0, 255).astype(np.uint8)


def _with_gray(src: Bitmap, gray: np.ndarray) -> Bitmap:
    out = src.pixels.copy()
    out[:, :, 0] = gray
    out[:, :, 1] = gray
    out[:, :, 2] = gray
    return src.with_pixels(out)


def _too_small(src: Bitmap) -> bool:
    return src.width < 3 or src.height < 3


def _interior(src: Bitmap, computed: np.ndarray) -> np.ndarray:
    """Copy of src with only the 1-pixel-inset interior taken from `computed`."""
    out = src.pixels.copy()
    out[1:-1, 1:-1, :3] = computed[1:-1, 1:-1, :3]
    return out


# ---------------------------------------------------------
# FILTERS
# ---------------------------------------------------------
def identity(src: Bitmap) -> Bitmap:
    return src


def enhance_contrast(src: Bitmap) -> Bitmap:
    out = src.pixels.copy()
    rgb = out[:, :, :3].astype(np.float64)
    stretched = CONTRAST_FACTOR * (rgb - 128) + 128
    out[:, :, :3] = np.clip(np.rint(stretched), 0, 255).astype(np.uint8)
    return src.with_pixels(out)


def grayscale(src: Bitmap) -> Bitmap:
    return _with_gray(src, luma(src.pixels))


def binary_threshold(src: Bitmap) -> Bitmap:
    """Global mean threshold over luma; one threshold for the whole image."""
    gray = luma(src.pixels)
    threshold = float(gray.astype(np.float64).mean())
    binary = np.where(gray > threshold, 255, 0).astype(np.uint8)
    return _with_gray(src, binary)


def sharpen(src: Bitmap) -> Bitmap:
    """
    3x3 sharpen applied in place, row by row.

    Each interior pixel is computed from the working copy, so the neighbours
    above and to the left are already sharpened when it is visited.
    """
    if _too_small(src):
        return src.copy()

    work = src.pixels[:, :, :3].astype(np.int32)
    width = src.width

    for y in range(1, src.height - 1):
        above, row, below = work[y - 1], work[y], work[y + 1]
        # every term except the left neighbour, which changes as the row advances
        partial = (
            9 * row[1:-1]
            - row[2:]
            - above[:-2] - above[1:-1] - above[2:]
            - below[:-2] - below[1:-1] - below[2:]
        ).tolist()

        left = row[0].tolist()
        for x in range(1, width - 1):
            base = partial[x - 1]
            left = [min(255, max(0, base[c] - left[c])) for c in range(3)]
            row[x] = left

    out = src.pixels.copy()
    out[:, :, :3] = work.astype(np.uint8)
    return src.with_pixels(out)


def invert(src: Bitmap) -> Bitmap:
    out = src.pixels.copy()
    out[:, :, :3] = 255 - out[:, :, :3]
    return src.with_pixels(out)


def erode(src: Bitmap) -> Bitmap:
    """
    3x3 minimum over luma.

    Neighbourhoods are read from the untouched input, so an eroded pixel never
    feeds the minimum of the next pixel in the same pass.
    """
    if _too_small(src):
        return src.copy()

    snapshot = luma(src.pixels)
    minimum = cv2.erode(snapshot, ERODE_KERNEL, borderType=cv2.BORDER_REPLICATE)
    computed = np.zeros_like(src.pixels)
    for channel in range(3):
        computed[:, :, channel] = minimum
    return src.with_pixels(_interior(src, computed))
