"""Shared fixtures for qrscan tests."""

import numpy as np
import pytest

from qrscan.qr_scanner.bitmap import Bitmap, DecodeResult, Point


def make_bitmap(width: int, height: int, seed: int = 0) -> Bitmap:
    rng = np.random.default_rng(seed)
    pixels = rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)
    return Bitmap(width=width, height=height, pixels=pixels)


def make_result(text: str = "hello") -> DecodeResult:
    return DecodeResult(
        text=text,
        top_left=Point(1, 1),
        top_right=Point(9, 1),
        bottom_left=Point(1, 9),
        bottom_right=Point(9, 9),
    )


class ScriptedDecoder:
    """Decoder that replays a fixed sequence of outcomes, one per call.

    Each entry is None (no result), a DecodeResult, or an exception to raise.
    """

    name = "scripted"

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def decode(self, pixels, width, height):
        self.calls.append((bytes(pixels), width, height))
        outcome = self.outcomes.pop(0) if self.outcomes else None
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def random_bitmap():
    return make_bitmap(7, 5, seed=42)


@pytest.fixture
def png_bytes():
    import io

    from PIL import Image

    img = Image.new("RGB", (16, 16), (255, 255, 255))
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def encoded_qr(text: str, scale: int = 8, invert: bool = False) -> Bitmap:
    """Render `text` as a QR code with OpenCV's encoder, scaled up for detection."""
    import cv2

    modules = cv2.QRCodeEncoder.create().encode(text)
    gray = cv2.resize(modules, None, fx=scale, fy=scale, interpolation=cv2.INTER_NEAREST)
    if invert:
        gray = 255 - gray
    return Bitmap.from_array(gray)
