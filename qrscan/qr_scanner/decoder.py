# qrscan/qr_scanner/decoder.py

"""
Pattern decoder backends.

The pipeline only needs `decode(pixels, width, height) -> DecodeResult | None`.
Two backends are shipped:

- OpenCVDecoder: cv2.QRCodeDetector (default, no system libraries needed)
- ZbarDecoder:   pyzbar, requires libzbar on the host

Library failures are reported as "no result"; only a malformed pixel buffer
raises.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

import cv2
import numpy as np

from .bitmap import CHANNELS, DecodeResult, Point

try:
    from pyzbar.pyzbar import ZBarSymbol
    from pyzbar.pyzbar import decode as decode_zbar
except Exception:  # pragma: no cover - libzbar missing on host
    decode_zbar = None  # type: ignore
    ZBarSymbol = None  # type: ignore


@runtime_checkable
class PatternDecoder(Protocol):
    """Protocol for bi-level pattern decoders."""

    name: str

    def decode(self, pixels: bytes, width: int, height: int) -> Optional[DecodeResult]:
        ...


def _as_rgba(pixels: bytes, width: int, height: int) -> np.ndarray:
    expected = width * height * CHANNELS
    if len(pixels) != expected:
        raise ValueError(
            f"Decoder expects {expected} bytes for {width}x{height} RGBA, got {len(pixels)}"
        )
    return np.frombuffer(pixels, dtype=np.uint8).reshape(height, width, CHANNELS)


class OpenCVDecoder:
    name = "opencv"

    def __init__(self) -> None:
        self._detector = cv2.QRCodeDetector()

    def decode(self, pixels: bytes, width: int, height: int) -> Optional[DecodeResult]:
        rgba = _as_rgba(pixels, width, height)
        img = cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGR)

        try:
            txt, pts, _ = self._detector.detectAndDecode(img)
        except cv2.error:
            return None

        if not txt or pts is None:
            return None

        # OpenCV orders corners clockwise from top-left
        corners = np.asarray(pts, dtype=np.float64).reshape(-1, 2)
        if len(corners) < 4:
            return None
        tl, tr, br, bl = corners[:4]
        return DecodeResult(
            text=txt,
            top_left=Point(float(tl[0]), float(tl[1])),
            top_right=Point(float(tr[0]), float(tr[1])),
            bottom_left=Point(float(bl[0]), float(bl[1])),
            bottom_right=Point(float(br[0]), float(br[1])),
        )


class ZbarDecoder:
    name = "zbar"

    def __init__(self) -> None:
        if decode_zbar is None:
            raise RuntimeError("pyzbar (and the zbar shared library) is required for the zbar decoder.")

    def decode(self, pixels: bytes, width: int, height: int) -> Optional[DecodeResult]:
        rgba = _as_rgba(pixels, width, height)
        gray = cv2.cvtColor(rgba, cv2.COLOR_RGBA2GRAY)

        decoded = decode_zbar(gray, symbols=[ZBarSymbol.QRCODE])
        for obj in decoded:
            raw = obj.data.decode("utf-8", errors="replace")
            if not raw:
                continue

            polygon = [(p.x, p.y) for p in obj.polygon]
            if len(polygon) < 4:
                r = obj.rect
                polygon = [
                    (r.left, r.top),
                    (r.left + r.width, r.top),
                    (r.left + r.width, r.top + r.height),
                    (r.left, r.top + r.height),
                ]
            return DecodeResult.from_polygon(raw, polygon)

        return None


def get_decoder(name: str = "opencv") -> PatternDecoder:
    name = (name or "opencv").strip().lower()
    if name == "opencv":
        return OpenCVDecoder()
    if name == "zbar":
        return ZbarDecoder()
    raise ValueError(f"Unknown decoder backend: {name!r}")
