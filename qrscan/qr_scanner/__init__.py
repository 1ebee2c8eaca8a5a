# qrscan/qr_scanner/__init__.py

"""
QR image scanner package.

Exposes a high-level function:

    process_qr_image(image_bytes: bytes) -> dict

which:
- Validates the upload (PNG / JPEG / GIF, at most 10 MB)
- Runs the preprocessing strategies in priority order until one decodes
- Classifies and parses the payload (URL, WiFi, vCard, SMS, geo, ...)
- Returns the parsed content, the winning strategy and the code's corners
"""

from .qr_engine import process_qr_image, scan_bitmap

__all__ = ["process_qr_image", "scan_bitmap"]
