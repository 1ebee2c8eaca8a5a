# qrscan/__init__.py

"""
QR image reader.

Exposes:

    process_qr_image(image_bytes: bytes) -> dict
    parse_content(text: str) -> ParsedResult
"""

from .content.actions import parse_content
from .qr_scanner import process_qr_image

__all__ = ["parse_content", "process_qr_image"]
