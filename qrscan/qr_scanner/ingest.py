# qrscan/qr_scanner/ingest.py

"""
Image ingestion: upload validation and bytes -> Bitmap conversion.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Optional

import numpy as np
from PIL import Image, UnidentifiedImageError

from .. import config
from .bitmap import Bitmap

INVALID_TYPE_MESSAGE = "Invalid file type. Please use PNG, JPG, or GIF images."
TOO_LARGE_MESSAGE = "File size too large. Please use images smaller than 10MB."
UNREADABLE_MESSAGE = "Failed to load image."
TOO_MANY_PIXELS_MESSAGE = "Image dimensions too large. Please use a smaller image."


class ImageRejected(ValueError):
    """Raised with a user-facing message when an upload cannot be scanned."""


@dataclass(frozen=True)
class FileValidation:
    is_valid: bool
    error: Optional[str] = None


def validate_file(mime: Optional[str], size: int, max_bytes: Optional[int] = None) -> FileValidation:
    limit = config.MAX_UPLOAD_BYTES if max_bytes is None else max_bytes

    if (mime or "").lower() not in config.ALLOWED_MIME_TYPES:
        return FileValidation(is_valid=False, error=INVALID_TYPE_MESSAGE)

    if size > limit:
        return FileValidation(is_valid=False, error=TOO_LARGE_MESSAGE)

    return FileValidation(is_valid=True)


def load_image_bytes(image_bytes: bytes) -> Image.Image:
    """Robust loader from raw bytes → PIL image."""
    bio = io.BytesIO(image_bytes)
    try:
        img = Image.open(bio)
        img.load()
    except Image.DecompressionBombError as exc:
        raise ImageRejected(TOO_MANY_PIXELS_MESSAGE) from exc
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageRejected(UNREADABLE_MESSAGE) from exc
    return img


def sniff_mime(img: Image.Image) -> Optional[str]:
    return Image.MIME.get(img.format or "")


def image_to_bitmap(img: Image.Image) -> Bitmap:
    # GIFs and other multi-frame images scan their first frame only
    if getattr(img, "n_frames", 1) > 1:
        img.seek(0)
    rgba = img.convert("RGBA")
    return Bitmap.from_array(np.array(rgba))


def load_bitmap(image_bytes: bytes, mime: Optional[str] = None) -> Bitmap:
    """
    Validate an upload and turn it into an RGBA Bitmap.

    When `mime` is not supplied it is sniffed from the image header. Raises
    ImageRejected with the message to show the user.
    """
    if not image_bytes:
        raise ImageRejected(UNREADABLE_MESSAGE)

    if mime is not None:
        check = validate_file(mime, len(image_bytes))
        if not check.is_valid:
            raise ImageRejected(check.error)
    elif len(image_bytes) > config.MAX_UPLOAD_BYTES:
        raise ImageRejected(TOO_LARGE_MESSAGE)

    img = load_image_bytes(image_bytes)

    if mime is None:
        check = validate_file(sniff_mime(img), len(image_bytes))
        if not check.is_valid:
            raise ImageRejected(check.error)

    return image_to_bitmap(img)
