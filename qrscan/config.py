# qrscan/config.py

from __future__ import annotations

import os


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


MAX_UPLOAD_BYTES = _int_env("QRSCAN_MAX_UPLOAD_BYTES", 10 * 1024 * 1024)

ALLOWED_MIME_TYPES = (
    "image/png",
    "image/jpeg",
    "image/jpg",
    "image/gif",
)

# "opencv" or "zbar"
DECODER_BACKEND = os.getenv("QRSCAN_DECODER", "opencv").strip().lower()

STRATEGY_PAUSE_SECONDS = _int_env("QRSCAN_STRATEGY_PAUSE_MS", 0) / 1000.0

TEXT_PREVIEW_CHARS = _int_env("QRSCAN_TEXT_PREVIEW_CHARS", 100)

LOG_LEVEL = os.getenv("QRSCAN_LOG_LEVEL", "INFO").upper()

SENTRY_DSN = os.getenv("SENTRY_DSN", "")
