# qrscan/qr_scanner/qr_engine.py

import logging
from typing import Any, Callable, Dict, Optional

from .. import config
from ..content.actions import parse_content
from ..utils.log import log_event, preview
from .bitmap import Bitmap, corners_or_none
from .decoder import PatternDecoder, get_decoder
from .ingest import ImageRejected, load_bitmap
from .pipeline import ScanOutcome, run_strategies

ProgressCallback = Callable[[int, str], None]


def _empty_result(error: Optional[str] = None) -> Dict[str, Any]:
    return {
        "qr_found": False,
        "strategy": None,
        "content": None,
        "location": None,
        "attempts": [],
        "error": error,
    }


# ---------------------------------------------------------
# QR DECODING
# ---------------------------------------------------------
def scan_bitmap(
    bitmap: Bitmap,
    decoder: Optional[PatternDecoder] = None,
    on_progress: Optional[ProgressCallback] = None,
    pause: Optional[float] = None,
) -> ScanOutcome:
    decoder = decoder or get_decoder(config.DECODER_BACKEND)
    pause = config.STRATEGY_PAUSE_SECONDS if pause is None else pause

    outcome = run_strategies(bitmap, decoder, on_progress=on_progress, pause=pause)

    if outcome.found:
        log_event(
            "qr_decoded",
            strategy=outcome.strategy,
            decoder=getattr(decoder, "name", type(decoder).__name__),
            attempts=len(outcome.attempts),
            content_preview=preview(outcome.result.text),
        )
    else:
        log_event(
            "qr_not_found",
            decoder=getattr(decoder, "name", type(decoder).__name__),
            attempts=len(outcome.attempts),
            failed=[a.strategy for a in outcome.attempts if a.error],
        )
    return outcome


# ---------------------------------------------------------
# MAIN ENTRY
# ---------------------------------------------------------
def process_qr_image(
    image_bytes: bytes,
    mime: Optional[str] = None,
    decoder: Optional[PatternDecoder] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> Dict[str, Any]:
    """
    Decode a single QR code from an uploaded image and parse its payload.

    Returns:
    {
        "qr_found": bool,
        "strategy": str | None,        # preprocessing strategy that decoded
        "content": dict | None,        # ParsedResult.model_dump(mode="json")
        "location": dict | None,       # corner points in pixel space
        "attempts": [{"strategy", "decoded", "error"}],
        "error": str | None,           # user-facing rejection message
    }
    """
    try:
        bitmap = load_bitmap(image_bytes, mime=mime)
    except ImageRejected as exc:
        log_event("image_rejected", level=logging.WARNING, reason=str(exc), size=len(image_bytes or b""))
        return _empty_result(error=str(exc))

    outcome = scan_bitmap(bitmap, decoder=decoder, on_progress=on_progress)
    attempts = [a.to_dict() for a in outcome.attempts]

    if not outcome.found:
        result = _empty_result()
        result["attempts"] = attempts
        return result

    parsed = parse_content(outcome.result.text)
    return {
        "qr_found": True,
        "strategy": outcome.strategy,
        "content": parsed.model_dump(mode="json"),
        "location": corners_or_none(outcome.result),
        "attempts": attempts,
        "error": None,
    }
