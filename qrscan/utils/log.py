# qrscan/utils/log.py

"""
Structured JSON log lines for scanner events.

Every line is a single JSON object with an "event" key, so log shippers can
index it without a custom parser:

    {"event": "strategy_failed", "strategy": "Sharpening", "error": "..."}
"""

from __future__ import annotations

import json
import logging
from typing import Any

logger = logging.getLogger("qrscan")


def log_event(event: str, level: int = logging.INFO, **fields: Any) -> None:
    payload = {"event": event, **fields}
    try:
        message = json.dumps(payload, default=str)
    except (TypeError, ValueError):
        message = json.dumps({"event": event, "fields": repr(fields)})
    logger.log(level, message)


def preview(text: str | None, limit: int = 120) -> str:
    return (text or "")[:limit]
