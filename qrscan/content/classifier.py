# qrscan/content/classifier.py

"""
Shape-based classification of decoded QR payloads.

Rules are checked in a fixed order and the first match wins, so a payload that
looks like both a phone number and something else is always a phone number.
"""

from __future__ import annotations

import re

import validators

from ..models import ContentType

PHONE_RE = re.compile(r"\+?[0-9\s\-()]{10,}")
EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
GEO_RE = re.compile(r"geo:-?[0-9]+\.?[0-9]*,-?[0-9]+\.?[0-9]*")
BARE_DOMAIN_RE = re.compile(r"(www\.)?[a-zA-Z0-9][a-zA-Z0-9-]*[a-zA-Z0-9]*\.[a-zA-Z]{2,}")
# RFC 3986 scheme followed by a non-empty remainder without whitespace
SCHEME_URI_RE = re.compile(r"[a-zA-Z][a-zA-Z0-9+.\-]*:\S+")


def is_absolute_url(text: str) -> bool:
    if validators.url(text):
        return True
    return SCHEME_URI_RE.fullmatch(text) is not None


def looks_like_url(text: str) -> bool:
    return is_absolute_url(text) or BARE_DOMAIN_RE.match(text) is not None


def detect_content_type(content: str | None) -> ContentType:
    if not content or not content.strip():
        return ContentType.EMPTY

    s = content.strip()

    if s.startswith("BEGIN:VCARD") and "END:VCARD" in s:
        return ContentType.VCARD

    if s.startswith("WIFI:"):
        return ContentType.WIFI

    if s.startswith(("SMSTO:", "sms:")):
        return ContentType.SMS

    if PHONE_RE.fullmatch(s) or s.startswith("tel:"):
        return ContentType.PHONE

    if EMAIL_RE.fullmatch(s) or s.startswith("mailto:"):
        return ContentType.EMAIL

    if GEO_RE.match(s):
        return ContentType.LOCATION

    if looks_like_url(s):
        return ContentType.URL

    return ContentType.TEXT
