# qrscan/content/__init__.py

"""
Decoded-payload understanding.

Exposes:

    detect_content_type(text: str) -> ContentType
    parse_content(text: str) -> ParsedResult
    format_for_display(parsed: ParsedResult) -> str
"""

from .actions import format_for_display, parse_content
from .classifier import detect_content_type

__all__ = ["detect_content_type", "format_for_display", "parse_content"]
