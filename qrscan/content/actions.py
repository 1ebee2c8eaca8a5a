# qrscan/content/actions.py

"""
Turns a decoded payload into a ParsedResult: typed data, display text and
an ordered list of actions for the UI (first action = primary button).
"""

from __future__ import annotations

import logging
from typing import List
from urllib.parse import quote

from .. import config
from ..models import (
    Action,
    ActionKind,
    ContactCard,
    ContentType,
    EmailData,
    GeoData,
    ParsedResult,
    PhoneData,
    SmsData,
    TextData,
    UrlData,
    WifiData,
)
from ..utils.log import log_event, preview
from .classifier import detect_content_type
from .parsers import (
    normalize_url,
    parse_geo,
    parse_sms,
    parse_vcard,
    parse_wifi,
    registrable_domain,
)

MAPS_URL = "https://maps.google.com/maps?q={lat},{lng}"
URI_COMPONENT_SAFE = "!~*'()"


def _copy(label: str, value: str) -> Action:
    return Action(kind=ActionKind.COPY, label=label, value=value, icon="clipboard")


def truncate(text: str, limit: int | None = None) -> str:
    limit = config.TEXT_PREVIEW_CHARS if limit is None else limit
    return text[:limit] + "..." if len(text) > limit else text


# ---------------------------------------------------------
# Per-type builders
# ---------------------------------------------------------
def _vcard_result(content: str) -> ParsedResult:
    contact = parse_vcard(content)
    actions: List[Action] = []

    for phone in contact.phones or []:
        type_label = f" ({phone.type})" if phone.type and phone.type != "phone" else ""
        actions.append(
            Action(
                kind=ActionKind.CALL,
                label=f"Call {phone.value}{type_label}",
                value=phone.value,
                icon="phone",
            )
        )

    if contact.emails:
        first = contact.emails[0].value
        actions.append(Action(kind=ActionKind.EMAIL, label=f"Email {first}", value=first, icon="envelope"))

    actions.append(_copy("Copy vCard", content))

    return ParsedResult(
        type=ContentType.VCARD,
        data=contact,
        display_text=contact.display_name or "Contact",
        actions=actions,
        raw=content,
    )


def _url_result(content: str) -> ParsedResult:
    url = normalize_url(content)
    return ParsedResult(
        type=ContentType.URL,
        data=UrlData(url=url, original=content, domain=registrable_domain(url)),
        display_text=content,
        actions=[
            Action(kind=ActionKind.OPEN, label="Open Website", value=url, icon="external-link"),
            _copy("Copy URL", content),
        ],
        raw=content,
    )


def _email_result(content: str) -> ParsedResult:
    address = content[len("mailto:"):] if content.startswith("mailto:") else content
    return ParsedResult(
        type=ContentType.EMAIL,
        data=EmailData(email=address),
        display_text=address,
        actions=[
            Action(kind=ActionKind.EMAIL, label="Send Email", value=address, icon="envelope"),
            _copy("Copy Email", address),
        ],
        raw=content,
    )


def _phone_result(content: str) -> ParsedResult:
    number = content[len("tel:"):] if content.startswith("tel:") else content
    return ParsedResult(
        type=ContentType.PHONE,
        data=PhoneData(phone=number),
        display_text=number,
        actions=[
            Action(kind=ActionKind.CALL, label="Call Number", value=number, icon="phone"),
            Action(kind=ActionKind.SMS, label="Send SMS", value=number, icon="chat-bubble-left"),
            _copy("Copy Number", number),
        ],
        raw=content,
    )


def wifi_summary(wifi: WifiData) -> str:
    visibility = "Hidden Network" if wifi.hidden else "Visible Network"
    return f"WiFi Network\nSSID: {wifi.ssid}\nSecurity: {wifi.security}\n{visibility}"


def geo_summary(geo: GeoData) -> str:
    return f"GPS Location\nLatitude: {geo.latitude}\nLongitude: {geo.longitude}"


def sms_summary(sms: SmsData) -> str:
    message = f"\nMessage: {sms.message}" if sms.message else ""
    return f"SMS Message\nTo: {sms.number}{message}"


def sms_uri(sms: SmsData) -> str:
    if not sms.message:
        return f"sms:{sms.number}"
    return f"sms:{sms.number}?body={quote(sms.message, safe=URI_COMPONENT_SAFE)}"


def _text_result(content: str, display_text: str) -> ParsedResult:
    return ParsedResult(
        type=ContentType.TEXT,
        data=TextData(text=content),
        display_text=display_text,
        actions=[_copy("Copy Text", content)],
        raw=content,
    )


def _fallback(content: str, content_type: ContentType) -> ParsedResult:
    log_event(
        "qr_parse_fallback",
        level=logging.DEBUG,
        detected=content_type.value,
        content_preview=preview(content),
    )
    return _text_result(content, content)


# ---------------------------------------------------------
# MAIN ENTRY
# ---------------------------------------------------------
def parse_content(content: str | None) -> ParsedResult:
    raw = content or ""
    content_type = detect_content_type(raw)
    text = raw.strip()

    if content_type is ContentType.EMPTY:
        result = ParsedResult(type=ContentType.EMPTY, display_text="No content found", raw=raw)

    elif content_type is ContentType.VCARD:
        result = _vcard_result(text)

    elif content_type is ContentType.URL:
        result = _url_result(text)

    elif content_type is ContentType.EMAIL:
        result = _email_result(text)

    elif content_type is ContentType.PHONE:
        result = _phone_result(text)

    elif content_type is ContentType.WIFI:
        wifi = parse_wifi(text)
        if wifi is None:
            result = _fallback(text, content_type)
        else:
            result = ParsedResult(
                type=ContentType.WIFI,
                data=wifi,
                display_text=wifi_summary(wifi),
                actions=[_copy("Copy WiFi Info", text)],
                raw=text,
            )

    elif content_type is ContentType.LOCATION:
        geo = parse_geo(text)
        if geo is None:
            result = _fallback(text, content_type)
        else:
            lat, lng = geo.raw_latitude, geo.raw_longitude
            result = ParsedResult(
                type=ContentType.LOCATION,
                data=geo,
                display_text=geo_summary(geo),
                actions=[
                    Action(
                        kind=ActionKind.NAVIGATE,
                        label="Open in Maps",
                        value=MAPS_URL.format(lat=lat, lng=lng),
                        icon="map-pin",
                    ),
                    _copy("Copy Coordinates", f"{lat}, {lng}"),
                ],
                raw=text,
            )

    elif content_type is ContentType.SMS:
        sms = parse_sms(text)
        if sms is None:
            result = _fallback(text, content_type)
        else:
            result = ParsedResult(
                type=ContentType.SMS,
                data=sms,
                display_text=sms_summary(sms),
                actions=[
                    Action(kind=ActionKind.SMS, label="Send SMS", value=sms_uri(sms), icon="chat-bubble-left"),
                    _copy("Copy Content", text),
                ],
                raw=text,
            )

    else:
        result = _text_result(text, truncate(text))

    log_event(
        "qr_classification",
        qr_type=result.type.value,
        detected=content_type.value,
        actions=len(result.actions),
        content_preview=preview(text, 140),
    )
    return result


# ---------------------------------------------------------
# DISPLAY
# ---------------------------------------------------------
def _contact_lines(contact: ContactCard) -> List[str]:
    parts: List[str] = []

    if contact.display_name:
        parts.append(contact.display_name)
    if contact.organization and contact.organization.title:
        parts.append(contact.organization.title)
    parts.extend(email.value for email in contact.emails or [])
    parts.extend(phone.value for phone in contact.phones or [])
    if contact.organization and contact.organization.name:
        parts.append(contact.organization.name)
    for address in contact.addresses or []:
        if address.formatted:
            parts.extend(address.formatted.split(", "))
    parts.extend(url.value for url in contact.urls or [])

    return parts


def format_for_display(parsed: ParsedResult) -> str:
    """Multi-line text for the result panel."""
    data = parsed.data

    if isinstance(data, ContactCard):
        return "\n".join(_contact_lines(data))
    if isinstance(data, WifiData):
        return wifi_summary(data)
    if isinstance(data, GeoData):
        return geo_summary(data)
    if isinstance(data, SmsData):
        return sms_summary(data)
    if isinstance(data, UrlData):
        return data.original
    if isinstance(data, EmailData):
        return data.email
    if isinstance(data, PhoneData):
        return data.phone
    if isinstance(data, TextData):
        return data.text
    return parsed.display_text
