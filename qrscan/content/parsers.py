# qrscan/content/parsers.py

"""
Per-type payload parsers.

parse_vcard always returns a ContactCard. The WiFi, geo and SMS parsers return
None when the payload does not match their pattern; callers fall back to
plain text in that case.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional
from urllib.parse import parse_qs

import tldextract

from ..models import (
    Address,
    ContactCard,
    ContactName,
    GeoData,
    Organization,
    SmsData,
    TypedValue,
    WifiData,
)
from .classifier import BARE_DOMAIN_RE, SCHEME_URI_RE

WIFI_RE = re.compile(r"WIFI:T:([^;]*);S:([^;]*);P:([^;]*);H:([^;]*);?")
GEO_RE = re.compile(r"geo:(-?[0-9]+\.?[0-9]*),(-?[0-9]+\.?[0-9]*)")
SMS_RE = re.compile(r"(?:SMSTO:|sms:)([^:?]*)[?:]?(.*)")
AUTHORITY_URL_RE = re.compile(r"[a-zA-Z][a-zA-Z0-9+.\-]*://")

DEFAULT_TYPE = "default"

# Bundled public-suffix snapshot only; never fetch the list over the network.
_extract = tldextract.TLDExtract(suffix_list_urls=())


# ---------------------------------------------------------
# vCard
# ---------------------------------------------------------
def _logical_lines(text: str) -> List[str]:
    lines: List[str] = []
    for raw in re.split(r"\r?\n", text):
        # folded continuation line
        if raw[:1] in (" ", "\t") and lines:
            lines[-1] += raw[1:]
            continue
        lines.append(raw)
    return [line.strip() for line in lines if line.strip()]


def _type_param(params: List[str]) -> Optional[str]:
    for param in params:
        key, sep, value = param.partition("=")
        if sep and key.strip().upper() == "TYPE":
            return value
    return None


def normalize_phone_type(type_param: Optional[str]) -> str:
    if type_param is None:
        return "phone"
    types = type_param.lower()
    if "cell" in types or "mobile" in types:
        return "mobile"
    if "work" in types:
        return "work"
    if "home" in types:
        return "home"
    if "fax" in types:
        return "fax"
    return type_param.split(",")[0].strip()


def format_address(
    street: Optional[str],
    city: Optional[str],
    state: Optional[str],
    zip_code: Optional[str],
    country: Optional[str],
) -> Optional[str]:
    city_line = " ".join(p for p in (zip_code, city) if p)
    parts = [p for p in (street, city_line, state, country) if p]
    return ", ".join(parts) or None


def _component(parts: List[str], index: int) -> Optional[str]:
    if index < len(parts) and parts[index]:
        return parts[index]
    return None


def parse_vcard(vcard: str) -> ContactCard:
    name: Dict[str, Optional[str]] = {}
    organization: Dict[str, Optional[str]] = {}
    emails: List[TypedValue] = []
    phones: List[TypedValue] = []
    addresses: List[Address] = []
    urls: List[TypedValue] = []
    note: Optional[str] = None
    unmapped: Dict[str, str] = {}

    for line in _logical_lines(vcard):
        if line.upper().startswith(("BEGIN:", "END:", "VERSION:")):
            continue

        field_part, sep, value = line.partition(":")
        if not sep:
            continue

        field, *params = field_part.split(";")
        raw_type = _type_param(params)
        type_param = raw_type if raw_type is not None else DEFAULT_TYPE
        key = field.strip().upper()

        if key == "FN":
            name["formatted"] = value

        elif key == "N":
            parts = value.split(";")
            name["family"] = _component(parts, 0)
            name["given"] = _component(parts, 1)
            name["prefix"] = _component(parts, 3)
            name["suffix"] = _component(parts, 4)

        elif key == "EMAIL":
            emails.append(TypedValue(type=type_param.lower(), value=value))

        elif key == "TEL":
            phones.append(TypedValue(type=normalize_phone_type(raw_type), value=value))

        elif key == "ORG":
            organization["name"] = value

        elif key == "TITLE":
            organization["title"] = value

        elif key == "ADR":
            parts = value.split(";")
            street = _component(parts, 2)
            city = _component(parts, 3)
            state = _component(parts, 4)
            zip_code = _component(parts, 5)
            country = _component(parts, 6)
            addresses.append(
                Address(
                    type=type_param.lower(),
                    street=street,
                    city=city,
                    state=state,
                    zip=zip_code,
                    country=country,
                    formatted=format_address(street, city, state, zip_code, country),
                )
            )

        elif key == "URL":
            urls.append(TypedValue(type=type_param.lower(), value=value))

        elif key == "NOTE":
            note = value

        else:
            unmapped[field.strip().lower()] = value

    return ContactCard(
        name=ContactName(**name) if name else None,
        organization=Organization(**organization) if organization else None,
        emails=emails or None,
        phones=phones or None,
        addresses=addresses or None,
        urls=urls or None,
        note=note,
        unmapped_fields=unmapped,
    )


# ---------------------------------------------------------
# WiFi / geo / SMS
# ---------------------------------------------------------
def parse_wifi(content: str) -> Optional[WifiData]:
    match = WIFI_RE.search(content)
    if not match:
        return None
    security, ssid, password, hidden = match.groups()
    return WifiData(security=security, ssid=ssid, password=password, hidden=hidden == "true")


def parse_geo(content: str) -> Optional[GeoData]:
    match = GEO_RE.search(content)
    if not match:
        return None
    lat, lng = match.groups()
    return GeoData(
        latitude=float(lat),
        longitude=float(lng),
        raw_latitude=lat,
        raw_longitude=lng,
    )


def parse_sms(content: str) -> Optional[SmsData]:
    match = SMS_RE.search(content)
    if not match:
        return None
    number, message = match.groups()
    message = message or ""

    # sms:<number>?body=<urlencoded>
    if content.startswith("sms:") and message.startswith("body="):
        message = parse_qs(message, keep_blank_values=True).get("body", [""])[0]

    return SmsData(number=number.strip(), message=message)


# ---------------------------------------------------------
# URL helpers
# ---------------------------------------------------------
def normalize_url(content: str) -> str:
    if AUTHORITY_URL_RE.match(content):
        return content
    if BARE_DOMAIN_RE.match(content):
        return f"https://{content}"
    # opaque schemes such as market: or bitcoin:
    if SCHEME_URI_RE.fullmatch(content):
        return content
    return f"https://{content}"


def registrable_domain(url: str) -> Optional[str]:
    ext = _extract(url)
    if ext.domain and ext.suffix:
        return f"{ext.domain}.{ext.suffix}".lower()
    return None
