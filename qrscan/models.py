from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class ContentType(str, Enum):
    VCARD = "vcard"
    URL = "url"
    EMAIL = "email"
    PHONE = "phone"
    WIFI = "wifi"
    LOCATION = "location"
    SMS = "sms"
    TEXT = "text"
    EMPTY = "empty"


class ActionKind(str, Enum):
    COPY = "copy"
    CALL = "call"
    OPEN = "open"
    EMAIL = "email"
    SMS = "sms"
    NAVIGATE = "navigate"


class Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------
# Contact card
# ---------------------------------------------------------
class TypedValue(Frozen):
    type: str
    value: str


class ContactName(Frozen):
    formatted: Optional[str] = None
    given: Optional[str] = None
    family: Optional[str] = None
    prefix: Optional[str] = None
    suffix: Optional[str] = None


class Organization(Frozen):
    name: Optional[str] = None
    title: Optional[str] = None


class Address(Frozen):
    type: str
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None
    formatted: Optional[str] = None


class ContactCard(Frozen):
    name: Optional[ContactName] = None
    organization: Optional[Organization] = None
    emails: Optional[Tuple[TypedValue, ...]] = None
    phones: Optional[Tuple[TypedValue, ...]] = None
    addresses: Optional[Tuple[Address, ...]] = None
    urls: Optional[Tuple[TypedValue, ...]] = None
    note: Optional[str] = None
    unmapped_fields: Dict[str, str] = Field(default_factory=dict)

    @property
    def display_name(self) -> Optional[str]:
        if self.name is None:
            return None
        if self.name.formatted:
            return self.name.formatted
        if self.name.given and self.name.family:
            return f"{self.name.given} {self.name.family}"
        return None


# ---------------------------------------------------------
# Typed payload records
# ---------------------------------------------------------
class UrlData(Frozen):
    url: str
    original: str
    domain: Optional[str] = None


class EmailData(Frozen):
    email: str


class PhoneData(Frozen):
    phone: str


class WifiData(Frozen):
    security: str
    ssid: str
    password: str
    hidden: bool = False


class GeoData(Frozen):
    latitude: float
    longitude: float
    raw_latitude: str
    raw_longitude: str


class SmsData(Frozen):
    number: str
    message: str = ""


class TextData(Frozen):
    text: str


PayloadData = Union[
    ContactCard, UrlData, EmailData, PhoneData, WifiData, GeoData, SmsData, TextData
]


class Action(Frozen):
    kind: ActionKind
    label: str
    value: str
    icon: Optional[str] = None


class ParsedResult(Frozen):
    type: ContentType
    data: Optional[PayloadData] = None
    display_text: str
    actions: Tuple[Action, ...] = ()
    raw: str = ""
