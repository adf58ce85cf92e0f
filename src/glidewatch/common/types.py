from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Generator(str, Enum):
    OSCLASS = "osclass"
    DJ_CLASSIFIEDS = "dj_classifieds"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class Listing:
    guid: str
    title: str
    link: str
    raw_description: str | None = None
    image_url: str | None = None
    description: str | None = None


@dataclass(frozen=True, slots=True)
class EntryRejected:
    reason: str
    position: int


@dataclass(slots=True)
class ListingDetails:
    price: str | None = None
    location: str | None = None
    photo_urls: list[str] = field(default_factory=list)
    user_link: str | None = None


@dataclass(slots=True)
class SellerInfo:
    name: str | None = None
    location: str | None = None
    address: str | None = None
    website: str | None = None


@dataclass(frozen=True, slots=True)
class NotificationMessage:
    console: str
    body: str
    short_body: str
