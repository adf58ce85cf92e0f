"""CSS selector tables for the two site generators.

The tables are plain frozen values built at import time and handed to the
extractor functions explicitly, so each variant can be exercised against
alternative markup in tests.
"""

from __future__ import annotations

from dataclasses import dataclass


GENERATOR_META = 'meta[name="generator"]'

# Values the site prints when a field was never filled in.
PLACEHOLDER_VALUES = frozenset({"", "not available", "Antarktis, Antarktis"})


@dataclass(frozen=True, slots=True)
class OsclassDetailSelectors:
    price_icon: str = ".fa-money"
    photos: str = ".item-photos .thumbs a"
    photo_attr: str = "href"
    no_photo_suffix: str = "/no_photo.gif"
    location: str = "#item_location"
    location_label: str = "Standort:"
    user_link: str = 'a[href*="action=pub_profile"]'


@dataclass(frozen=True, slots=True)
class DjDetailSelectors:
    price_value: str = ".price_val"
    price_unit: str = ".price_unit"
    price_container: str = ".djcf_price"
    photos: str = ".djc_images img"
    photo_attr: str = "src"
    location_icon: str = ".fa-map-marker"
    location_label: str = "Flugplatz:"
    region_icon: str = ".fa-globe"
    region_prefix: str = "Europa, "
    user_link: str = 'a[href*="view=profile"]'


@dataclass(frozen=True, slots=True)
class OsclassUserSelectors:
    name: str = "li.name"
    address: str = "li.address"
    address_label: str = "Adresse:"
    location: str = "li.location"
    location_label: str = "Standort:"
    website: str = "li.website"


@dataclass(frozen=True, slots=True)
class DjUserSelectors:
    name: str = ".djc-profile-box h3.el-title"
    location_heading: str = "h2.uk-h4"
    location_keyword: str = "Standort"
    location_label: str = "Flugplatz:"
    region_marker: str = ".reg_path"
    region_prefix: str = "Europa, "


OSCLASS_DETAIL = OsclassDetailSelectors()
DJ_DETAIL = DjDetailSelectors()
OSCLASS_USER = OsclassUserSelectors()
DJ_USER = DjUserSelectors()
