from __future__ import annotations

import logging

from bs4 import BeautifulSoup, Tag

from glidewatch.common.types import Generator, SellerInfo
from glidewatch.monitor.scrape.common import clean_value, element_text, join_location, select_text
from glidewatch.monitor.scrape.generator import detect_generator, resolve_variant
from glidewatch.monitor.scrape.selectors import (
    DJ_USER,
    OSCLASS_USER,
    DjUserSelectors,
    OsclassUserSelectors,
)


logger = logging.getLogger("scrape")


def extract_user(soup: BeautifulSoup, generator: Generator | None = None) -> SellerInfo:
    variant = resolve_variant(generator or detect_generator(soup))
    if variant is Generator.OSCLASS:
        user = extract_osclass_user(soup)
    else:
        user = extract_dj_user(soup)
    logger.debug("User extracted: variant=%s name=%s location=%s", variant.value, user.name, user.location)
    return user


def extract_osclass_user(soup: BeautifulSoup, selectors: OsclassUserSelectors = OSCLASS_USER) -> SellerInfo:
    return SellerInfo(
        name=clean_value(select_text(soup, selectors.name)),
        location=clean_value(select_text(soup, selectors.location), selectors.location_label),
        address=clean_value(select_text(soup, selectors.address), selectors.address_label),
        website=clean_value(select_text(soup, selectors.website)),
    )


def extract_dj_user(soup: BeautifulSoup, selectors: DjUserSelectors = DJ_USER) -> SellerInfo:
    name_element = soup.select_one(selectors.name)
    name = clean_value(name_element.get_text()) if name_element is not None else None
    return SellerInfo(name=name, location=_dj_location(soup, selectors))


def _dj_location(soup: BeautifulSoup, selectors: DjUserSelectors) -> str | None:
    heading = next(
        (
            element
            for element in soup.select(selectors.location_heading)
            if selectors.location_keyword in element.get_text()
        ),
        None,
    )
    if heading is None:
        return None

    location: str | None = None
    region: str | None = None
    for sibling in heading.next_siblings:
        if not isinstance(sibling, Tag):
            continue
        text = clean_value(element_text(sibling), selectors.region_prefix) or ""
        if text.startswith(selectors.location_label):
            location = clean_value(text, selectors.location_label) or location
        elif sibling.select_one(selectors.region_marker) is not None:
            region = clean_value(text) or region
        elif sibling.name == "h2":
            break

    return join_location(location, region)
