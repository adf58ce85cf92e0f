from __future__ import annotations

import logging

from bs4 import BeautifulSoup

from glidewatch.common.types import Generator, ListingDetails
from glidewatch.monitor.scrape.common import (
    absolute_url,
    clean_value,
    container_text,
    element_text,
    join_location,
    normalize_price,
    select_text,
)
from glidewatch.monitor.scrape.generator import detect_generator, resolve_variant
from glidewatch.monitor.scrape.selectors import (
    DJ_DETAIL,
    OSCLASS_DETAIL,
    DjDetailSelectors,
    OsclassDetailSelectors,
)


logger = logging.getLogger("scrape")


def extract_details(
    soup: BeautifulSoup,
    site_origin: str,
    generator: Generator | None = None,
) -> ListingDetails:
    variant = resolve_variant(generator or detect_generator(soup))
    if variant is Generator.OSCLASS:
        details = extract_osclass_details(soup, site_origin)
    else:
        details = extract_dj_details(soup, site_origin)
    logger.debug(
        "Details extracted: variant=%s price=%s location=%s photos=%s user_link=%s",
        variant.value,
        details.price,
        details.location,
        len(details.photo_urls),
        details.user_link,
    )
    return details


def extract_osclass_details(
    soup: BeautifulSoup,
    site_origin: str,
    selectors: OsclassDetailSelectors = OSCLASS_DETAIL,
) -> ListingDetails:
    price = None
    icon = soup.select_one(selectors.price_icon)
    if icon is not None:
        price = normalize_price(element_text(icon.parent))

    photo_urls: list[str] = []
    for element in soup.select(selectors.photos):
        src = element.get(selectors.photo_attr)
        if not src or src.endswith(selectors.no_photo_suffix):
            continue
        url = absolute_url(src, site_origin)
        if url:
            photo_urls.append(url)

    location = clean_value(select_text(soup, selectors.location), selectors.location_label)

    return ListingDetails(
        price=price,
        location=location,
        photo_urls=photo_urls,
        user_link=_user_link(soup, selectors.user_link, site_origin),
    )


def extract_dj_details(
    soup: BeautifulSoup,
    site_origin: str,
    selectors: DjDetailSelectors = DJ_DETAIL,
) -> ListingDetails:
    value = select_text(soup, selectors.price_value)
    unit = select_text(soup, selectors.price_unit)
    if value:
        price = normalize_price(f"{value} {unit}" if unit else value)
    else:
        price = normalize_price(select_text(soup, selectors.price_container))

    photo_urls: list[str] = []
    for element in soup.select(selectors.photos):
        src = element.get(selectors.photo_attr)
        url = absolute_url(src, site_origin)
        if url:
            photo_urls.append(url)

    location = clean_value(
        container_text(soup.select_one(selectors.location_icon)),
        selectors.location_label,
    )
    region = clean_value(
        container_text(soup.select_one(selectors.region_icon)),
        selectors.region_prefix,
    )

    return ListingDetails(
        price=price,
        location=join_location(location, region),
        photo_urls=photo_urls,
        user_link=_user_link(soup, selectors.user_link, site_origin),
    )


def _user_link(soup: BeautifulSoup, selector: str, site_origin: str) -> str | None:
    anchor = soup.select_one(selector)
    if anchor is None:
        return None
    return absolute_url(anchor.get("href"), site_origin)
