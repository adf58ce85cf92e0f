from __future__ import annotations

import re
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from glidewatch.common.html_utils import strip_prefix
from glidewatch.monitor.scrape.selectors import PLACEHOLDER_VALUES


EURO_SYMBOL = "€"
_CURRENCY_WORD_RE = re.compile(r"(?<![A-Za-z])(?:Euro\s*€|Euro|EUR)(?![A-Za-z])")
CONTAINER_DEPTH = 3


def element_text(element: Tag | None) -> str | None:
    if element is None:
        return None
    return element.get_text().replace("\xa0", " ").strip()


def select_text(soup: BeautifulSoup | Tag, selector: str) -> str | None:
    return element_text(soup.select_one(selector))


def container_text(marker: Tag | None) -> str | None:
    """Return the text of the closest ancestor of an icon that has any."""
    node = marker
    for _ in range(CONTAINER_DEPTH):
        if node is None:
            return None
        node = node.parent
        text = element_text(node)
        if text:
            return text
    return None


def clean_value(text: str | None, prefix: str | None = None) -> str | None:
    if text is None:
        return None
    if prefix:
        text = strip_prefix(text, prefix)
    text = text.strip()
    if text in PLACEHOLDER_VALUES:
        return None
    return text


def normalize_price(text: str | None) -> str | None:
    if text is None:
        return None
    text = " ".join(text.split())
    text = _CURRENCY_WORD_RE.sub(EURO_SYMBOL, text)
    return text.strip() or None


def absolute_url(href: str | None, site_origin: str) -> str | None:
    if not href:
        return None
    try:
        return urljoin(site_origin.rstrip("/") + "/", href.strip())
    except ValueError:
        return None


def join_location(location: str | None, region: str | None) -> str | None:
    if location and region:
        return f"{location}, {region}"
    return location or region
