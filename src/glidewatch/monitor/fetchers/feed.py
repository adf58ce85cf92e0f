"""RSS feed parsing.

Every ``<item>`` is validated on its own: entries lacking a guid, title
or link come back as ``EntryRejected`` so the caller can log them while
the remaining entries are still used.
"""

from __future__ import annotations

import logging
import re

from bs4 import BeautifulSoup
from lxml import etree

from glidewatch.common.html_utils import find_image_url, sanitize_description
from glidewatch.common.types import EntryRejected, Listing


logger = logging.getLogger("feed")

REQUIRED_FIELDS = ("guid", "title", "link")

# Osclass wraps inline scripts in "//<![CDATA[ ... //]]>" which leaks into
# the feed and breaks XML parsing.
_SCRIPT_CDATA_RE = re.compile(rb"//\s*<!\[CDATA\[|//\s*\]\]>")
_DOCUMENT_START_RE = re.compile(rb"<\?xml|<rss")


class FeedParseError(RuntimeError):
    pass


def normalize_feed(raw: bytes) -> bytes:
    text = raw.lstrip(b"\xef\xbb\xbf")
    text = _SCRIPT_CDATA_RE.sub(b"", text)
    start = _DOCUMENT_START_RE.search(text)
    if start:
        text = text[start.start():]
    return text.strip()


def parse_feed(raw: bytes) -> list[Listing | EntryRejected]:
    document = normalize_feed(raw)
    if not document:
        raise FeedParseError("empty feed document")

    # bs4 recovers from truncated markup, so well-formedness is checked first.
    try:
        etree.fromstring(document, etree.XMLParser(recover=False, resolve_entities=False))
    except etree.XMLSyntaxError as exc:
        raise FeedParseError(f"feed document is not well-formed XML: {exc}") from exc

    soup = BeautifulSoup(document, "xml")
    channel = soup.find("channel")
    if channel is None:
        raise FeedParseError("feed document has no <channel> element")

    results: list[Listing | EntryRejected] = []
    for position, item in enumerate(channel.find_all("item", recursive=False)):
        results.append(_to_listing(item, position))
    return results


def _to_listing(item, position: int) -> Listing | EntryRejected:
    values: dict[str, str] = {}
    for name in REQUIRED_FIELDS:
        value = _child_text(item, name)
        if not value:
            return EntryRejected(reason=f"Missing `{name}` element", position=position)
        values[name] = value

    raw_description = _child_text(item, "description")
    image_url = find_image_url(raw_description) if raw_description else None
    description = sanitize_description(raw_description) if raw_description else None

    return Listing(
        guid=values["guid"],
        title=values["title"],
        link=values["link"],
        raw_description=raw_description,
        image_url=image_url,
        description=description,
    )


def _child_text(item, name: str) -> str | None:
    node = item.find(name, recursive=False)
    if node is None:
        return None
    text = node.get_text().strip()
    return text or None
