from __future__ import annotations

import re

from bs4 import BeautifulSoup


DESCRIPTION_LIMIT = 3500
ELLIPSIS = "…"

_IMAGE_SRC_RE = re.compile(r' src="([^"]+)"')


def strip_html(value: str) -> str:
    """Return the text content of an HTML fragment with entities decoded."""
    if not value:
        return ""
    text = BeautifulSoup(value, "html.parser").get_text()
    return text.replace("\xa0", " ")


def sanitize_description(value: str, limit: int = DESCRIPTION_LIMIT) -> str:
    text = strip_html(value).strip()
    if len(text) < limit:
        return text
    return text[: limit - 1] + ELLIPSIS


def find_image_url(description: str) -> str | None:
    match = _IMAGE_SRC_RE.search(description or "")
    if not match:
        return None
    return match.group(1)


def strip_prefix(text: str, prefix: str) -> str:
    text = text.strip()
    if text.startswith(prefix):
        return text[len(prefix):].strip()
    return text
