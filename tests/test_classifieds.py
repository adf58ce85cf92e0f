from __future__ import annotations

import asyncio
import logging

import httpx
import pytest

from glidewatch.monitor.fetchers import classifieds as classifieds_module
from glidewatch.monitor.fetchers.classifieds import ClassifiedsApi, PageFetchError


ORIGIN = "https://www.segelflug.de"
PAGE_URL = f"{ORIGIN}/item/A"

OSCLASS_PAGE = """
<html><head><meta name="generator" content="Osclass 3.7.0"></head><body>
<li><i class="fa fa-money"></i> 9.900 Euro €</li>
<div class="item-photos"><div class="thumbs">
  <a href="http://[broken/x.jpg"></a>
  <a href="/photos/A.jpg"></a>
</div></div>
</body></html>
"""


def _call(pages: dict[str, str], method: str, url: str = PAGE_URL):
    def handle(request: httpx.Request) -> httpx.Response:
        if str(request.url) in pages:
            return httpx.Response(200, text=pages[str(request.url)])
        return httpx.Response(404)

    async def go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handle)) as client:
            api = ClassifiedsApi(f"{ORIGIN}/feed", client, ORIGIN)
            return await getattr(api, method)(url)

    return asyncio.run(go())


def test_load_details_skips_malformed_photo_link() -> None:
    details = _call({PAGE_URL: OSCLASS_PAGE}, "load_details")

    assert details.price == "9.900 €"
    assert details.photo_urls == [f"{ORIGIN}/photos/A.jpg"]


def test_load_details_wraps_extraction_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken_extract(*args, **kwargs):
        raise ValueError("Invalid IPv6 URL")

    monkeypatch.setattr(classifieds_module, "extract_details", broken_extract)

    with pytest.raises(PageFetchError, match="Failed to parse"):
        _call({PAGE_URL: OSCLASS_PAGE}, "load_details")


def test_load_user_wraps_extraction_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken_extract(*args, **kwargs):
        raise AttributeError("'NoneType' object has no attribute 'get_text'")

    monkeypatch.setattr(classifieds_module, "extract_user", broken_extract)

    with pytest.raises(PageFetchError, match="Failed to parse"):
        _call({PAGE_URL: OSCLASS_PAGE}, "load_user")


def test_missing_page_raises_page_fetch_error() -> None:
    with pytest.raises(PageFetchError, match="Failed to download"):
        _call({}, "load_details")


def test_html_parsing_issues_are_logged(caplog: pytest.LogCaptureFixture) -> None:
    page = '<?xml version="1.0"?><rss><channel></channel></rss>'
    caplog.set_level(logging.DEBUG, logger="classifieds")

    details = _call({PAGE_URL: page}, "load_details")

    assert details.photo_urls == []
    assert f"HTML parsing issues: url={PAGE_URL}" in caplog.text
