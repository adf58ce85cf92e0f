from __future__ import annotations

import logging
import warnings

import httpx
from bs4 import BeautifulSoup

from glidewatch.common.types import EntryRejected, Listing, ListingDetails, SellerInfo
from glidewatch.monitor.fetchers.feed import parse_feed
from glidewatch.monitor.scrape.item import extract_details
from glidewatch.monitor.scrape.user import extract_user


logger = logging.getLogger("classifieds")

HEADERS = {
    "accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "accept-language": "de-DE,de;q=0.9,en-US;q=0.8,en;q=0.7",
    "user-agent": "Mozilla/5.0 (compatible; glidewatch)",
}


class FeedError(RuntimeError):
    pass


class PageFetchError(RuntimeError):
    pass


class ClassifiedsApi:
    def __init__(self, feed_url: str, client: httpx.AsyncClient, site_origin: str) -> None:
        self.feed_url = feed_url
        self.client = client
        self.site_origin = site_origin

    async def load_feed(self) -> list[Listing | EntryRejected]:
        logger.debug("Feed download: url=%s", self.feed_url)
        try:
            response = await self.client.get(self.feed_url, headers=HEADERS)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise FeedError(f"Failed to download RSS feed: {exc}") from exc
        return parse_feed(response.content)

    async def load_details(self, url: str) -> ListingDetails:
        soup = await self._load_page(url)
        try:
            return extract_details(soup, site_origin=self.site_origin)
        except Exception as exc:
            raise PageFetchError(f"Failed to parse {url}: {exc}") from exc

    async def load_user(self, url: str) -> SellerInfo:
        soup = await self._load_page(url)
        try:
            return extract_user(soup)
        except Exception as exc:
            raise PageFetchError(f"Failed to parse {url}: {exc}") from exc

    async def _load_page(self, url: str) -> BeautifulSoup:
        logger.debug("Page download: url=%s", url)
        try:
            response = await self.client.get(url, headers=HEADERS)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise PageFetchError(f"Failed to download {url}: {exc}") from exc
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            soup = BeautifulSoup(response.text, "html.parser")
        for warning in caught:
            logger.debug("HTML parsing issues: url=%s warning=%s", url, warning.message)
        return soup


def build_client(timeout_sec: float) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=timeout_sec, follow_redirects=True)
