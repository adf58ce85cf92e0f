from __future__ import annotations

import logging

from bs4 import BeautifulSoup

from glidewatch.common.types import Generator
from glidewatch.monitor.scrape.selectors import GENERATOR_META


logger = logging.getLogger("scrape")

GENERATOR_PREFIXES = (
    ("Osclass", Generator.OSCLASS),
    ("Joomla", Generator.DJ_CLASSIFIEDS),
)


def detect_generator(soup: BeautifulSoup) -> Generator:
    meta = soup.select_one(GENERATOR_META)
    content = (meta.get("content") or "") if meta else ""
    for prefix, generator in GENERATOR_PREFIXES:
        if content.startswith(prefix):
            return generator
    return Generator.UNKNOWN


def resolve_variant(generator: Generator) -> Generator:
    """Map the detected generator onto the extraction rules to use.

    Unrecognised pages are scraped with the DJ Classifieds rules because
    that is what the current site serves for most pages. The fallback is
    logged so a site relaunch shows up in the logs instead of as a stream
    of empty fields.
    """

    if generator is Generator.UNKNOWN:
        logger.warning("Unknown page generator, using DJ Classifieds rules")
        return Generator.DJ_CLASSIFIEDS
    return generator
