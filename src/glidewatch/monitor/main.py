from __future__ import annotations

import argparse
import asyncio
import logging
import random
from importlib.metadata import PackageNotFoundError, version
from typing import Awaitable, Callable

import sentry_sdk
from aiogram.exceptions import TelegramAPIError

from glidewatch.bot.telegram import BackoffPolicy, DeliveryError, TelegramApi, create_bot
from glidewatch.common.config import get_settings
from glidewatch.common.formatting import build_notification
from glidewatch.common.logging import setup_logging
from glidewatch.common.types import EntryRejected, Listing, ListingDetails, SellerInfo
from glidewatch.db.guids import GuidStore, GuidStoreError
from glidewatch.monitor.fetchers.classifieds import ClassifiedsApi, FeedError, PageFetchError, build_client
from glidewatch.monitor.fetchers.feed import FeedParseError


logger = logging.getLogger("monitor")

CYCLE_ERRORS = (FeedError, FeedParseError, GuidStoreError)
DELIVERY_ERRORS = (TelegramAPIError, DeliveryError)


class App:
    def __init__(
        self,
        classifieds: ClassifiedsApi,
        store: GuidStore,
        telegram: TelegramApi | None = None,
        echo: Callable[[str], None] = print,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.classifieds = classifieds
        self.store = store
        self.telegram = telegram
        self.echo = echo
        self.sleep = sleep

    async def run(self) -> int:
        """Run one polling cycle and return the number of new listings."""

        guids = self.store.load()
        entries = await self.classifieds.load_feed()

        listings: list[Listing] = []
        for entry in entries:
            if isinstance(entry, EntryRejected):
                logger.warning("Feed entry rejected: position=%s reason=%s", entry.position, entry.reason)
                continue
            listings.append(entry)
        logger.debug("Feed parsed: listings=%s rejected=%s", len(listings), len(entries) - len(listings))

        # The feed lists the newest entry first.
        new_listings: list[Listing] = []
        pending: set[str] = set()
        for listing in reversed(listings):
            if listing.guid in guids or listing.guid in pending:
                continue
            pending.add(listing.guid)
            new_listings.append(listing)

        self.echo(f"✈️  Found {len(new_listings)} new classifieds on Segelflug.de")
        self.echo("")

        for listing in new_listings:
            try:
                await self._process_listing(listing)
            except Exception:
                logger.exception("Listing processing failed: guid=%s", listing.guid)
            guids.add(listing.guid)

        self.store.save(guids)
        return len(new_listings)

    async def watch(self, min_time: float, max_time: float) -> None:
        while True:
            try:
                await self.run()
            except CYCLE_ERRORS as exc:
                logger.warning("Cycle failed: %s", exc)

            minutes = random.uniform(min_time, max_time)
            self.echo(f"⏳  Running again in {minutes:.1f} minutes")
            self.echo("")
            await self.sleep(minutes * 60)

    async def _process_listing(self, listing: Listing) -> None:
        details = await self._load_details(listing)
        user = await self._load_user(listing, details)

        message = build_notification(listing, details, user)
        self.echo(message.console)
        self.echo("")

        if self.telegram is None:
            return
        photo_url = details.photo_urls[0] if details and details.photo_urls else None
        try:
            await self.telegram.deliver(message, photo_url=photo_url, thumbnail_url=listing.image_url)
        except DELIVERY_ERRORS as exc:
            logger.warning("Delivery failed: guid=%s error=%s", listing.guid, exc)

    async def _load_details(self, listing: Listing) -> ListingDetails | None:
        try:
            return await self.classifieds.load_details(listing.link)
        except PageFetchError as exc:
            logger.warning("Details unavailable: guid=%s error=%s", listing.guid, exc)
            return None

    async def _load_user(self, listing: Listing, details: ListingDetails | None) -> SellerInfo | None:
        if details is None or not details.user_link:
            return None
        try:
            return await self.classifieds.load_user(details.user_link)
        except PageFetchError as exc:
            logger.warning("Seller unavailable: guid=%s error=%s", listing.guid, exc)
            return None


def init_sentry(dsn: str) -> None:
    try:
        release = version("glidewatch")
    except PackageNotFoundError:
        release = None
    sentry_sdk.init(dsn=dsn, release=release)
    logger.info("Sentry error reporting enabled")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="glidewatch",
        description="Announce new Segelflug.de classifieds on the console and in Telegram",
    )
    parser.add_argument(
        "-w",
        "--watch",
        action="store_true",
        help="Run continuously and poll the server in random intervals",
    )
    parser.add_argument(
        "--min-time",
        type=float,
        default=settings.min_time,
        help="Minimum time to wait between server requests (in minutes)",
    )
    parser.add_argument(
        "--max-time",
        type=float,
        default=settings.max_time,
        help="Maximum time to wait between server requests (in minutes)",
    )
    parser.add_argument("--telegram-chat-id", default=settings.telegram_chat_id, help="Telegram chat ID")
    parser.add_argument("--telegram-token", default=settings.telegram_token, help="Telegram bot token")

    args = parser.parse_args(argv)
    if args.min_time > args.max_time:
        parser.error("--min-time must not be larger than --max-time")
    return args


async def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level)
    if settings.sentry_dsn:
        init_sentry(settings.sentry_dsn)
    logger.info("Monitor started: feed=%s guids=%s", settings.feed_url, settings.guids_path)

    bot = create_bot(args.telegram_token, settings.request_timeout_sec) if args.telegram_token else None
    telegram = None
    if bot is not None:
        backoff = BackoffPolicy(max_attempts=settings.telegram_max_attempts)
        telegram = TelegramApi(bot, args.telegram_chat_id, backoff)
    else:
        logger.info("No Telegram token configured, console output only")

    try:
        async with build_client(settings.request_timeout_sec) as client:
            classifieds = ClassifiedsApi(settings.feed_url, client, settings.site_origin)
            app = App(classifieds, GuidStore(settings.guids_path), telegram)
            if args.watch:
                await app.watch(args.min_time, args.max_time)
                return 0
            try:
                await app.run()
            except CYCLE_ERRORS as exc:
                logger.warning("Cycle failed: %s", exc)
                return 1
            return 0
    finally:
        if bot is not None:
            await bot.session.close()


def run() -> None:
    raise SystemExit(asyncio.run(main()))


if __name__ == "__main__":
    run()
