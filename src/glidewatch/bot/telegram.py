"""Telegram delivery for new classifieds.

Requests go through ``BackoffPolicy`` which honours the ``retry_after``
interval Telegram sends with flood-control errors. All other API errors
propagate to the caller unchanged.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, TypeVar

from aiogram import Bot
from aiogram.client.session.aiohttp import AiohttpSession
from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramAPIError, TelegramRetryAfter
from aiogram.types import BufferedInputFile, LinkPreviewOptions, Message, ReplyParameters

from glidewatch.common.types import NotificationMessage


logger = logging.getLogger("telegram")

CAPTION_LIMIT = 1024
TEXT_LIMIT = 4096

T = TypeVar("T")


class DeliveryError(RuntimeError):
    pass


@dataclass(slots=True)
class BackoffPolicy:
    max_attempts: int = 5
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep)

    async def run(self, request: Callable[[], Awaitable[T]], name: str = "request") -> T:
        for attempt in range(1, self.max_attempts + 1):
            if attempt > 1:
                logger.debug("Retrying %s (%s/%s)", name, attempt, self.max_attempts)
            try:
                return await request()
            except TelegramRetryAfter as exc:
                if attempt >= self.max_attempts:
                    break
                logger.info("Rate limited: request=%s retry_after=%s", name, exc.retry_after)
                await self.sleep(exc.retry_after)
        raise DeliveryError(f"Maximum number of retries reached for {name}")


class TelegramApi:
    def __init__(self, bot: Bot, chat_id: int | str, backoff: BackoffPolicy | None = None) -> None:
        self.bot = bot
        self.chat_id = chat_id
        self.backoff = backoff or BackoffPolicy()

    async def send_text(self, text: str, reply_to: int | None = None) -> Message:
        reply = ReplyParameters(message_id=reply_to) if reply_to is not None else None
        return await self.backoff.run(
            lambda: self.bot.send_message(
                chat_id=self.chat_id,
                text=text,
                parse_mode=ParseMode.HTML,
                link_preview_options=LinkPreviewOptions(is_disabled=True),
                reply_parameters=reply,
            ),
            name="sendMessage",
        )

    async def send_photo(self, photo: str | bytes, caption: str | None = None) -> Message:
        if isinstance(photo, bytes):
            photo = BufferedInputFile(photo, filename="photo.jpg")
        return await self.backoff.run(
            lambda: self.bot.send_photo(
                chat_id=self.chat_id,
                photo=photo,
                caption=caption,
                parse_mode=ParseMode.HTML,
            ),
            name="sendPhoto",
        )

    async def deliver(
        self,
        message: NotificationMessage,
        photo_url: str | None = None,
        thumbnail_url: str | None = None,
    ) -> None:
        """Send one listing: detail photo, then feed thumbnail, then plain text."""

        candidates = [("details", photo_url), ("feed", thumbnail_url)]
        for source, url in candidates:
            if not url:
                continue
            if await self._deliver_with_photo(message, url, source):
                return
        await self.send_text(message.body if len(message.body) <= TEXT_LIMIT else message.short_body)

    async def _deliver_with_photo(self, message: NotificationMessage, url: str, source: str) -> bool:
        fits = len(message.body) <= CAPTION_LIMIT
        if fits:
            caption = message.body
        elif len(message.short_body) <= CAPTION_LIMIT:
            caption = message.short_body
        else:
            caption = None

        try:
            photo_message = await self.send_photo(url, caption=caption)
        except (TelegramAPIError, DeliveryError) as exc:
            logger.warning("Photo send failed: source=%s url=%s error=%s", source, url, exc)
            return False

        if not fits:
            followup = message.body if len(message.body) <= TEXT_LIMIT else message.short_body
            if followup != caption:
                await self.send_text(followup, reply_to=photo_message.message_id)
        return True


def create_bot(token: str, timeout_sec: float) -> Bot:
    return Bot(token=token, session=AiohttpSession(timeout=timeout_sec))
