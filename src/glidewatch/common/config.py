from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


SITE_ORIGIN = "https://www.segelflug.de"
FEED_URL = f"{SITE_ORIGIN}/osclass/index.php?page=search&sFeed=rss"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", populate_by_name=True)

    telegram_token: str | None = Field(default=None, alias="TELEGRAM_TOKEN")
    telegram_chat_id: str = Field(default="@segelflug_classifieds", alias="TELEGRAM_CHAT_ID")
    telegram_max_attempts: int = Field(default=5, alias="TELEGRAM_MAX_ATTEMPTS")

    feed_url: str = Field(default=FEED_URL, alias="FEED_URL")
    site_origin: str = Field(default=SITE_ORIGIN, alias="SITE_ORIGIN")
    guids_path: str = Field(default="./last-guids.json", alias="GUIDS_PATH")
    request_timeout_sec: float = Field(default=10.0, alias="REQUEST_TIMEOUT_SEC")

    min_time: float = Field(default=10.0, alias="MIN_TIME")
    max_time: float = Field(default=30.0, alias="MAX_TIME")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    sentry_dsn: str | None = Field(default=None, alias="SENTRY_DSN")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
