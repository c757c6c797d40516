# app/config.py
"""Runtime settings for SalesHub.

Values come from the environment; a ``.env`` file next to the app is loaded
first if present.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

from errors import ConfigError

WEEKDAYS = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
}


@dataclass(frozen=True)
class Settings:
    """Backend connection and display settings.

    Attributes:
        supabase_url: Base URL of the hosted backend project.
        supabase_key: Public (anon) API key sent with every request.
        page_size: Rows per page on the Entries table.
        currency: Symbol used when formatting money.
        week_start: Weekday (0=Monday .. 6=Sunday) that starts a week.
        log_level: Level name passed to logging.
    """

    supabase_url: str
    supabase_key: str
    page_size: int = 10
    currency: str = "₹"
    week_start: int = 6
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ=None) -> Settings:
        env = os.environ if environ is None else environ

        url = (env.get("SUPABASE_URL") or "").strip().rstrip("/")
        key = (env.get("SUPABASE_ANON_KEY") or env.get("SUPABASE_KEY") or "").strip()
        if not url or not key:
            raise ConfigError("SUPABASE_URL and SUPABASE_ANON_KEY must be set.")

        week_name = (env.get("SALESHUB_WEEK_START") or "sunday").strip().lower()
        if week_name not in WEEKDAYS:
            raise ConfigError(f"Unknown SALESHUB_WEEK_START: {week_name!r}")

        try:
            page_size = int(env.get("SALESHUB_PAGE_SIZE") or 10)
        except ValueError as e:
            raise ConfigError(f"Invalid numeric setting: {e}") from e
        if page_size <= 0:
            raise ConfigError("SALESHUB_PAGE_SIZE must be positive.")

        return cls(
            supabase_url=url,
            supabase_key=key,
            page_size=page_size,
            currency=env.get("SALESHUB_CURRENCY") or "₹",
            week_start=WEEKDAYS[week_name],
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    load_dotenv()
    return Settings.from_env()


def configure_logging(level: str = "INFO"):
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        return
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
