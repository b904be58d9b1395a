"""
Application settings.

Responsibilities:
- Load configuration from environment variables and .env files once.
- Provide defaults for optional settings.
- Expose a typed, immutable AppConfig passed into the components that need it.
"""

from __future__ import annotations

import functools
import os
from dataclasses import dataclass

from replybox.config.env import (
    get_database_url,
    get_embed_url,
    get_replace_comments_override,
    get_timezone_name,
    load_replybox_env,
)

OPTION_NAME = "replybox"


@dataclass(frozen=True)
class AppConfig:
    """Process-wide configuration, loaded once at startup."""

    database_url: str
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "info"
    timezone: str = "UTC"
    embed_url: str = "https://cdn.getreplybox.com/js/embed.js"
    replace_comments: bool | None = None
    option_name: str = OPTION_NAME


def load_settings() -> AppConfig:
    """Build an AppConfig from the current environment (uncached)."""
    load_replybox_env()
    return AppConfig(
        database_url=get_database_url(),
        api_host=(os.getenv("API_HOST") or "0.0.0.0").strip(),
        api_port=int((os.getenv("API_PORT") or "8000").strip() or "8000"),
        log_level=(os.getenv("LOG_LEVEL") or "info").strip().lower(),
        timezone=get_timezone_name(),
        embed_url=get_embed_url(),
        replace_comments=get_replace_comments_override(),
        option_name=(os.getenv("REPLYBOX_OPTION_NAME") or OPTION_NAME).strip() or OPTION_NAME,
    )


@functools.lru_cache(maxsize=1)
def get_settings() -> AppConfig:
    """
    Return the application settings, loaded on first call.

    Call get_settings.cache_clear() to force a reload (tests do this after
    changing the environment).
    """
    return load_settings()
