"""
Environment variable loading for ReplyBox.

- REPLYBOX_DB_URL / DATABASE_URL: SQLAlchemy URL (Postgres or SQLite)
- REPLYBOX_DB_PATH: SQLite file used when no URL is set (default: replybox.db)
- REPLYBOX_TIMEZONE: site timezone used to derive local comment dates (default: UTC)
- REPLYBOX_EMBED_URL: widget script URL override
- REPLYBOX_REPLACE_COMMENTS: force the comment replacement switch on/off
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

# Project root: config is replybox/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_SQLITE_PATH = "replybox.db"
DEFAULT_EMBED_URL = "https://cdn.getreplybox.com/js/embed.js"

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


def load_replybox_env() -> None:
    """Load .env from project root. Safe to call multiple times."""
    from dotenv import load_dotenv

    load_dotenv(_ENV_PATH)


def get_database_url() -> str:
    """
    Resolve the database URL from env.
    Order: REPLYBOX_DB_URL > DATABASE_URL > sqlite file from REPLYBOX_DB_PATH.
    """
    load_replybox_env()
    url = (os.getenv("REPLYBOX_DB_URL") or os.getenv("DATABASE_URL") or "").strip()
    if url:
        return url
    path = (os.getenv("REPLYBOX_DB_PATH") or "").strip() or DEFAULT_SQLITE_PATH
    return f"sqlite:///{path}"


def get_embed_url() -> str:
    load_replybox_env()
    return (os.getenv("REPLYBOX_EMBED_URL") or "").strip() or DEFAULT_EMBED_URL


def get_timezone_name() -> str:
    load_replybox_env()
    return (os.getenv("REPLYBOX_TIMEZONE") or "").strip() or "UTC"


def get_replace_comments_override() -> bool | None:
    """
    Return the REPLYBOX_REPLACE_COMMENTS override, or None when unset.
    Unrecognised values are treated as unset.
    """
    load_replybox_env()
    raw = (os.getenv("REPLYBOX_REPLACE_COMMENTS") or "").strip().lower()
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    return None


def mask_database_url(url: str) -> str:
    """Strip credentials and query string from a database URL for logging."""
    return url.split("?")[0].split("@")[-1].split("//")[-1]
