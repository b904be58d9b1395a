"""
Service container: one instance of each component, built once at startup and
handed to the HTTP layer.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from replybox.api_server.sync_api import SyncAPI
from replybox.auth import TokenAuthority
from replybox.config import AppConfig
from replybox.database import CommentRepository, Database, SettingsStore, get_database
from replybox.database.options import SITE_ID
from replybox.replybox_logging import get_logger

logger = get_logger(__name__)

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


@dataclass
class ReplyBoxServices:
    config: AppConfig
    db: Database
    settings: SettingsStore
    tokens: TokenAuthority
    comments: CommentRepository
    sync: SyncAPI

    def activate(self) -> str:
        """Create tables and issue the secure token if missing. Returns the token."""
        self.db.init_db()
        token = self.tokens.ensure_token()
        logger.info("replybox_activated")
        return token

    def save_site_id(self, site_id: str) -> str:
        """Store the site id from the admin form and reload the settings record."""
        value = _CONTROL_CHARS.sub("", site_id or "").strip()
        self.settings.set(SITE_ID, value).persist()
        self.settings.reload()
        logger.info("site_id_saved", site_id=value)
        return value


def build_services(config: AppConfig, db: Database | None = None) -> ReplyBoxServices:
    """Wire the components for the given configuration."""
    if db is None:
        db = get_database(config.database_url)
    settings = SettingsStore(db, option_name=config.option_name)
    tokens = TokenAuthority(settings)
    comments = CommentRepository(db, tz_name=config.timezone)
    return ReplyBoxServices(
        config=config,
        db=db,
        settings=settings,
        tokens=tokens,
        comments=comments,
        sync=SyncAPI(tokens, comments),
    )
