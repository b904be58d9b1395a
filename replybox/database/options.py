"""
Settings store: the ReplyBox option record {site_id, secure_token}.

The record lives as one JSON value in the options table. It is read once,
lazily, and served from memory afterwards; persist() writes the whole record
back in a single transaction so readers never see a half-written record.
Each persist bumps the row version; refresh() compares it to pick up saves
made by another process (the admin CLI) without re-reading the record.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from replybox.core.exceptions import StoreFailure
from replybox.database.connection import Database
from replybox.database.models import Option
from replybox.replybox_logging import get_logger

logger = get_logger(__name__)

SITE_ID = "site_id"
SECURE_TOKEN = "secure_token"


@dataclass(frozen=True)
class ReplyBoxSettings:
    """Immutable view of the option record."""

    site_id: str = ""
    secure_token: str = ""


class SettingsStore:
    def __init__(self, db: Database, option_name: str = "replybox") -> None:
        self._db = db
        self.option_name = option_name
        self._options: dict[str, Any] | None = None
        self._version = 0

    def _load(self) -> dict[str, Any]:
        if self._options is None:
            try:
                with self._db.session_scope() as session:
                    row = session.get(Option, self.option_name)
                    raw = row.value if row is not None else None
                    version = (row.version or 0) if row is not None else 0
            except SQLAlchemyError as e:
                logger.exception("settings_load_failed", option=self.option_name, error=str(e))
                raise StoreFailure(f"Could not read option {self.option_name!r}") from e
            if not raw:
                options: dict[str, Any] = {}
            else:
                try:
                    options = json.loads(raw)
                except ValueError as e:
                    logger.error("settings_load_failed", option=self.option_name, error=str(e))
                    raise StoreFailure(f"Option {self.option_name!r} is not valid JSON") from e
                if not isinstance(options, dict):
                    raise StoreFailure(f"Option {self.option_name!r} is not an object")
            self._options = options
            self._version = version
            logger.debug("settings_loaded", option=self.option_name, version=version, keys=sorted(options))
        return self._options

    def get(self, key: str, default: Any = "") -> Any:
        """Return a single option, or default when it is unset or null."""
        value = self._load().get(key)
        return default if value is None else value

    def set(self, key: str, value: Any) -> SettingsStore:
        """Update a single option in memory. Chain with persist() to save."""
        self._load()[key] = value
        return self

    def persist(self) -> None:
        """
        Write the whole record back as one value and bump its version.
        On failure the cached record is dropped, so unsaved values are never served.
        """
        payload = json.dumps(self._load(), sort_keys=True)
        try:
            with self._db.session_scope() as session:
                row = session.get(Option, self.option_name)
                if row is None:
                    row = Option(name=self.option_name, value=payload, version=1)
                    session.add(row)
                else:
                    row.value = payload
                    row.version = (row.version or 0) + 1
                version = row.version
        except SQLAlchemyError as e:
            self.reload()
            logger.exception("settings_persist_failed", option=self.option_name, error=str(e))
            raise StoreFailure(f"Could not save option {self.option_name!r}") from e
        self._version = version
        logger.info("settings_persisted", option=self.option_name, version=version)

    def reload(self) -> None:
        self._options = None

    def refresh(self) -> bool:
        """
        Reload if another process persisted a newer record since the last load.
        Reads only the version column. Returns True when the cache was dropped.
        """
        if self._options is None:
            return False
        try:
            with self._db.session_scope() as session:
                version = session.execute(
                    select(Option.version).where(Option.name == self.option_name)
                ).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.exception("settings_refresh_failed", option=self.option_name, error=str(e))
            raise StoreFailure(f"Could not read option {self.option_name!r}") from e
        if (version or 0) == self._version:
            return False
        logger.info("settings_changed", option=self.option_name, version=version)
        self.reload()
        return True

    def snapshot(self) -> ReplyBoxSettings:
        return ReplyBoxSettings(
            site_id=str(self.get(SITE_ID)),
            secure_token=str(self.get(SECURE_TOKEN)),
        )
