"""
Comment repository: the bridge between the sync API comment shape and the
comments/users tables.

list() pages through comments in ascending id order and counts them with a
separate query; create() resolves the author against the user directory and
inserts one row.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any
from zoneinfo import ZoneInfo

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from replybox.core.exceptions import StoreFailure, ValidationFailure
from replybox.database.connection import Database
from replybox.database.models import (
    COMMENT_AGENT,
    COMMENT_TYPE,
    Comment,
    CommentStatus,
    Post,
    User,
)
from replybox.replybox_logging import get_logger

logger = get_logger(__name__)


@dataclass
class CommentInput:
    """
    Fields accepted when creating a comment, as received. Values are coerced
    and checked in CommentRepository.create, after the token has been checked.
    """

    post: Any
    email: Any
    content: Any
    name: Any = ""
    parent: Any = 0
    spam: Any = False
    date_gmt: Any = None


# Largest value an INTEGER column or LIMIT/OFFSET accepts (SQLite, Postgres bigint)
MAX_INT = 2**63 - 1

_TRUE = ("1", "true", "yes", "on")


def page_count(total: int, per_page: int) -> int:
    """Number of pages needed for total items; 0 when there are none."""
    return int(math.ceil(total / per_page))


def require_positive_int(name: str, value: Any) -> int:
    """Coerce a parameter to an int in 1..MAX_INT or raise ValidationFailure."""
    if isinstance(value, bool):
        raise ValidationFailure(f"Invalid parameter: {name}")
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationFailure(f"Invalid parameter: {name}") from None
    if number < 1:
        raise ValidationFailure(f"Invalid parameter: {name} must be at least 1")
    if number > MAX_INT:
        raise ValidationFailure(f"Invalid parameter: {name} is too large")
    return number


def page_offset(page: int, per_page: int) -> int:
    offset = per_page * (page - 1)
    if offset > MAX_INT:
        raise ValidationFailure("Invalid parameter: page is out of range")
    return offset


def coerce_flag(value: Any) -> bool:
    """Spam flag from JSON: booleans, numbers, or strings such as "true"/"1"."""
    if isinstance(value, str):
        return value.strip().lower() in _TRUE
    return bool(value)


def require_text(name: str, value: Any, max_length: int | None = None) -> str:
    if not isinstance(value, str):
        raise ValidationFailure(f"Invalid parameter: {name}")
    if max_length is not None and len(value) > max_length:
        raise ValidationFailure(f"Invalid parameter: {name} is longer than {max_length} characters")
    return value


def parse_gmt(value: Any) -> datetime:
    """
    Parse a GMT timestamp ("YYYY-MM-DD HH:MM:SS" or ISO 8601) to a naive UTC datetime.
    None means now.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)
    if isinstance(value, datetime):
        parsed = value
    elif not isinstance(value, str):
        raise ValidationFailure("Invalid parameter: date_gmt")
    else:
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            raise ValidationFailure(f"Invalid parameter: date_gmt {value!r}") from None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed.replace(microsecond=0)


class CommentRepository:
    def __init__(self, db: Database, tz_name: str = "UTC") -> None:
        self._db = db
        self._tz = ZoneInfo(tz_name)

    def local_from_gmt(self, date_gmt: datetime) -> datetime:
        """Site-local counterpart of a naive UTC datetime."""
        return date_gmt.replace(tzinfo=timezone.utc).astimezone(self._tz).replace(tzinfo=None)

    def find_user_by_email(self, email: str) -> dict[str, Any] | None:
        """Return {id, email, display_name} for a registered user, or None."""
        email = (email or "").strip()
        if not email:
            return None
        with self._db.session_scope() as session:
            user = session.execute(
                select(User).where(func.lower(User.email) == email.lower()).order_by(User.id)
            ).scalars().first()
            if user is None:
                return None
            return {"id": user.id, "email": user.email, "display_name": user.display_name}

    def list(self, page: int, per_page: int) -> tuple[list[dict[str, Any]], int]:
        """
        Return (comments, total) for one page, ascending by id.
        The total comes from its own count query, so under concurrent writes it
        may disagree with the page by a few rows.
        """
        page = require_positive_int("page", page)
        per_page = require_positive_int("per_page", per_page)
        offset = page_offset(page, per_page)
        try:
            with self._db.session_scope() as session:
                rows = session.execute(
                    select(Comment)
                    .where(Comment.type == COMMENT_TYPE)
                    .order_by(Comment.id.asc())
                    .offset(offset)
                    .limit(per_page)
                ).scalars().all()
                comments = [r.to_dict() for r in rows]
                total = session.execute(
                    select(func.count(Comment.id)).where(Comment.type == COMMENT_TYPE)
                ).scalar_one()
        except SQLAlchemyError as e:
            logger.exception("comments_list_failed", page=page, per_page=per_page, error=str(e))
            raise StoreFailure("Could not read comments") from e
        logger.debug("comments_listed", page=page, per_page=per_page, count=len(comments), total=total)
        return comments, int(total)

    def create(self, data: CommentInput) -> int:
        """Insert a comment and return its new id."""
        missing = [
            name
            for name, value in (("post", data.post), ("content", data.content), ("email", data.email))
            if value is None or (isinstance(value, str) and not value.strip())
        ]
        if missing:
            raise ValidationFailure(
                f"Missing parameter(s): {', '.join(missing)}", code="rest_missing_param"
            )
        post_id = require_positive_int("post", data.post)
        parent = 0 if data.parent in (None, "", 0, "0") else require_positive_int("parent", data.parent)
        content = require_text("content", data.content)
        email = require_text("email", data.email, 255).strip()
        name = "" if data.name is None else require_text("name", data.name, 255)
        spam = coerce_flag(data.spam)
        date_gmt = parse_gmt(data.date_gmt)
        user = self.find_user_by_email(email)

        try:
            with self._db.session_scope() as session:
                if session.get(Post, post_id) is None:
                    raise StoreFailure(
                        f"Post {post_id} does not exist", code="post_not_found", status=422
                    )
                if parent and session.get(Comment, parent) is None:
                    raise StoreFailure(
                        f"Parent comment {parent} does not exist", code="parent_not_found", status=422
                    )
                comment = Comment(
                    post_id=post_id,
                    parent_id=parent,
                    user_id=user["id"] if user else 0,
                    author_name=user["display_name"] if user else name,
                    author_email=email,
                    author_url="",
                    content=content,
                    agent=COMMENT_AGENT,
                    type=COMMENT_TYPE,
                    approved=(CommentStatus.SPAM if spam else CommentStatus.APPROVED).value,
                    date=self.local_from_gmt(date_gmt),
                    date_gmt=date_gmt,
                )
                session.add(comment)
                session.flush()
                comment_id = int(comment.id)
        except SQLAlchemyError as e:
            logger.exception("comment_insert_failed", post_id=post_id, error=str(e))
            raise StoreFailure("Could not insert comment") from e

        logger.info(
            "comment_created",
            comment_id=comment_id,
            post_id=post_id,
            parent_id=parent,
            user_id=user["id"] if user else 0,
            spam=spam,
        )
        return comment_id
