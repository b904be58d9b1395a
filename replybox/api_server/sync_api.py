"""
Comment sync operations: list and create, both behind the secure token.

The token is checked before anything else; a rejected request never reaches
the repository.
"""

from __future__ import annotations

from typing import Any, Protocol

from replybox.auth import TokenAuthority
from replybox.database.repositories import (
    CommentInput,
    page_count,
    require_positive_int,
)
from replybox.replybox_logging import get_logger

logger = get_logger(__name__)

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 100


class CommentStore(Protocol):
    def list(self, page: int, per_page: int) -> tuple[list[dict[str, Any]], int]: ...

    def create(self, data: CommentInput) -> int: ...


class SyncAPI:
    def __init__(self, tokens: TokenAuthority, comments: CommentStore) -> None:
        self._tokens = tokens
        self._comments = comments

    def list_comments(
        self,
        token: str | None,
        page: Any = DEFAULT_PAGE,
        per_page: Any = DEFAULT_PER_PAGE,
    ) -> dict[str, Any]:
        """Return {total, pages, comments} for one page of comments."""
        self._tokens.require(token)
        page = require_positive_int("page", page)
        per_page = require_positive_int("per_page", per_page)
        comments, total = self._comments.list(page, per_page)
        return {
            "total": total,
            "pages": page_count(total, per_page),
            "comments": comments,
        }

    def create_comment(self, token: str | None, data: CommentInput) -> int:
        """Create a comment and return its id."""
        self._tokens.require(token)
        return self._comments.create(data)
