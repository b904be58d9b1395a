"""
Application-level exceptions.

Every failure the sync API can report is a ReplyBoxError carrying a stable
error code and an HTTP status. The API server converts them to the JSON
error body {"code", "message", "status"} in one exception handler.
"""

from __future__ import annotations

from typing import Any


class ReplyBoxError(Exception):
    """Base exception for all ReplyBox domain errors."""

    code = "replybox_error"
    status = 500

    def __init__(
        self,
        message: str,
        code: str | None = None,
        status: int | None = None,
    ) -> None:
        self.message = message
        if code is not None:
            self.code = code
        if status is not None:
            self.status = status
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "status": self.status}


class AuthenticationFailure(ReplyBoxError):
    """Secure token missing or mismatched. Never says which."""

    code = "token_incorrect"
    status = 403

    def __init__(self, message: str = "Sorry, incorrect secure token.") -> None:
        super().__init__(message)


class ValidationFailure(ReplyBoxError):
    """Malformed pagination parameters or missing comment fields."""

    code = "rest_invalid_param"
    status = 400


class StoreFailure(ReplyBoxError):
    """The comment store rejected a write."""

    code = "comment_insert_failed"
    status = 500


class EmbedDisabled(ReplyBoxError):
    """No site id configured, so comments are not replaced."""

    code = "embed_disabled"
    status = 404
