"""
Request and response models for the sync API.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from replybox.database.repositories import CommentInput


class CommentOut(BaseModel):
    """One comment as the hosted service sees it."""

    id: int = Field(..., description="Comment id (ascending, store-assigned)")
    post: int = Field(..., description="Post the comment belongs to")
    parent: int = Field(0, description="Parent comment id, 0 for top-level")
    user_name: str = Field("", description="Author display name")
    user_email: str = Field("", description="Author email")
    content: str = Field("", description="Comment body")
    approved: str = Field(..., description='Moderation value: "1" (approved) or "spam"')
    date_gmt: str = Field(..., description="Creation time, UTC, YYYY-MM-DD HH:MM:SS")


class CommentListResponse(BaseModel):
    """GET /replybox/v1/comments response."""

    total: int = Field(..., ge=0, description="Total number of comments")
    pages: int = Field(..., ge=0, description="Number of pages at this per_page")
    comments: list[CommentOut] = Field(default_factory=list)


class CommentCreateRequest(BaseModel):
    """
    POST /replybox/v1/comments body. token may also be sent as a query parameter.

    Fields are accepted as sent and checked only after the token, so an
    unauthenticated caller always gets 403 whatever the body holds.
    """

    token: Any = Field(None, description="Secure token")
    post: Any = Field(None, description="Post id")
    name: Any = Field("", description="Author name (ignored for registered users)")
    email: Any = Field(None, description="Author email")
    content: Any = Field(None, description="Comment body")
    parent: Any = Field(0, description="Parent comment id, 0 for top-level")
    spam: Any = Field(False, description="Mark the comment as spam")
    date_gmt: Any = Field(None, description="Creation time, UTC, YYYY-MM-DD HH:MM:SS; defaults to now")

    def to_input(self) -> CommentInput:
        return CommentInput(
            post=self.post,
            email=self.email,
            content=self.content,
            name=self.name,
            parent=self.parent,
            spam=self.spam,
            date_gmt=self.date_gmt,
        )


class EmbedResponse(BaseModel):
    """GET /replybox/v1/embed/{post_id} response."""

    script: str = Field(..., description="Widget script URL")
    site: str = Field(..., description="Site identifier")
    identifier: int = Field(..., description="Post id the widget renders comments for")


class ErrorResponse(BaseModel):
    code: str
    message: str
    status: int
