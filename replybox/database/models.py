"""
SQLAlchemy models for the site's content store.

posts and users are the host records comments attach to; comments is the
table the sync API reads and writes; options holds the ReplyBox settings
record as one JSON value.
"""

from __future__ import annotations

import enum
from typing import Any

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
COMMENT_AGENT = "ReplyBox"
COMMENT_TYPE = "comment"


class CommentStatus(str, enum.Enum):
    """Stored moderation value. PENDING exists in the store but the API never writes it."""

    APPROVED = "1"
    PENDING = "0"
    SPAM = "spam"


class Post(Base):
    """A content item comments attach to."""

    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False, default="")


class User(Base):
    """Registered site user. Email lookup drives comment attribution."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    display_name = Column(String(255), nullable=False, default="")


class Comment(Base):
    """
    One comment on a post. parent_id is 0 for top-level comments; user_id is 0
    when the author is not a registered user.
    """

    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(Integer, nullable=False, index=True)
    parent_id = Column(Integer, nullable=False, default=0)
    user_id = Column(Integer, nullable=False, default=0)
    author_name = Column(String(255), nullable=False, default="")
    author_email = Column(String(255), nullable=False, default="")
    author_url = Column(String(255), nullable=False, default="")
    content = Column(Text, nullable=False)
    agent = Column(String(255), nullable=False, default=COMMENT_AGENT)
    type = Column(String(20), nullable=False, default=COMMENT_TYPE, index=True)
    approved = Column(String(20), nullable=False, default=CommentStatus.APPROVED.value, index=True)
    date = Column(DateTime, nullable=False)  # site-local
    date_gmt = Column(DateTime, nullable=False)

    def to_dict(self) -> dict[str, Any]:
        """Project to the sync API comment shape."""
        return {
            "id": self.id,
            "post": self.post_id,
            "parent": self.parent_id,
            "user_name": self.author_name,
            "user_email": self.author_email,
            "content": self.content,
            "approved": self.approved,
            "date_gmt": self.date_gmt.strftime(DATE_FORMAT),
        }


class Option(Base):
    """Named option record; value is a JSON document. version increases on every save."""

    __tablename__ = "options"

    name = Column(String(191), primary_key=True)
    value = Column(Text, nullable=False, default="{}")
    version = Column(Integer, nullable=False, default=0)
