"""
Database layer: content store models, sessions, settings store and comment repository.
"""

from replybox.database.connection import Database, get_database
from replybox.database.models import Comment, CommentStatus, Option, Post, User
from replybox.database.options import ReplyBoxSettings, SettingsStore
from replybox.database.repositories import CommentInput, CommentRepository

__all__ = [
    "Database",
    "get_database",
    "Comment",
    "CommentStatus",
    "Option",
    "Post",
    "User",
    "ReplyBoxSettings",
    "SettingsStore",
    "CommentInput",
    "CommentRepository",
]
