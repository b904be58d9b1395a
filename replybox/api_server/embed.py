"""
Embed context for the hosted widget script.

Comments are only replaced once a site id is configured (unless the config
forces it either way). The widget reads {site, identifier} to know which
thread to render.
"""

from __future__ import annotations

from typing import Any

from replybox.config import AppConfig
from replybox.core.exceptions import EmbedDisabled
from replybox.database.options import ReplyBoxSettings


def replace_comments(settings: ReplyBoxSettings, config: AppConfig) -> bool:
    if config.replace_comments is not None:
        return config.replace_comments
    return bool(settings.site_id)


def embed_context(settings: ReplyBoxSettings, post_id: int) -> dict[str, Any]:
    return {"site": settings.site_id, "identifier": post_id}


def embed_payload(settings: ReplyBoxSettings, config: AppConfig, post_id: int) -> dict[str, Any]:
    """Script URL plus embed context, or EmbedDisabled when comments are not replaced."""
    if not replace_comments(settings, config):
        raise EmbedDisabled("ReplyBox is not configured for this site.")
    return {"script": config.embed_url, **embed_context(settings, post_id)}
