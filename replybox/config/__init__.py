"""
Configuration management for the ReplyBox sync service.

Loads settings from environment variables and an optional .env file.
Exposes a single source of truth for all service configuration.
"""

from replybox.config.settings import AppConfig, get_settings  # noqa: F401

__all__ = ["AppConfig", "get_settings"]
