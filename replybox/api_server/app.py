"""
ASGI application entrypoint.

Builds the service container from environment configuration on first access.
Run with: uvicorn replybox.api_server.app:app --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from replybox.api_server.server import create_app
from replybox.api_server.services import build_services
from replybox.config import get_settings

_app: FastAPI | None = None


def create_default_app() -> FastAPI:
    return create_app(build_services(get_settings()))


def __getattr__(name: str) -> Any:
    """Lazy app: expose 'app' without touching the database at import time."""
    global _app
    if name == "app":
        if _app is None:
            _app = create_default_app()
        return _app
    raise AttributeError(name)
