"""
HTTP middleware: request logging and timing.

Logs method, path, status and duration. Query strings are not logged because
they can carry the secure token.
"""

from __future__ import annotations

import time

from fastapi import FastAPI, Request

from replybox.replybox_logging.logger import bind_request


def install_request_logging(app: FastAPI) -> None:
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        log = bind_request(request.url.path, request.method)
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            log.exception("request_failed", error=str(e))
            raise
        log.info(
            "request_completed",
            status=response.status_code,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return response
