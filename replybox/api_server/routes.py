"""
API route definitions: /replybox/v1.

GET  /comments            page through all comments (token required)
POST /comments            create a comment (token required)
GET  /embed/{post_id}     widget script URL and embed context
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request

from replybox.api_server.embed import embed_payload
from replybox.api_server.schemas import (
    CommentCreateRequest,
    CommentListResponse,
    EmbedResponse,
    ErrorResponse,
)
from replybox.api_server.services import ReplyBoxServices
from replybox.api_server.sync_api import DEFAULT_PAGE, DEFAULT_PER_PAGE, SyncAPI
from replybox.replybox_logging import get_logger

logger = get_logger(__name__)

API_PREFIX = "/replybox/v1"
COMMENTS_PATH = "/comments"

router = APIRouter(prefix=API_PREFIX, tags=["replybox"])

_ERRORS = {
    400: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
}


def get_services(request: Request) -> ReplyBoxServices:
    """Dependency: the service container built at startup."""
    return request.app.state.services


def get_sync_api(services: ReplyBoxServices = Depends(get_services)) -> SyncAPI:
    return services.sync


@router.get(COMMENTS_PATH, response_model=CommentListResponse, responses=_ERRORS)
def list_comments(
    token: str = Query("", description="Secure token"),
    page: str = Query(str(DEFAULT_PAGE), description="Page number, starting at 1"),
    per_page: str = Query(str(DEFAULT_PER_PAGE), description="Comments per page"),
    api: SyncAPI = Depends(get_sync_api),
) -> dict:
    """
    Return one page of comments in ascending id order, with the overall total and
    page count. Pages 1..pages together contain every comment exactly once.
    """
    return api.list_comments(token, page=page, per_page=per_page)


@router.post(
    COMMENTS_PATH,
    response_model=int,
    responses={**_ERRORS, 422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"schema": CommentCreateRequest.model_json_schema()}}
        }
    },
)
def create_comment(
    body: Any = Body(None),
    token: str | None = Query(None, description="Secure token (alternative to body.token)"),
    api: SyncAPI = Depends(get_sync_api),
) -> int:
    """
    Create a comment and return its id. A body token takes precedence over the query token.
    The body is only checked once the token has been accepted.
    """
    payload = CommentCreateRequest.model_validate(body if isinstance(body, dict) else {})
    return api.create_comment(payload.token or token, payload.to_input())


@router.get("/embed/{post_id}", response_model=EmbedResponse, responses={404: {"model": ErrorResponse}})
def get_embed(post_id: int, services: ReplyBoxServices = Depends(get_services)) -> dict:
    """
    Widget script URL plus {site, identifier}. 404 while no site id is configured.
    Picks up a site id saved by another process (the admin CLI).
    """
    services.settings.refresh()
    return embed_payload(services.settings.snapshot(), services.config, post_id)
