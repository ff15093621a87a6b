"""
Gist Relay — Shared Notebook Route Handlers
============================================

What:  The relay's single path, /api, branching on method.
Who:   Called by the notebook frontend's share and open-shared actions.

Request Flow:
    GET /api?id=<id>
        1. Reject a missing/empty id with 400 (no upstream call)
        2. GistService.fetch_raw() → one GET to the raw-content URL
        3. Relay the bytes verbatim with the upstream content type
           (any upstream failure surfaces as 404 via NotFoundError)

    POST /api   body = notebook source
        1. Reject an empty body with 400 (no upstream call)
        2. GistService.create_gist() → one authenticated POST to GitHub
        3. Return GitHub's gist object as JSON
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, Response
from pydantic_core import PydanticSerializationError
from starlette.requests import ClientDisconnect

from gist_relay.dependencies import get_gist_service
from gist_relay.exceptions import SerializationError, ValidationError
from gist_relay.middleware.request_id import request_id_var
from gist_relay.schemas.gist import ErrorResponse, Gist
from gist_relay.services.gist_base import GistService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Gists"])

MISSING_ID_MESSAGE = "Missing `id` query field"
MISSING_BODY_MESSAGE = "Missing body of POST request"


@router.get(
    "",
    response_class=Response,
    responses={
        200: {"description": "Raw notebook content", "content": {"text/plain": {}}},
        400: {"description": "Missing `id` query parameter", "content": {"text/plain": {}}},
        404: {"description": "Gist could not be fetched", "content": {"text/plain": {}}},
    },
    summary="Fetch a shared notebook",
)
async def fetch_gist(
    gist_id: Optional[str] = Query(
        default=None,
        alias="id",
        description="Identifier returned when the notebook was shared",
    ),
    gist_service: GistService = Depends(get_gist_service),
) -> Response:
    if not gist_id:
        raise ValidationError(message=MISSING_ID_MESSAGE, field="id")

    raw = await gist_service.fetch_raw(gist_id)
    return Response(content=raw.content, media_type=raw.media_type)


@router.post(
    "",
    response_model=Gist,
    responses={
        400: {"description": "Missing body", "content": {"text/plain": {}}},
        502: {"description": "GitHub failed to create the gist", "model": ErrorResponse},
        503: {"description": "Sharing is not configured", "model": ErrorResponse},
    },
    summary="Share a notebook as a secret gist",
    description=(
        "Stores the raw request body as `notebook.percival` in a new non-public gist "
        "and returns GitHub's gist object. Use its `id` with GET /api to load it back."
    ),
)
async def create_gist(
    request: Request,
    gist_service: GistService = Depends(get_gist_service),
) -> JSONResponse:
    """
    Share the request body as a gist.

    UTF-8 bodies are stored byte-for-byte. Invalid UTF-8 is not rejected:
    it is decoded with replacement characters, as GitHub needs a JSON string.
    """
    try:
        body = await request.body()
    except ClientDisconnect:
        raise ValidationError(message=MISSING_BODY_MESSAGE, field="body")

    if not body:
        raise ValidationError(message=MISSING_BODY_MESSAGE, field="body")

    # GitHub takes file contents as a JSON string; invalid sequences become U+FFFD
    content = body.decode("utf-8", errors="replace")

    gist = await gist_service.create_gist(content)

    try:
        payload = gist.model_dump(mode="json", exclude_none=True)
    except PydanticSerializationError as e:
        logger.error("[%s] Failed to serialize gist %s: %s", request_id_var.get(""), gist.id, e)
        raise SerializationError(context={"gist_id": gist.id})

    return JSONResponse(content=payload)
