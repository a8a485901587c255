"""
Snippetbox Backend - Snippet Route Handlers
============================================

What:  GET /snippet/view?id=N and POST /snippet/create.
Why:   Thin adapters between HTTP and the snippet repository.
How:   Parse the request, call the repository, return a response. Failures
       are raised and turned into responses by the global exception handlers.

Status codes:
    view    200 text/plain | 404 bad/absent/expired id | 500 storage fault
    create  303 → /snippet/view?id=<new> | 405 (+Allow: POST) | 500 storage fault
"""

import logging
import re
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import PlainTextResponse, RedirectResponse

from snippetbox.exceptions import NotFoundError
from snippetbox.schemas.snippet import FIELD_ORDER, Snippet
from snippetbox.services.snippet_repository import SnippetRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/snippet", tags=["Snippets"])

# Placeholder content until the create form exists
PLACEHOLDER_TITLE = "O snail"
PLACEHOLDER_CONTENT = "O snail\nClimb Mount Fuji,\nBut slowly, slowly!\n\n- Kobayashi Issa"
PLACEHOLDER_EXPIRES_DAYS = 7

# Largest value the INTEGER id column can hold
MAX_SNIPPET_ID = 2**31 - 1

_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


def get_snippet_repository(request: Request) -> SnippetRepository:
    """FastAPI dependency: the repository opened during app startup."""
    return request.app.state.snippets


def parse_snippet_id(raw: Optional[str]) -> int:
    """
    Parse the `id` query value as a positive integer.

    Missing, malformed, non-positive and out-of-range values all raise
    NotFoundError, exactly like an id that simply doesn't exist.
    """
    if raw is None or not _ID_PATTERN.fullmatch(raw):
        raise NotFoundError(resource="snippet", resource_id=raw)
    snippet_id = int(raw)
    if not 1 <= snippet_id <= MAX_SNIPPET_ID:
        raise NotFoundError(resource="snippet", resource_id=raw)
    return snippet_id


def format_snippet(snippet: Snippet) -> str:
    return "".join(f"{name}: {getattr(snippet, name)}\n" for name in FIELD_ORDER)


@router.get(
    "/view",
    response_class=PlainTextResponse,
    summary="Show a single snippet as plain text",
)
async def snippet_view(
    raw_id: Optional[str] = Query(default=None, alias="id"),
    snippets: SnippetRepository = Depends(get_snippet_repository),
) -> PlainTextResponse:
    snippet_id = parse_snippet_id(raw_id)
    snippet = await snippets.get(snippet_id)
    return PlainTextResponse(format_snippet(snippet))


@router.post(
    "/create",
    status_code=303,
    response_class=RedirectResponse,
    summary="Create a snippet and redirect to it",
)
async def snippet_create(
    snippets: SnippetRepository = Depends(get_snippet_repository),
) -> RedirectResponse:
    """
    Insert a placeholder snippet and redirect (303) to its view page.

    Only POST is routed here; other methods get 405 with `Allow: POST`
    from the router, rendered by the client-error handler.
    """
    snippet_id = await snippets.insert(
        PLACEHOLDER_TITLE,
        PLACEHOLDER_CONTENT,
        PLACEHOLDER_EXPIRES_DAYS,
    )
    logger.info("Created snippet %d", snippet_id)
    return RedirectResponse(url=f"/snippet/view?id={snippet_id}", status_code=303)
