"""API routes implementation.

Routes only translate HTTP to service calls. Domain errors propagate to the
exception handler registered in the app factory, which maps them to status
codes.
"""

from fastapi import APIRouter, Query, Request, status
from datetime import datetime, timezone

from .schemas import (
    DeactivateResponse,
    ErrorResponse,
    HealthResponse,
    MappingResponse,
    RewriteRequest,
    RewriteResponse,
)
from shortener.database.models import ShortMapping
from shortener.rewriter import TextRewriter
from shortener.common.headers import build_base_url, resolve_path_prefix

router = APIRouter()


def _request_base(request: Request):
    """Base URL and path prefix for short URLs built during this request."""
    config = request.app.state.config
    headers = dict(request.headers)

    base_url = build_base_url(
        headers=headers,
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )
    return base_url, resolve_path_prefix(headers, config.path_prefix)


def _mapping_response(request: Request, mapping: ShortMapping) -> dict:
    base_url, path_prefix = _request_base(request)
    service = request.app.state.service

    return {
        "short_code": mapping.code,
        "short_url": service.short_url(mapping.code, base_url=base_url, path_prefix=path_prefix),
        "original_url": mapping.original_url,
        "status": mapping.status.value,
        "created_at": mapping.created_at,
        "deactivated_at": mapping.deactivated_at,
    }


@router.post(
    "/urls",
    response_model=MappingResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid URL"},
        409: {"model": ErrorResponse, "description": "Short code conflict"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Create short URL",
    description="Shorten a URL. Returns the existing active mapping if the URL is already shortened.",
)
async def add_url(request: Request, url: str = Query(..., description="The URL to shorten")):
    """Create (or reuse) a short URL."""
    mapping = await request.app.state.service.add(url)
    return _mapping_response(request, mapping)


@router.get(
    "/urls",
    response_model=MappingResponse,
    responses={404: {"model": ErrorResponse, "description": "URL was never shortened"}},
    summary="Get URL information",
    description="Get the most recent mapping for a URL, active or deactivated.",
)
async def url_info(request: Request, url: str = Query(..., description="The original URL")):
    """Get information about a shortened URL."""
    mapping = await request.app.state.service.info(url)
    return _mapping_response(request, mapping)


@router.delete(
    "/urls",
    response_model=DeactivateResponse,
    responses={404: {"model": ErrorResponse, "description": "No active mapping"}},
    summary="Deactivate short URL",
    description="Deactivate the active mapping for a URL. The code stops resolving.",
)
async def deactivate_url(request: Request, url: str = Query(..., description="The original URL")):
    """Deactivate the active short URL for a URL."""
    mapping = await request.app.state.service.deactivate(url)
    return {**_mapping_response(request, mapping), "result": "OK"}


@router.get(
    "/urls/{short_code}",
    response_model=MappingResponse,
    responses={404: {"model": ErrorResponse, "description": "Short code not found"}},
    summary="Get short code information",
)
async def code_info(request: Request, short_code: str):
    """Get information about a short code, active or deactivated."""
    mapping = await request.app.state.service.info_by_code(short_code)
    return _mapping_response(request, mapping)


@router.post(
    "/text",
    response_model=RewriteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Text contains an invalid URL"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Shorten URLs in text",
    description="Replace every URL in the text with its short URL.",
)
async def rewrite_text(request: Request, body: RewriteRequest):
    """Shorten every URL embedded in a piece of text."""
    base_url, path_prefix = _request_base(request)
    rewriter = TextRewriter(
        request.app.state.service,
        base_url=base_url,
        path_prefix=path_prefix,
        logger=request.app.state.logger,
    )
    return RewriteResponse(value=await rewriter.rewrite(body.text))


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    health = await request.app.state.service.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        database="healthy" if health["database"] else "unhealthy",
        cache="healthy" if health["cache"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )
