"""FastAPI application factory."""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shortener.errors import ErrorKind, ShortenerError
from .api import api_router
from .web import web_router
from .middleware.logging import LoggingMiddleware

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.CONFLICT: 409,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INTERNAL: 500,
}


def create_app(
    service_instance,
    config,
    logger: Optional[logging.Logger] = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        service_instance: URLShortenerService instance (may be set later in lifespan)
        config: Configuration instance
        logger: Optional logger

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="URL Shortener",
        description="URL shortening service",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.state.service = service_instance
    app.state.config = config
    app.state.logger = logger or logging.getLogger("shortener")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    @app.exception_handler(ShortenerError)
    async def shortener_error_handler(request: Request, exc: ShortenerError):
        status_code = STATUS_BY_KIND.get(exc.kind, 500)
        body = exc.to_dict()

        if exc.kind == ErrorKind.INTERNAL:
            # Full detail stays in the server log
            request.app.state.logger.error(
                f"Internal error on {request.method} {request.url.path}: {exc.message}",
                exc_info=exc,
            )
            body["message"] = "Internal server error"
        else:
            request.app.state.logger.info(
                f"{request.method} {request.url.path} -> {exc.code}: {exc.message}"
            )

        return JSONResponse(status_code=status_code, content=body)

    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(web_router, tags=["Web"])

    return app
