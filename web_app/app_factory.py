"""FastAPI application factory."""

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shortener.errors import ErrorKind, ShortenerError

from .api import api_router
from .middleware.logging import LoggingMiddleware

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: HTTPStatus.BAD_REQUEST,
    ErrorKind.CODEC: HTTPStatus.BAD_REQUEST,
    ErrorKind.RANGE: HTTPStatus.BAD_REQUEST,
    ErrorKind.INVALID_CODE: HTTPStatus.BAD_REQUEST,
    ErrorKind.NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorKind.STORE: HTTPStatus.INTERNAL_SERVER_ERROR,
    ErrorKind.DEADLINE_EXCEEDED: HTTPStatus.SERVICE_UNAVAILABLE,
}


async def shortener_error_handler(request: Request, exc: ShortenerError) -> JSONResponse:
    """Map an engine error to its status code and an {"error": ...} body."""
    status_code = STATUS_BY_KIND.get(exc.kind, HTTPStatus.INTERNAL_SERVER_ERROR)

    # Only validation messages are meant for clients. Errors raised by the
    # engine were logged there.
    if exc.kind is ErrorKind.VALIDATION:
        logger.warning(f"{request.method} {request.url.path}: {exc}")
        message = str(exc)
    else:
        message = status_code.phrase

    return JSONResponse(status_code=int(status_code), content={"error": message})


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Report unrouted paths and unsupported methods with the {"error": ...} body."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed requests with the same error body as other failures."""
    logger.warning(f"{request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=int(HTTPStatus.BAD_REQUEST),
        content={"error": HTTPStatus.BAD_REQUEST.phrase},
    )


def create_app(
    engine,
    config,
    lifespan=None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        engine: Shortening engine instance (may be None until lifespan startup)
        config: Configuration instance
        lifespan: Optional lifespan context manager that builds the engine

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="URL Shortener",
        description="Reversible short codes for long URLs",
        version=config.build,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )

    # Store instances in app state for access in routes
    app.state.engine = engine
    app.state.config = config

    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(ShortenerError, shortener_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    app.include_router(api_router)

    return app
