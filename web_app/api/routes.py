"""API routes implementation."""

import os
import socket

from fastapi import APIRouter, Form, Request, status
from fastapi.responses import JSONResponse

from shortener.common.validators import is_valid_short_code, is_valid_url
from shortener.errors import ValidationError

from .schemas import (
    ErrorResponse,
    ExpandResponse,
    LivenessResponse,
    ReadinessResponse,
    ShortenResponse,
)

router = APIRouter()


@router.get(
    "/readiness",
    response_model=ReadinessResponse,
    responses={
        500: {"model": ReadinessResponse, "description": "Database not ready"},
    },
    summary="Readiness probe",
    description="Check that the database answers within the readiness timeout.",
)
async def readiness(request: Request):
    """Readiness probe backed by the store health check."""
    engine = request.app.state.engine
    config = request.app.state.config

    if await engine.health_check(timeout=config.readiness_timeout_seconds):
        return ReadinessResponse(status="ok")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ReadinessResponse(status="db not ready").model_dump(),
    )


@router.get(
    "/liveness",
    response_model=LivenessResponse,
    response_model_exclude_none=True,
    summary="Liveness probe",
    description="Report that the process is up, with host and pod details.",
)
async def liveness(request: Request):
    """Liveness probe.

    When deployed to Kubernetes, pod, node and namespace details come from
    the Downward API environment variables set in the Pod manifest.
    """
    try:
        host = socket.gethostname()
    except OSError:
        host = "unavailable"

    return LivenessResponse(
        status="up",
        build=request.app.state.config.build,
        host=host,
        pod=os.getenv("KUBERNETES_PODNAME") or None,
        pod_ip=os.getenv("KUBERNETES_NAMESPACE_POD_IP") or None,
        node=os.getenv("KUBERNETES_NODENAME") or None,
        namespace=os.getenv("KUBERNETES_NAMESPACE") or None,
    )


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid URL"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
        503: {"model": ErrorResponse, "description": "Database deadline exceeded"},
    },
    summary="Create short URL",
    description="Return the short code for a URL. The same URL always gets the same code.",
)
async def shorten_url(request: Request, url: str = Form("")):
    """Create a shortened URL."""
    is_valid, error = is_valid_url(url)
    if not is_valid:
        raise ValidationError(error)

    code = await request.app.state.engine.shorten(url)
    return ShortenResponse(code=code)


@router.get(
    "/{code}",
    response_model=ExpandResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid short code"},
        404: {"model": ErrorResponse, "description": "Short code not found"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
        503: {"model": ErrorResponse, "description": "Database deadline exceeded"},
    },
    summary="Expand short code",
    description="Return the original URL of a short code.",
)
async def expand_code(request: Request, code: str):
    """Resolve a short code to its original URL."""
    is_valid, error = is_valid_short_code(code)
    if not is_valid:
        raise ValidationError(error)

    url = await request.app.state.engine.expand(code)
    return ExpandResponse(url=url)
