"""
Health Check Routes - System health and monitoring endpoints.

These endpoints are used for:
1. Load balancer health checks
2. Container liveness and readiness checks
"""
from datetime import datetime

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from voice_relay import __version__
from voice_relay.core.logging_config import get_logger
from voice_relay.models.chat import HealthResponse

logger = get_logger(__name__)

router = APIRouter(
    prefix="/health",
    tags=["Health"],
)


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check endpoint",
)
async def health_check() -> HealthResponse:
    """
    Perform a basic health check.

    Does not contact either provider.
    """
    logger.debug("Health check requested")

    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.utcnow()
    )


@router.get(
    "/ready",
    response_model=HealthResponse,
    summary="Readiness check endpoint",
    description="""
    Returns 200 once the relay service has been built (credentials
    exchanged), 503 before that.
    """
)
async def readiness_check(request: Request):
    logger.debug("Readiness check requested")

    ready = getattr(request.app.state, "relay_service", None) is not None
    body = HealthResponse(
        status="ready" if ready else "starting",
        version=__version__,
        timestamp=datetime.utcnow()
    )
    if not ready:
        return JSONResponse(status_code=503, content=body.model_dump(mode="json"))
    return body
