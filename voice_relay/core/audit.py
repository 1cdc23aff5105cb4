"""
Relay audit logging.

One log line per request, carrying the relay outcome that routes record on
request.state:
- voice_id       : voice used for synthesis (POST /chat)
- audio_returned : whether synthesis produced audio (POST /chat)
- voice_count    : catalog size (GET /voices)

Example:
    REQUEST: POST /chat status=200 duration=1.204s voice_id=abc123 audio=none
"""
import logging
import time
from typing import Callable

from starlette.datastructures import State
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from voice_relay.core.logging_config import get_logger

logger = get_logger(__name__)

RELAY_PATHS = ("/chat", "/voices")


def relay_summary(state: State) -> str:
    """Render the relay facts a route left on request.state."""
    facts = []

    voice_id = getattr(state, "voice_id", None)
    if voice_id:
        facts.append(f"voice_id={voice_id}")

    audio_returned = getattr(state, "audio_returned", None)
    if audio_returned is not None:
        facts.append("audio=yes" if audio_returned else "audio=none")

    voice_count = getattr(state, "voice_count", None)
    if voice_count is not None:
        facts.append(f"voices={voice_count}")

    return " ".join(facts)


def _level_for(path: str, status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    # Health checks and static assets
    if not path.startswith(RELAY_PATHS):
        return logging.DEBUG
    return logging.INFO


class AuditMiddleware(BaseHTTPMiddleware):
    """Logs each request with its relay outcome and sets X-Response-Time."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        path = request.url.path

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"REQUEST FAILED: {request.method} {path} "
                f"duration={time.perf_counter() - started:.3f}s "
                f"{relay_summary(request.state)} error={e}"
            )
            raise

        duration = time.perf_counter() - started
        response.headers["X-Response-Time"] = f"{duration:.3f}s"

        logger.log(
            _level_for(path, response.status_code),
            f"REQUEST: {request.method} {path} status={response.status_code} "
            f"duration={duration:.3f}s {relay_summary(request.state)}".rstrip()
        )
        return response
