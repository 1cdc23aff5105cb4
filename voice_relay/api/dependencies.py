"""
Request-scoped access to the process-wide RelayService.
"""
from fastapi import Request

from voice_relay.core.exceptions import RelayException
from voice_relay.services.relay_service import RelayService


def get_relay_service(request: Request) -> RelayService:
    """Return the service built during application startup."""
    service = getattr(request.app.state, "relay_service", None)
    if service is None:
        raise RelayException("Relay service is not initialized")
    return service
