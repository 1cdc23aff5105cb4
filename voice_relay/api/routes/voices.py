"""
Voice Routes - Proxy for the speech provider's voice catalog.
"""
from fastapi import APIRouter, Depends, Request

from voice_relay.api.dependencies import get_relay_service
from voice_relay.models.chat import ErrorResponse, VoicesResponse
from voice_relay.services.relay_service import RelayService

router = APIRouter(
    prefix="/voices",
    tags=["Voices"],
    responses={
        500: {"model": ErrorResponse, "description": "Could not fetch voices"}
    }
)


@router.get(
    "",
    response_model=VoicesResponse,
    summary="List available voices",
)
async def list_voices(
    request: Request,
    service: RelayService = Depends(get_relay_service),
) -> VoicesResponse:
    """Return the provider's voices under a `voices` envelope."""
    voices = await service.list_voices()
    request.state.voice_count = len(voices)
    return VoicesResponse(voices=voices)
