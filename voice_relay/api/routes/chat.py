"""
Chat Routes - Prompt in, text and speech out.

POST /chat validates the request, then runs generation and synthesis in
order. Missing fields are rejected before either provider is called.
"""
from fastapi import APIRouter, Depends, Request

from voice_relay.api.dependencies import get_relay_service
from voice_relay.core.exceptions import RelayException, ValidationError
from voice_relay.core.logging_config import get_logger
from voice_relay.core.validators import validate_prompt, validate_voice_id
from voice_relay.models.chat import ChatRequest, ChatResponse, ErrorResponse
from voice_relay.services.relay_service import RelayService

logger = get_logger(__name__)

router = APIRouter(
    prefix="/chat",
    tags=["Chat"],
    responses={
        400: {"model": ErrorResponse, "description": "Missing or invalid field"},
        500: {"model": ErrorResponse, "description": "Upstream or internal error"}
    }
)


@router.post(
    "",
    response_model=ChatResponse,
    summary="Generate text for a prompt and read it aloud",
    description="""
    Sends `prompt` to the language model, then synthesizes the answer with
    the speech provider using `voice_id`.

    **Limits:**
    - `prompt`: 1 to 4000 characters after trimming
    - `voice_id`: 1 to 64 characters from `[A-Za-z0-9_-]`

    A missing, empty or out-of-range field is a 400 and neither provider
    is called.

    `audio` is base64-encoded audio, or `null` when synthesis failed; the
    generated text is returned either way. A failed generation is a 500.
    """
)
async def relay_chat(
    payload: ChatRequest,
    request: Request,
    service: RelayService = Depends(get_relay_service),
) -> ChatResponse:
    is_valid, prompt, error = validate_prompt(payload.prompt)
    if not is_valid:
        raise ValidationError(error, field="prompt")

    is_valid, voice_id, error = validate_voice_id(payload.voice_id)
    if not is_valid:
        raise ValidationError(error, field="voice_id")

    # Read back by AuditMiddleware
    request.state.voice_id = voice_id

    try:
        response = await service.chat(prompt, voice_id)
    except RelayException:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        raise RelayException("Internal server error", details=str(e)) from e

    request.state.audio_returned = response.audio is not None
    return response
