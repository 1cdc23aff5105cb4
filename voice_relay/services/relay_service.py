"""
Relay Service - Business logic for the prompt-to-speech pipeline.

This service orchestrates one relay:
1. Sends the prompt to the language model
2. Sends the generated text to the speech provider
3. Returns text and base64 audio together

The two calls are strictly sequential since synthesis reads the generated
text. The service holds no per-request state; one instance is built at
startup and shared by all requests.
"""
from typing import Any, Dict, List

from voice_relay.auth.credentials import TokenProvider
from voice_relay.core.config import Settings
from voice_relay.core.logging_config import get_logger
from voice_relay.llm.client import GenerativeTextClient
from voice_relay.models.chat import ChatResponse
from voice_relay.speech.client import SpeechClient

logger = get_logger(__name__)


class RelayService:
    """
    Composes the generation and speech clients.

    Example:
        >>> service = RelayService(text_client, speech_client)
        >>> response = await service.chat("Hello", "abc123")
        >>> response.text
        "Hi there"
    """

    def __init__(self, text_client: GenerativeTextClient, speech_client: SpeechClient):
        self.text_client = text_client
        self.speech_client = speech_client

    @classmethod
    def from_settings(cls, settings: Settings) -> "RelayService":
        """
        Build the service and mint the provider token up front.

        Raises:
            CredentialExchangeError: If credentials are misconfigured or the
                exchange fails; startup should abort
        """
        token_provider = TokenProvider.from_settings(settings)
        token_provider.get_token()

        return cls(
            GenerativeTextClient(settings, token_provider),
            SpeechClient.from_settings(settings),
        )

    async def chat(self, prompt: str, voice_id: str) -> ChatResponse:
        """
        Run one relay.

        Raises:
            GenerationError: If the language model call fails
        """
        logger.info(f"Relaying prompt: prompt_length={len(prompt)}, voice_id={voice_id}")

        text = await self.text_client.generate(prompt)
        audio = await self.speech_client.synthesize(text, voice_id)

        logger.info(
            f"Relay complete: text_length={len(text)}, "
            f"audio={'yes' if audio is not None else 'none'}"
        )
        return ChatResponse(text=text, audio=audio)

    async def list_voices(self) -> List[Dict[str, Any]]:
        return await self.speech_client.list_voices()

    async def aclose(self) -> None:
        await self.speech_client.aclose()
