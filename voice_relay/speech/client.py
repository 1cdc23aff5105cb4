"""
Speech Synthesis Client for the ElevenLabs REST API.

Failure policy:
- synthesize(): a failed synthesis is logged and yields None, so the relay
  still answers with the generated text and `audio: null`.
- list_voices(): any failure raises VoiceCatalogError.
"""
import base64
from typing import Any, Dict, List, Optional

import httpx

from voice_relay.core.config import Settings
from voice_relay.core.exceptions import SpeechSynthesisError, VoiceCatalogError
from voice_relay.core.logging_config import get_logger

logger = get_logger(__name__)

VOICE_SETTINGS = {"stability": 0.5, "similarity_boost": 0.75}


class SpeechClient:
    """Async wrapper around the ElevenLabs text-to-speech and voices endpoints."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://api.elevenlabs.io",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"xi-api-key": api_key},
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "SpeechClient":
        return cls(
            settings.elevenlabs_api_key,
            base_url=settings.elevenlabs_base_url,
            timeout=settings.tts_timeout_seconds,
            **kwargs,
        )

    async def __aenter__(self) -> "SpeechClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if not self._client.is_closed:
            await self._client.aclose()

    async def synthesize_bytes(self, text: str, voice_id: str) -> bytes:
        """
        Synthesize text and return the raw audio.

        Raises:
            SpeechSynthesisError: On transport failure or a non-2xx status
        """
        payload = {"text": text, "voice_settings": VOICE_SETTINGS}
        try:
            response = await self._client.post(
                f"/v1/text-to-speech/{voice_id}",
                json=payload,
                headers={"Accept": "audio/mpeg"},
            )
        except httpx.HTTPError as e:
            raise SpeechSynthesisError(f"ElevenLabs request failed: {e}") from e

        if not response.is_success:
            raise SpeechSynthesisError(
                f"ElevenLabs API error: {response.status_code}",
                status_code=response.status_code,
            )
        return response.content

    async def synthesize(self, text: str, voice_id: str) -> Optional[str]:
        """Synthesize text, returning base64 audio or None when synthesis failed."""
        try:
            audio = await self.synthesize_bytes(text, voice_id)
        except SpeechSynthesisError as e:
            logger.error(f"{e.message} (voice_id={voice_id})")
            return None

        logger.info(f"Speech synthesized: voice_id={voice_id}, bytes={len(audio)}")
        return base64.b64encode(audio).decode("ascii")

    async def list_voices(self) -> List[Dict[str, Any]]:
        """
        Fetch the voice catalog. Entries are returned exactly as the provider sent them.

        Raises:
            VoiceCatalogError: On transport failure, non-2xx status or an
                unexpected payload
        """
        try:
            response = await self._client.get("/v1/voices")
        except httpx.HTTPError as e:
            logger.error(f"Voices fetch error: {e}")
            raise VoiceCatalogError() from e

        if not response.is_success:
            logger.error(f"Voices fetch error: status={response.status_code}")
            raise VoiceCatalogError()

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Voices payload is not JSON: {e}")
            raise VoiceCatalogError() from e

        voices = data.get("voices") if isinstance(data, dict) else None
        if not isinstance(voices, list):
            logger.error("Voices payload has no 'voices' list")
            raise VoiceCatalogError()

        return voices
