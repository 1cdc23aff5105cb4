"""
LLM Client for Google Gemini.

The bearer token minted by the TokenProvider is wrapped into static OAuth
credentials and passed straight to the generative-language service client,
so every generation request carries `Authorization: Bearer <token>` and
bills the configured project.

No fallback text is ever substituted: a provider error, an empty candidate
list or a candidate without text parts raises GenerationError.
"""
from typing import Any, Callable, Optional

import google.generativeai as genai
from google.ai.generativelanguage import GenerativeServiceAsyncClient
from google.oauth2.credentials import Credentials as OAuthCredentials
from starlette.concurrency import run_in_threadpool

from voice_relay.auth.credentials import AccessToken, TokenProvider
from voice_relay.core.config import Settings
from voice_relay.core.exceptions import GenerationError
from voice_relay.core.logging_config import get_logger

logger = get_logger(__name__)


def model_path(model_name: str) -> str:
    """Resource name for a model, e.g. 'gemini-2.5-flash' -> 'models/gemini-2.5-flash'."""
    return model_name if model_name.startswith("models/") else f"models/{model_name}"


def build_async_client(credentials: OAuthCredentials) -> GenerativeServiceAsyncClient:
    """Service client bound to explicit credentials; never reads API keys from the environment."""
    return GenerativeServiceAsyncClient(credentials=credentials)


def extract_text(response: Any) -> str:
    """
    Return the first candidate's first content part as text.

    Raises:
        GenerationError: If the response has no candidates or the first
            candidate has no text part
    """
    candidates = getattr(response, "candidates", None)
    if not candidates:
        raise GenerationError("Model returned no candidates")

    try:
        text = candidates[0].content.parts[0].text
    except (AttributeError, IndexError, TypeError) as e:
        raise GenerationError(f"Malformed generation response: {e}") from e

    if not isinstance(text, str) or not text:
        raise GenerationError("Model returned an empty text part")

    return text


class GenerativeTextClient:
    """
    Single-shot text generation against Gemini.

    genai.configure() is not used: it also reads GOOGLE_API_KEY or
    GEMINI_API_KEY from the environment and rejects that key alongside
    credentials.

    Example:
        >>> client = GenerativeTextClient(settings, token_provider)
        >>> await client.generate("Hello")
        "Hi there"
    """

    def __init__(
        self,
        settings: Settings,
        token_provider: TokenProvider,
        client_factory: Optional[Callable[[OAuthCredentials], Any]] = None,
    ):
        """
        Args:
            settings: Application settings (model, project, generation config)
            token_provider: Source of the bearer token
            client_factory: Builds the service client from credentials;
                defaults to build_async_client
        """
        self.settings = settings
        self.token_provider = token_provider
        self.model_name = settings.llm_model
        self.model_path = model_path(settings.llm_model)
        self.timeout = settings.llm_timeout_seconds

        self._client_factory = client_factory or build_async_client
        self._client = None
        self._client_token: Optional[str] = None

        logger.info(f"Generative text client initialized (model={self.model_name})")

    def _generation_config(self) -> Optional[genai.protos.GenerationConfig]:
        options = {}
        if self.settings.llm_temperature is not None:
            options["temperature"] = self.settings.llm_temperature
        if self.settings.llm_max_tokens is not None:
            options["max_output_tokens"] = self.settings.llm_max_tokens
        return genai.protos.GenerationConfig(**options) if options else None

    def credentials_for(self, token: AccessToken) -> OAuthCredentials:
        """
        Wrap the token as static credentials.

        No expiry is attached, so google-auth never tries to refresh them;
        expiry belongs to the TokenProvider refresh policy.
        """
        return OAuthCredentials(
            token=token.value,
            quota_project_id=self.settings.google_cloud_project,
        )

    def _client_for(self, token: AccessToken):
        """Return the service client for the token, rebuilding it when the token changed."""
        if token.value != self._client_token or self._client is None:
            self._client = self._client_factory(self.credentials_for(token))
            self._client_token = token.value
        return self._client

    def build_request(self, prompt: str) -> genai.protos.GenerateContentRequest:
        request = genai.protos.GenerateContentRequest(
            model=self.model_path,
            contents=[genai.protos.Content(role="user", parts=[genai.protos.Part(text=prompt)])],
        )
        generation_config = self._generation_config()
        if generation_config is not None:
            request.generation_config = generation_config
        return request

    async def generate(self, prompt: str) -> str:
        """
        Issue one generation call for the prompt.

        Raises:
            CredentialExchangeError: If no token can be obtained
            GenerationError: If the call fails or yields no text
        """
        # Blocking only when the token has to be minted
        token = await run_in_threadpool(self.token_provider.get_token)
        client = self._client_for(token)

        logger.debug(f"Generating text: model={self.model_name}, prompt_length={len(prompt)}")

        try:
            response = await client.generate_content(
                request=self.build_request(prompt),
                timeout=self.timeout,
            )
        except Exception as e:
            logger.error(f"Gemini error: {e}")
            raise GenerationError(f"Text generation failed: {e}") from e

        text = extract_text(response)
        logger.info(f"Text generated: response_length={len(text)}")
        return text
