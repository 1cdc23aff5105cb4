import asyncio
from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from voice_relay.auth.credentials import AccessToken
from voice_relay.core.exceptions import GenerationError
from voice_relay.llm import client as llm_client
from voice_relay.llm.client import GenerativeTextClient, extract_text, model_path


def _response(*texts):
    parts = [SimpleNamespace(text=text) for text in texts]
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))])


class FakeServiceClient:
    def __init__(self, credentials, response=None, error=None):
        self.credentials = credentials
        self.response = response
        self.error = error
        self.calls = []

    async def generate_content(self, request, timeout):
        self.calls.append((request, timeout))
        if self.error is not None:
            raise self.error
        return self.response


class RotatingTokenProvider:
    """Hands out a new token on every call, as a refresh-enabled provider does near expiry."""

    def __init__(self, *values):
        self.values = list(values)

    def get_token(self):
        return AccessToken(value=self.values.pop(0))


def _client(settings, token_provider, response=None, error=None):
    built = []

    def factory(credentials):
        service = FakeServiceClient(credentials, response=response, error=error)
        built.append(service)
        return service

    return GenerativeTextClient(settings, token_provider, client_factory=factory), built


def test_extract_text_returns_first_part_of_first_candidate():
    assert extract_text(_response("Hi there", "ignored")) == "Hi there"


def test_extract_text_rejects_zero_candidates():
    with pytest.raises(GenerationError, match="no candidates"):
        extract_text(SimpleNamespace(candidates=[]))


def test_extract_text_rejects_candidate_without_parts():
    response = SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[]))])

    with pytest.raises(GenerationError, match="Malformed"):
        extract_text(response)


def test_extract_text_rejects_candidate_without_content():
    with pytest.raises(GenerationError, match="Malformed"):
        extract_text(SimpleNamespace(candidates=[SimpleNamespace()]))


def test_extract_text_rejects_empty_text():
    with pytest.raises(GenerationError, match="empty"):
        extract_text(_response(""))


def test_model_path_adds_prefix_once():
    assert model_path("gemini-2.5-flash") == "models/gemini-2.5-flash"
    assert model_path("models/gemini-2.5-flash") == "models/gemini-2.5-flash"


def test_generate_sends_prompt_with_bearer_credentials(settings, token_provider):
    client, built = _client(settings, token_provider, response=_response("Hi there"))

    text = asyncio.run(client.generate("Hello"))

    assert text == "Hi there"
    request, timeout = built[0].calls[0]
    assert request.model == "models/gemini-2.5-flash"
    assert request.contents[0].parts[0].text == "Hello"
    assert request.contents[0].role == "user"
    assert timeout == 30.0
    assert "generation_config" not in request

    credentials = built[0].credentials
    assert credentials.token == "token-123"
    assert credentials.quota_project_id == "test-project"


def test_ambient_api_key_does_not_displace_bearer_token(monkeypatch, settings, token_provider):
    monkeypatch.setenv("GOOGLE_API_KEY", "leftover-key")
    monkeypatch.setenv("GEMINI_API_KEY", "another-leftover-key")
    client, built = _client(settings, token_provider, response=_response("Hi there"))

    assert asyncio.run(client.generate("Hello")) == "Hi there"
    assert built[0].credentials.token == "token-123"


def test_default_service_client_ignores_ambient_api_key(monkeypatch, settings):
    monkeypatch.setenv("GOOGLE_API_KEY", "leftover-key")
    constructed = []

    class RecordingServiceClient:
        def __init__(self, **kwargs):
            constructed.append(kwargs)

    monkeypatch.setattr(llm_client, "GenerativeServiceAsyncClient", RecordingServiceClient)
    credentials = GenerativeTextClient(settings, None).credentials_for(AccessToken(value="token-123"))

    llm_client.build_async_client(credentials)

    assert constructed == [{"credentials": credentials}]


def test_same_token_reuses_the_service_client(settings, token_provider):
    client, built = _client(settings, token_provider, response=_response("Hi"))

    asyncio.run(client.generate("one"))
    asyncio.run(client.generate("two"))

    assert len(built) == 1
    assert len(built[0].calls) == 2
    assert token_provider.calls == 2


def test_reminted_token_reaches_the_provider(settings):
    client, built = _client(settings, RotatingTokenProvider("token-a", "token-b"), response=_response("Hi"))

    asyncio.run(client.generate("one"))
    asyncio.run(client.generate("two"))

    assert [service.credentials.token for service in built] == ["token-a", "token-b"]
    assert len(built[1].calls) == 1


def test_wrapped_credentials_never_self_refresh(settings):
    token = AccessToken(value="token-123", expiry=datetime.utcnow() + timedelta(seconds=30))

    credentials = GenerativeTextClient(settings, None).credentials_for(token)

    assert credentials.expiry is None
    assert credentials.valid


def test_generate_applies_generation_config(settings_factory, token_provider):
    settings = settings_factory(LLM_TEMPERATURE="0.2", LLM_MAX_TOKENS="256")
    client, built = _client(settings, token_provider, response=_response("Hi"))

    asyncio.run(client.generate("Hello"))

    config = built[0].calls[0][0].generation_config
    assert config.temperature == pytest.approx(0.2)
    assert config.max_output_tokens == 256


def test_generate_wraps_provider_errors(settings, token_provider):
    client, _ = _client(settings, token_provider, error=RuntimeError("quota exceeded"))

    with pytest.raises(GenerationError, match="quota exceeded"):
        asyncio.run(client.generate("Hello"))


def test_generate_fails_on_empty_candidates(settings, token_provider):
    client, _ = _client(settings, token_provider, response=SimpleNamespace(candidates=[]))

    with pytest.raises(GenerationError):
        asyncio.run(client.generate("Hello"))
