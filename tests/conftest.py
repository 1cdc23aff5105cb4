import os
import tempfile

import pytest

# The app reads settings at import time; give it a complete test environment first.
os.environ.setdefault("GOOGLE_CLOUD_PROJECT", "test-project")
os.environ.setdefault("ELEVENLABS_API_KEY", "test-xi-key")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="voice-relay-logs-"))
os.environ.setdefault("PUBLIC_DIR", os.path.join(tempfile.gettempdir(), "voice-relay-no-public"))

from voice_relay.core.config import get_settings  # noqa: E402


CREDENTIAL_ENV_VARS = (
    "GOOGLE_AUTH_MODE",
    "GOOGLE_APPLICATION_CREDENTIALS",
    "GOOGLE_APPLICATION_CREDENTIALS_JSON",
    "GCP_PROJECT_NUMBER",
    "GCP_SERVICE_ACCOUNT_EMAIL",
    "GCP_WORKLOAD_IDENTITY_POOL_ID",
    "GCP_WORKLOAD_IDENTITY_POOL_PROVIDER_ID",
    "OIDC_TOKEN_FILE",
    "TOKEN_REFRESH_ENABLED",
    "LLM_TEMPERATURE",
    "LLM_MAX_TOKENS",
)


@pytest.fixture
def settings_factory(monkeypatch):
    """Build Settings from a clean credential environment plus the given overrides."""
    def build(**env):
        for key in CREDENTIAL_ENV_VARS:
            monkeypatch.delenv(key, raising=False)
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        get_settings.cache_clear()
        return get_settings()

    yield build
    get_settings.cache_clear()


@pytest.fixture
def settings(settings_factory):
    return settings_factory()


class FakeTokenProvider:
    def __init__(self, value="token-123"):
        from voice_relay.auth.credentials import AccessToken

        self.token = AccessToken(value=value)
        self.calls = 0

    def get_token(self):
        self.calls += 1
        return self.token


@pytest.fixture
def token_provider():
    return FakeTokenProvider()
