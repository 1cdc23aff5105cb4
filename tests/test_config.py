import pytest

from voice_relay.core.config import get_settings


def test_defaults(settings):
    assert settings.google_auth_mode == "workload_identity"
    assert settings.llm_model == "gemini-2.5-flash"
    assert settings.elevenlabs_base_url == "https://api.elevenlabs.io"
    assert settings.token_refresh_enabled is False
    assert settings.llm_temperature is None


def test_missing_speech_key_fails(monkeypatch, settings_factory):
    settings_factory()
    monkeypatch.delenv("ELEVENLABS_API_KEY")
    get_settings.cache_clear()

    with pytest.raises(ValueError, match="ELEVENLABS_API_KEY"):
        get_settings()


def test_unknown_auth_mode_fails(settings_factory):
    with pytest.raises(ValueError, match="GOOGLE_AUTH_MODE"):
        settings_factory(GOOGLE_AUTH_MODE="api_key")


def test_flags_and_numbers_are_parsed(settings_factory):
    settings = settings_factory(
        GOOGLE_AUTH_MODE="FILE",
        TOKEN_REFRESH_ENABLED="true",
        LLM_TEMPERATURE="0.7",
        LLM_MAX_TOKENS="512",
    )

    assert settings.google_auth_mode == "file"
    assert settings.token_refresh_enabled is True
    assert settings.llm_temperature == 0.7
    assert settings.llm_max_tokens == 512
