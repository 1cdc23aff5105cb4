"""
Configuration management via environment variables.

This module loads configuration from .env file using python-dotenv.
All configuration values are accessed through the Settings class.

Secrets (speech API key, service-account material, identity tokens) only
ever live in the environment; nothing here is written back to disk.
"""
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


# Load .env file from project root
# This must happen before accessing os.environ
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(env_path)


AUTH_MODES = ("file", "env", "workload_identity")


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    frozen=True makes the dataclass immutable, preventing accidental
    modification of settings at runtime.

    Attributes:
        app_name: Application identifier for logging
        app_env: Environment name (development, staging, production)
        log_level: Logging verbosity (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        port: Port the HTTP server listens on
        google_cloud_project: Project billed for generation requests
        google_auth_mode: One of 'file', 'env', 'workload_identity'
        llm_model: Gemini model identifier
        elevenlabs_api_key: API key for the speech provider
    """
    # Application settings
    app_name: str
    app_env: str
    log_level: str
    log_dir: str
    port: int

    # Google credential settings
    google_cloud_project: str
    google_auth_mode: str
    google_credentials_file: Optional[str]
    google_credentials_json: Optional[str]
    gcp_project_number: Optional[str]
    gcp_service_account_email: Optional[str]
    gcp_pool_id: Optional[str]
    gcp_provider_id: Optional[str]
    oidc_token_file: Optional[str]
    oidc_token_env: str
    token_refresh_enabled: bool
    token_refresh_margin_seconds: int

    # LLM settings
    llm_model: str
    llm_temperature: Optional[float]
    llm_max_tokens: Optional[int]
    llm_timeout_seconds: float

    # Speech settings
    elevenlabs_api_key: str
    elevenlabs_base_url: str
    tts_timeout_seconds: float

    # HTTP surface
    public_dir: str
    cors_allow_all: bool
    enable_audit_logging: bool

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env.lower() == "development"


def _get_env(key: str, default: Optional[str] = None) -> str:
    """
    Get environment variable with optional default.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Environment variable value

    Raises:
        ValueError: If required variable is not set and no default provided
    """
    value = os.environ.get(key, default)
    if value is None or value == "":
        if default is not None:
            return default
        raise ValueError(
            f"Required environment variable '{key}' is not set. "
            f"Please check your .env file."
        )
    return value


def _get_optional(key: str) -> Optional[str]:
    """Get an environment variable, treating empty strings as unset."""
    value = os.environ.get(key)
    return value or None


def _get_bool(key: str, default: str) -> bool:
    return _get_env(key, default).lower() in ("1", "true", "yes")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are read once; call get_settings.cache_clear() to force a
    re-read (tests do this after changing the environment).

    Returns:
        Settings instance with all configuration values

    Raises:
        ValueError: If required environment variables are missing or invalid
    """
    auth_mode = _get_env("GOOGLE_AUTH_MODE", "workload_identity").lower()
    if auth_mode not in AUTH_MODES:
        raise ValueError(
            f"GOOGLE_AUTH_MODE must be one of {', '.join(AUTH_MODES)}, got '{auth_mode}'"
        )

    temperature = _get_optional("LLM_TEMPERATURE")
    max_tokens = _get_optional("LLM_MAX_TOKENS")

    return Settings(
        # Application
        app_name=_get_env("APP_NAME", "VoiceRelay"),
        app_env=_get_env("APP_ENV", "development"),
        log_level=_get_env("LOG_LEVEL", "INFO"),
        log_dir=_get_env("LOG_DIR", "logs"),
        port=int(_get_env("PORT", "8080")),

        # Google credentials
        google_cloud_project=_get_env("GOOGLE_CLOUD_PROJECT"),
        google_auth_mode=auth_mode,
        google_credentials_file=_get_optional("GOOGLE_APPLICATION_CREDENTIALS"),
        google_credentials_json=_get_optional("GOOGLE_APPLICATION_CREDENTIALS_JSON"),
        gcp_project_number=_get_optional("GCP_PROJECT_NUMBER"),
        gcp_service_account_email=_get_optional("GCP_SERVICE_ACCOUNT_EMAIL"),
        gcp_pool_id=_get_optional("GCP_WORKLOAD_IDENTITY_POOL_ID"),
        gcp_provider_id=_get_optional("GCP_WORKLOAD_IDENTITY_POOL_PROVIDER_ID"),
        oidc_token_file=_get_optional("OIDC_TOKEN_FILE"),
        oidc_token_env=_get_env("OIDC_TOKEN_ENV", "OIDC_TOKEN"),
        token_refresh_enabled=_get_bool("TOKEN_REFRESH_ENABLED", "false"),
        token_refresh_margin_seconds=int(_get_env("TOKEN_REFRESH_MARGIN_SECONDS", "300")),

        # LLM
        llm_model=_get_env("LLM_MODEL", "gemini-2.5-flash"),
        llm_temperature=float(temperature) if temperature else None,
        llm_max_tokens=int(max_tokens) if max_tokens else None,
        llm_timeout_seconds=float(_get_env("LLM_TIMEOUT_SECONDS", "30")),

        # Speech
        elevenlabs_api_key=_get_env("ELEVENLABS_API_KEY"),
        elevenlabs_base_url=_get_env("ELEVENLABS_BASE_URL", "https://api.elevenlabs.io"),
        tts_timeout_seconds=float(_get_env("TTS_TIMEOUT_SECONDS", "30")),

        # HTTP surface
        public_dir=_get_env("PUBLIC_DIR", "public"),
        cors_allow_all=_get_bool("CORS_ALLOW_ALL", "true"),
        enable_audit_logging=_get_bool("ENABLE_AUDIT_LOGGING", "true"),
    )
