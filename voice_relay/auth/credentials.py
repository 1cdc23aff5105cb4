"""
Credential Exchange - Access tokens for the generation provider.

Three credential sources are supported, selected by GOOGLE_AUTH_MODE:
- file              : service-account key file on disk
- env               : service-account key JSON held in an environment variable
- workload_identity : a platform-issued OIDC token is exchanged at Google's
                      security token service for a federated token, which is
                      then used to impersonate a service account

The protocol work (STS exchange, impersonation) is done by google-auth.
This module builds the right credential object and owns the process-wide
token cache.
"""
import json
import os
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Optional

import google.auth.exceptions
from google.auth import identity_pool
from google.auth.credentials import Credentials
from google.auth.transport.requests import Request
from google.oauth2 import service_account

from voice_relay.core.config import Settings
from voice_relay.core.exceptions import CredentialExchangeError
from voice_relay.core.logging_config import get_logger

logger = get_logger(__name__)

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"
STS_TOKEN_URL = "https://sts.googleapis.com/v1/token"
JWT_TOKEN_TYPE = "urn:ietf:params:oauth:token-type:jwt"
IMPERSONATION_URL_TEMPLATE = (
    "https://iamcredentials.googleapis.com/v1/projects/-/"
    "serviceAccounts/{email}:generateAccessToken"
)


@dataclass(frozen=True)
class AccessToken:
    """A minted bearer token. expiry is naive UTC, as reported by google-auth."""
    value: str
    expiry: Optional[datetime] = None


def workload_identity_audience(project_number: str, pool_id: str, provider_id: str) -> str:
    """Build the STS audience naming a workload identity pool provider."""
    return (
        f"//iam.googleapis.com/projects/{project_number}/locations/global/"
        f"workloadIdentityPools/{pool_id}/providers/{provider_id}"
    )


class OidcTokenSupplier(identity_pool.SubjectTokenSupplier):
    """
    Supplies the platform's OIDC identity token as the STS subject token.

    The token is read fresh on every exchange, from a file when one is
    configured (platforms that rotate a projected token file), otherwise
    from an environment variable.
    """

    def __init__(self, token_file: Optional[str] = None, token_env: str = "OIDC_TOKEN"):
        self.token_file = token_file
        self.token_env = token_env

    def get_subject_token(self, context, request):
        if self.token_file:
            try:
                token = Path(self.token_file).read_text(encoding="utf-8").strip()
            except OSError as e:
                raise google.auth.exceptions.RefreshError(
                    f"Could not read OIDC token file {self.token_file}: {e}"
                ) from e
            source = self.token_file
        else:
            token = os.environ.get(self.token_env, "").strip()
            source = f"${self.token_env}"

        if not token:
            raise google.auth.exceptions.RefreshError(f"No OIDC token available from {source}")

        # A JWT is three dot-separated segments; anything else is rejected before the STS call
        if token.count(".") != 2:
            raise google.auth.exceptions.RefreshError(f"OIDC token from {source} is not a JWT")

        return token


def _require(value: Optional[str], name: str) -> str:
    if not value:
        raise CredentialExchangeError(f"{name} must be set for the configured GOOGLE_AUTH_MODE")
    return value


def build_credentials(settings: Settings) -> Credentials:
    """
    Build (but do not refresh) google-auth credentials for the configured mode.

    Raises:
        CredentialExchangeError: If mode-specific configuration is missing
            or the key material cannot be parsed
    """
    mode = settings.google_auth_mode
    scopes = [CLOUD_PLATFORM_SCOPE]

    try:
        if mode == "file":
            path = _require(settings.google_credentials_file, "GOOGLE_APPLICATION_CREDENTIALS")
            logger.info(f"Using service-account key file {path}")
            return service_account.Credentials.from_service_account_file(path, scopes=scopes)

        if mode == "env":
            raw = _require(settings.google_credentials_json, "GOOGLE_APPLICATION_CREDENTIALS_JSON")
            logger.info("Using service-account key from environment")
            return service_account.Credentials.from_service_account_info(json.loads(raw), scopes=scopes)

        if mode == "workload_identity":
            audience = workload_identity_audience(
                _require(settings.gcp_project_number, "GCP_PROJECT_NUMBER"),
                _require(settings.gcp_pool_id, "GCP_WORKLOAD_IDENTITY_POOL_ID"),
                _require(settings.gcp_provider_id, "GCP_WORKLOAD_IDENTITY_POOL_PROVIDER_ID"),
            )
            email = _require(settings.gcp_service_account_email, "GCP_SERVICE_ACCOUNT_EMAIL")
            logger.info(f"Using workload identity federation: audience={audience}, impersonating={email}")
            return identity_pool.Credentials(
                audience=audience,
                subject_token_type=JWT_TOKEN_TYPE,
                token_url=STS_TOKEN_URL,
                subject_token_supplier=OidcTokenSupplier(
                    token_file=settings.oidc_token_file,
                    token_env=settings.oidc_token_env,
                ),
                service_account_impersonation_url=IMPERSONATION_URL_TEMPLATE.format(email=email),
                scopes=scopes,
            )
    except CredentialExchangeError:
        raise
    except (ValueError, OSError, google.auth.exceptions.GoogleAuthError) as e:
        raise CredentialExchangeError(f"Invalid {mode} credentials: {e}") from e

    raise CredentialExchangeError(f"Unsupported GOOGLE_AUTH_MODE: {mode}")


class TokenProvider:
    """
    Process-wide cache for the generation provider's access token.

    The first get_token() call performs the exchange; later calls reuse the
    cached token. Initialization is guarded by a lock so concurrent callers
    (the threadpool, or a multi-threaded server) trigger one exchange.

    With refresh disabled (the default) the token is kept for the life of
    the process and is never re-minted, even after it expires upstream.
    With refresh enabled, a token within refresh_margin of its expiry is
    replaced on the next call.
    """

    def __init__(
        self,
        credentials: Credentials,
        refresh_enabled: bool = False,
        refresh_margin_seconds: int = 300,
        request_factory: Callable[[], Request] = Request,
    ):
        self._credentials = credentials
        self._request_factory = request_factory
        self.refresh_enabled = refresh_enabled
        self.refresh_margin = timedelta(seconds=refresh_margin_seconds)

        self._lock = threading.Lock()
        self._token: Optional[AccessToken] = None
        self.exchange_count = 0

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenProvider":
        return cls(
            build_credentials(settings),
            refresh_enabled=settings.token_refresh_enabled,
            refresh_margin_seconds=settings.token_refresh_margin_seconds,
        )

    def get_token(self) -> AccessToken:
        """
        Return the cached token, minting it on first use.

        Raises:
            CredentialExchangeError: If the exchange fails
        """
        token = self._token
        if token is not None and not self._is_stale(token):
            return token

        with self._lock:
            if self._token is None or self._is_stale(self._token):
                self._token = self._exchange()
            return self._token

    def _is_stale(self, token: AccessToken) -> bool:
        if not self.refresh_enabled or token.expiry is None:
            return False
        return datetime.utcnow() >= token.expiry - self.refresh_margin

    def _exchange(self) -> AccessToken:
        self.exchange_count += 1
        logger.info(f"Minting access token (exchange #{self.exchange_count})")

        try:
            self._credentials.refresh(self._request_factory())
        except google.auth.exceptions.GoogleAuthError as e:
            logger.error(f"Credential exchange failed: {e}")
            raise CredentialExchangeError(f"Credential exchange failed: {e}") from e

        value = self._credentials.token
        if not value:
            raise CredentialExchangeError("Credential exchange returned an empty token")

        expiry = self._credentials.expiry
        logger.info(f"Access token minted, expires={expiry.isoformat() if expiry else 'unknown'}")
        return AccessToken(value=value, expiry=expiry)
