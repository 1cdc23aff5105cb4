"""
Auth module - Credentials for the generation provider.
"""
from voice_relay.auth.credentials import (
    AccessToken,
    OidcTokenSupplier,
    TokenProvider,
    build_credentials,
    workload_identity_audience,
)

__all__ = [
    "AccessToken",
    "OidcTokenSupplier",
    "TokenProvider",
    "build_credentials",
    "workload_identity_audience",
]
