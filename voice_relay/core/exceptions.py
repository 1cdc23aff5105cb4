"""
Custom Exceptions - Application-specific error classes.

This module defines a hierarchy of exceptions for clean error handling:
- Each exception has a status code and error code
- Used by the API layer for consistent error responses
- No stack traces leaked in production
"""
from typing import Optional


class RelayException(Exception):
    """
    Base exception for all relay errors.

    Subclass this for specific error types.
    """
    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        """Convert to error response dict."""
        return {
            "error": self.message,
            "code": self.error_code,
            "details": self.details
        }


class ValidationError(RelayException):
    """Raised when input validation fails."""
    status_code = 400
    error_code = "validation_error"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, details=f"field={field}" if field else None)
        self.field = field


class CredentialExchangeError(RelayException):
    """Raised when an access token for the generation provider cannot be minted."""
    error_code = "credential_error"

    def __init__(self, message: str = "Could not obtain access token"):
        super().__init__(message)


class GenerationError(RelayException):
    """Raised when the text-generation call fails or returns no usable text."""
    error_code = "generation_error"

    def __init__(self, message: str = "Text generation failed"):
        super().__init__(message)


class SpeechSynthesisError(RelayException):
    """Raised when the text-to-speech call fails."""
    error_code = "speech_error"

    def __init__(self, message: str = "Speech synthesis failed", status_code: Optional[int] = None):
        super().__init__(message, details=f"upstream_status={status_code}" if status_code else None)
        self.upstream_status = status_code


class VoiceCatalogError(RelayException):
    """Raised when the voice catalog cannot be fetched."""
    error_code = "voices_error"

    def __init__(self, message: str = "Could not fetch voices"):
        super().__init__(message)
