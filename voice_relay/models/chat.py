"""
Request and Response models for the relay API.

These Pydantic models define the contract between client and server.
They provide:
- Type validation
- Automatic documentation
- Request/response serialization
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """
    Request model for the /chat endpoint.

    Both fields are optional at the schema level so that a missing field
    is reported by the route as a 400 with the relay's error body.

    Attributes:
        prompt: Text sent to the language model.
        voice_id: Speech provider voice used to read the answer aloud.
    """
    prompt: Optional[str] = Field(
        default=None,
        description="Text prompt for the language model",
        examples=["Hello"]
    )
    voice_id: Optional[str] = Field(
        default=None,
        description="Speech provider voice identifier",
        examples=["21m00Tcm4TlvDq8ikWAM"]
    )


class ChatResponse(BaseModel):
    """Response model for the /chat endpoint."""
    text: str = Field(
        ...,
        description="Text generated by the language model"
    )
    audio: Optional[str] = Field(
        default=None,
        description="Base64-encoded audio, or null when synthesis failed"
    )


class VoicesResponse(BaseModel):
    """Voice catalog, entries passed through unchanged from the provider."""
    voices: List[Dict[str, Any]]


class HealthResponse(BaseModel):
    """Response model for the /health endpoint."""
    status: str = Field(default="healthy")
    version: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class ErrorResponse(BaseModel):
    """Standard error response model."""
    error: str
    code: str
    details: Optional[str] = None
