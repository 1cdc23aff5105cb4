"""
Models module - Pydantic schemas for data validation.
"""
from voice_relay.models.chat import (
    ChatRequest,
    ChatResponse,
    VoicesResponse,
    HealthResponse,
    ErrorResponse,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "VoicesResponse",
    "HealthResponse",
    "ErrorResponse",
]
