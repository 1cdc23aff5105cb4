"""
API Routes module - Endpoint definitions.

- chat.py   : Prompt-to-speech relay
- voices.py : Voice catalog proxy
- health.py : Health check endpoints
"""
from voice_relay.api.routes.chat import router as chat_router
from voice_relay.api.routes.voices import router as voices_router
from voice_relay.api.routes.health import router as health_router

__all__ = [
    "chat_router",
    "voices_router",
    "health_router",
]
