"""
Services module - Business logic and orchestration.

Services contain the core application logic:
- No HTTP concerns (those belong in api/)
- Orchestrate between the language model and speech clients
"""
from voice_relay.services.relay_service import RelayService

__all__ = [
    "RelayService",
]
