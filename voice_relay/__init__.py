"""
Voice Relay - prompt in, generated text and speech out.

Package layout:
- api/      : FastAPI app, routes and HTTP error handling
- core/     : Configuration, logging, exceptions, middleware, validators
- auth/     : Credentials and the cached access token for Gemini
- llm/      : Gemini text generation
- speech/   : ElevenLabs text-to-speech and voice catalog
- services/ : The relay pipeline composing llm/ and speech/
- models/   : Pydantic request/response schemas
"""

__version__ = "0.1.0"
