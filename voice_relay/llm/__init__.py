"""
LLM module - Language model integration.

This module handles the Gemini call:
- Bearer-token credentials
- The generation request
- Response parsing
"""
from voice_relay.llm.client import GenerativeTextClient, extract_text

__all__ = [
    "GenerativeTextClient",
    "extract_text",
]
