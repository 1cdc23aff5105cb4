"""
Speech module - Text-to-speech provider integration.
"""
from voice_relay.speech.client import SpeechClient, VOICE_SETTINGS

__all__ = [
    "SpeechClient",
    "VOICE_SETTINGS",
]
