"""
Core module - Configuration and cross-cutting concerns.

This module provides:
- config.py         : Environment-based configuration management
- logging_config.py : Console and daily-file logging setup
- exceptions.py     : Error hierarchy mapped to HTTP responses
- audit.py          : Per-request audit line with the relay outcome
- validators.py     : Request field validation
"""
from voice_relay.core.config import get_settings, Settings
from voice_relay.core.logging_config import setup_logging, get_logger

__all__ = [
    "get_settings",
    "Settings",
    "setup_logging",
    "get_logger",
]
