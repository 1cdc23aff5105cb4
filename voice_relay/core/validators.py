"""
Input Validators - Sanitization and validation utilities.

Both validators return tuples rather than raising, so the route decides
which field the error is reported against.
"""
import re
from typing import Optional, Tuple

from voice_relay.core.logging_config import get_logger

logger = get_logger(__name__)

MAX_PROMPT_LENGTH = 4000

# Voice ids are interpolated into the provider URL path
_VOICE_ID_REGEX = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def sanitize_prompt(prompt: str) -> str:
    """
    Sanitize a user prompt.

    - Removes null bytes
    - Strips leading/trailing whitespace

    Inner whitespace and newlines are kept; they are meaningful to the model.
    """
    if not prompt:
        return ""
    return prompt.replace("\x00", "").strip()


def validate_prompt(prompt: Optional[str]) -> Tuple[bool, str, Optional[str]]:
    """
    Full validation and sanitization of a prompt.

    Args:
        prompt: Raw prompt from the request body (may be None)

    Returns:
        Tuple of (is_valid, sanitized_prompt, error_message)
    """
    if not prompt or not prompt.strip():
        return False, "", "Missing prompt or voice_id"

    sanitized = sanitize_prompt(prompt)
    if not sanitized:
        return False, "", "Missing prompt or voice_id"

    if len(sanitized) > MAX_PROMPT_LENGTH:
        return False, "", f"Prompt too long (max {MAX_PROMPT_LENGTH} characters)"

    return True, sanitized, None


def validate_voice_id(voice_id: Optional[str]) -> Tuple[bool, str, Optional[str]]:
    """
    Validate a voice identifier.

    Returns:
        Tuple of (is_valid, cleaned_voice_id, error_message)
    """
    if not voice_id or not voice_id.strip():
        return False, "", "Missing prompt or voice_id"

    cleaned = voice_id.strip()
    if not _VOICE_ID_REGEX.match(cleaned):
        logger.warning(f"Rejected malformed voice_id: {cleaned[:32]!r}")
        return False, "", "Invalid voice_id format"

    return True, cleaned, None
