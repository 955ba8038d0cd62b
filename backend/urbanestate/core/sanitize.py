"""Input Sanitization — strips markup and script vectors from free text.

Invariants:
    - Non-string or empty input returns ""
    - Truncation happens BEFORE stripping (bounded regex work)
    - Script blocks removed whole, including their content
    - sanitize_required raises ValidationFailedError when nothing survives stripping
"""

import re

from urbanestate.core.errors import ValidationFailedError

_SCRIPT_BLOCK = re.compile(r"<script[\s\S]*?>[\s\S]*?</script>", re.IGNORECASE)
_HTML_TAG = re.compile(r"<[^>]*>")
_JS_PROTOCOL = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER = re.compile(r"on\w+\s*=", re.IGNORECASE)


def sanitize_input(value: object, max_length: int = 2000) -> str:
    if not value or not isinstance(value, str):
        return ""
    text = value[:max_length]
    text = _SCRIPT_BLOCK.sub("", text)
    text = _HTML_TAG.sub("", text)
    text = _JS_PROTOCOL.sub("", text)
    text = _EVENT_HANDLER.sub("", text)
    return text.strip()


def sanitize_text(value: object, max_length: int = 500) -> str:
    """Shorter default for names, notes and titles."""
    return sanitize_input(value, max_length)


def sanitize_required(value: object, max_length: int, field: str, message: str) -> str:
    """Sanitize a required free-text field; markup-only input counts as empty."""
    text = sanitize_input(value, max_length)
    if not text:
        raise ValidationFailedError(message, field=field)
    return text
