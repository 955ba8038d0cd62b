"""Contact Field Validation — returns a human-readable error or None.

Invariants:
    - Validators never raise; callers turn a message into ValidationFailedError
    - Email is optional: empty input is valid
    - as_finite_number turns model-supplied numbers into a float or None;
      NaN, infinities and booleans are never numbers
"""

import math
import re

_NAME_RE = re.compile(r"^[a-zA-Z\s'\-.]+$")
_PHONE_STRIP_RE = re.compile(r"[\s\-()]")
_PHONE_RE = re.compile(r"^\+?\d+$")
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def validate_name(name: str | None) -> str | None:
    if not name or not name.strip():
        return "Name is required"
    name = name.strip()
    if len(name) < 2:
        return "Name must be at least 2 characters"
    if len(name) > 100:
        return "Name must be less than 100 characters"
    if not _NAME_RE.match(name):
        return "Name contains invalid characters"
    return None


def normalize_phone(phone: str) -> str:
    return _PHONE_STRIP_RE.sub("", phone).strip()


def validate_phone_number(phone: str | None) -> str | None:
    if not phone or not phone.strip():
        return "Phone number is required"
    cleaned = normalize_phone(phone)
    if len(cleaned) < 7 or len(cleaned) > 20:
        return "Phone number must be between 7 and 20 digits"
    if not _PHONE_RE.match(cleaned):
        return "Invalid phone number format"
    return None


def validate_email(email: str | None) -> str | None:
    if not email or not email.strip():
        return None
    email = email.strip()
    if not _EMAIL_RE.match(email):
        return "Invalid email format"
    if len(email) > 254:
        return "Email is too long"
    return None


def validate_uuid(value: str) -> bool:
    return bool(_UUID_RE.match(value))


def as_finite_number(value: object) -> float | None:
    """Numeric model output as a float; None for non-numbers, NaN and infinities."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)
