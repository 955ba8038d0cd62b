"""Idempotency Keys — deterministic dedupe tokens for public write submissions.

Invariants:
    - Pure function: identical 4-tuples always yield identical keys
    - No time or randomness component
    - Uniqueness is enforced by the database constraint, not here

Design Decisions:
    - SHA-256 truncated to 24 hex chars: 96 bits is plenty against accidental collisions
"""

import hashlib

KEY_PREFIX = "bk_"
_DIGEST_CHARS = 24


def generate_idempotency_key(
    property_id: str, slot_id: str, customer_phone: str, client_ip: str,
) -> str:
    raw = ":".join((property_id, slot_id, customer_phone, client_ip))
    digest = hashlib.sha256(raw.encode("utf-8")).hexdigest()
    return f"{KEY_PREFIX}{digest[:_DIGEST_CHARS]}"
