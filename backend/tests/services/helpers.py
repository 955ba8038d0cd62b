"""Request helpers shared by route tests."""

from urbanestate.models.profile import Profile


def auth_headers(profile: Profile) -> dict:
    """Headers the auth gateway sets after verifying a session."""
    return {"X-User-Id": str(profile.id)}


def public_headers(ip: str = "203.0.113.10") -> dict:
    return {"X-Forwarded-For": ip}
