"""API Dependencies — client identity, rate limits, auth context and the AI client.

Invariants:
    - Client id is the first X-Forwarded-For entry (trimmed, untrusted) or "unknown"
    - X-User-Id is set by the auth gateway after it verifies the session; the role
      always comes from the profiles table, never from the request
    - Missing/unknown user → 401, wrong role → 403
    - get_ai_client returns None without ANTHROPIC_API_KEY; require_ai_client turns
      that into 503 for endpoints that have no rule-based fallback

Design Decisions:
    - One cached ResilientAnthropicClient per process (shares the HTTP connection pool)
    - rate_limit(name) is a dependency factory so routes declare their preset inline
"""

import logging
from collections.abc import Callable
from functools import lru_cache
from uuid import UUID

from fastapi import Depends, Header, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from urbanestate.config import get_settings
from urbanestate.core.auth_context import AuthContext
from urbanestate.core.domain_types import UserRole
from urbanestate.core.errors import (
    AuthenticationRequiredError, PermissionDeniedError, ServiceUnavailableError,
)
from urbanestate.core.rate_limit import enforce_rate_limit
from urbanestate.infrastructure.anthropic_client import ResilientAnthropicClient
from urbanestate.infrastructure.database import get_db
from urbanestate.models.profile import Profile

logger = logging.getLogger(__name__)


def get_client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for", "")
    first = forwarded.split(",")[0].strip()
    return first or "unknown"


def rate_limit(name: str) -> Callable:
    """Dependency factory: enforce the named preset for the calling client."""

    def _check(response: Response, client_ip: str = Depends(get_client_ip)) -> None:
        result = enforce_rate_limit(client_ip, name)
        response.headers["X-RateLimit-Remaining"] = str(result.remaining)

    return _check


# ─── Auth ───────────────────────────────────────────────────────

async def _load_auth(db: AsyncSession, x_user_id: str | None) -> AuthContext | None:
    if not x_user_id:
        return None
    try:
        user_id = UUID(x_user_id)
    except ValueError:
        return None
    profile = await db.get(Profile, user_id)
    if profile is None:
        return None
    return AuthContext(user_id=profile.id, role=UserRole(profile.role))


async def get_optional_auth(
    x_user_id: str | None = Header(None),
    db: AsyncSession = Depends(get_db),
) -> AuthContext | None:
    return await _load_auth(db, x_user_id)


async def get_auth_context(
    x_user_id: str | None = Header(None),
    db: AsyncSession = Depends(get_db),
) -> AuthContext:
    auth = await _load_auth(db, x_user_id)
    if auth is None:
        raise AuthenticationRequiredError()
    return auth


def require_role(*roles: UserRole) -> Callable:
    allowed = set(roles)

    async def _check(auth: AuthContext = Depends(get_auth_context)) -> AuthContext:
        if auth.role not in allowed:
            raise PermissionDeniedError(
                f"Requires role: {', '.join(sorted(r.value for r in allowed))}",
            )
        return auth

    return _check


require_agent = require_role(UserRole.AGENT, UserRole.ADMIN)
require_admin = require_role(UserRole.ADMIN)


# ─── AI client ──────────────────────────────────────────────────

@lru_cache
def _build_ai_client(api_key: str) -> ResilientAnthropicClient:
    settings = get_settings()
    return ResilientAnthropicClient(
        api_key=api_key,
        max_retries=settings.anthropic_max_retries,
        base_delay_ms=settings.anthropic_base_delay_ms,
        max_delay_ms=settings.anthropic_max_delay_ms,
        timeout_seconds=settings.anthropic_timeout_seconds,
    )


def get_ai_client() -> ResilientAnthropicClient | None:
    api_key = get_settings().anthropic_api_key
    if not api_key:
        return None
    return _build_ai_client(api_key)


def require_ai_client(client=Depends(get_ai_client)):
    if client is None:
        raise ServiceUnavailableError("AI service")
    return client
