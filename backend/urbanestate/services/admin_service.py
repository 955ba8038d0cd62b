"""Admin Service — role changes and admin-only overrides.

Invariants:
    - Callers are already verified admins (enforced by the route dependency)
    - An admin cannot demote themselves (keeps at least the acting admin in place)
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from urbanestate.core.auth_context import AuthContext
from urbanestate.core.domain_types import UserRole
from urbanestate.core.errors import ResourceNotFoundError, ValidationFailedError
from urbanestate.models.profile import Profile
from urbanestate.services.audit import log_audit


async def change_user_role(
    db: AsyncSession, auth: AuthContext, user_id: UUID, role: UserRole,
) -> Profile:
    if user_id == auth.user_id and role != UserRole.ADMIN:
        raise ValidationFailedError("Admins cannot change their own role", field="role")
    profile = await db.get(Profile, user_id)
    if profile is None:
        raise ResourceNotFoundError("User", str(user_id))
    previous = profile.role
    profile.role = role.value
    await db.commit()
    await log_audit(db, auth.user_id, "role_changed", "profiles", user_id, {
        "previous_role": previous,
        "new_role": role.value,
    })
    return profile
