"""Auth Context — the verified caller of a request, resolved once per request.

Invariants:
    - user_id is the auth platform's id; role comes from the profiles table
    - Admins may act on any resource; agents only on resources they own
"""

from dataclasses import dataclass
from uuid import UUID

from urbanestate.core.domain_types import UserRole
from urbanestate.core.errors import PermissionDeniedError


@dataclass(frozen=True)
class AuthContext:
    user_id: UUID
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def can_manage(self, owner_id: UUID | None) -> bool:
        return self.is_admin or (owner_id is not None and owner_id == self.user_id)

    def require_owner(self, owner_id: UUID | None, resource: str) -> None:
        if not self.can_manage(owner_id):
            raise PermissionDeniedError(f"You do not have access to this {resource}")
