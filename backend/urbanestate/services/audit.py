"""Audit Log — best-effort record of privileged and public write actions.

Invariants:
    - log_audit never raises: a failed audit write is logged and the caller carries on
    - Called after the audited action has committed; the audit row commits on its own,
      so a failed write only rolls back the audit row
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from urbanestate.models.audit_log import AuditLog

logger = logging.getLogger(__name__)


async def log_audit(
    db: AsyncSession,
    actor_id: UUID | None,
    action: str,
    entity_type: str,
    entity_id: object | None = None,
    details: dict | None = None,
) -> None:
    db.add(AuditLog(
        actor_id=actor_id,
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id) if entity_id is not None else None,
        details=details or {},
    ))
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(
            f"Audit log write failed for {action}: {e}",
            extra={"entity_id": str(entity_id) if entity_id else None},
        )


async def list_audit_logs(
    db: AsyncSession, limit: int = 100, offset: int = 0,
    action: str | None = None,
) -> list[AuditLog]:
    query = select(AuditLog).order_by(AuditLog.created_at.desc())
    if action:
        query = query.where(AuditLog.action == action)
    result = await db.execute(query.limit(limit).offset(offset))
    return list(result.scalars().all())
