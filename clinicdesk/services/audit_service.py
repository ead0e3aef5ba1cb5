from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from clinicdesk.db.models import AuditLog

def record_audit(
    session: AsyncSession,
    action: str,
    tenant_id: Optional[UUID],
    actor_id: Optional[UUID] = None,
    payload: Optional[dict] = None,
) -> AuditLog:
    """Stage an audit row on the session; it is written with the caller's commit."""
    entry = AuditLog(action=action, tenant_id=tenant_id, actor_id=actor_id, payload=payload)
    session.add(entry)
    return entry
