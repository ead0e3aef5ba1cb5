from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from clinicdesk.core.utils import format_sequence
from clinicdesk.db.models import Counter

PREFIXES = {
    "appointment": "APT",
    "patient": "PAT",
}

async def next_code(session: AsyncSession, tenant_id: UUID, name: str) -> str:
    """
    Reserve the next per-tenant code for ``name``. The counter row is locked
    until the caller commits, so codes are never handed out twice.
    """
    stmt = select(Counter).where(Counter.tenant_id == tenant_id, Counter.name == name).with_for_update()
    result = await session.execute(stmt)
    counter = result.scalars().first()
    if not counter:
        counter = Counter(tenant_id=tenant_id, name=name, last_value=0)
    counter.last_value += 1
    session.add(counter)
    await session.flush()
    return format_sequence(PREFIXES[name], counter.last_value)
