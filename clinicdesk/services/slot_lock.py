from contextlib import asynccontextmanager
from datetime import date
from uuid import UUID, uuid4

from fastapi import HTTPException

from clinicdesk.core.config import settings
from clinicdesk.core.logger import get_logger
from clinicdesk.core.redis import redis_client

logger = get_logger("slot_lock")

SLOT_TAKEN = "This time slot is no longer available"

@asynccontextmanager
async def slot_lock(tenant_id: UUID, doctor_id: UUID, appointment_date: date, start_time: str):
    """
    Serialize bookings of one slot across requests and workers.

    Holders must re-count bookings for the slot inside the block; the lock only
    guarantees nobody else is doing the same at that moment.
    """
    key = f"{tenant_id}:{doctor_id}:{appointment_date.isoformat()}:{start_time}"
    owner = uuid4().hex
    acquired = await redis_client.acquire_slot_lock(key, owner, settings.SLOT_LOCK_SECONDS)
    if not acquired:
        logger.info(f"Slot lock busy for {key}")
        raise HTTPException(status_code=409, detail=SLOT_TAKEN)
    try:
        yield
    finally:
        await redis_client.release_slot_lock(key, owner)
