from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from uuid import UUID

from clinicdesk.api.deps import get_current_user, require_admin
from clinicdesk.db.models import User
from clinicdesk.db.session import get_session
from clinicdesk.schemas.auth import MessageResponse
from clinicdesk.schemas.schedule import AvailabilityResponse, ScheduleResponse, ScheduleUpdate, ScheduleUpsert
from clinicdesk.services.availability_service import AvailabilityService
from clinicdesk.services.schedule_service import ScheduleService

router = APIRouter()

async def get_schedule_service(session: AsyncSession = Depends(get_session)) -> ScheduleService:
    return ScheduleService(session)

@router.get("/", response_model=List[ScheduleResponse])
async def read_schedules(
    doctor_id: Optional[UUID] = None,
    online_only: bool = False,
    current_user: User = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service)
):
    rows = await service.list_schedules(current_user.tenant_id, doctor_id, online_only)
    return [await service.to_response(schedule, doctor) for schedule, doctor in rows]

@router.post("/", response_model=ScheduleResponse, status_code=status.HTTP_201_CREATED)
async def upsert_schedule(
    data: ScheduleUpsert,
    response: Response,
    current_user: User = Depends(require_admin),
    service: ScheduleService = Depends(get_schedule_service)
):
    schedule, created = await service.upsert_schedule(current_user.tenant_id, data, current_user)
    if not created:
        response.status_code = status.HTTP_200_OK
    return await service.to_response(schedule)

@router.get("/doctor/{doctor_id}/availability", response_model=AvailabilityResponse)
async def read_availability(
    doctor_id: UUID,
    date: str,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    service = AvailabilityService(session)
    return await service.get_availability(current_user.tenant_id, doctor_id, date)

@router.get("/{schedule_id}", response_model=ScheduleResponse)
async def read_schedule(
    schedule_id: UUID,
    current_user: User = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service)
):
    schedule = await service.get_schedule(current_user.tenant_id, schedule_id)
    return await service.to_response(schedule)

@router.put("/{schedule_id}", response_model=ScheduleResponse)
async def update_schedule(
    schedule_id: UUID,
    data: ScheduleUpdate,
    current_user: User = Depends(require_admin),
    service: ScheduleService = Depends(get_schedule_service)
):
    schedule = await service.update_schedule(current_user.tenant_id, schedule_id, data, current_user)
    return await service.to_response(schedule)

@router.delete("/{schedule_id}", response_model=MessageResponse)
async def delete_schedule(
    schedule_id: UUID,
    current_user: User = Depends(require_admin),
    service: ScheduleService = Depends(get_schedule_service)
):
    await service.delete_schedule(current_user.tenant_id, schedule_id, current_user)
    return MessageResponse(message="Schedule deleted")
