from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from uuid import UUID

from clinicdesk.api.deps import get_current_user
from clinicdesk.db.models import User
from clinicdesk.db.session import get_session
from clinicdesk.schemas.appointment import (
    AppointmentCreate,
    AppointmentListResponse,
    AppointmentResponse,
    AppointmentUpdate,
)
from clinicdesk.schemas.auth import MessageResponse
from clinicdesk.services.appointment_service import AppointmentService

router = APIRouter()

async def get_appointment_service(session: AsyncSession = Depends(get_session)) -> AppointmentService:
    return AppointmentService(session)

@router.get("/", response_model=AppointmentListResponse)
async def read_appointments(
    on_date: Optional[date] = Query(default=None, alias="date"),
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    status: Optional[str] = None,
    doctor_id: Optional[UUID] = None,
    patient_id: Optional[UUID] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=200),
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service)
):
    return await service.list_appointments(
        current_user.tenant_id,
        on_date=on_date,
        start_date=start_date,
        end_date=end_date,
        status=status,
        doctor_id=doctor_id,
        patient_id=patient_id,
        page=page,
        limit=limit,
    )

@router.post("/", response_model=AppointmentResponse, status_code=201)
async def create_appointment(
    data: AppointmentCreate,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service)
):
    return await service.create_appointment(current_user.tenant_id, data, current_user)

@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def read_appointment(
    appointment_id: UUID,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service)
):
    return await service.get_appointment(current_user.tenant_id, appointment_id)

@router.put("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: UUID,
    data: AppointmentUpdate,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service)
):
    return await service.update_appointment(current_user.tenant_id, appointment_id, data, current_user)

@router.delete("/{appointment_id}", response_model=MessageResponse)
async def delete_appointment(
    appointment_id: UUID,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service)
):
    await service.delete_appointment(current_user.tenant_id, appointment_id, current_user)
    return MessageResponse(message="Appointment deleted")
