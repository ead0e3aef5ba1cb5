from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from uuid import UUID

from clinicdesk.api.deps import get_current_user, require_admin
from clinicdesk.db.session import get_session
from clinicdesk.db.models import User
from clinicdesk.services.clinic_service import ClinicService
from clinicdesk.schemas.clinic import (
    ClinicCreate,
    ClinicCreatedResponse,
    ClinicResponse,
    PublicBookingSettingsResponse,
    PublicBookingSettingsUpdate,
    StaffCreatedResponse,
)
from clinicdesk.schemas.user import StaffCreate, StaffResponse

router = APIRouter()

def ensure_own_clinic(clinic_id: UUID, current_user: User) -> None:
    if current_user.tenant_id != clinic_id:
        raise HTTPException(status_code=403, detail="Not authorized for this clinic")

@router.post("/", response_model=ClinicCreatedResponse)
async def create_clinic(
    clinic_data: ClinicCreate,
    session: AsyncSession = Depends(get_session)
):
    service = ClinicService(session)
    return await service.create_clinic(clinic_data)

@router.post("/{clinic_id}/staff", response_model=StaffCreatedResponse, status_code=201)
async def create_staff(
    clinic_id: UUID,
    data: StaffCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    service = ClinicService(session)
    return await service.create_staff(clinic_id, data, current_user)

@router.get("/{clinic_id}/staff", response_model=List[StaffResponse])
async def read_staff(
    clinic_id: UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    ensure_own_clinic(clinic_id, current_user)
    service = ClinicService(session)
    return await service.get_staff(clinic_id)

@router.get("/{clinic_id}", response_model=ClinicResponse)
async def read_clinic(
    clinic_id: UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    ensure_own_clinic(clinic_id, current_user)
    service = ClinicService(session)
    return await service.get_clinic(clinic_id)

@router.get("/{clinic_id}/public-booking", response_model=PublicBookingSettingsResponse)
async def read_public_booking_settings(
    clinic_id: UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    ensure_own_clinic(clinic_id, current_user)
    service = ClinicService(session)
    return await service.get_clinic(clinic_id)

@router.put("/{clinic_id}/public-booking", response_model=PublicBookingSettingsResponse)
async def update_public_booking_settings(
    clinic_id: UUID,
    data: PublicBookingSettingsUpdate,
    current_user: User = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    ensure_own_clinic(clinic_id, current_user)
    service = ClinicService(session)
    return await service.update_public_booking_settings(clinic_id, data)
