from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from uuid import UUID

from clinicdesk.api.deps import get_current_user, require_admin
from clinicdesk.db.models import User
from clinicdesk.db.session import get_session
from clinicdesk.schemas.doctor import DoctorCreate, DoctorResponse
from clinicdesk.services.doctor_service import DoctorService

router = APIRouter()

async def get_doctor_service(session: AsyncSession = Depends(get_session)) -> DoctorService:
    return DoctorService(session)

@router.post("/", response_model=DoctorResponse, status_code=201)
async def create_doctor(
    data: DoctorCreate,
    current_user: User = Depends(require_admin),
    service: DoctorService = Depends(get_doctor_service)
):
    return await service.create_doctor(current_user.tenant_id, data)

@router.get("/", response_model=List[DoctorResponse])
async def read_doctors(
    active_only: bool = False,
    current_user: User = Depends(get_current_user),
    service: DoctorService = Depends(get_doctor_service)
):
    return await service.get_doctors(current_user.tenant_id, active_only)

@router.get("/{doctor_id}", response_model=DoctorResponse)
async def read_doctor(
    doctor_id: UUID,
    current_user: User = Depends(get_current_user),
    service: DoctorService = Depends(get_doctor_service)
):
    return await service.get_doctor(current_user.tenant_id, doctor_id)
