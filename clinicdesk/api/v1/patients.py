from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from uuid import UUID

from clinicdesk.api.deps import get_current_user
from clinicdesk.db.models import User
from clinicdesk.db.session import get_session
from clinicdesk.schemas.patient import PatientCreate, PatientResponse
from clinicdesk.services.patient_service import PatientService

router = APIRouter()

async def get_patient_service(session: AsyncSession = Depends(get_session)) -> PatientService:
    return PatientService(session)

@router.post("/", response_model=PatientResponse, status_code=201)
async def create_patient(
    data: PatientCreate,
    current_user: User = Depends(get_current_user),
    service: PatientService = Depends(get_patient_service)
):
    return await service.create_patient(current_user.tenant_id, data)

@router.get("/", response_model=List[PatientResponse])
async def search_patients(
    search: Optional[str] = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    current_user: User = Depends(get_current_user),
    service: PatientService = Depends(get_patient_service)
):
    return await service.search_patients(current_user.tenant_id, search, skip, limit)

@router.get("/{patient_id}", response_model=PatientResponse)
async def read_patient(
    patient_id: UUID,
    current_user: User = Depends(get_current_user),
    service: PatientService = Depends(get_patient_service)
):
    return await service.get_patient(current_user.tenant_id, patient_id)
