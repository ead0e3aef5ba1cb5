from typing import List, Optional
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import or_, select

from clinicdesk.core.utils import split_name
from clinicdesk.db.models import Patient
from clinicdesk.schemas.patient import PatientCreate
from clinicdesk.services.counter_service import next_code

class PatientService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_patient(self, tenant_id: UUID, data: PatientCreate, commit: bool = True) -> Patient:
        patient = Patient(
            tenant_id=tenant_id,
            patient_code=await next_code(self.session, tenant_id, "patient"),
            **data.model_dump()
        )
        self.session.add(patient)
        if commit:
            await self.session.commit()
            await self.session.refresh(patient)
        else:
            await self.session.flush()
        return patient

    async def get_patient(self, tenant_id: UUID, patient_id: UUID) -> Patient:
        patient = await self.session.get(Patient, patient_id)
        if not patient or patient.tenant_id != tenant_id:
            raise HTTPException(status_code=404, detail="Patient not found")
        return patient

    async def search_patients(self, tenant_id: UUID, search: Optional[str] = None, skip: int = 0, limit: int = 50) -> List[Patient]:
        stmt = select(Patient).where(Patient.tenant_id == tenant_id)
        if search:
            pattern = f"%{search.strip()}%"
            stmt = stmt.where(or_(
                Patient.first_name.ilike(pattern),
                Patient.last_name.ilike(pattern),
                Patient.phone.ilike(pattern),
                Patient.email.ilike(pattern),
                Patient.patient_code.ilike(pattern),
            ))
        stmt = stmt.order_by(Patient.created_at.desc()).offset(skip).limit(limit)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def find_or_create_for_booking(
        self,
        tenant_id: UUID,
        full_name: str,
        email: Optional[str],
        phone: Optional[str]
    ) -> Patient:
        """Match an online booker to an existing patient by email or phone, else register them."""
        conditions = []
        if email:
            conditions.append(Patient.email == email)
        if phone:
            conditions.append(Patient.phone == phone)

        if conditions:
            stmt = select(Patient).where(Patient.tenant_id == tenant_id, or_(*conditions))
            result = await self.session.execute(stmt)
            patient = result.scalars().first()
            if patient:
                return patient

        first_name, last_name = split_name(full_name)
        return await self.create_patient(
            tenant_id,
            PatientCreate(
                first_name=first_name,
                last_name=last_name,
                email=email,
                phone=phone,
                notes="Created via online booking",
            ),
            commit=False,
        )
