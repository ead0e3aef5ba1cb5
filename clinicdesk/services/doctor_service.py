from typing import List
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from clinicdesk.db.models import Doctor, User
from clinicdesk.schemas.doctor import DoctorCreate

class DoctorService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_doctor(self, tenant_id: UUID, data: DoctorCreate) -> Doctor:
        if data.user_id:
            user = await self.session.get(User, data.user_id)
            if not user or user.tenant_id != tenant_id:
                raise HTTPException(status_code=404, detail="User not found")

        doctor = Doctor(tenant_id=tenant_id, **data.model_dump())
        self.session.add(doctor)
        await self.session.commit()
        await self.session.refresh(doctor)
        return doctor

    async def get_doctors(self, tenant_id: UUID, active_only: bool = False) -> List[Doctor]:
        query = select(Doctor).where(Doctor.tenant_id == tenant_id)
        if active_only:
            query = query.where(Doctor.is_active == True)
        result = await self.session.execute(query.order_by(Doctor.name))
        return result.scalars().all()

    async def get_doctor(self, tenant_id: UUID, doctor_id: UUID, active_only: bool = False) -> Doctor:
        doctor = await self.session.get(Doctor, doctor_id)
        if not doctor or doctor.tenant_id != tenant_id or (active_only and not doctor.is_active):
            raise HTTPException(status_code=404, detail="Doctor not found")
        return doctor
