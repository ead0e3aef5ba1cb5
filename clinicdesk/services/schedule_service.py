from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from clinicdesk.core.logger import get_logger
from clinicdesk.db.models import Doctor, DoctorSchedule, User
from clinicdesk.schemas.schedule import ScheduleFields, ScheduleResponse, ScheduleUpsert, ScheduleUpdate
from clinicdesk.services.audit_service import record_audit
from clinicdesk.services.doctor_service import DoctorService

logger = get_logger("schedules")

class ScheduleService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_for_doctor(self, tenant_id: UUID, doctor_id: UUID) -> Optional[DoctorSchedule]:
        stmt = select(DoctorSchedule).where(
            DoctorSchedule.tenant_id == tenant_id,
            DoctorSchedule.doctor_id == doctor_id
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_schedule(self, tenant_id: UUID, schedule_id: UUID) -> DoctorSchedule:
        schedule = await self.session.get(DoctorSchedule, schedule_id)
        if not schedule or schedule.tenant_id != tenant_id:
            raise HTTPException(status_code=404, detail="Schedule not found")
        return schedule

    async def list_schedules(
        self,
        tenant_id: UUID,
        doctor_id: Optional[UUID] = None,
        online_only: bool = False
    ) -> List[tuple[DoctorSchedule, Doctor]]:
        stmt = select(DoctorSchedule, Doctor).join(Doctor, Doctor.id == DoctorSchedule.doctor_id).where(
            DoctorSchedule.tenant_id == tenant_id
        )
        if doctor_id:
            stmt = stmt.where(DoctorSchedule.doctor_id == doctor_id)
        if online_only:
            stmt = stmt.where(
                DoctorSchedule.accepts_online_booking == True,
                DoctorSchedule.is_accepting_appointments == True,
                Doctor.is_active == True
            )
        stmt = stmt.order_by(DoctorSchedule.created_at.desc())
        result = await self.session.execute(stmt)
        return result.all()

    async def upsert_schedule(self, tenant_id: UUID, data: ScheduleUpsert, actor: User) -> tuple[DoctorSchedule, bool]:
        """Create the doctor's schedule, or update it when one exists. Returns (schedule, created)."""
        await DoctorService(self.session).get_doctor(tenant_id, data.doctor_id, active_only=True)

        schedule = await self.get_for_doctor(tenant_id, data.doctor_id)
        created = schedule is None
        if created:
            schedule = DoctorSchedule(tenant_id=tenant_id, doctor_id=data.doctor_id)

        self._apply(schedule, data)
        record_audit(
            self.session,
            "schedule.created" if created else "schedule.updated",
            tenant_id,
            actor.id,
            {"doctor_id": str(data.doctor_id)},
        )
        self.session.add(schedule)
        await self.session.commit()
        await self.session.refresh(schedule)
        logger.info(f"{'Created' if created else 'Updated'} schedule for doctor {data.doctor_id}")
        return schedule, created

    async def update_schedule(self, tenant_id: UUID, schedule_id: UUID, data: ScheduleUpdate, actor: User) -> DoctorSchedule:
        schedule = await self.get_schedule(tenant_id, schedule_id)
        self._apply(schedule, data)
        record_audit(self.session, "schedule.updated", tenant_id, actor.id, {"schedule_id": str(schedule_id)})
        self.session.add(schedule)
        await self.session.commit()
        await self.session.refresh(schedule)
        return schedule

    async def delete_schedule(self, tenant_id: UUID, schedule_id: UUID, actor: User) -> None:
        schedule = await self.get_schedule(tenant_id, schedule_id)
        record_audit(
            self.session,
            "schedule.deleted",
            tenant_id,
            actor.id,
            {"schedule_id": str(schedule_id), "doctor_id": str(schedule.doctor_id)},
        )
        await self.session.delete(schedule)
        await self.session.commit()

    async def to_response(self, schedule: DoctorSchedule, doctor: Optional[Doctor] = None) -> ScheduleResponse:
        if doctor is None:
            doctor = await self.session.get(Doctor, schedule.doctor_id)
        response = ScheduleResponse.model_validate(schedule)
        response.doctor_name = doctor.name if doctor else None
        return response

    @staticmethod
    def _apply(schedule: DoctorSchedule, data: ScheduleFields) -> None:
        # JSON columns are reassigned, never mutated in place, so changes are flushed
        update_data = data.model_dump(exclude_unset=True, exclude_none=True, exclude={"doctor_id"}, mode="json")
        for key, value in update_data.items():
            setattr(schedule, key, value)
        schedule.updated_at = datetime.utcnow()
