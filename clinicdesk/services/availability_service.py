from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from clinicdesk.core.config import settings
from clinicdesk.core.slots import AvailabilityResult, ScheduleRules, Unavailable, compute_availability
from clinicdesk.db.models import Appointment, DoctorSchedule
from clinicdesk.db.models.appointment import RELEASED_STATUSES
from clinicdesk.schemas.schedule import AvailabilityResponse
from clinicdesk.services.schedule_service import ScheduleService

def parse_query_date(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail="Invalid date format. Use YYYY-MM-DD")

class AvailabilityService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def booked_start_times(
        self,
        tenant_id: UUID,
        doctor_id: UUID,
        appointment_date: date,
        exclude_id: Optional[UUID] = None
    ) -> List[str]:
        """Start times of the doctor's bookings on the date that still hold capacity."""
        stmt = select(Appointment.start_time).where(
            Appointment.tenant_id == tenant_id,
            Appointment.doctor_id == doctor_id,
            Appointment.appointment_date == appointment_date,
            Appointment.status.not_in(RELEASED_STATUSES)
        )
        if exclude_id:
            stmt = stmt.where(Appointment.id != exclude_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def compute(
        self,
        tenant_id: UUID,
        doctor_id: UUID,
        target: date,
        public: bool = False,
        now: Optional[datetime] = None,
        schedule: Optional[DoctorSchedule] = None,
    ) -> AvailabilityResult:
        now = now or datetime.now()
        if schedule is None:
            schedule = await ScheduleService(self.session).get_for_doctor(tenant_id, doctor_id)
        if schedule is None:
            return AvailabilityResult.unavailable(Unavailable.NO_SCHEDULE, settings.DEFAULT_SLOT_DURATION)

        booked = await self.booked_start_times(tenant_id, doctor_id, target)
        return compute_availability(
            ScheduleRules.from_record(schedule),
            target,
            now.date(),
            booked,
            public=public,
            now_minutes=now.hour * 60 + now.minute if public else None,
            lead_minutes=settings.PUBLIC_BOOKING_LEAD_MINUTES,
        )

    async def get_availability(
        self,
        tenant_id: UUID,
        doctor_id: UUID,
        date_str: str,
        public: bool = False,
        now: Optional[datetime] = None,
    ) -> AvailabilityResponse:
        target = parse_query_date(date_str)
        result = await self.compute(tenant_id, doctor_id, target, public=public, now=now)
        return AvailabilityResponse(
            doctor_id=doctor_id,
            date=target.isoformat(),
            available_slots=result.available_slots,
            slot_duration=result.slot_duration,
            message=result.message,
        )
