import math
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import func, select

from clinicdesk.core.config import settings
from clinicdesk.core.logger import get_logger
from clinicdesk.core.slots import format_clock, parse_clock
from clinicdesk.db.models import Appointment, User
from clinicdesk.db.models.appointment import RELEASED_STATUSES
from clinicdesk.schemas.appointment import (
    AppointmentCreate,
    AppointmentListResponse,
    AppointmentResponse,
    AppointmentUpdate,
    Pagination,
)
from clinicdesk.services.audit_service import record_audit
from clinicdesk.services.availability_service import AvailabilityService
from clinicdesk.services.counter_service import next_code
from clinicdesk.services.doctor_service import DoctorService
from clinicdesk.services.patient_service import PatientService
from clinicdesk.services.schedule_service import ScheduleService
from clinicdesk.services.slot_lock import SLOT_TAKEN, slot_lock

logger = get_logger("appointments")

def end_of_slot(start_time: str, duration: int) -> str:
    end = parse_clock(start_time) + duration
    if end >= 24 * 60:
        raise HTTPException(status_code=400, detail="Appointment must end before midnight")
    return format_clock(end)

class AppointmentService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def slot_capacity(self, tenant_id: UUID, doctor_id: UUID) -> tuple[int, int]:
        """(max patients per slot, default duration) for the doctor; unscheduled doctors take one patient."""
        schedule = await ScheduleService(self.session).get_for_doctor(tenant_id, doctor_id)
        if schedule is None:
            return 1, settings.DEFAULT_SLOT_DURATION
        return schedule.max_patients_per_slot, schedule.slot_duration

    async def ensure_capacity(
        self,
        tenant_id: UUID,
        doctor_id: UUID,
        appointment_date: date,
        start_time: str,
        capacity: int,
        exclude_id: Optional[UUID] = None
    ) -> None:
        booked = await AvailabilityService(self.session).booked_start_times(
            tenant_id, doctor_id, appointment_date, exclude_id=exclude_id
        )
        if booked.count(start_time) >= capacity:
            detail = "Doctor already has an appointment at this time" if capacity == 1 else SLOT_TAKEN
            raise HTTPException(status_code=409, detail=detail)

    async def insert_appointment(self, **fields) -> Appointment:
        """Insert a booking and commit; callers hold the slot lock and have checked capacity."""
        appointment = Appointment(
            appointment_code=await next_code(self.session, fields["tenant_id"], "appointment"),
            **fields
        )
        self.session.add(appointment)
        record_audit(
            self.session,
            "appointment.created",
            appointment.tenant_id,
            appointment.created_by,
            {
                "appointment_id": str(appointment.id),
                "doctor_id": str(appointment.doctor_id),
                "date": appointment.appointment_date.isoformat(),
                "start_time": appointment.start_time,
                "source": appointment.source,
            },
        )
        await self.session.commit()
        await self.session.refresh(appointment)
        logger.info(
            f"Booked {appointment.appointment_code} for doctor {appointment.doctor_id} "
            f"on {appointment.appointment_date} {appointment.start_time} ({appointment.source})"
        )
        return appointment

    async def create_appointment(self, tenant_id: UUID, data: AppointmentCreate, actor: User) -> Appointment:
        await PatientService(self.session).get_patient(tenant_id, data.patient_id)
        await DoctorService(self.session).get_doctor(tenant_id, data.doctor_id, active_only=True)

        capacity, default_duration = await self.slot_capacity(tenant_id, data.doctor_id)
        duration = data.duration or default_duration
        end_time = data.end_time or end_of_slot(data.start_time, duration)
        if parse_clock(end_time) <= parse_clock(data.start_time):
            raise HTTPException(status_code=400, detail="End time must be after start time")

        async with slot_lock(tenant_id, data.doctor_id, data.appointment_date, data.start_time):
            await self.ensure_capacity(tenant_id, data.doctor_id, data.appointment_date, data.start_time, capacity)
            return await self.insert_appointment(
                tenant_id=tenant_id,
                doctor_id=data.doctor_id,
                patient_id=data.patient_id,
                appointment_date=data.appointment_date,
                start_time=data.start_time,
                end_time=end_time,
                duration=duration,
                type=data.type,
                reason=data.reason,
                notes=data.notes,
                priority=data.priority,
                is_first_visit=data.is_first_visit,
                status="scheduled",
                source="staff",
                created_by=actor.id,
            )

    async def get_appointment(self, tenant_id: UUID, appointment_id: UUID) -> Appointment:
        appointment = await self.session.get(Appointment, appointment_id)
        if not appointment or appointment.tenant_id != tenant_id:
            raise HTTPException(status_code=404, detail="Appointment not found")
        return appointment

    async def list_appointments(
        self,
        tenant_id: UUID,
        on_date: Optional[date] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[str] = None,
        doctor_id: Optional[UUID] = None,
        patient_id: Optional[UUID] = None,
        page: int = 1,
        limit: int = 50
    ) -> AppointmentListResponse:
        conditions = [Appointment.tenant_id == tenant_id]
        if on_date:
            conditions.append(Appointment.appointment_date == on_date)
        if start_date and end_date:
            conditions.append(Appointment.appointment_date.between(start_date, end_date))
        if status and status != "all":
            conditions.append(Appointment.status == status)
        if doctor_id:
            conditions.append(Appointment.doctor_id == doctor_id)
        if patient_id:
            conditions.append(Appointment.patient_id == patient_id)

        total = (await self.session.execute(select(func.count(Appointment.id)).where(*conditions))).scalar() or 0

        stmt = (
            select(Appointment)
            .where(*conditions)
            .order_by(Appointment.appointment_date, Appointment.start_time)
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await self.session.execute(stmt)

        return AppointmentListResponse(
            data=[AppointmentResponse.model_validate(a) for a in result.scalars().all()],
            pagination=Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit)),
        )

    async def update_appointment(self, tenant_id: UUID, appointment_id: UUID, data: AppointmentUpdate, actor: User) -> Appointment:
        appointment = await self.get_appointment(tenant_id, appointment_id)
        # Explicit nulls leave the stored value alone
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        cancellation_reason = update_data.pop("cancellation_reason", None)

        doctor_id = update_data.get("doctor_id", appointment.doctor_id)
        appointment_date = update_data.get("appointment_date", appointment.appointment_date)
        start_time = update_data.get("start_time", appointment.start_time)
        status = update_data.get("status", appointment.status)

        if doctor_id != appointment.doctor_id:
            await DoctorService(self.session).get_doctor(tenant_id, doctor_id, active_only=True)

        moved = (
            doctor_id != appointment.doctor_id
            or appointment_date != appointment.appointment_date
            or start_time != appointment.start_time
        )
        if (moved or "duration" in update_data) and "end_time" not in update_data:
            update_data["end_time"] = end_of_slot(start_time, update_data.get("duration", appointment.duration))

        if status == "cancelled" and appointment.status != "cancelled":
            appointment.cancelled_at = datetime.utcnow()
            appointment.cancellation_reason = cancellation_reason or "Cancelled by clinic"
            record_audit(
                self.session,
                "appointment.cancelled",
                tenant_id,
                actor.id,
                {"appointment_id": str(appointment.id), "reason": appointment.cancellation_reason},
            )

        # Reopening a released booking or moving a live one needs room in the target slot
        reoccupies = appointment.status in RELEASED_STATUSES and status not in RELEASED_STATUSES
        if status not in RELEASED_STATUSES and (moved or reoccupies):
            capacity, _ = await self.slot_capacity(tenant_id, doctor_id)
            async with slot_lock(tenant_id, doctor_id, appointment_date, start_time):
                await self.ensure_capacity(
                    tenant_id, doctor_id, appointment_date, start_time, capacity, exclude_id=appointment.id
                )
                return await self._save(appointment, update_data)

        return await self._save(appointment, update_data)

    async def delete_appointment(self, tenant_id: UUID, appointment_id: UUID, actor: User) -> None:
        appointment = await self.get_appointment(tenant_id, appointment_id)
        record_audit(
            self.session,
            "appointment.deleted",
            tenant_id,
            actor.id,
            {"appointment_id": str(appointment.id), "appointment_code": appointment.appointment_code},
        )
        await self.session.delete(appointment)
        await self.session.commit()

    async def _save(self, appointment: Appointment, update_data: dict) -> Appointment:
        for key, value in update_data.items():
            setattr(appointment, key, value)
        if parse_clock(appointment.end_time) <= parse_clock(appointment.start_time):
            raise HTTPException(status_code=400, detail="End time must be after start time")
        appointment.updated_at = datetime.utcnow()
        self.session.add(appointment)
        await self.session.commit()
        await self.session.refresh(appointment)
        return appointment
