from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from clinicdesk.core.captcha import verify_captcha
from clinicdesk.core.logger import get_logger
from clinicdesk.core.slots import Unavailable
from clinicdesk.db.models import Tenant
from clinicdesk.schemas.public_booking import (
    BookedAppointment,
    PublicBookingInfo,
    PublicBookingRequest,
    PublicBookingResponse,
    PublicClinicInfo,
    PublicDoctor,
)
from clinicdesk.schemas.schedule import AvailabilityResponse
from clinicdesk.services.appointment_service import AppointmentService, end_of_slot
from clinicdesk.services.availability_service import AvailabilityService
from clinicdesk.services.clinic_service import ClinicService
from clinicdesk.services.doctor_service import DoctorService
from clinicdesk.services.patient_service import PatientService
from clinicdesk.services.schedule_service import ScheduleService
from clinicdesk.services.slot_lock import SLOT_TAKEN, slot_lock

logger = get_logger("public_booking")

DEFAULT_CONFIRMATION = "Your appointment has been booked successfully. We look forward to seeing you!"

class PublicBookingService:
    """Unauthenticated booking page of a clinic, addressed by its booking slug."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_info(self, slug: str) -> PublicBookingInfo:
        tenant = await ClinicService(self.session).get_by_booking_slug(slug)
        rows = await ScheduleService(self.session).list_schedules(tenant.id, online_only=True)

        doctors = [
            PublicDoctor(
                id=doctor.id,
                name=doctor.name,
                specialization=schedule.specialization,
                qualifications=schedule.qualifications,
                bio=schedule.bio,
                consultation_fee=schedule.consultation_fee if tenant.show_doctor_fees else None,
                slot_duration=schedule.slot_duration,
                advance_booking_days=schedule.advance_booking_days,
            )
            for schedule, doctor in rows
        ]

        return PublicBookingInfo(
            clinic=PublicClinicInfo(
                name=tenant.booking_clinic_name or tenant.name,
                description=tenant.booking_description,
                address=tenant.address,
                phone=tenant.phone,
                email=tenant.email,
                terms_and_conditions=tenant.terms_and_conditions,
                cancellation_policy=tenant.cancellation_policy,
                require_phone_number=tenant.require_phone_number,
                require_email=tenant.require_email,
                captcha_enabled=tenant.captcha_enabled,
                captcha_site_key=tenant.captcha_site_key if tenant.captcha_enabled else None,
            ),
            doctors=doctors,
        )

    async def get_slots(self, slug: str, doctor_id: UUID, date_str: str, now: Optional[datetime] = None) -> AvailabilityResponse:
        tenant = await ClinicService(self.session).get_by_booking_slug(slug)
        return await AvailabilityService(self.session).get_availability(
            tenant.id, doctor_id, date_str, public=True, now=now
        )

    async def book(self, slug: str, data: PublicBookingRequest, now: Optional[datetime] = None) -> PublicBookingResponse:
        tenant = await ClinicService(self.session).get_by_booking_slug(slug)

        await self._check_captcha(tenant, data.captcha_token)
        self._check_required_fields(tenant, data)

        await DoctorService(self.session).get_doctor(tenant.id, data.doctor_id, active_only=True)
        schedule = await ScheduleService(self.session).get_for_doctor(tenant.id, data.doctor_id)
        if not schedule or not schedule.accepts_online_booking or not schedule.is_accepting_appointments:
            raise HTTPException(status_code=400, detail="Doctor is not accepting online appointments")

        availability = AvailabilityService(self.session)
        async with slot_lock(tenant.id, data.doctor_id, data.date, data.time):
            result = await availability.compute(
                tenant.id, data.doctor_id, data.date, public=True, now=now, schedule=schedule
            )
            if data.time not in result.available_slots:
                if result.reason is None or result.reason == Unavailable.FULLY_BOOKED:
                    raise HTTPException(status_code=409, detail=SLOT_TAKEN)
                # The whole day is closed: past date, outside the window, leave, ...
                raise HTTPException(status_code=400, detail=result.message)

            patient = await PatientService(self.session).find_or_create_for_booking(
                tenant.id, data.patient_name, data.patient_email, data.patient_phone
            )
            end_time = end_of_slot(data.time, schedule.slot_duration)
            appointment = await AppointmentService(self.session).insert_appointment(
                tenant_id=tenant.id,
                doctor_id=data.doctor_id,
                patient_id=patient.id,
                appointment_date=data.date,
                start_time=data.time,
                end_time=end_time,
                duration=schedule.slot_duration,
                type="consultation",
                status="scheduled",
                reason=data.notes or "Online booking",
                notes="Booked via public online booking page",
                source="online",
            )

        return PublicBookingResponse(
            appointment_id=appointment.id,
            appointment_code=appointment.appointment_code,
            confirmation_message=tenant.confirmation_message or DEFAULT_CONFIRMATION,
            appointment=BookedAppointment(
                date=data.date.isoformat(),
                time=data.time,
                end_time=end_time,
                duration=schedule.slot_duration,
            ),
        )

    async def _check_captcha(self, tenant: Tenant, token: Optional[str]) -> None:
        if not tenant.captcha_enabled:
            return
        if not token:
            raise HTTPException(status_code=400, detail="Please complete the CAPTCHA verification")
        if not tenant.captcha_secret_key:
            logger.error(f"Clinic {tenant.id} has CAPTCHA enabled without a secret key")
            raise HTTPException(status_code=500, detail="CAPTCHA is not configured properly")
        if not await verify_captcha(token, tenant.captcha_secret_key):
            logger.info(f"CAPTCHA rejected for booking page {tenant.booking_slug}")
            raise HTTPException(status_code=400, detail="CAPTCHA verification failed. Please try again.")

    @staticmethod
    def _check_required_fields(tenant: Tenant, data: PublicBookingRequest) -> None:
        if tenant.require_email and not data.patient_email:
            raise HTTPException(status_code=400, detail="Email is required")
        if tenant.require_phone_number and not data.patient_phone:
            raise HTTPException(status_code=400, detail="Phone number is required")
        if tenant.terms_and_conditions and not data.agreed_to_terms:
            raise HTTPException(status_code=400, detail="You must agree to the terms and conditions")
