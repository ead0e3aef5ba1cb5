from pydantic import BaseModel, Field, field_validator
from datetime import date
from typing import Optional, List
from uuid import UUID

from clinicdesk.core.slots import parse_clock

class PublicClinicInfo(BaseModel):
    name: str
    description: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    terms_and_conditions: Optional[str] = None
    cancellation_policy: Optional[str] = None
    require_phone_number: bool
    require_email: bool
    captcha_enabled: bool
    captcha_site_key: Optional[str] = None

class PublicDoctor(BaseModel):
    id: UUID
    name: str
    specialization: Optional[str] = None
    qualifications: Optional[str] = None
    bio: Optional[str] = None
    consultation_fee: Optional[float] = None
    slot_duration: int
    advance_booking_days: int

class PublicBookingInfo(BaseModel):
    clinic: PublicClinicInfo
    doctors: List[PublicDoctor]

class PublicBookingRequest(BaseModel):
    doctor_id: UUID
    date: date
    time: str
    patient_name: str = Field(min_length=1, max_length=200)
    patient_email: Optional[str] = None
    patient_phone: Optional[str] = None
    notes: Optional[str] = Field(default=None, max_length=1000)
    agreed_to_terms: bool = False
    captcha_token: Optional[str] = None

    @field_validator("time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        parse_clock(value)
        return value

    @field_validator("patient_name")
    @classmethod
    def validate_patient_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("Patient name is required.")
        return normalized

    @field_validator("patient_email")
    @classmethod
    def normalize_email(cls, value: Optional[str]) -> Optional[str]:
        return value.strip().lower() if value and value.strip() else None

    @field_validator("patient_phone")
    @classmethod
    def normalize_phone(cls, value: Optional[str]) -> Optional[str]:
        return value.strip() if value and value.strip() else None

class BookedAppointment(BaseModel):
    date: str
    time: str
    end_time: str
    duration: int

class PublicBookingResponse(BaseModel):
    appointment_id: UUID
    appointment_code: str
    confirmation_message: str
    appointment: BookedAppointment
