from pydantic import BaseModel, Field, field_validator
from typing import Optional
from uuid import UUID
from datetime import datetime
import re

from clinicdesk.schemas.user import StaffResponse

class ClinicBase(BaseModel):
    name: str = Field(min_length=1)
    city: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None

class ClinicCreate(ClinicBase):
    pass

class ClinicResponse(ClinicBase):
    id: UUID
    slug: str
    is_active: bool
    booking_enabled: bool
    booking_slug: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

class StaffCredentials(BaseModel):
    username: str
    password: str

class ClinicCreatedResponse(BaseModel):
    tenant_id: UUID
    clinic: ClinicResponse
    admin_credentials: StaffCredentials

class StaffCreatedResponse(BaseModel):
    user: StaffResponse
    credentials: StaffCredentials

class PublicBookingSettingsUpdate(BaseModel):
    booking_enabled: Optional[bool] = None
    booking_slug: Optional[str] = None
    booking_clinic_name: Optional[str] = None
    booking_description: Optional[str] = Field(default=None, max_length=500)
    require_phone_number: Optional[bool] = None
    require_email: Optional[bool] = None
    show_doctor_fees: Optional[bool] = None
    confirmation_message: Optional[str] = None
    terms_and_conditions: Optional[str] = None
    cancellation_policy: Optional[str] = None
    captcha_enabled: Optional[bool] = None
    captcha_site_key: Optional[str] = None
    captcha_secret_key: Optional[str] = None

    @field_validator("booking_slug")
    @classmethod
    def validate_booking_slug(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        normalized = value.strip().lower()
        if not re.fullmatch(r"[a-z0-9]+(?:-[a-z0-9]+)*", normalized):
            raise ValueError("Booking slug may contain only letters, digits and single hyphens.")
        return normalized

class PublicBookingSettingsResponse(BaseModel):
    booking_enabled: bool
    booking_slug: Optional[str] = None
    booking_clinic_name: Optional[str] = None
    booking_description: Optional[str] = None
    require_phone_number: bool
    require_email: bool
    show_doctor_fees: bool
    confirmation_message: Optional[str] = None
    terms_and_conditions: Optional[str] = None
    cancellation_policy: Optional[str] = None
    captcha_enabled: bool
    captcha_site_key: Optional[str] = None

    class Config:
        from_attributes = True
