from pydantic import BaseModel, Field, field_validator
from uuid import UUID
from datetime import date, datetime
from typing import Literal, Optional, List

from clinicdesk.core.slots import parse_clock

AppointmentStatus = Literal["scheduled", "confirmed", "checked-in", "in-progress", "completed", "cancelled", "no-show"]
AppointmentType = Literal["consultation", "follow-up", "procedure", "emergency", "routine-checkup", "vaccination"]
Priority = Literal["normal", "urgent", "emergency"]

def _check_clock(value: Optional[str]) -> Optional[str]:
    if value is not None:
        parse_clock(value)
    return value

class AppointmentCreate(BaseModel):
    patient_id: UUID
    doctor_id: UUID
    appointment_date: date
    start_time: str
    end_time: Optional[str] = None
    duration: Optional[int] = Field(default=None, ge=5, le=480)
    type: AppointmentType = "consultation"
    reason: str = Field(min_length=1)
    notes: Optional[str] = None
    priority: Priority = "normal"
    is_first_visit: bool = False

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_times(cls, value: Optional[str]) -> Optional[str]:
        return _check_clock(value)

class AppointmentUpdate(BaseModel):
    doctor_id: Optional[UUID] = None
    appointment_date: Optional[date] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    duration: Optional[int] = Field(default=None, ge=5, le=480)
    type: Optional[AppointmentType] = None
    status: Optional[AppointmentStatus] = None
    reason: Optional[str] = None
    notes: Optional[str] = None
    priority: Optional[Priority] = None
    is_first_visit: Optional[bool] = None
    cancellation_reason: Optional[str] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_times(cls, value: Optional[str]) -> Optional[str]:
        return _check_clock(value)

class AppointmentResponse(BaseModel):
    id: UUID
    appointment_code: str
    tenant_id: UUID
    doctor_id: UUID
    patient_id: UUID
    appointment_date: date
    start_time: str
    end_time: str
    duration: int
    type: str
    status: str
    reason: str
    notes: Optional[str] = None
    priority: str
    is_first_visit: bool
    source: str
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

class AppointmentListResponse(BaseModel):
    data: List[AppointmentResponse]
    pagination: Pagination
