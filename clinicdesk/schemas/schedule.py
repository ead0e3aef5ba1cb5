from pydantic import BaseModel, Field, field_validator, model_validator
from datetime import date, datetime
from typing import Literal, Optional, List
from uuid import UUID

from clinicdesk.core.slots import WEEKDAYS, parse_clock

DayName = Literal["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

class TimeRangeIn(BaseModel):
    start_time: str
    end_time: str

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_clock(cls, value: str) -> str:
        parse_clock(value)
        return value

    @model_validator(mode="after")
    def validate_order(self):
        if parse_clock(self.start_time) >= parse_clock(self.end_time):
            raise ValueError(f"Start time {self.start_time} must be before end time {self.end_time}")
        return self

class DayScheduleIn(BaseModel):
    day: DayName
    is_working: bool = True
    slots: List[TimeRangeIn] = []

    @model_validator(mode="after")
    def validate_no_overlap(self):
        ordered = sorted(self.slots, key=lambda r: parse_clock(r.start_time))
        for previous, current in zip(ordered, ordered[1:]):
            if parse_clock(current.start_time) < parse_clock(previous.end_time):
                raise ValueError(
                    f"Time ranges {previous.start_time}-{previous.end_time} and "
                    f"{current.start_time}-{current.end_time} overlap on {self.day}"
                )
        return self

class LeaveDateIn(BaseModel):
    date: date
    reason: Optional[str] = None

def _unique_days(days: List[DayScheduleIn]) -> List[DayScheduleIn]:
    seen = [d.day for d in days]
    duplicates = sorted({d for d in seen if seen.count(d) > 1}, key=WEEKDAYS.index)
    if duplicates:
        raise ValueError(f"Duplicate schedule entries for: {', '.join(duplicates)}")
    return days

class ScheduleFields(BaseModel):
    weekly_schedule: Optional[List[DayScheduleIn]] = None
    slot_duration: Optional[Literal[15, 20, 30, 45, 60]] = None
    buffer_time: Optional[int] = Field(default=None, ge=0, le=30)
    max_patients_per_slot: Optional[int] = Field(default=None, ge=1, le=10)
    advance_booking_days: Optional[int] = Field(default=None, ge=1, le=90)
    is_accepting_appointments: Optional[bool] = None
    accepts_online_booking: Optional[bool] = None
    consultation_fee: Optional[float] = Field(default=None, ge=0)
    specialization: Optional[str] = None
    qualifications: Optional[str] = None
    bio: Optional[str] = Field(default=None, max_length=1000)
    leave_dates: Optional[List[LeaveDateIn]] = None

    @field_validator("weekly_schedule")
    @classmethod
    def validate_days(cls, value):
        return _unique_days(value) if value is not None else value

    @field_validator("specialization", "qualifications")
    @classmethod
    def strip_text(cls, value: Optional[str]) -> Optional[str]:
        return value.strip() if value is not None else value

class ScheduleUpsert(ScheduleFields):
    doctor_id: UUID

class ScheduleUpdate(ScheduleFields):
    pass

class ScheduleResponse(BaseModel):
    id: UUID
    tenant_id: UUID
    doctor_id: UUID
    doctor_name: Optional[str] = None
    weekly_schedule: List[dict]
    slot_duration: int
    buffer_time: int
    max_patients_per_slot: int
    advance_booking_days: int
    is_accepting_appointments: bool
    accepts_online_booking: bool
    consultation_fee: float
    specialization: Optional[str] = None
    qualifications: Optional[str] = None
    bio: Optional[str] = None
    leave_dates: List[dict]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class AvailabilityResponse(BaseModel):
    doctor_id: UUID
    date: str
    available_slots: List[str]
    slot_duration: int
    message: Optional[str] = None
