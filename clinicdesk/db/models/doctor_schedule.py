from sqlmodel import SQLModel, Field
from typing import Optional, List
from datetime import datetime
from uuid import UUID, uuid4
from sqlalchemy import Column, JSON, UniqueConstraint

def default_weekly_schedule() -> list[dict]:
    full_day = [{"start_time": "09:00", "end_time": "13:00"}, {"start_time": "14:00", "end_time": "18:00"}]
    return [
        {"day": "monday", "is_working": True, "slots": list(full_day)},
        {"day": "tuesday", "is_working": True, "slots": list(full_day)},
        {"day": "wednesday", "is_working": True, "slots": list(full_day)},
        {"day": "thursday", "is_working": True, "slots": list(full_day)},
        {"day": "friday", "is_working": True, "slots": list(full_day)},
        {"day": "saturday", "is_working": True, "slots": [{"start_time": "09:00", "end_time": "13:00"}]},
        {"day": "sunday", "is_working": False, "slots": []},
    ]

class DoctorSchedule(SQLModel, table=True):
    __tablename__ = "doctor_schedules"
    __table_args__ = (UniqueConstraint("tenant_id", "doctor_id", name="uq_doctor_schedules_tenant_doctor"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", index=True)
    doctor_id: UUID = Field(foreign_key="doctors.id", index=True)
    weekly_schedule: List[dict] = Field(default_factory=default_weekly_schedule, sa_column=Column(JSON))
    slot_duration: int = Field(default=30) # minutes
    buffer_time: int = Field(default=0) # minutes between consecutive slots
    max_patients_per_slot: int = Field(default=1)
    advance_booking_days: int = Field(default=30)
    is_accepting_appointments: bool = Field(default=True)
    accepts_online_booking: bool = Field(default=False)
    consultation_fee: float = Field(default=0)
    specialization: Optional[str] = None
    qualifications: Optional[str] = None
    bio: Optional[str] = None
    leave_dates: List[dict] = Field(default_factory=list, sa_column=Column(JSON)) # [{"date": "YYYY-MM-DD", "reason": ...}]
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

