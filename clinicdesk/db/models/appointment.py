from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import date, datetime
from uuid import UUID, uuid4

if TYPE_CHECKING:
    from .tenant import Tenant
    from .doctor import Doctor
    from .patient import Patient

# Bookings in these states no longer occupy a slot
RELEASED_STATUSES = ("cancelled", "no-show")

class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", index=True)
    doctor_id: UUID = Field(foreign_key="doctors.id", index=True)
    patient_id: UUID = Field(foreign_key="patients.id", index=True)
    appointment_code: str = Field(index=True)
    appointment_date: date = Field(index=True)
    start_time: str # HH:MM
    end_time: str # HH:MM
    duration: int = Field(default=30)
    type: str = Field(default="consultation")
    status: str = Field(default="scheduled")
    reason: str
    notes: Optional[str] = None
    priority: str = Field(default="normal")
    is_first_visit: bool = Field(default=False)
    source: str = Field(default="staff") # staff, online
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    created_by: Optional[UUID] = Field(default=None, foreign_key="users.id")
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    tenant: "Tenant" = Relationship(back_populates="appointments")
    doctor: "Doctor" = Relationship(back_populates="appointments")
    patient: "Patient" = Relationship(back_populates="appointments")
