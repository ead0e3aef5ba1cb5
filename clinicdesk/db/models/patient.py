from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import date, datetime
from uuid import UUID, uuid4

if TYPE_CHECKING:
    from .tenant import Tenant
    from .appointment import Appointment

class Patient(SQLModel, table=True):
    __tablename__ = "patients"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", index=True)
    patient_code: str = Field(index=True) # PAT000001, unique per tenant
    first_name: str
    last_name: str
    phone: Optional[str] = Field(default=None, index=True)
    email: Optional[str] = Field(default=None, index=True)
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    tenant: "Tenant" = Relationship(back_populates="patients")
    appointments: List["Appointment"] = Relationship(back_populates="patient")
