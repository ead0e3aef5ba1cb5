from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
from uuid import UUID, uuid4

if TYPE_CHECKING:
    from .tenant import Tenant
    from .appointment import Appointment

class Doctor(SQLModel, table=True):
    __tablename__ = "doctors"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", index=True)
    user_id: Optional[UUID] = Field(default=None, foreign_key="users.id")
    name: str
    email: Optional[str] = None
    specialty: Optional[str] = None
    medical_degree: Optional[str] = None
    registration_number: Optional[str] = None
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    tenant: "Tenant" = Relationship(back_populates="doctors")
    appointments: List["Appointment"] = Relationship(back_populates="doctor")
