from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
from uuid import UUID, uuid4

if TYPE_CHECKING:
    from .user import User
    from .doctor import Doctor
    from .patient import Patient
    from .appointment import Appointment

class Tenant(SQLModel, table=True):
    __tablename__ = "tenants"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str
    slug: str = Field(unique=True, index=True)
    city: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Public booking page
    booking_enabled: bool = Field(default=False)
    booking_slug: Optional[str] = Field(default=None, unique=True, index=True)
    booking_clinic_name: Optional[str] = None
    booking_description: Optional[str] = None
    require_phone_number: bool = Field(default=True)
    require_email: bool = Field(default=True)
    show_doctor_fees: bool = Field(default=True)
    confirmation_message: Optional[str] = None
    terms_and_conditions: Optional[str] = None
    cancellation_policy: Optional[str] = None
    captcha_enabled: bool = Field(default=False)
    captcha_site_key: Optional[str] = None
    captcha_secret_key: Optional[str] = None

    users: List["User"] = Relationship(back_populates="tenant")
    doctors: List["Doctor"] = Relationship(back_populates="tenant")
    patients: List["Patient"] = Relationship(back_populates="tenant")
    appointments: List["Appointment"] = Relationship(back_populates="tenant")
