from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID
from datetime import datetime

class DoctorBase(BaseModel):
    name: str = Field(min_length=1)
    email: Optional[str] = None
    specialty: Optional[str] = None
    medical_degree: Optional[str] = None
    registration_number: Optional[str] = None

class DoctorCreate(DoctorBase):
    user_id: Optional[UUID] = None

class DoctorResponse(DoctorBase):
    id: UUID
    tenant_id: UUID
    user_id: Optional[UUID] = None
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True
