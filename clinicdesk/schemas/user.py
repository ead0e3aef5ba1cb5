from pydantic import BaseModel, Field, field_validator
from typing import Literal, Optional
from uuid import UUID
from datetime import datetime

UserRole = Literal["admin", "doctor", "receptionist"]

class StaffCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    role: UserRole = "receptionist"
    email: Optional[str] = None
    phone: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required.")
        return value

class StaffResponse(BaseModel):
    id: UUID
    tenant_id: UUID
    role: UserRole
    name: str
    username: str
    email: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool
    last_login_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True
