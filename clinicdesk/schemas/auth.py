from pydantic import BaseModel, Field
from uuid import UUID

from clinicdesk.schemas.user import UserRole

class LoginRequest(BaseModel):
    clinic_slug: str = Field(min_length=1)
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)

class SessionUser(BaseModel):
    id: UUID
    name: str
    username: str
    role: UserRole
    clinic_id: UUID
    clinic_name: str

class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: SessionUser

class MessageResponse(BaseModel):
    message: str
