from sqlmodel import SQLModel, Field
from uuid import UUID, uuid4
from sqlalchemy import UniqueConstraint

class Counter(SQLModel, table=True):
    """Per-tenant sequence used for human-readable codes (APT000001, PAT000001)."""
    __tablename__ = "counters"
    __table_args__ = (UniqueConstraint("tenant_id", "name", name="uq_counters_tenant_name"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id")
    name: str # appointment, patient
    last_value: int = Field(default=0)
