from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select
from typing import List
from uuid import UUID

from clinicdesk.db.models import Tenant, User
from clinicdesk.schemas.clinic import (
    ClinicCreate,
    ClinicCreatedResponse,
    StaffCreatedResponse,
    ClinicResponse,
    StaffCredentials,
    PublicBookingSettingsUpdate,
)
from clinicdesk.schemas.user import StaffCreate, StaffResponse
from clinicdesk.core.logger import get_logger
from clinicdesk.core.utils import generate_slug, generate_username, generate_password
from clinicdesk.core.security import get_password_hash
from fastapi import HTTPException

logger = get_logger("clinics")

class ClinicService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_clinic(self, clinic_data: ClinicCreate) -> ClinicCreatedResponse:
        clinic = Tenant(**clinic_data.model_dump())
        clinic.slug = generate_slug(clinic_data.name)

        self.session.add(clinic)
        await self.session.commit()
        await self.session.refresh(clinic)

        username = generate_username(clinic.name)
        password = generate_password()

        admin_user = User(
            tenant_id=clinic.id,
            role="admin",
            name=f"Admin - {clinic.name}",
            username=username,
            password_hash=get_password_hash(password)
        )
        self.session.add(admin_user)
        await self.session.commit()
        logger.info(f"Created clinic {clinic.slug}")

        return ClinicCreatedResponse(
            tenant_id=clinic.id,
            clinic=ClinicResponse.model_validate(clinic),
            admin_credentials=StaffCredentials(username=username, password=password)
        )

    async def create_staff(self, tenant_id: UUID, data: StaffCreate, current_user: User) -> StaffCreatedResponse:
        """Add a staff account to the caller's clinic; the generated password is only returned here."""
        tenant = await self.get_clinic(tenant_id)

        if current_user.tenant_id != tenant_id or current_user.role != "admin":
            raise HTTPException(status_code=403, detail="Not authorized to add staff to this clinic")

        username = generate_username(data.name)
        password = generate_password()

        staff = User(
            tenant_id=tenant.id,
            username=username,
            password_hash=get_password_hash(password),
            **data.model_dump()
        )

        self.session.add(staff)
        await self.session.commit()
        await self.session.refresh(staff)
        logger.info(f"Added {staff.role} {staff.username} to clinic {tenant.slug}")

        return StaffCreatedResponse(
            user=StaffResponse.model_validate(staff),
            credentials=StaffCredentials(username=username, password=password)
        )

    async def get_staff(self, tenant_id: UUID) -> List[User]:
        stmt = select(User).where(User.tenant_id == tenant_id).order_by(User.created_at)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def get_clinic(self, clinic_id: UUID) -> Tenant:
        clinic = await self.session.get(Tenant, clinic_id)
        if not clinic:
            raise HTTPException(status_code=404, detail="Clinic not found")
        return clinic

    async def get_by_booking_slug(self, slug: str) -> Tenant:
        """Tenant behind a public booking page; disabled pages look like missing ones."""
        stmt = select(Tenant).where(
            Tenant.booking_slug == slug.lower(),
            Tenant.booking_enabled == True,
            Tenant.is_active == True
        )
        result = await self.session.execute(stmt)
        tenant = result.scalars().first()
        if not tenant:
            raise HTTPException(status_code=404, detail="Clinic not found or public booking is disabled")
        return tenant

    async def update_public_booking_settings(self, tenant_id: UUID, data: PublicBookingSettingsUpdate) -> Tenant:
        tenant = await self.get_clinic(tenant_id)
        update_data = data.model_dump(exclude_unset=True)

        slug = update_data.get("booking_slug")
        if slug:
            stmt = select(Tenant).where(Tenant.booking_slug == slug, Tenant.id != tenant_id)
            result = await self.session.execute(stmt)
            if result.scalars().first():
                raise HTTPException(status_code=409, detail="Booking slug is already in use")

        merged = {
            key: update_data.get(key, getattr(tenant, key))
            for key in ("booking_enabled", "booking_slug", "captcha_enabled", "captcha_secret_key")
        }
        if merged["booking_enabled"] and not merged["booking_slug"]:
            raise HTTPException(status_code=400, detail="A booking slug is required to enable public booking")
        if merged["captcha_enabled"] and not merged["captcha_secret_key"]:
            raise HTTPException(status_code=400, detail="CAPTCHA secret key is required when CAPTCHA is enabled")

        for key, value in update_data.items():
            setattr(tenant, key, value)

        self.session.add(tenant)
        await self.session.commit()
        await self.session.refresh(tenant)
        return tenant
