import json
from datetime import datetime, timedelta
from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from clinicdesk.core.config import settings
from clinicdesk.core.logger import get_logger
from clinicdesk.core.redis import redis_client
from clinicdesk.core.security import verify_password, create_access_token
from clinicdesk.db.models import User, Tenant
from clinicdesk.schemas.auth import LoginRequest, LoginResponse, SessionUser, MessageResponse

logger = get_logger("auth")

class AuthService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def login(self, login_data: LoginRequest) -> LoginResponse:
        # 1. Find Clinic by Slug
        stmt = select(Tenant).where(Tenant.slug == login_data.clinic_slug, Tenant.is_active == True)
        result = await self.session.execute(stmt)
        clinic = result.scalars().first()

        if not clinic:
            raise HTTPException(status_code=404, detail="Clinic not found")

        # 2. Find User in that Clinic
        stmt = select(User).where(
            User.tenant_id == clinic.id,
            User.username == login_data.username,
            User.is_active == True
        )
        result = await self.session.execute(stmt)
        user = result.scalars().first()

        if not user or not verify_password(login_data.password, user.password_hash):
            logger.info(f"Failed login for '{login_data.username}' at clinic {clinic.slug}")
            raise HTTPException(status_code=401, detail="Invalid username or password")

        # 3. Generate Token
        access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        access_token = create_access_token(
            data={"sub": str(user.id), "tenant_id": str(clinic.id), "role": user.role},
            expires_delta=access_token_expires
        )

        # 4. Register in Redis; tokens missing there are rejected
        token_data = {
            "user_id": str(user.id),
            "tenant_id": str(clinic.id),
            "role": user.role,
        }
        await redis_client.set_token(
            access_token,
            json.dumps(token_data),
            settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
        )

        user.last_login_at = datetime.utcnow()
        self.session.add(user)
        await self.session.commit()
        logger.info(f"{user.role} {user.username} logged in to clinic {clinic.slug}")

        return LoginResponse(
            access_token=access_token,
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            user=SessionUser(
                id=user.id,
                name=user.name,
                username=user.username,
                role=user.role,
                clinic_id=clinic.id,
                clinic_name=clinic.name
            )
        )

    async def logout(self, token: str) -> MessageResponse:
        await redis_client.delete_token(token)
        return MessageResponse(message="Logged out")
