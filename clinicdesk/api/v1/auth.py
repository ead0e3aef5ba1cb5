from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from clinicdesk.api.deps import get_current_user, oauth2_scheme
from clinicdesk.db.models import User
from clinicdesk.db.session import get_session
from clinicdesk.schemas.auth import LoginRequest, LoginResponse, MessageResponse
from clinicdesk.services.auth_service import AuthService

router = APIRouter()

@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: LoginRequest,
    session: AsyncSession = Depends(get_session)
):
    service = AuthService(session)
    return await service.login(login_data)

@router.post("/logout", response_model=MessageResponse)
async def logout(
    token: str = Depends(oauth2_scheme),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    service = AuthService(session)
    return await service.logout(token)
