from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from clinicdesk.db.session import get_session
from clinicdesk.schemas.public_booking import PublicBookingInfo, PublicBookingRequest, PublicBookingResponse
from clinicdesk.schemas.schedule import AvailabilityResponse
from clinicdesk.services.public_booking_service import PublicBookingService

router = APIRouter()

async def get_public_booking_service(session: AsyncSession = Depends(get_session)) -> PublicBookingService:
    return PublicBookingService(session)

@router.get("/{slug}", response_model=PublicBookingInfo)
async def read_booking_page(
    slug: str,
    service: PublicBookingService = Depends(get_public_booking_service)
):
    return await service.get_info(slug)

@router.get("/{slug}/slots", response_model=AvailabilityResponse)
async def read_available_slots(
    slug: str,
    doctor_id: UUID,
    date: str,
    service: PublicBookingService = Depends(get_public_booking_service)
):
    return await service.get_slots(slug, doctor_id, date)

@router.post("/{slug}/book", response_model=PublicBookingResponse, status_code=201)
async def book_appointment(
    slug: str,
    data: PublicBookingRequest,
    service: PublicBookingService = Depends(get_public_booking_service)
):
    return await service.book(slug, data)
