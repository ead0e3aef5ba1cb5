from fastapi import APIRouter
from clinicdesk.api.v1 import appointments, auth, clinics, doctors, patients, public_booking, schedules

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(clinics.router, prefix="/clinics", tags=["clinics"])
api_router.include_router(doctors.router, prefix="/doctors", tags=["doctors"])
api_router.include_router(schedules.router, prefix="/schedules", tags=["schedules"])
api_router.include_router(patients.router, prefix="/patients", tags=["patients"])
api_router.include_router(appointments.router, prefix="/appointments", tags=["appointments"])
api_router.include_router(public_booking.router, prefix="/public-booking", tags=["public-booking"])
