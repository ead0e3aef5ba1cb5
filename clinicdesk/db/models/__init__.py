from sqlmodel import SQLModel
from .tenant import Tenant
from .user import User
from .patient import Patient
from .doctor import Doctor
from .doctor_schedule import DoctorSchedule
from .appointment import Appointment
from .counter import Counter
from .audit_log import AuditLog

__all__ = [
    "SQLModel",
    "Tenant",
    "User",
    "Patient",
    "Doctor",
    "DoctorSchedule",
    "Appointment",
    "Counter",
    "AuditLog",
]
