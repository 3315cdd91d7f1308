from .base import Base
from .appointments import Appointment, AppointmentStatus, AppointmentType

__all__ = [
    "Base",
    "Appointment",
    "AppointmentStatus",
    "AppointmentType",
]
