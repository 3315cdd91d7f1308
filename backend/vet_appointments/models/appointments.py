# backend/vet_appointments/models/appointments.py

import enum
import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
    false,
    func,
    text,
)

from .base import Base


class AppointmentStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class AppointmentType(str, enum.Enum):
    CONSULTATION = "consultation"
    VACCINATION = "vaccination"
    SURGERY = "surgery"
    EMERGENCY = "emergency"
    CHECKUP = "checkup"


# Only one active appointment per veterinarian and timestamp.
# Cancelled rows are excluded so a cancelled slot can be booked again.
ACTIVE_SLOT_WHERE = text("status != 'cancelled'")


class Appointment(Base):
    __tablename__ = 'appointments'
    __table_args__ = (
        Index(
            'uq_appointments_vet_date_active',
            'veterinarian_id',
            'appointment_date',
            unique=True,
            sqlite_where=ACTIVE_SLOT_WHERE,
            postgresql_where=ACTIVE_SLOT_WHERE,
        ),
        Index('ix_appointments_client_date', 'client_id', 'appointment_date'),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id = Column(Uuid, nullable=False)
    veterinarian_id = Column(Uuid, nullable=False)

    pet_name = Column(String(100), nullable=False)
    pet_species = Column(String(50), nullable=False)
    pet_breed = Column(String(50))
    pet_age = Column(Integer, nullable=False)

    appointment_date = Column(DateTime, nullable=False)
    type = Column(String(20), nullable=False, default=AppointmentType.CONSULTATION.value)
    status = Column(
        String(20),
        nullable=False,
        default=AppointmentStatus.SCHEDULED.value,
        server_default=text("'scheduled'"),
    )

    reason = Column(Text)
    notes = Column(Text)
    cancel_reason = Column(Text)

    client_name = Column(String(100), nullable=False)
    client_email = Column(String(100), nullable=False)
    client_phone = Column(String(20))
    veterinarian_name = Column(String(100), nullable=False)

    cost = Column(Numeric(10, 2))
    is_emergency = Column(Boolean, nullable=False, default=False, server_default=false())

    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())
    updated_at = Column(
        DateTime,
        nullable=False,
        server_default=func.current_timestamp(),
        onupdate=func.current_timestamp(),
    )

    def __repr__(self) -> str:
        return f"<Appointment {self.id} vet={self.veterinarian_id} at={self.appointment_date} {self.status}>"
