# backend/vet_appointments/schemas/appointments.py

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from ..models.appointments import AppointmentStatus, AppointmentType

# Columns an update cannot clear
NOT_NULL_FIELDS = ("pet_name", "pet_species", "pet_age", "appointment_date", "type", "is_emergency")


class AppointmentCreate(BaseModel):
    client_id: uuid.UUID
    veterinarian_id: uuid.UUID

    pet_name: str = Field(min_length=2, max_length=100)
    pet_species: str = Field(max_length=50)
    pet_breed: Optional[str] = Field(None, max_length=50)
    pet_age: int = Field(ge=0, le=50, description="Pet age in years")

    appointment_date: datetime = Field(description="Appointment date and time in ISO format")
    type: AppointmentType = AppointmentType.CONSULTATION
    reason: Optional[str] = Field(None, max_length=500)

    client_name: str = Field(max_length=100)
    client_email: EmailStr
    client_phone: Optional[str] = Field(None, max_length=20)
    veterinarian_name: str = Field(max_length=100)

    cost: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    is_emergency: bool = False

    @field_validator("client_email")
    @classmethod
    def email_fits_column(cls, v: str) -> str:
        if len(v) > 100:
            raise ValueError("Email must be at most 100 characters")
        return v


class AppointmentUpdate(BaseModel):
    """Partial update. Status changes go through the transition endpoints."""

    pet_name: Optional[str] = Field(None, min_length=2, max_length=100)
    pet_species: Optional[str] = Field(None, max_length=50)
    pet_breed: Optional[str] = Field(None, max_length=50)
    pet_age: Optional[int] = Field(None, ge=0, le=50)

    appointment_date: Optional[datetime] = None
    type: Optional[AppointmentType] = None
    reason: Optional[str] = Field(None, max_length=500)
    notes: Optional[str] = Field(None, max_length=1000)

    client_phone: Optional[str] = Field(None, max_length=20)
    cost: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    is_emergency: Optional[bool] = None

    @model_validator(mode="after")
    def reject_null_required(self):
        for name in NOT_NULL_FIELDS:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class AppointmentConfirm(BaseModel):
    notes: Optional[str] = Field(None, max_length=500)


class AppointmentCancel(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


class AppointmentRead(BaseModel):
    id: uuid.UUID
    client_id: uuid.UUID
    veterinarian_id: uuid.UUID

    pet_name: str
    pet_species: str
    pet_breed: Optional[str] = None
    pet_age: int

    appointment_date: datetime
    type: AppointmentType
    status: AppointmentStatus

    reason: Optional[str] = None
    notes: Optional[str] = None
    cancel_reason: Optional[str] = None

    client_name: str
    client_email: str
    client_phone: Optional[str] = None
    veterinarian_name: str

    cost: Optional[Decimal] = None
    is_emergency: bool

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AppointmentFilter(BaseModel):
    client_id: Optional[uuid.UUID] = None
    veterinarian_id: Optional[uuid.UUID] = None
    status: Optional[AppointmentStatus] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)


class AppointmentPage(BaseModel):
    appointments: list[AppointmentRead]
    total: int
    page: int
    limit: int
