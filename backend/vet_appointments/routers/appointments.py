# backend/vet_appointments/routers/appointments.py
# - PUT = allowed while status is "scheduled"
# - DELETE = hard delete
# - Status changes: POST /{id}/confirm | start | complete | cancel

import uuid
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.appointments import AppointmentStatus
from ..schemas.appointments import (
    AppointmentCancel,
    AppointmentConfirm,
    AppointmentCreate,
    AppointmentFilter,
    AppointmentPage,
    AppointmentRead,
    AppointmentUpdate,
)
from ..schemas.common import ApiResponse, success
from ..services import appointments as service
from ..services.slots import compute_available_slots

router = APIRouter(prefix="/appointments", tags=["appointments"])


def appointment_filters(
    client_id: Optional[uuid.UUID] = None,
    veterinarian_id: Optional[uuid.UUID] = None,
    status: Optional[AppointmentStatus] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
) -> AppointmentFilter:
    return AppointmentFilter(
        client_id=client_id,
        veterinarian_id=veterinarian_id,
        status=status,
        start_date=start_date,
        end_date=end_date,
        page=page,
        limit=limit,
    )


def _page(result: dict) -> dict:
    return {**result, "appointments": [_read(a) for a in result["appointments"]]}


def _read(obj) -> dict:
    return AppointmentRead.model_validate(obj).model_dump(mode="json")


# ---------------------------------------------------------------------
# Collection
# ---------------------------------------------------------------------

@router.post("", response_model=ApiResponse[AppointmentRead], status_code=status.HTTP_201_CREATED)
def create_appointment(
    data: AppointmentCreate,
    db: Session = Depends(get_db),
):
    obj = service.create_appointment(db, data)
    return success(_read(obj), "Appointment scheduled successfully")


@router.get("", response_model=ApiResponse[AppointmentPage])
def list_appointments(
    filters: AppointmentFilter = Depends(appointment_filters),
    db: Session = Depends(get_db),
):
    result = service.list_appointments(db, filters)
    return success(_page(result), "Appointments retrieved successfully")


@router.get("/health")
def health_check():
    return success(
        {"status": "OK", "timestamp": datetime.now().isoformat()},
        "Appointment service is healthy",
    )


@router.get("/available-slots/{veterinarian_id}/{target_date}", response_model=ApiResponse[list[str]])
def get_available_slots(
    veterinarian_id: uuid.UUID,
    target_date: date,
    db: Session = Depends(get_db),
):
    """Free "HH:MM" slots of a veterinarian on a date (YYYY-MM-DD)."""
    slots = compute_available_slots(db, veterinarian_id, target_date)
    return success(slots, "Available time slots retrieved successfully")


@router.get("/client/{client_id}", response_model=ApiResponse[AppointmentPage])
def list_client_appointments(
    client_id: uuid.UUID,
    filters: AppointmentFilter = Depends(appointment_filters),
    db: Session = Depends(get_db),
):
    scoped = filters.model_copy(update={"client_id": client_id})
    result = service.list_appointments(db, scoped)
    return success(_page(result), "Client appointments retrieved successfully")


@router.get("/veterinarian/{veterinarian_id}", response_model=ApiResponse[AppointmentPage])
def list_veterinarian_appointments(
    veterinarian_id: uuid.UUID,
    filters: AppointmentFilter = Depends(appointment_filters),
    db: Session = Depends(get_db),
):
    scoped = filters.model_copy(update={"veterinarian_id": veterinarian_id})
    result = service.list_appointments(db, scoped)
    return success(_page(result), "Veterinarian appointments retrieved successfully")


# ---------------------------------------------------------------------
# Single appointment
# ---------------------------------------------------------------------

@router.get("/{id}", response_model=ApiResponse[AppointmentRead])
def get_appointment(id: uuid.UUID, db: Session = Depends(get_db)):
    obj = service.get_appointment(db, id)
    return success(_read(obj), "Appointment found")


@router.put("/{id}", response_model=ApiResponse[AppointmentRead])
def update_appointment(
    id: uuid.UUID,
    data: AppointmentUpdate,
    db: Session = Depends(get_db),
):
    obj = service.update_appointment(db, id, data)
    return success(_read(obj), "Appointment updated successfully")


@router.delete("/{id}", response_model=ApiResponse[None])
def delete_appointment(id: uuid.UUID, db: Session = Depends(get_db)):
    service.delete_appointment(db, id)
    return success(None, "Appointment deleted successfully")


@router.post("/{id}/confirm", response_model=ApiResponse[AppointmentRead])
def confirm_appointment(
    id: uuid.UUID,
    data: Optional[AppointmentConfirm] = Body(None),
    db: Session = Depends(get_db),
):
    notes = data.notes if data else None
    obj = service.confirm_appointment(db, id, notes)
    return success(_read(obj), "Appointment confirmed successfully")


@router.post("/{id}/start", response_model=ApiResponse[AppointmentRead])
def start_appointment(id: uuid.UUID, db: Session = Depends(get_db)):
    obj = service.start_appointment(db, id)
    return success(_read(obj), "Appointment started")


@router.post("/{id}/complete", response_model=ApiResponse[AppointmentRead])
def complete_appointment(id: uuid.UUID, db: Session = Depends(get_db)):
    obj = service.complete_appointment(db, id)
    return success(_read(obj), "Appointment completed")


@router.post("/{id}/cancel", response_model=ApiResponse[AppointmentRead])
def cancel_appointment(
    id: uuid.UUID,
    data: Optional[AppointmentCancel] = Body(None),
    db: Session = Depends(get_db),
):
    reason = data.reason if data else None
    obj = service.cancel_appointment(db, id, reason)
    return success(_read(obj), "Appointment cancelled")
