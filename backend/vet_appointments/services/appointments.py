# backend/vet_appointments/services/appointments.py
"""
Appointment management.

Owns every mutation of the appointments table. Writes are guarded by the
slots module:
- validate_and_reserve before a timestamp is written
- ensure_editable / ensure_transition before a field or status change

Raises the errors in services/errors.py; the HTTP layer maps them.
"""

import logging
import uuid
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models.appointments import Appointment, AppointmentStatus
from ..schemas.appointments import AppointmentCreate, AppointmentFilter, AppointmentUpdate
from .errors import AppointmentNotFound, SlotConflict
from .events import appointment_payload, emit_event
from .slots import (
    ensure_editable,
    ensure_transition,
    normalize_timestamp,
    validate_and_reserve,
)

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────────────
# Create / update / delete
# ──────────────────────────────────────────────────────────────────────────────

def create_appointment(
    db: Session,
    data: AppointmentCreate,
    now: datetime | None = None,
) -> Appointment:
    appointment_date = normalize_timestamp(data.appointment_date)

    validate_and_reserve(db, data.veterinarian_id, appointment_date, now=now)

    values = data.model_dump()
    values["appointment_date"] = appointment_date
    values["type"] = data.type.value
    obj = Appointment(**values, status=AppointmentStatus.SCHEDULED.value)
    db.add(obj)
    _commit_slot_write(db)
    db.refresh(obj)

    logger.info(
        f"Appointment {obj.id} created: vet={obj.veterinarian_id} at={obj.appointment_date.isoformat()}"
    )
    emit_event("appointment_created", appointment_payload(obj))
    return obj


def update_appointment(
    db: Session,
    appointment_id: uuid.UUID,
    data: AppointmentUpdate,
    now: datetime | None = None,
) -> Appointment:
    obj = get_appointment(db, appointment_id)

    # Guard before looking at the payload: non-scheduled rows are frozen
    ensure_editable(obj.status)

    changes = data.model_dump(exclude_unset=True)

    if changes.get("appointment_date") is not None:
        new_date = normalize_timestamp(changes["appointment_date"])
        validate_and_reserve(
            db,
            obj.veterinarian_id,
            new_date,
            exclude_id=obj.id,
            now=now,
        )
        changes["appointment_date"] = new_date

    if changes.get("type") is not None:
        changes["type"] = changes["type"].value

    for field, value in changes.items():
        setattr(obj, field, value)

    _commit_slot_write(db)
    db.refresh(obj)

    logger.info(f"Appointment {obj.id} updated: {sorted(changes)}")
    emit_event("appointment_updated", appointment_payload(obj))
    return obj


def delete_appointment(db: Session, appointment_id: uuid.UUID) -> None:
    obj = get_appointment(db, appointment_id)
    payload = appointment_payload(obj)

    db.delete(obj)
    db.commit()

    logger.info(f"Appointment {appointment_id} deleted")
    emit_event("appointment_deleted", payload)


# ──────────────────────────────────────────────────────────────────────────────
# Status transitions
# ──────────────────────────────────────────────────────────────────────────────

def confirm_appointment(
    db: Session,
    appointment_id: uuid.UUID,
    notes: str | None = None,
) -> Appointment:
    obj = get_appointment(db, appointment_id)
    ensure_transition(obj.status, AppointmentStatus.CONFIRMED)

    obj.status = AppointmentStatus.CONFIRMED.value
    if notes:
        obj.notes = notes

    return _save_status(db, obj)


def start_appointment(db: Session, appointment_id: uuid.UUID) -> Appointment:
    obj = get_appointment(db, appointment_id)
    ensure_transition(obj.status, AppointmentStatus.IN_PROGRESS)

    obj.status = AppointmentStatus.IN_PROGRESS.value
    return _save_status(db, obj)


def complete_appointment(db: Session, appointment_id: uuid.UUID) -> Appointment:
    obj = get_appointment(db, appointment_id)
    ensure_transition(obj.status, AppointmentStatus.COMPLETED)

    obj.status = AppointmentStatus.COMPLETED.value
    return _save_status(db, obj)


def cancel_appointment(
    db: Session,
    appointment_id: uuid.UUID,
    reason: str | None = None,
) -> Appointment:
    """Soft removal: the timestamp becomes free for new appointments."""
    obj = get_appointment(db, appointment_id)
    ensure_transition(obj.status, AppointmentStatus.CANCELLED)

    obj.status = AppointmentStatus.CANCELLED.value
    if reason:
        obj.cancel_reason = reason

    return _save_status(db, obj)


# ──────────────────────────────────────────────────────────────────────────────
# Read
# ──────────────────────────────────────────────────────────────────────────────

def get_appointment(db: Session, appointment_id: uuid.UUID) -> Appointment:
    obj = db.get(Appointment, appointment_id)
    if not obj:
        raise AppointmentNotFound()
    return obj


def list_appointments(db: Session, filters: AppointmentFilter) -> dict:
    """
    Paginated appointments, ordered by appointment_date ascending.

    The date range is applied only when both start_date and end_date are
    given (inclusive on both ends).
    """
    query = db.query(Appointment)

    if filters.client_id:
        query = query.filter(Appointment.client_id == filters.client_id)
    if filters.veterinarian_id:
        query = query.filter(Appointment.veterinarian_id == filters.veterinarian_id)
    if filters.status:
        query = query.filter(Appointment.status == filters.status.value)
    if filters.start_date and filters.end_date:
        query = query.filter(
            Appointment.appointment_date >= normalize_timestamp(filters.start_date),
            Appointment.appointment_date <= normalize_timestamp(filters.end_date),
        )

    total = query.count()
    appointments = (
        query.order_by(Appointment.appointment_date.asc())
        .offset((filters.page - 1) * filters.limit)
        .limit(filters.limit)
        .all()
    )

    return {
        "appointments": appointments,
        "total": total,
        "page": filters.page,
        "limit": filters.limit,
    }


# ── Helpers ──────────────────────────────────────────────────────────────


def _save_status(db: Session, obj: Appointment) -> Appointment:
    db.commit()
    db.refresh(obj)

    logger.info(f"Appointment {obj.id} status → {obj.status}")
    emit_event("appointment_status_changed", appointment_payload(obj))
    return obj


def _commit_slot_write(db: Session) -> None:
    """
    Commit a write that sets appointment_date.

    Two requests can both pass validate_and_reserve before either commits;
    the partial unique index rejects the second one.
    """
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if "unique" in str(e.orig).lower():
            logger.warning(f"Slot taken concurrently: {e.orig}")
            raise SlotConflict() from e
        raise
