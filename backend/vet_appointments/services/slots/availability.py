# backend/vet_appointments/services/slots/availability.py
"""
Veterinarian availability.

compute_available_slots: the workday grid ("HH:MM" every slot_step_minutes
inside [workday_start, workday_end)) minus the times already taken by
active (non-cancelled) appointments of the veterinarian on that date.

validate_and_reserve: precondition check before an appointment is written
at a given timestamp. It does not persist anything; the write itself is
guarded by the uq_appointments_vet_date_active index.

Both sides of the comparison are reduced to "HH:MM" of naive local time.
Seconds are dropped on the way in (stored timestamps are minute resolution);
aware timestamps are converted to server-local time.
"""

import logging
import uuid
from datetime import date, datetime, timedelta

from sqlalchemy.orm import Session

from ...models.appointments import Appointment, AppointmentStatus
from ..errors import InvalidSchedule, SlotConflict
from .config import SchedulingConfig, get_scheduling_config

logger = logging.getLogger(__name__)


def normalize_timestamp(value: datetime) -> datetime:
    """Naive local datetime at minute resolution, for comparison and storage."""
    if value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value.replace(second=0, microsecond=0)


def format_slot_time(value: datetime) -> str:
    return normalize_timestamp(value).strftime("%H:%M")


def workday_window(
    target_date: date,
    config: SchedulingConfig | None = None,
) -> tuple[datetime, datetime]:
    """[start, end) of the workday on target_date."""
    config = config or get_scheduling_config()
    midnight = datetime.combine(target_date, datetime.min.time())
    return (
        midnight + timedelta(minutes=config.start_minutes),
        midnight + timedelta(minutes=config.end_minutes),
    )


def compute_available_slots(
    db: Session,
    veterinarian_id: uuid.UUID,
    target_date: date,
    config: SchedulingConfig | None = None,
) -> list[str]:
    """
    Free slot start times for a veterinarian on a date.

    Returns:
        Ascending list of "HH:MM" strings. Empty list = day fully booked.
    """
    config = config or get_scheduling_config()

    # Step 1: Workday grid
    grid = config.grid()

    # Step 2: Occupied times from active appointments inside the window
    window_start, window_end = workday_window(target_date, config)
    appointments = _get_active_appointments(db, veterinarian_id, window_start, window_end)
    occupied = {format_slot_time(a.appointment_date) for a in appointments}

    # Step 3: Grid minus occupied, grid order kept
    return [t for t in grid if t not in occupied]


def validate_and_reserve(
    db: Session,
    veterinarian_id: uuid.UUID,
    desired: datetime,
    exclude_id: uuid.UUID | None = None,
    now: datetime | None = None,
) -> None:
    """
    Check that an appointment may be written at `desired`.

    Raises:
        InvalidSchedule: desired is not strictly after now
        SlotConflict: another active appointment of the veterinarian
                      has exactly this timestamp
    """
    desired = normalize_timestamp(desired)
    now = normalize_timestamp(now) if now else datetime.now()

    # Step 1: Future check
    if desired <= now:
        raise InvalidSchedule()

    # Step 2: Conflict check
    conflict = _find_conflict(db, veterinarian_id, desired, exclude_id)
    if conflict is not None:
        logger.warning(
            f"Slot conflict: vet={veterinarian_id} at={desired.isoformat()} "
            f"taken by appointment {conflict.id}"
        )
        raise SlotConflict()


# ── Database helpers ─────────────────────────────────────────────────────


def _get_active_appointments(
    db: Session,
    veterinarian_id: uuid.UUID,
    window_start: datetime,
    window_end: datetime,
) -> list[Appointment]:
    """Non-cancelled appointments of the veterinarian within [start, end)."""
    return (
        db.query(Appointment)
        .filter(
            Appointment.veterinarian_id == veterinarian_id,
            Appointment.appointment_date >= window_start,
            Appointment.appointment_date < window_end,
            Appointment.status != AppointmentStatus.CANCELLED.value,
        )
        .all()
    )


def _find_conflict(
    db: Session,
    veterinarian_id: uuid.UUID,
    desired: datetime,
    exclude_id: uuid.UUID | None,
) -> Appointment | None:
    query = db.query(Appointment).filter(
        Appointment.veterinarian_id == veterinarian_id,
        Appointment.appointment_date == desired,
        Appointment.status != AppointmentStatus.CANCELLED.value,
    )
    if exclude_id is not None:
        query = query.filter(Appointment.id != exclude_id)
    return query.first()
