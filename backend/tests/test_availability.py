"""Availability engine: free slots and the reservation guard."""

from datetime import date, datetime, timedelta, timezone

import pytest

from vet_appointments.models import AppointmentStatus
from vet_appointments.services.errors import InvalidSchedule, SlotConflict
from vet_appointments.services.slots import (
    SchedulingConfig,
    compute_available_slots,
    normalize_timestamp,
    validate_and_reserve,
)

from .conftest import OTHER_VET_ID, VET_ID

CHRISTMAS = date(2025, 12, 25)
FULL_GRID = [
    "08:00", "08:30", "09:00", "09:30", "10:00", "10:30", "11:00", "11:30",
    "12:00", "12:30", "13:00", "13:30", "14:00", "14:30", "15:00", "15:30",
    "16:00", "16:30", "17:00", "17:30",
]
DEFAULT_CONFIG = SchedulingConfig()
BEFORE_CHRISTMAS = datetime(2025, 12, 1, 9, 0)


# ──────────────────────────────────────────────────────────────────────────────
# compute_available_slots
# ──────────────────────────────────────────────────────────────────────────────


def test_no_appointments_returns_full_grid(db_session):
    slots = compute_available_slots(db_session, VET_ID, CHRISTMAS, DEFAULT_CONFIG)

    assert slots == FULL_GRID
    assert len(slots) == 20


def test_active_appointment_removes_its_slot(db_session, add_appointment):
    add_appointment(datetime(2025, 12, 25, 10, 0))

    slots = compute_available_slots(db_session, VET_ID, CHRISTMAS, DEFAULT_CONFIG)

    assert "10:00" not in slots
    assert len(slots) == 19
    assert slots == [t for t in FULL_GRID if t != "10:00"]


def test_cancelling_frees_the_slot_again(db_session, add_appointment):
    obj = add_appointment(datetime(2025, 12, 25, 10, 0))
    obj.status = AppointmentStatus.CANCELLED.value
    db_session.commit()

    slots = compute_available_slots(db_session, VET_ID, CHRISTMAS, DEFAULT_CONFIG)

    assert slots == FULL_GRID


@pytest.mark.parametrize(
    "status",
    [AppointmentStatus.SCHEDULED, AppointmentStatus.CONFIRMED, AppointmentStatus.IN_PROGRESS, AppointmentStatus.COMPLETED],
)
def test_every_non_cancelled_status_occupies(db_session, add_appointment, status):
    add_appointment(datetime(2025, 12, 25, 14, 30), status=status)

    slots = compute_available_slots(db_session, VET_ID, CHRISTMAS, DEFAULT_CONFIG)

    assert "14:30" not in slots


def test_other_veterinarian_and_other_days_are_ignored(db_session, add_appointment):
    add_appointment(datetime(2025, 12, 25, 9, 0), veterinarian_id=OTHER_VET_ID)
    add_appointment(datetime(2025, 12, 24, 9, 0))
    add_appointment(datetime(2025, 12, 26, 9, 0))

    slots = compute_available_slots(db_session, VET_ID, CHRISTMAS, DEFAULT_CONFIG)

    assert slots == FULL_GRID


def test_outside_window_and_off_grid_times_do_not_remove_slots(db_session, add_appointment):
    add_appointment(datetime(2025, 12, 25, 7, 30))
    add_appointment(datetime(2025, 12, 25, 18, 0))
    add_appointment(datetime(2025, 12, 25, 11, 15))

    slots = compute_available_slots(db_session, VET_ID, CHRISTMAS, DEFAULT_CONFIG)

    assert slots == FULL_GRID


def test_seconds_are_dropped_before_comparing(db_session, add_appointment):
    add_appointment(datetime(2025, 12, 25, 16, 0, 30))

    slots = compute_available_slots(db_session, VET_ID, CHRISTMAS, DEFAULT_CONFIG)

    assert "16:00" not in slots


def test_fully_booked_day_returns_empty_list(db_session, add_appointment):
    start = datetime(2025, 12, 25, 8, 0)
    for i in range(20):
        add_appointment(start + timedelta(minutes=30 * i))

    assert compute_available_slots(db_session, VET_ID, CHRISTMAS, DEFAULT_CONFIG) == []


def test_repeated_calls_are_identical(db_session, add_appointment):
    add_appointment(datetime(2025, 12, 25, 12, 0))

    first = compute_available_slots(db_session, VET_ID, CHRISTMAS, DEFAULT_CONFIG)
    second = compute_available_slots(db_session, VET_ID, CHRISTMAS, DEFAULT_CONFIG)

    assert first == second


def test_custom_window_and_step(db_session, add_appointment):
    config = SchedulingConfig(workday_start="09:00", workday_end="12:00", slot_step_minutes=60)
    add_appointment(datetime(2025, 12, 25, 10, 0))

    assert compute_available_slots(db_session, VET_ID, CHRISTMAS, config) == ["09:00", "11:00"]


# ──────────────────────────────────────────────────────────────────────────────
# validate_and_reserve
# ──────────────────────────────────────────────────────────────────────────────


def test_past_timestamp_is_invalid_schedule(db_session):
    with pytest.raises(InvalidSchedule):
        validate_and_reserve(db_session, VET_ID, datetime(2020, 1, 1, 10, 0))


def test_timestamp_equal_to_now_is_invalid_schedule(db_session):
    now = datetime(2030, 5, 5, 10, 0)
    with pytest.raises(InvalidSchedule):
        validate_and_reserve(db_session, VET_ID, now, now=now)


def test_free_future_timestamp_passes(db_session):
    assert validate_and_reserve(
        db_session, VET_ID, datetime(2025, 12, 25, 10, 0), now=BEFORE_CHRISTMAS
    ) is None


def test_taken_timestamp_is_slot_conflict(db_session, add_appointment):
    add_appointment(datetime(2025, 12, 25, 10, 0))

    with pytest.raises(SlotConflict) as exc_info:
        validate_and_reserve(db_session, VET_ID, datetime(2025, 12, 25, 10, 0), now=BEFORE_CHRISTMAS)

    assert "not available" in exc_info.value.message


def test_timestamp_with_seconds_conflicts_with_same_minute(db_session, add_appointment):
    add_appointment(datetime(2025, 12, 25, 16, 0))

    with pytest.raises(SlotConflict):
        validate_and_reserve(
            db_session, VET_ID, datetime(2025, 12, 25, 16, 0, 30), now=BEFORE_CHRISTMAS
        )


def test_cancelled_appointment_does_not_conflict(db_session, add_appointment):
    add_appointment(datetime(2025, 12, 25, 10, 0), status=AppointmentStatus.CANCELLED)

    validate_and_reserve(db_session, VET_ID, datetime(2025, 12, 25, 10, 0), now=BEFORE_CHRISTMAS)


def test_same_time_for_other_veterinarian_does_not_conflict(db_session, add_appointment):
    add_appointment(datetime(2025, 12, 25, 10, 0), veterinarian_id=OTHER_VET_ID)

    validate_and_reserve(db_session, VET_ID, datetime(2025, 12, 25, 10, 0), now=BEFORE_CHRISTMAS)


def test_excluded_appointment_does_not_conflict_with_itself(db_session, add_appointment):
    obj = add_appointment(datetime(2025, 12, 25, 10, 0))

    validate_and_reserve(
        db_session,
        VET_ID,
        datetime(2025, 12, 25, 10, 0),
        exclude_id=obj.id,
        now=BEFORE_CHRISTMAS,
    )


def test_exclusion_does_not_hide_other_conflicts(db_session, add_appointment):
    mine = add_appointment(datetime(2025, 12, 25, 9, 0))
    add_appointment(datetime(2025, 12, 25, 10, 0))

    with pytest.raises(SlotConflict):
        validate_and_reserve(
            db_session,
            VET_ID,
            datetime(2025, 12, 25, 10, 0),
            exclude_id=mine.id,
            now=BEFORE_CHRISTMAS,
        )


# ──────────────────────────────────────────────────────────────────────────────
# normalize_timestamp
# ──────────────────────────────────────────────────────────────────────────────


def test_naive_timestamp_is_kept():
    value = datetime(2025, 12, 25, 10, 0)
    assert normalize_timestamp(value) == value


def test_seconds_and_microseconds_are_truncated():
    value = datetime(2025, 12, 25, 16, 0, 30, 123)

    assert normalize_timestamp(value) == datetime(2025, 12, 25, 16, 0)


def test_aware_timestamp_becomes_naive_local():
    value = datetime(2025, 12, 25, 10, 0, tzinfo=timezone.utc)

    result = normalize_timestamp(value)

    assert result.tzinfo is None
    assert result == value.astimezone().replace(tzinfo=None)
