# backend/vet_appointments/services/slots/states.py
"""
Appointment status machine.

  scheduled → confirmed → in_progress → completed
  scheduled → cancelled
  confirmed → cancelled

completed and cancelled are terminal.
"""

from ...models.appointments import AppointmentStatus
from ..errors import InvalidState

S = AppointmentStatus

TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    S.SCHEDULED: frozenset({S.CONFIRMED, S.CANCELLED}),
    S.CONFIRMED: frozenset({S.IN_PROGRESS, S.CANCELLED}),
    S.IN_PROGRESS: frozenset({S.COMPLETED}),
    S.COMPLETED: frozenset(),
    S.CANCELLED: frozenset(),
}

EDITABLE_STATUS = S.SCHEDULED


def can_transition(current: AppointmentStatus | str, target: AppointmentStatus | str) -> bool:
    return AppointmentStatus(target) in TRANSITIONS[AppointmentStatus(current)]


def ensure_transition(current: AppointmentStatus | str, target: AppointmentStatus | str) -> None:
    """Raise InvalidState unless current → target is an allowed transition."""
    current = AppointmentStatus(current)
    target = AppointmentStatus(target)
    if not can_transition(current, target):
        if target == S.CONFIRMED:
            raise InvalidState("Only scheduled appointments can be confirmed")
        raise InvalidState(
            f"Cannot change appointment status from '{current.value}' to '{target.value}'"
        )


def ensure_editable(current: AppointmentStatus | str) -> None:
    """Raise InvalidState unless the appointment may still be edited."""
    if AppointmentStatus(current) != EDITABLE_STATUS:
        raise InvalidState("Only scheduled appointments can be edited")
