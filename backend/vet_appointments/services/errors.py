# backend/vet_appointments/services/errors.py
"""
Scheduling error taxonomy.

All of these are expected, caller-recoverable conditions. They carry a
human-readable message and a machine code; the HTTP layer maps each class
to a status code (see exception_handlers.py).
"""


class SchedulingError(Exception):
    """Base class for appointment scheduling failures."""

    code = "scheduling_error"
    default_message = "The request could not be processed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidSchedule(SchedulingError):
    """Requested timestamp is not strictly in the future."""

    code = "invalid_schedule"
    default_message = "The appointment date must be in the future"


class SlotConflict(SchedulingError):
    """An active appointment already occupies the requested timestamp."""

    code = "slot_conflict"
    default_message = "The selected time slot is not available"


class InvalidState(SchedulingError):
    """Mutation attempted outside the state that permits it."""

    code = "invalid_state"
    default_message = "The appointment cannot be changed in its current status"


class AppointmentNotFound(SchedulingError):
    code = "not_found"
    default_message = "Appointment not found"
