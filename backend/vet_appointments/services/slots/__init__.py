# backend/vet_appointments/services/slots/__init__.py
"""
Slots module.

Availability: free "HH:MM" slots of a veterinarian for a day
Reservation guard: future + no-conflict check before a write
States: appointment status machine
"""

from .config import SchedulingConfig, get_scheduling_config
from .availability import (
    compute_available_slots,
    normalize_timestamp,
    validate_and_reserve,
)
from .states import can_transition, ensure_editable, ensure_transition

__all__ = [
    "SchedulingConfig",
    "get_scheduling_config",
    "compute_available_slots",
    "normalize_timestamp",
    "validate_and_reserve",
    "can_transition",
    "ensure_editable",
    "ensure_transition",
]
