# backend/vet_appointments/services/slots/config.py
"""
Scheduling configuration for slots calculation.
"""

from dataclasses import dataclass
from functools import lru_cache

from ...config import settings


def time_str_to_minutes(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight."""
    hour, minute = value.strip().split(":")[:2]
    return int(hour) * 60 + int(minute)


def minutes_to_time_str(total_minutes: int) -> str:
    """Convert minutes since midnight to "HH:MM"."""
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


@dataclass(frozen=True)
class SchedulingConfig:
    """
    Configuration for the availability engine.

    Attributes:
        workday_start: First slot of the day, "HH:MM" (inclusive)
        workday_end: End of the workday window, "HH:MM" (exclusive)
        slot_step_minutes: Grid step in minutes (15/30/60)
    """
    workday_start: str = "08:00"
    workday_end: str = "18:00"
    slot_step_minutes: int = 30  # 15 / 30 / 60

    def __post_init__(self):
        """Validate configuration."""
        if self.slot_step_minutes not in (15, 30, 60):
            raise ValueError(f"slot_step_minutes must be 15, 30, or 60, got {self.slot_step_minutes}")
        if self.start_minutes >= self.end_minutes:
            raise ValueError(
                f"workday_start must be before workday_end, got {self.workday_start}-{self.workday_end}"
            )
        if self.end_minutes > 24 * 60:
            raise ValueError(f"workday_end must not exceed 24:00, got {self.workday_end}")

    @property
    def start_minutes(self) -> int:
        return time_str_to_minutes(self.workday_start)

    @property
    def end_minutes(self) -> int:
        return time_str_to_minutes(self.workday_end)

    @property
    def slots_per_day(self) -> int:
        """
        Number of slots in the workday window.

        - 08:00-18:00 / 30 min → 20 slots
        """
        span = self.end_minutes - self.start_minutes
        return -(-span // self.slot_step_minutes)

    def grid(self) -> list[str]:
        """All slot start times of the window, ascending."""
        return [
            minutes_to_time_str(t)
            for t in range(self.start_minutes, self.end_minutes, self.slot_step_minutes)
        ]


@lru_cache
def get_scheduling_config() -> SchedulingConfig:
    """Get scheduling configuration (singleton, built from settings)."""
    return SchedulingConfig(
        workday_start=settings.workday_start,
        workday_end=settings.workday_end,
        slot_step_minutes=settings.slot_step_minutes,
    )
