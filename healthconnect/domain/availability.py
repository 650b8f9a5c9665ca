"""
Doctor availability.

Slots come from a fixed daily catalog rather than per-doctor working hours.
A booking blocks a catalog slot only when its start and end times match the
slot exactly.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, List, Sequence, Tuple

TIME_FORMAT = "%H:%M"

SLOT_MINUTES = 30

# Morning and afternoon windows; 12:00-13:00 is the lunch break
BUSINESS_WINDOWS: Tuple[Tuple[str, str], ...] = (
    ("09:00", "12:00"),
    ("13:00", "16:00"),
)


@dataclass(frozen=True)
class TimeSlot:
    start_time: str
    end_time: str


def build_catalog(
    windows: Sequence[Tuple[str, str]] = BUSINESS_WINDOWS,
    slot_minutes: int = SLOT_MINUTES,
) -> List[TimeSlot]:
    """Cut each window into back-to-back slots; a trailing partial slot is dropped."""
    step = timedelta(minutes=slot_minutes)
    slots = []

    for window_start, window_end in windows:
        current = datetime.strptime(window_start, TIME_FORMAT)
        end = datetime.strptime(window_end, TIME_FORMAT)

        while current + step <= end:
            slots.append(TimeSlot(
                start_time=current.strftime(TIME_FORMAT),
                end_time=(current + step).strftime(TIME_FORMAT),
            ))
            current += step

    return slots


DAILY_CATALOG: Tuple[TimeSlot, ...] = tuple(build_catalog())


def available_slots(catalog: Sequence[TimeSlot], booked: Iterable[TimeSlot]) -> List[TimeSlot]:
    """Catalog slots, in catalog order, that no booking matches exactly."""
    taken = set(booked)
    return [slot for slot in catalog if slot not in taken]
