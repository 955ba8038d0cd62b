"""Slot Rules — pure checks for creating visit slots.

Invariants:
    - A slot is valid iff its date is today or later, start < end, and no block covers the date
    - Block ranges are inclusive on both ends
    - filter_valid_slots keeps input order and drops invalid entries silently
"""

from dataclasses import dataclass
from datetime import date, time


@dataclass(frozen=True)
class BlockedRange:
    start: date
    end: date

    def covers(self, day: date) -> bool:
        return self.start <= day <= self.end


def is_date_blocked(day: date, blocks: list[BlockedRange]) -> bool:
    return any(b.covers(day) for b in blocks)


def slot_error(
    slot_date: date, start_time: time, end_time: time,
    blocks: list[BlockedRange], today: date,
) -> str | None:
    """Return the first reason a slot cannot be created, or None."""
    if slot_date < today:
        return "Cannot create slots in the past"
    if start_time >= end_time:
        return "End time must be after start time"
    if is_date_blocked(slot_date, blocks):
        return (
            "This date is blocked as unavailable. Remove the block first "
            "before adding availability."
        )
    return None


def filter_valid_slots(slots: list, blocks: list[BlockedRange], today: date) -> list:
    """Keep slots (objects with slot_date/start_time/end_time) that pass slot_error."""
    return [
        s for s in slots
        if slot_error(s.slot_date, s.start_time, s.end_time, blocks, today) is None
    ]
