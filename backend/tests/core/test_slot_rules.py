"""Slot Rules — past dates, inverted times and blocked ranges."""

from dataclasses import dataclass
from datetime import date, time

from urbanestate.core.availability import (
    BlockedRange, filter_valid_slots, is_date_blocked, slot_error,
)

TODAY = date(2025, 3, 10)
BLOCKS = [BlockedRange(date(2025, 3, 20), date(2025, 3, 22))]


@dataclass
class _Slot:
    slot_date: date
    start_time: time
    end_time: time


def test_block_range_is_inclusive():
    assert is_date_blocked(date(2025, 3, 20), BLOCKS)
    assert is_date_blocked(date(2025, 3, 22), BLOCKS)
    assert not is_date_blocked(date(2025, 3, 23), BLOCKS)


def test_slot_errors():
    assert slot_error(date(2025, 3, 9), time(9), time(10), [], TODAY) == (
        "Cannot create slots in the past"
    )
    assert slot_error(TODAY, time(10), time(10), [], TODAY) == (
        "End time must be after start time"
    )
    assert "blocked" in slot_error(date(2025, 3, 21), time(9), time(10), BLOCKS, TODAY)
    assert slot_error(TODAY, time(9), time(10), BLOCKS, TODAY) is None


def test_filter_keeps_order_and_drops_invalid():
    slots = [
        _Slot(date(2025, 3, 12), time(9), time(10)),
        _Slot(date(2025, 3, 1), time(9), time(10)),
        _Slot(date(2025, 3, 21), time(9), time(10)),
        _Slot(date(2025, 3, 11), time(9), time(10)),
    ]
    valid = filter_valid_slots(slots, BLOCKS, TODAY)
    assert [s.slot_date.day for s in valid] == [12, 11]
