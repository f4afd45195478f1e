"""Six-way shift classification of ticket creation times."""

from datetime import datetime
from enum import StrEnum

DAY_SHIFT_START = 4 * 60 + 30  # 04:30, inclusive
DAY_SHIFT_END = 16 * 60 + 30  # 16:30, exclusive


class ShiftLabel(StrEnum):
    FRONT_HALF_DAYS = "Front Half Days"
    FRONT_HALF_NIGHTS = "Front Half Nights"
    BACK_HALF_DAYS = "Back Half Days"
    BACK_HALF_NIGHTS = "Back Half Nights"
    WEDNESDAY_DAYS = "Wednesday Days"
    WEDNESDAY_NIGHTS = "Wednesday Nights"


# Canonical display order, shared by every report and table.
SHIFT_LABELS: tuple[ShiftLabel, ...] = tuple(ShiftLabel)

type ShiftCounts = dict[str, int]


def sunday_weekday(instant: datetime) -> int:
    """Day of week with 0 = Sunday ... 6 = Saturday."""
    return instant.isoweekday() % 7


def is_day_shift(instant: datetime) -> bool:
    minutes = instant.hour * 60 + instant.minute
    return DAY_SHIFT_START <= minutes < DAY_SHIFT_END


def classify_shift(instant: datetime) -> ShiftLabel:
    """Map a creation instant onto one of the six shift labels."""
    day = is_day_shift(instant)

    match sunday_weekday(instant):
        case 0 | 1 | 2:
            return ShiftLabel.FRONT_HALF_DAYS if day else ShiftLabel.FRONT_HALF_NIGHTS
        case 4 | 5 | 6:
            return ShiftLabel.BACK_HALF_DAYS if day else ShiftLabel.BACK_HALF_NIGHTS
        case _:
            return ShiftLabel.WEDNESDAY_DAYS if day else ShiftLabel.WEDNESDAY_NIGHTS


def empty_shift_counts() -> ShiftCounts:
    return {str(label): 0 for label in SHIFT_LABELS}


def complete_shift_counts(counts: dict[str, int]) -> ShiftCounts:
    """Return counts keyed by exactly the six labels, in canonical order."""
    filled = empty_shift_counts()
    for label in filled:
        filled[label] = int(counts.get(label, 0))
    return filled
