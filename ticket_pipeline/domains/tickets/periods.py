"""Calendar bucketing and reporting windows for ticket analytics."""

from dataclasses import dataclass
from datetime import datetime, timedelta

import pandas as pd

from ticket_pipeline.config import AnalysisConfig
from ticket_pipeline.domains.tickets.shifts import sunday_weekday

type MonthKey = str  # "YYYY-MM"
type WeekKey = str  # "YYYY-MM-DD", Monday of the week


def month_key(instant: datetime) -> MonthKey:
    return f"{instant.year:04d}-{instant.month:02d}"


def week_start(instant: datetime) -> datetime:
    """Midnight of the Monday that starts ``instant``'s week."""
    day = sunday_weekday(instant)
    offset = -6 if day == 0 else 1 - day
    midnight = datetime(instant.year, instant.month, instant.day)
    return midnight + timedelta(days=offset)


def week_key(instant: datetime) -> WeekKey:
    return week_start(instant).strftime("%Y-%m-%d")


def months_before(instant: datetime, months: int) -> datetime:
    """Calendar-month subtraction; the day is clamped to the target month's end."""
    return (pd.Timestamp(instant) - pd.DateOffset(months=months)).to_pydatetime()


def month_progress(now: datetime) -> float:
    """Fraction of the current month elapsed, by day of month."""
    return now.day / pd.Timestamp(now).days_in_month


@dataclass(frozen=True)
class AnalysisWindows:
    """Window starts for one analysis run, all inclusive lower bounds."""

    reference_time: datetime
    ytd_start: datetime
    current_month_start: datetime
    last_1_month_start: datetime
    last_3_months_start: datetime
    last_6_months_start: datetime

    @classmethod
    def from_reference(cls, now: datetime, config: AnalysisConfig) -> "AnalysisWindows":
        midnight = datetime(now.year, now.month, now.day)
        current_month_start = datetime(now.year, now.month, 1)

        match config.three_month_window:
            case "fixed_days":
                last_3_months_start = now - timedelta(days=config.three_month_days)
            case "calendar_months":
                last_3_months_start = months_before(now, 3)
            case other:
                raise ValueError(f"Unsupported three_month_window: {other}")

        return cls(
            reference_time=now,
            ytd_start=datetime(now.year, 1, 1),
            current_month_start=current_month_start,
            last_1_month_start=months_before(midnight, 1),
            last_3_months_start=last_3_months_start,
            last_6_months_start=months_before(now, config.rolling_months),
        )

