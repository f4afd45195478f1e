"""Ticket analytics data structures and pandera schemas."""

from dataclasses import dataclass
from datetime import datetime

import pandera as pa
from pandera import Column, Check

from ticket_pipeline.domains.tickets.shifts import SHIFT_LABELS

type RawRecord = dict[str, str]
type CountMap = dict[str, int]
type SampleMap = dict[str, tuple[float, ...]]

SKIP_REASONS = ["missing_field", "unparseable", "future_create", "negative_duration"]


@dataclass(frozen=True)
class ProcessedTicket:
    create_instant: datetime
    resolve_instant: datetime
    resolution_hours: float
    shift: str
    month_key: str
    week_key: str


@dataclass(frozen=True)
class MonthlyStat:
    month_start: str  # YYYY-MM-01
    label: str  # e.g. "Dec 2024"
    total_tickets: int
    avg_resolution_hrs: float


@dataclass(frozen=True)
class AccumulatedBuckets:
    """Everything the aggregation fold collects before assembly."""

    total_processed_rows: int
    total_valid_rows: int
    total_resolution_hours: float
    ytd_count: int
    current_month_count: int
    last_6_months_count: int
    shift_counts: CountMap
    last_1_month_shift_counts: CountMap
    last_3_months_shift_counts: CountMap
    last_6_months_shift_counts: CountMap
    monthly_tickets: CountMap
    monthly_resolve_times: SampleMap
    weekly_tickets: CountMap
    weekly_resolve_times: SampleMap
    processed_tickets: tuple[ProcessedTicket, ...]
    skipped: CountMap


@dataclass(frozen=True)
class AnalysisResult:
    reference_time: datetime

    ytd_count: int
    last_6_months_count: int
    current_month_count: int
    last_6_calendar_months_count: int
    last_4_calendar_weeks_count: int
    last_4_weeks_count: int
    total_processed_rows: int
    total_valid_rows: int

    avg_monthly: float
    avg_weekly: float
    avg_resolution_time: float
    last_6_months_avg_resolution_time: float

    current_month_progress: float
    projected_current_month: float
    trend_vs_average: float
    trend_percentage: float

    shift_counts: CountMap
    last_1_month_shift_counts: CountMap
    last_3_months_shift_counts: CountMap
    last_6_months_shift_counts: CountMap

    monthly_tickets: CountMap
    monthly_resolve_times: SampleMap
    weekly_tickets: CountMap
    weekly_resolve_times: SampleMap

    monthly_stats: tuple[MonthlyStat, ...]
    processed_tickets: tuple[ProcessedTicket, ...]

    @property
    def skipped_rows(self) -> int:
        return self.total_processed_rows - self.total_valid_rows


def build_raw_ticket_schema(
    create_column: str = "CreateDate",
    resolve_column: str = "ResolvedDate",
) -> pa.DataFrameSchema:
    """Schema for a decoded export: both date columns present, as text."""
    return pa.DataFrameSchema(
        columns={
            create_column: Column(str, nullable=True),
            resolve_column: Column(str, nullable=True),
        },
        coerce=True,
        strict=False,
    )


ProcessedTicketSchema = pa.DataFrameSchema(
    columns={
        "create_instant": Column("datetime64[ns]", nullable=False),
        "resolve_instant": Column("datetime64[ns]", nullable=False),
        "resolution_hours": Column(float, Check.ge(0)),
        "shift": Column(str, Check.isin([str(label) for label in SHIFT_LABELS])),
        "month_key": Column(str, Check.str_matches(r"^\d{4}-\d{2}$")),
        "week_key": Column(str, Check.str_matches(r"^\d{4}-\d{2}-\d{2}$")),
    },
    coerce=True,
    strict=False,
)


MonthlyStatsSchema = pa.DataFrameSchema(
    columns={
        "month_start": Column(str, Check.str_matches(r"^\d{4}-\d{2}-01$"), unique=True),
        "label": Column(str, nullable=False),
        "total_tickets": Column(int, Check.ge(0)),
        "avg_resolution_hrs": Column(float, Check.ge(0)),
    },
    coerce=True,
    strict=False,
)
