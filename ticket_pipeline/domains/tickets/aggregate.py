"""Single-pass accumulation of ticket counts and resolution samples."""

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime

import pandas as pd

from ticket_pipeline.config import AnalysisConfig
from ticket_pipeline.domains.tickets.models import (
    AccumulatedBuckets,
    CountMap,
    ProcessedTicket,
    SampleMap,
)
from ticket_pipeline.domains.tickets.periods import AnalysisWindows
from ticket_pipeline.domains.tickets.transform import normalize_ticket_records, valid_tickets

logger = logging.getLogger(__name__)


def _sample_map(df: pd.DataFrame, key: str) -> SampleMap:
    """Resolution-hour samples per bucket, in input order."""
    return {
        str(bucket): tuple(float(h) for h in group["resolution_hours"])
        for bucket, group in df.groupby(key, sort=False)
    }


def _count_map(samples: SampleMap) -> CountMap:
    return {bucket: len(hours) for bucket, hours in samples.items()}


def _shift_tally(shifts: pd.Series) -> CountMap:
    return {str(shift): int(n) for shift, n in shifts.value_counts(sort=False).items()}


def _to_ticket(row) -> ProcessedTicket:
    return ProcessedTicket(
        create_instant=row.create_instant.to_pydatetime(),
        resolve_instant=row.resolve_instant.to_pydatetime(),
        resolution_hours=float(row.resolution_hours),
        shift=row.shift,
        month_key=row.month_key,
        week_key=row.week_key,
    )


def aggregate_frame(
    frame: pd.DataFrame,
    windows: AnalysisWindows,
) -> AccumulatedBuckets:
    """Fold a normalized ticket frame into bucket maps and window counts."""
    valid = valid_tickets(frame)
    created = valid["create_instant"]

    in_ytd = created >= windows.ytd_start
    in_current_month = created >= windows.current_month_start
    in_last_1_month = created >= windows.last_1_month_start
    in_last_3_months = created >= windows.last_3_months_start
    in_last_6_months = created >= windows.last_6_months_start

    monthly_resolve_times = _sample_map(valid, "month_key")
    weekly_resolve_times = _sample_map(valid, "week_key")

    skipped = frame.loc[~frame["is_valid"], "skip_reason"].value_counts().to_dict()
    if skipped:
        logger.info("Skipped rows by reason: %s", skipped)

    return AccumulatedBuckets(
        total_processed_rows=len(frame),
        total_valid_rows=len(valid),
        total_resolution_hours=float(valid["resolution_hours"].sum()),
        ytd_count=int(in_ytd.sum()),
        current_month_count=int(in_current_month.sum()),
        last_6_months_count=int(in_last_6_months.sum()),
        shift_counts=_shift_tally(valid["shift"]),
        last_1_month_shift_counts=_shift_tally(valid.loc[in_last_1_month, "shift"]),
        last_3_months_shift_counts=_shift_tally(valid.loc[in_last_3_months, "shift"]),
        last_6_months_shift_counts=_shift_tally(valid.loc[in_last_6_months, "shift"]),
        monthly_tickets=_count_map(monthly_resolve_times),
        monthly_resolve_times=monthly_resolve_times,
        weekly_tickets=_count_map(weekly_resolve_times),
        weekly_resolve_times=weekly_resolve_times,
        processed_tickets=tuple(_to_ticket(row) for row in valid.itertuples(index=False)),
        skipped={str(reason): int(n) for reason, n in skipped.items()},
    )


def aggregate_tickets(
    records: Iterable[Mapping[str, object]],
    now: datetime,
    config: AnalysisConfig | None = None,
) -> AccumulatedBuckets:
    """Normalize ``records`` against ``now`` and accumulate every bucket."""
    config = config or AnalysisConfig()
    windows = AnalysisWindows.from_reference(now, config)
    frame = normalize_ticket_records(records, now, config)
    return aggregate_frame(frame, windows)
