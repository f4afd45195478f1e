"""Assemble accumulated buckets into the final analysis result."""

import logging
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

import numpy as np

from ticket_pipeline.config import AnalysisConfig
from ticket_pipeline.domains.tickets.models import (
    AccumulatedBuckets,
    AnalysisResult,
    CountMap,
    MonthlyStat,
    SampleMap,
)
from ticket_pipeline.domains.tickets.periods import month_key, month_progress, months_before
from ticket_pipeline.domains.tickets.shifts import complete_shift_counts

logger = logging.getLogger(__name__)

WEEKS_IN_SUMMARY = 4


def _mean(values) -> float:
    values = list(values)
    return float(np.mean(values)) if values else 0.0


def round_half_up(value: float, digits: int = 2) -> float:
    """Round to ``digits`` places with exact ties going away from zero."""
    return float(Decimal(value).quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP))


def _latest_total(counts: CountMap, n: int) -> int:
    """Sum of the ``n`` latest buckets that actually hold data."""
    return sum(counts[key] for key in sorted(counts)[-n:])


def build_monthly_stats(
    monthly_tickets: CountMap,
    monthly_resolve_times: SampleMap,
    now: datetime,
    months_back: int = 6,
) -> list[MonthlyStat]:
    """Stats for the last ``months_back`` full calendar months, oldest first.

    The current, partial month is never included; months with no tickets
    are still emitted with zero counts so charts get a continuous axis.
    """
    anchor = months_before(datetime(now.year, now.month, 1), 1)
    stats = []
    for back in range(months_back - 1, -1, -1):
        start = months_before(anchor, back)
        key = month_key(start)
        samples = monthly_resolve_times.get(key, ())
        stats.append(
            MonthlyStat(
                month_start=f"{key}-01",
                label=start.strftime("%b %Y"),
                total_tickets=monthly_tickets.get(key, 0),
                avg_resolution_hrs=round_half_up(_mean(samples), 2),
            )
        )
    return stats


def assemble_result(
    buckets: AccumulatedBuckets,
    now: datetime,
    config: AnalysisConfig | None = None,
) -> AnalysisResult:
    config = config or AnalysisConfig()

    monthly_stats = build_monthly_stats(
        buckets.monthly_tickets,
        buckets.monthly_resolve_times,
        now,
        months_back=config.summary_months,
    )

    avg_monthly = _mean(buckets.monthly_tickets.values())
    avg_weekly = _mean(buckets.weekly_tickets.values())
    avg_resolution_time = (
        buckets.total_resolution_hours / buckets.total_valid_rows
        if buckets.total_valid_rows
        else 0.0
    )

    progress = month_progress(now)
    projected = buckets.current_month_count / progress if progress > 0 else 0.0
    trend_vs_average = projected - avg_monthly
    trend_percentage = trend_vs_average / avg_monthly * 100 if avg_monthly > 0 else 0.0

    last_4_weeks = _latest_total(buckets.weekly_tickets, WEEKS_IN_SUMMARY)

    logger.info(
        "Analysis at %s: %d/%d valid rows, YTD %d, projected month %.1f (%+.1f%%)",
        now.isoformat(timespec="seconds"),
        buckets.total_valid_rows,
        buckets.total_processed_rows,
        buckets.ytd_count,
        projected,
        trend_percentage,
    )

    return AnalysisResult(
        reference_time=now,
        ytd_count=buckets.ytd_count,
        last_6_months_count=buckets.last_6_months_count,
        current_month_count=buckets.current_month_count,
        last_6_calendar_months_count=_latest_total(buckets.monthly_tickets, config.summary_months),
        last_4_calendar_weeks_count=last_4_weeks,
        last_4_weeks_count=last_4_weeks,
        total_processed_rows=buckets.total_processed_rows,
        total_valid_rows=buckets.total_valid_rows,
        avg_monthly=avg_monthly,
        avg_weekly=avg_weekly,
        avg_resolution_time=avg_resolution_time,
        last_6_months_avg_resolution_time=_mean(m.avg_resolution_hrs for m in monthly_stats),
        current_month_progress=progress,
        projected_current_month=projected,
        trend_vs_average=trend_vs_average,
        trend_percentage=trend_percentage,
        shift_counts=complete_shift_counts(buckets.shift_counts),
        last_1_month_shift_counts=complete_shift_counts(buckets.last_1_month_shift_counts),
        last_3_months_shift_counts=complete_shift_counts(buckets.last_3_months_shift_counts),
        last_6_months_shift_counts=complete_shift_counts(buckets.last_6_months_shift_counts),
        monthly_tickets=dict(buckets.monthly_tickets),
        monthly_resolve_times=dict(buckets.monthly_resolve_times),
        weekly_tickets=dict(buckets.weekly_tickets),
        weekly_resolve_times=dict(buckets.weekly_resolve_times),
        monthly_stats=tuple(monthly_stats),
        processed_tickets=buckets.processed_tickets,
    )
