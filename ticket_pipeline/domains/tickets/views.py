"""Read-only slices of an analysis result for cards, charts and tables.

Nothing here recomputes domain logic; these helpers only pick, order and
format what the engine already produced.
"""

import pandas as pd

from ticket_pipeline.domains.tickets.models import AnalysisResult, CountMap
from ticket_pipeline.domains.tickets.report import round_half_up
from ticket_pipeline.domains.tickets.shifts import SHIFT_LABELS

PERIODS = ("1mo", "3mo", "6mo", "all")


def shift_counts_for_period(result: AnalysisResult, period: str = "all") -> CountMap:
    match period:
        case "1mo":
            return result.last_1_month_shift_counts
        case "3mo":
            return result.last_3_months_shift_counts
        case "6mo":
            return result.last_6_months_shift_counts
        case "all":
            return result.shift_counts
        case other:
            raise ValueError(f"Unknown period: {other}")


def shift_distribution(counts: CountMap) -> pd.DataFrame:
    """Shift rows in canonical order with their share of the total."""
    total = sum(counts.values())
    rows = []
    for label in SHIFT_LABELS:
        tickets = counts.get(str(label), 0)
        rows.append({
            "shift": str(label),
            "tickets": tickets,
            "share_pct": round_half_up(tickets / total * 100, 1) if total else 0.0,
        })
    return pd.DataFrame(rows, columns=["shift", "tickets", "share_pct"])


def _avg(samples: tuple[float, ...]) -> float:
    return sum(samples) / len(samples) if samples else 0.0


def weekly_trend(result: AnalysisResult, weeks: int = 12) -> pd.DataFrame:
    """Latest ``weeks`` week buckets with volume and mean resolution time."""
    latest = sorted(result.weekly_tickets)[-weeks:]
    return pd.DataFrame(
        [
            {
                "week_start": week,
                "tickets": result.weekly_tickets[week],
                "avg_resolution_hrs": round_half_up(_avg(result.weekly_resolve_times.get(week, ())), 1),
            }
            for week in latest
        ],
        columns=["week_start", "tickets", "avg_resolution_hrs"],
    )


def monthly_breakdown(result: AnalysisResult, months: int = 6) -> pd.DataFrame:
    """Latest ``months`` month buckets that hold data, oldest first.

    Unlike ``monthly_stats`` this follows the data rather than the calendar,
    so it may include the current month and skip empty ones.
    """
    latest = sorted(result.monthly_tickets)[-months:]
    return pd.DataFrame(
        [
            {
                "month": month,
                "tickets": result.monthly_tickets[month],
                "avg_resolution_hrs": round_half_up(_avg(result.monthly_resolve_times.get(month, ())), 1),
            }
            for month in latest
        ],
        columns=["month", "tickets", "avg_resolution_hrs"],
    )


def monthly_average_for_period(result: AnalysisResult, months: int) -> float:
    """Tickets in the latest ``months`` month buckets, spread over ``months``."""
    if months <= 0:
        raise ValueError(f"months must be positive, got {months}")
    latest = sorted(result.monthly_tickets)[-months:]
    return sum(result.monthly_tickets[m] for m in latest) / months


def summary_cards(result: AnalysisResult) -> dict[str, float | int]:
    return {
        "ytd_total": result.ytd_count,
        "monthly_average": round_half_up(result.avg_monthly, 1),
        "weekly_average": round_half_up(result.avg_weekly, 1),
        "avg_resolution_hrs": round_half_up(result.avg_resolution_time, 1),
    }
