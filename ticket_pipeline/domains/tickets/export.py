"""Flatten an analysis result into frames and JSON-safe structures."""

from dataclasses import asdict
from pathlib import Path

import pandas as pd

from ticket_pipeline.domains.tickets.models import AnalysisResult, MonthlyStatsSchema
from ticket_pipeline.domains.tickets.views import shift_distribution, weekly_trend
from ticket_pipeline.utils.io import write_output
from ticket_pipeline.utils.validators import validate_dataframe

SCALAR_FIELDS = [
    "ytd_count",
    "last_6_months_count",
    "current_month_count",
    "last_6_calendar_months_count",
    "last_4_calendar_weeks_count",
    "last_4_weeks_count",
    "total_processed_rows",
    "total_valid_rows",
    "avg_monthly",
    "avg_weekly",
    "avg_resolution_time",
    "last_6_months_avg_resolution_time",
    "current_month_progress",
    "projected_current_month",
    "trend_vs_average",
    "trend_percentage",
]

SHIFT_WINDOWS = {
    "all": "shift_counts",
    "1mo": "last_1_month_shift_counts",
    "3mo": "last_3_months_shift_counts",
    "6mo": "last_6_months_shift_counts",
}


def _shift_frame(result: AnalysisResult) -> pd.DataFrame:
    frames = []
    for window, attr in SHIFT_WINDOWS.items():
        frame = shift_distribution(getattr(result, attr))
        frame.insert(0, "window", window)
        frames.append(frame)
    return pd.concat(frames, ignore_index=True)


def _bucket_frame(counts: dict[str, int], samples: dict[str, tuple[float, ...]], key: str) -> pd.DataFrame:
    rows = []
    for bucket in sorted(counts):
        hours = samples.get(bucket, ())
        rows.append({
            key: bucket,
            "tickets": counts[bucket],
            "total_resolution_hrs": sum(hours),
            "avg_resolution_hrs": sum(hours) / len(hours) if hours else 0.0,
        })
    return pd.DataFrame(rows, columns=[key, "tickets", "total_resolution_hrs", "avg_resolution_hrs"])


def result_to_frames(result: AnalysisResult, weeks: int = 12) -> dict[str, pd.DataFrame]:
    summary = pd.DataFrame(
        [{"metric": name, "value": getattr(result, name)} for name in SCALAR_FIELDS]
    )
    return {
        "summary": summary,
        "shifts": _shift_frame(result),
        "monthly_stats": pd.DataFrame([asdict(m) for m in result.monthly_stats]),
        "monthly": _bucket_frame(result.monthly_tickets, result.monthly_resolve_times, "month"),
        "weekly": _bucket_frame(result.weekly_tickets, result.weekly_resolve_times, "week_start"),
        "weekly_trend": weekly_trend(result, weeks=weeks),
    }


def result_to_dict(result: AnalysisResult, include_tickets: bool = False) -> dict:
    """JSON-safe representation; datetimes become ISO strings."""
    out = {name: getattr(result, name) for name in SCALAR_FIELDS}
    out["reference_time"] = result.reference_time.isoformat()
    for attr in SHIFT_WINDOWS.values():
        out[attr] = dict(getattr(result, attr))
    out["monthly_tickets"] = dict(result.monthly_tickets)
    out["monthly_resolve_times"] = {k: list(v) for k, v in result.monthly_resolve_times.items()}
    out["weekly_tickets"] = dict(result.weekly_tickets)
    out["weekly_resolve_times"] = {k: list(v) for k, v in result.weekly_resolve_times.items()}
    out["monthly_stats"] = [asdict(m) for m in result.monthly_stats]

    if include_tickets:
        out["processed_tickets"] = [
            {
                **asdict(t),
                "create_instant": t.create_instant.isoformat(),
                "resolve_instant": t.resolve_instant.isoformat(),
            }
            for t in result.processed_tickets
        ]
    return out


def export_result(
    result: AnalysisResult,
    output_dir: Path,
    fmt: str = "csv",
    weeks: int = 12,
) -> list[Path]:
    """Write every result frame to ``output_dir`` and return the paths."""
    suffix = {"csv": "csv", "json": "json", "parquet": "parquet", "excel": "xlsx"}.get(fmt)
    if suffix is None:
        raise ValueError(f"Unsupported output format: {fmt}")

    frames = result_to_frames(result, weeks=weeks)
    check = validate_dataframe(frames["monthly_stats"], MonthlyStatsSchema)
    if not check["valid"]:
        raise ValueError(f"Monthly stats failed validation: {check['errors']}")

    paths = []
    for name, frame in frames.items():
        path = Path(output_dir) / f"{name}.{suffix}"
        write_output(frame, path, fmt=fmt)
        paths.append(path)
    return paths
