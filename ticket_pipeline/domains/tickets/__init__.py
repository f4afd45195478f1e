"""Tickets domain: shift classification, volume windows and resolution metrics."""

from collections.abc import Iterable, Mapping
from datetime import datetime
from pathlib import Path

from ticket_pipeline.config import AnalysisConfig
from ticket_pipeline.domains.tickets.aggregate import aggregate_tickets
from ticket_pipeline.domains.tickets.export import export_result, result_to_dict, result_to_frames
from ticket_pipeline.domains.tickets.ingest import load_ticket_frame, load_ticket_records
from ticket_pipeline.domains.tickets.models import (
    AnalysisResult,
    MonthlyStat,
    MonthlyStatsSchema,
    ProcessedTicket,
    ProcessedTicketSchema,
    build_raw_ticket_schema,
)
from ticket_pipeline.domains.tickets.parsing import is_valid_timestamp, parse_local_timestamp
from ticket_pipeline.domains.tickets.report import assemble_result, build_monthly_stats
from ticket_pipeline.domains.tickets.shifts import SHIFT_LABELS, ShiftLabel, classify_shift
from ticket_pipeline.domains.tickets.transform import normalize_ticket_records, valid_tickets
from ticket_pipeline.utils.types import classify_quality
from ticket_pipeline.utils.validators import validate_dataframe, validate_no_blanks


def analyze_ticket_data(
    records: Iterable[Mapping[str, object]],
    now: datetime | None = None,
    config: AnalysisConfig | None = None,
) -> AnalysisResult:
    """Run the full aggregation over ``records`` as seen from ``now``.

    Malformed rows are skipped, never raised; compare ``total_valid_rows``
    with ``total_processed_rows`` to see how many were dropped.
    """
    now = now or datetime.now()
    config = config or AnalysisConfig()
    buckets = aggregate_tickets(records, now, config)
    return assemble_result(buckets, now, config)


def validate(path: str | Path, now: datetime | None = None, config: AnalysisConfig | None = None) -> dict:
    """Validate a ticket export before running the analysis."""
    config = config or AnalysisConfig()
    now = now or datetime.now()
    try:
        raw = load_ticket_frame(path, config)
    except (FileNotFoundError, ValueError) as exc:
        return {"status": "error", "message": str(exc)}

    schema_check = validate_dataframe(raw, build_raw_ticket_schema(*config.date_columns))
    if not schema_check["valid"]:
        return {"status": "error", "message": "; ".join(schema_check["errors"])}

    frame = normalize_ticket_records(raw.to_dict(orient="records"), now, config)
    processed_check = validate_dataframe(valid_tickets(frame), ProcessedTicketSchema)
    if not processed_check["valid"]:
        return {"status": "error", "message": "; ".join(processed_check["errors"])}

    valid_rows = int(frame["is_valid"].sum())
    blanks = validate_no_blanks(raw, list(config.date_columns))
    return {
        "status": "ok",
        "row_count": len(frame),
        "valid_rows": valid_rows,
        "quality": str(classify_quality(valid_rows, len(frame))),
        "warnings": blanks["errors"],
        "skipped": frame.loc[~frame["is_valid"], "skip_reason"].value_counts().to_dict(),
    }


def run(
    path: str | Path,
    now: datetime | None = None,
    config: AnalysisConfig | None = None,
    output_dir: str | Path | None = None,
) -> AnalysisResult:
    """Load an export, analyze it and optionally write the result frames."""
    config = config or AnalysisConfig()
    records = load_ticket_records(path, config)
    result = analyze_ticket_data(records, now=now, config=config)
    if output_dir is not None:
        export_result(
            result,
            Path(output_dir),
            fmt=config.output_format,
            weeks=config.weekly_trend_weeks,
        )
    return result
