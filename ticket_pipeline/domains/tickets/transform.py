"""Normalize raw ticket rows into a processed-ticket frame."""

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime

import numpy as np
import pandas as pd

from ticket_pipeline.config import AnalysisConfig
from ticket_pipeline.domains.tickets.models import SKIP_REASONS
from ticket_pipeline.domains.tickets.parsing import parse_local_timestamp
from ticket_pipeline.domains.tickets.periods import month_key, week_key
from ticket_pipeline.domains.tickets.shifts import classify_shift

logger = logging.getLogger(__name__)

PROCESSED_COLUMNS = [
    "create_instant",
    "resolve_instant",
    "resolution_hours",
    "shift",
    "month_key",
    "week_key",
]


def _cell(record: Mapping[str, object], column: str) -> object:
    value = record.get(column)
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return ""
    return value


def _build_raw_frame(records: Iterable[Mapping[str, object]], config: AnalysisConfig) -> pd.DataFrame:
    rows = list(records)
    return pd.DataFrame(
        {
            "create_raw": pd.Series([_cell(r, config.create_column) for r in rows], dtype=object),
            "resolve_raw": pd.Series([_cell(r, config.resolve_column) for r in rows], dtype=object),
        }
    )


def normalize_ticket_records(
    records: Iterable[Mapping[str, object]],
    now: datetime,
    config: AnalysisConfig | None = None,
) -> pd.DataFrame:
    """Parse, validate and enrich every row, keeping input order.

    Invalid rows stay in the frame with ``is_valid`` False and a
    ``skip_reason``; derived columns are only filled for valid rows.
    """
    config = config or AnalysisConfig()
    out = _build_raw_frame(records, config)

    out["create_instant"] = pd.to_datetime(out["create_raw"].map(parse_local_timestamp))
    out["resolve_instant"] = pd.to_datetime(out["resolve_raw"].map(parse_local_timestamp))

    missing = out["create_raw"].eq("") | out["resolve_raw"].eq("")
    unparseable = ~missing & (out["create_instant"].isna() | out["resolve_instant"].isna())
    parsed = ~missing & ~unparseable
    future = parsed & (out["create_instant"] > pd.Timestamp(now))
    negative = parsed & ~future & (out["resolve_instant"] < out["create_instant"])

    out["skip_reason"] = np.select(
        [missing, unparseable, future, negative], SKIP_REASONS, default=""
    )
    out["is_valid"] = out["skip_reason"] == ""

    valid = out["is_valid"]
    out["resolution_hours"] = np.nan
    out["shift"] = None
    out["month_key"] = None
    out["week_key"] = None

    if valid.any():
        out.loc[valid, "resolution_hours"] = (
            out.loc[valid, "resolve_instant"] - out.loc[valid, "create_instant"]
        ).dt.total_seconds() / 3600

        created = out.loc[valid, "create_instant"]
        out.loc[valid, "shift"] = [str(classify_shift(ts)) for ts in created]
        out.loc[valid, "month_key"] = [month_key(ts) for ts in created]
        out.loc[valid, "week_key"] = [week_key(ts) for ts in created]

    if logger.isEnabledFor(logging.DEBUG):
        for pos, row in out[~valid].iterrows():
            logger.debug(
                "Skipping row %d (%s): create=%r resolved=%r",
                pos, row["skip_reason"], row["create_raw"], row["resolve_raw"],
            )

    logger.info(
        "Normalized %d ticket rows: %d valid, %d skipped",
        len(out), int(valid.sum()), int((~valid).sum()),
    )
    return out


def valid_tickets(frame: pd.DataFrame) -> pd.DataFrame:
    """Only the valid rows, restricted to the processed-ticket columns."""
    return frame.loc[frame["is_valid"], PROCESSED_COLUMNS]
