"""Load ticket exports into plain row mappings."""

import logging
from pathlib import Path

import pandas as pd

from ticket_pipeline.config import AnalysisConfig
from ticket_pipeline.domains.tickets.models import RawRecord
from ticket_pipeline.utils.io import read_csv_files, read_text_csv

logger = logging.getLogger(__name__)


def load_ticket_frame(path: str | Path, config: AnalysisConfig | None = None) -> pd.DataFrame:
    """Read one CSV export, or every CSV in a directory, as text columns."""
    config = config or AnalysisConfig()
    path = Path(path)

    if path.is_dir():
        df = read_csv_files(path)
        if df.empty and not len(df.columns):
            raise FileNotFoundError(f"No CSV files found in {path}")
    elif path.exists():
        df = read_text_csv(path)
    else:
        raise FileNotFoundError(f"Ticket export not found: {path}")

    missing = [col for col in config.date_columns if col not in df.columns]
    if missing:
        raise ValueError(f"{path} is missing required columns: {', '.join(missing)}")

    logger.info("Loaded %d ticket rows from %s", len(df), path)
    return df


def load_ticket_records(path: str | Path, config: AnalysisConfig | None = None) -> list[RawRecord]:
    return load_ticket_frame(path, config).to_dict(orient="records")
