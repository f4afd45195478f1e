"""Shared utilities for the data pipeline."""

from ticket_pipeline.utils.io import read_csv_files, read_text_csv, write_output
from ticket_pipeline.utils.validators import validate_dataframe
from ticket_pipeline.utils.types import DataQuality, classify_quality
