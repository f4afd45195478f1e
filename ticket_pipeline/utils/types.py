"""Shared type definitions for the pipeline."""

from enum import StrEnum


class DataQuality(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    UNKNOWN = "unknown"


def classify_quality(valid_rows: int, total_rows: int) -> DataQuality:
    """Grade an export by the share of rows that survived validation."""
    if total_rows == 0:
        return DataQuality.UNKNOWN
    share = valid_rows / total_rows
    match share:
        case s if s > 0.95:
            return DataQuality.HIGH
        case s if s > 0.80:
            return DataQuality.MEDIUM
        case _:
            return DataQuality.LOW
