"""Timestamp parsing for ticket exports.

Ticket exports carry bare ``YYYY-MM-DDTHH:mm:ss`` wall-clock timestamps.
Generic parsers may read those as UTC and shift the hour (and sometimes the
weekday) once converted back to local time, which moves tickets across shift
boundaries near midnight. Fields are therefore pulled apart with a regex and
rebuilt as a naive local ``datetime`` with no timezone arithmetic at all.
"""

import re
from datetime import datetime

MIN_YEAR = 1900  # exclusive
MAX_YEAR = 2100  # exclusive

_LOCAL_ISO = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.\d+)?$"
)


def parse_local_timestamp(text: object) -> datetime | None:
    """Parse ``text`` as a local wall-clock instant, or return None."""
    if not isinstance(text, str):
        return None

    match = _LOCAL_ISO.match(text.strip())
    if match is None:
        return None

    year, month, day, hour, minute, second = (int(part) for part in match.groups())
    if not MIN_YEAR < year < MAX_YEAR:
        return None

    try:
        return datetime(year, month, day, hour, minute, second)
    except ValueError:
        # e.g. 2025-02-30 or 25:00:00
        return None


def is_valid_timestamp(text: object) -> bool:
    return parse_local_timestamp(text) is not None
