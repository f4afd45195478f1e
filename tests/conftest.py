from __future__ import annotations

from datetime import datetime

import pytest


@pytest.fixture
def reference_time() -> datetime:
    # Tuesday, day 17 of a 30-day month
    return datetime(2025, 6, 17, 12, 0, 0)


@pytest.fixture
def ticket_records() -> list[dict]:
    return [
        # valid
        {"IssueId": "T1", "CreateDate": "2025-01-15T10:00:00", "ResolvedDate": "2025-01-15T14:00:00"},
        {"IssueId": "T2", "CreateDate": "2025-06-16T03:00:00", "ResolvedDate": "2025-06-16T05:30:00"},
        {"IssueId": "T3", "CreateDate": "2025-06-14T16:30:00", "ResolvedDate": "2025-06-15T00:30:00"},
        {"IssueId": "T4", "CreateDate": "2025-05-20T04:30:00", "ResolvedDate": "2025-05-20T06:30:00"},
        {"IssueId": "T5", "CreateDate": "2025-03-18T09:00:00.123", "ResolvedDate": "2025-03-18T10:00:00"},
        {"IssueId": "T6", "CreateDate": "2024-12-18T20:00:00", "ResolvedDate": "2024-12-19T08:00:00"},
        {"IssueId": "T7", "CreateDate": "2024-11-05T12:00:00", "ResolvedDate": "2024-11-05T13:00:00"},
        # invalid
        {"IssueId": "X1", "CreateDate": "", "ResolvedDate": "2025-01-02T10:00:00"},
        {"IssueId": "X2", "CreateDate": "2025-13-01T00:00:00", "ResolvedDate": "2025-01-02T10:00:00"},
        {"IssueId": "X3", "CreateDate": "2025-07-01T10:00:00", "ResolvedDate": "2025-07-01T12:00:00"},
        {"IssueId": "X4", "CreateDate": "2025-04-10T10:00:00", "ResolvedDate": "2025-04-10T09:00:00"},
        {"IssueId": "X5", "CreateDate": "2025-05-22T13:51:18.467Z", "ResolvedDate": "2025-05-22T18:13:10.848Z"},
        {"IssueId": "X6", "CreateDate": "2025-02-03T08:00:00"},
    ]


@pytest.fixture
def ticket_csv(tmp_path, ticket_records):
    lines = ["IssueId,CreateDate,ResolvedDate"]
    for rec in ticket_records:
        lines.append(f"{rec['IssueId']},{rec.get('CreateDate', '')},{rec.get('ResolvedDate', '')}")
    path = tmp_path / "tickets.csv"
    path.write_text("\n".join(lines) + "\n")
    return path
