"""End-to-end checks of analyze_ticket_data against a fixed reference time."""

from datetime import datetime

import pytest

from ticket_pipeline.config import AnalysisConfig
from ticket_pipeline.domains.tickets import analyze_ticket_data
from ticket_pipeline.domains.tickets.aggregate import aggregate_tickets
from ticket_pipeline.domains.tickets.shifts import SHIFT_LABELS

SHIFT_KEYS = [str(s) for s in SHIFT_LABELS]


@pytest.fixture
def result(ticket_records, reference_time):
    return analyze_ticket_data(ticket_records, now=reference_time)


def test_row_counts(result):
    assert result.total_processed_rows == 13
    assert result.total_valid_rows == 7
    assert result.skipped_rows == 6


def test_skip_reasons_are_tallied(ticket_records, reference_time):
    buckets = aggregate_tickets(ticket_records, reference_time)
    assert buckets.skipped == {
        "missing_field": 2,
        "unparseable": 2,
        "future_create": 1,
        "negative_duration": 1,
    }


def test_single_wednesday_ticket(reference_time):
    result = analyze_ticket_data(
        [{"CreateDate": "2025-01-15T10:00:00", "ResolvedDate": "2025-01-15T14:00:00"}],
        now=reference_time,
    )
    (ticket,) = result.processed_tickets
    assert ticket.shift == "Wednesday Days"
    assert ticket.resolution_hours == 4
    assert ticket.month_key == "2025-01"
    assert ticket.week_key == "2025-01-13"
    assert result.avg_resolution_time == 4


def test_future_ticket_is_excluded(reference_time):
    result = analyze_ticket_data(
        [{"CreateDate": "2025-06-17T12:00:01", "ResolvedDate": "2025-06-17T13:00:00"}],
        now=reference_time,
    )
    assert result.total_processed_rows == 1
    assert result.total_valid_rows == 0
    assert sum(result.shift_counts.values()) == 0


def test_ticket_created_exactly_now_is_valid(reference_time):
    result = analyze_ticket_data(
        [{"CreateDate": "2025-06-17T12:00:00", "ResolvedDate": "2025-06-17T12:00:00"}],
        now=reference_time,
    )
    assert result.total_valid_rows == 1
    assert result.avg_resolution_time == 0


def test_shift_counts(result):
    assert result.shift_counts == {
        "Front Half Days": 3,
        "Front Half Nights": 1,
        "Back Half Days": 0,
        "Back Half Nights": 1,
        "Wednesday Days": 1,
        "Wednesday Nights": 1,
    }
    assert sum(result.shift_counts.values()) == result.total_valid_rows


def test_shift_windows(result):
    assert result.last_1_month_shift_counts["Front Half Days"] == 1
    assert result.last_1_month_shift_counts["Front Half Nights"] == 1
    assert result.last_1_month_shift_counts["Back Half Nights"] == 1
    assert sum(result.last_1_month_shift_counts.values()) == 3

    # the March 18 ticket sits just outside the 90-day window
    assert sum(result.last_3_months_shift_counts.values()) == 3

    assert result.last_6_months_shift_counts["Front Half Days"] == 2
    assert result.last_6_months_shift_counts["Wednesday Nights"] == 1
    assert sum(result.last_6_months_shift_counts.values()) == 6


def test_calendar_three_month_window_includes_march_ticket(ticket_records, reference_time):
    config = AnalysisConfig(three_month_window="calendar_months")
    result = analyze_ticket_data(ticket_records, now=reference_time, config=config)
    assert sum(result.last_3_months_shift_counts.values()) == 4
    assert result.last_3_months_shift_counts["Front Half Days"] == 2


def test_every_shift_map_is_key_complete(result):
    for counts in (
        result.shift_counts,
        result.last_1_month_shift_counts,
        result.last_3_months_shift_counts,
        result.last_6_months_shift_counts,
    ):
        assert list(counts) == SHIFT_KEYS
        assert all(v >= 0 for v in counts.values())


def test_window_counts(result):
    assert result.ytd_count == 5
    assert result.current_month_count == 2
    assert result.last_6_months_count == 6
    assert result.last_6_calendar_months_count == 7
    assert result.last_4_calendar_weeks_count == 4
    assert result.last_4_weeks_count == 4


def test_bucket_maps(result):
    assert result.monthly_tickets == {
        "2025-01": 1,
        "2025-06": 2,
        "2025-05": 1,
        "2025-03": 1,
        "2024-12": 1,
        "2024-11": 1,
    }
    assert result.monthly_resolve_times["2025-06"] == (2.5, 8.0)
    assert result.weekly_tickets == {
        "2025-01-13": 1,
        "2025-06-16": 1,
        "2025-06-09": 1,
        "2025-05-19": 1,
        "2025-03-17": 1,
        "2024-12-16": 1,
        "2024-11-04": 1,
    }
    assert result.weekly_resolve_times["2024-12-16"] == (12.0,)


def test_averages_and_projection(result):
    assert result.avg_resolution_time == pytest.approx(30.5 / 7)
    assert result.avg_monthly == pytest.approx(7 / 6)
    assert result.avg_weekly == pytest.approx(1.0)

    assert result.current_month_progress == pytest.approx(17 / 30)
    assert result.projected_current_month == pytest.approx(60 / 17)
    assert result.trend_vs_average == pytest.approx(60 / 17 - 7 / 6)
    assert result.trend_percentage == pytest.approx((60 / 17 - 7 / 6) / (7 / 6) * 100)


def test_monthly_stats_cover_last_six_full_months(result):
    stats = result.monthly_stats
    assert [m.month_start for m in stats] == [
        "2024-12-01",
        "2025-01-01",
        "2025-02-01",
        "2025-03-01",
        "2025-04-01",
        "2025-05-01",
    ]
    assert [m.label for m in stats] == ["Dec 2024", "Jan 2025", "Feb 2025", "Mar 2025", "Apr 2025", "May 2025"]
    assert [m.total_tickets for m in stats] == [1, 1, 0, 1, 0, 1]
    assert [m.avg_resolution_hrs for m in stats] == [12.0, 4.0, 0.0, 1.0, 0.0, 2.0]
    assert result.last_6_months_avg_resolution_time == pytest.approx(19 / 6)


def test_processed_tickets_keep_input_order(result):
    assert [t.month_key for t in result.processed_tickets] == [
        "2025-01", "2025-06", "2025-06", "2025-05", "2025-03", "2024-12", "2024-11",
    ]
    for ticket in result.processed_tickets:
        assert ticket.resolve_instant >= ticket.create_instant
        assert ticket.create_instant <= result.reference_time


def test_empty_input(reference_time):
    result = analyze_ticket_data([], now=reference_time)
    assert result.total_processed_rows == 0
    assert result.total_valid_rows == 0
    assert result.avg_resolution_time == 0
    assert result.avg_monthly == 0
    assert result.avg_weekly == 0
    assert result.trend_percentage == 0
    assert result.projected_current_month == 0
    assert result.shift_counts == dict.fromkeys(SHIFT_KEYS, 0)
    assert result.last_3_months_shift_counts == dict.fromkeys(SHIFT_KEYS, 0)
    assert result.monthly_tickets == {}
    assert result.weekly_resolve_times == {}
    assert len(result.monthly_stats) == 6
    assert all(m.total_tickets == 0 for m in result.monthly_stats)
    assert result.last_6_months_avg_resolution_time == 0


def test_all_rows_invalid(reference_time):
    result = analyze_ticket_data(
        [{"CreateDate": "garbage", "ResolvedDate": "2025-01-01T00:00:00"}, {"Other": "x"}],
        now=reference_time,
    )
    assert result.total_processed_rows == 2
    assert result.total_valid_rows == 0
    assert result.shift_counts == dict.fromkeys(SHIFT_KEYS, 0)


def test_analysis_is_idempotent(ticket_records, reference_time):
    first = analyze_ticket_data(ticket_records, now=reference_time)
    second = analyze_ticket_data(ticket_records, now=reference_time)
    assert first == second


def test_monthly_stats_roll_over_year_start(ticket_records):
    result = analyze_ticket_data(ticket_records, now=datetime(2025, 2, 3, 9, 0))
    assert [m.month_start for m in result.monthly_stats] == [
        "2024-08-01", "2024-09-01", "2024-10-01", "2024-11-01", "2024-12-01", "2025-01-01",
    ]
    # later tickets are now in the future and get dropped
    assert result.total_valid_rows == 3


def test_monthly_stat_average_rounds_ties_up(reference_time):
    # 2h07m30s is exactly 2.125 hours
    result = analyze_ticket_data(
        [{"CreateDate": "2025-05-06T10:00:00", "ResolvedDate": "2025-05-06T12:07:30"}],
        now=reference_time,
    )
    may = result.monthly_stats[-1]
    assert may.label == "May 2025"
    assert may.avg_resolution_hrs == 2.13
    assert result.last_6_months_avg_resolution_time == pytest.approx(2.13 / 6)
