"""Command line runner: analyze or validate a ticket export."""

import argparse
import logging
import sys
from datetime import datetime

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ticket_pipeline.config import (
    OUTPUT_FORMATS,
    apply_overrides,
    get_env_config,
    load_analysis_config,
    load_config_file,
)
from ticket_pipeline.domains import tickets
from ticket_pipeline.domains.tickets.report import round_half_up
from ticket_pipeline.domains.tickets.views import (
    PERIODS,
    shift_counts_for_period,
    shift_distribution,
    summary_cards,
    weekly_trend,
)

console = Console()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _parse_now(value: str | None) -> datetime | None:
    if value is None:
        return None
    now = tickets.parse_local_timestamp(value)
    if now is None:
        raise ValueError(f"--now must look like YYYY-MM-DDTHH:MM:SS, got {value!r}")
    return now


def _load_config(args: argparse.Namespace):
    if args.config:
        config = load_config_file(args.config, profile=args.profile)
    else:
        config = apply_overrides(load_analysis_config(args.profile), get_env_config())
    overrides = {}
    if getattr(args, "format", None):
        overrides["output_format"] = args.format
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    return apply_overrides(config, overrides)


def render_result(result: tickets.AnalysisResult, period: str, weeks: int) -> None:
    cards = summary_cards(result)
    summary = Table(title="Ticket Summary")
    summary.add_column("Metric")
    summary.add_column("Value", justify="right")
    summary.add_row("YTD total", f"{cards['ytd_total']:,}")
    summary.add_row("Monthly average", f"{cards['monthly_average']:.1f}")
    summary.add_row("Weekly average", f"{cards['weekly_average']:.1f}")
    summary.add_row("Avg resolution", f"{cards['avg_resolution_hrs']:.1f}h")
    summary.add_row("Current month", f"{result.current_month_count} ({result.current_month_progress:.0%} elapsed)")
    summary.add_row("Projected month", f"{round_half_up(result.projected_current_month, 1):.1f}")
    color = "green" if result.trend_percentage <= 0 else "red"
    summary.add_row("Trend vs average", f"[{color}]{round_half_up(result.trend_percentage, 1):+.1f}%[/{color}]")
    console.print(summary)

    shifts = Table(title=f"Shift Distribution ({period})")
    shifts.add_column("Shift")
    shifts.add_column("Tickets", justify="right")
    shifts.add_column("Share", justify="right")
    for row in shift_distribution(shift_counts_for_period(result, period)).itertuples(index=False):
        shifts.add_row(row.shift, str(row.tickets), f"{row.share_pct:.1f}%")
    console.print(shifts)

    monthly = Table(title="Last Full Calendar Months")
    monthly.add_column("Month")
    monthly.add_column("Tickets", justify="right")
    monthly.add_column("Avg resolution (h)", justify="right")
    for stat in result.monthly_stats:
        monthly.add_row(stat.label, str(stat.total_tickets), f"{stat.avg_resolution_hrs:.2f}")
    console.print(monthly)

    trend = weekly_trend(result, weeks=weeks)
    if not trend.empty:
        weekly = Table(title=f"Weekly Trend (last {len(trend)} weeks)")
        weekly.add_column("Week of")
        weekly.add_column("Tickets", justify="right")
        weekly.add_column("Avg resolution (h)", justify="right")
        for row in trend.itertuples(index=False):
            weekly.add_row(row.week_start, str(row.tickets), f"{row.avg_resolution_hrs:.1f}")
        console.print(weekly)

    console.print(
        f"Processed {result.total_valid_rows} valid rows out of "
        f"{result.total_processed_rows} total rows"
    )


def cmd_analyze(args: argparse.Namespace) -> int:
    config = _load_config(args)
    _configure_logging(config.log_level)
    result = tickets.run(args.path, now=_parse_now(args.now), config=config, output_dir=args.output_dir)
    render_result(result, args.period, config.weekly_trend_weeks)
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    config = _load_config(args)
    _configure_logging(config.log_level)
    outcome = tickets.validate(args.path, now=_parse_now(args.now), config=config)

    match outcome:
        case {"status": "ok", "row_count": total, "valid_rows": valid, **rest}:
            table = Table(title="Validation Results")
            table.add_column("Check")
            table.add_column("Result")
            table.add_row("Rows", str(total))
            table.add_row("Valid rows", str(valid))
            table.add_row("Quality", rest.get("quality", "unknown"))
            for reason, count in rest.get("skipped", {}).items():
                table.add_row(f"Skipped: {reason}", str(count))
            for warning in rest.get("warnings", []):
                table.add_row("Warning", f"[yellow]{warning}[/yellow]")
            console.print(table)
            return 0
        case {"status": "error", "message": msg}:
            console.print(f"[red]Validation failed: {escape(msg)}[/red]")
            return 1
        case _:
            console.print("[red]Unknown validation result[/red]")
            return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Ticket shift and volume analytics")
    parser.add_argument("--profile", default="default", help="Config profile (default, calendar, verbose)")
    parser.add_argument("--config", help="YAML or TOML file with config overrides")
    parser.add_argument("--now", help="Reference time, YYYY-MM-DDTHH:MM:SS (defaults to the clock)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log skipped rows")
    sub = parser.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="Analyze a ticket export")
    analyze.add_argument("path", help="CSV file or directory of CSV files")
    analyze.add_argument("--output-dir", help="Write result frames to this directory")
    analyze.add_argument("--format", choices=OUTPUT_FORMATS)
    analyze.add_argument("--period", choices=PERIODS, default="all", help="Shift window to display")
    analyze.set_defaults(func=cmd_analyze)

    check = sub.add_parser("validate", help="Validate a ticket export without analyzing it")
    check.add_argument("path", help="CSV file or directory of CSV files")
    check.set_defaults(func=cmd_validate)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except (FileNotFoundError, ValueError) as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
