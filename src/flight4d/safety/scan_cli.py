"""CLI that scans an enriched flight set for losses of separation."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Iterable, Sequence

from flight4d.enrichment.output_records import load_flights
from flight4d.safety.safety_scanner import SafetyReport, scan_times
from flight4d.safety.separation_config import SimulationConfig
from flight4d.safety.simulation_context import SimulationContext
from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)

logger = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--flights-4d",
        required=False,
        default="flights_4d.json",
        help="Enriched flights JSON produced by flight4d-enrich.",
    )
    parser.add_argument(
        "--config",
        required=False,
        default=None,
        help="Optional simulation config YAML (scan_step_sec, horizontal_nm, vertical_ft).",
    )
    parser.add_argument(
        "--step-sec",
        type=float,
        default=None,
        help="Scan step in seconds; overrides scan_step_sec from the config.",
    )
    parser.add_argument(
        "--timeline-csv",
        required=False,
        default=None,
        help="Optional CSV destination for the per-step conflict timeline.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report summary as JSON instead of a table.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))
    try:
        config = SimulationConfig.from_yaml(args.config) if args.config else SimulationConfig()
        context = SimulationContext(
            load_flights(args.flights_4d), config.minima, config.heading_lookahead_sec
        )
    except (OSError, KeyError, TypeError, ValueError) as exc:
        raise SystemExit(f"ERROR: {exc}") from exc
    step_sec = args.step_sec if args.step_sec is not None else config.scan_step_sec
    if step_sec <= 0:
        raise SystemExit("ERROR: --step-sec must be positive")

    report = _scan_with_progress(context, step_sec, record_timeline=bool(args.timeline_csv))
    if args.timeline_csv:
        _write_timeline_csv(args.timeline_csv, report)
        logger.info("Wrote conflict timeline with %d steps to %s", len(report.timeline), args.timeline_csv)

    console = Console()
    if args.json:
        console.print_json(json.dumps(report.summary()))
    else:
        _print_report(console, report)


def _scan_with_progress(
    context: SimulationContext, step_sec: float, *, record_timeline: bool
) -> SafetyReport:
    """Run the safety scan while displaying a progress bar over scan steps."""

    times = scan_times(context.sim_start, context.sim_end, step_sec)
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        TimeElapsedColumn(),
        TimeRemainingColumn(),
        console=Console(stderr=True),
        transient=True,
    )

    with progress:
        task_id = progress.add_task("Scanning separation", total=len(times))

        def iter_with_progress() -> Iterable[float]:
            for t in times:
                yield t
                progress.advance(task_id)

        return context.scan(step_sec, times=iter_with_progress(), record_timeline=record_timeline)


def _write_timeline_csv(path: str | Path, report: SafetyReport) -> None:
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    report.timeline_frame().to_csv(output_path, index=False)


def _print_report(console: Console, report: SafetyReport) -> None:
    first = report.first_conflict
    if first is None:
        console.print("First conflict: [green]none[/green]")
    else:
        console.print(f"First conflict: [red]t={first.t:.0f}[/red] ids={', '.join(first.ids)}")
    closest = report.closest_approach
    if closest is None:
        console.print("Closest approach: no data (fewer than 2 aircraft ever active together)")
    else:
        console.print(
            f"Closest approach: {closest.id_a} / {closest.id_b} at t={closest.t:.0f} "
            f"({closest.horizontal_nm:.2f} NM, {closest.vertical_ft:.0f} ft)"
        )


if __name__ == "__main__":
    main()
