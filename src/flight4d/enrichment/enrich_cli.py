"""CLI that enriches flight plans into the flights_4d.json trajectory file."""

from __future__ import annotations

import argparse
import logging
from typing import Iterable, List, Sequence

from flight4d.enrichment.enrichment_service import EnrichmentInputs, EnrichmentService
from flight4d.enrichment.flight_records import FlightRecord
from flight4d.enrichment.output_records import write_enriched_flights
from flight4d.safety.separation_config import SimulationConfig
from flight4d.trajectory.domain_types import Flight
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

logger = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--flights",
        required=False,
        default="canadian_flights_250.json",
        help="JSON array of raw flight plans.",
    )
    parser.add_argument(
        "--airports",
        required=False,
        default="airport.json",
        help="JSON mapping of ICAO codes to {lat, lon}.",
    )
    parser.add_argument(
        "--output",
        required=False,
        default="flights_4d.json",
        help="Destination JSON for the enriched flights.",
    )
    parser.add_argument(
        "--config",
        required=False,
        default=None,
        help="Optional simulation config YAML (trajectory_step_sec, separation minima, ...).",
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
        service = EnrichmentService.from_inputs(EnrichmentInputs(args.flights, args.airports), config)
        flights = _enrich_with_progress(service, service.load_records())
        output_path = write_enriched_flights(args.output, flights)
    except (OSError, KeyError, TypeError, ValueError) as exc:
        raise SystemExit(f"ERROR: {exc}") from exc
    logger.info("Wrote %s (%d flights)", output_path, len(flights))


def _enrich_with_progress(service: EnrichmentService, records: List[FlightRecord]) -> List[Flight]:
    """Enrich records while displaying a progress bar."""

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        TimeElapsedColumn(),
        transient=True,
    )

    with progress:
        task_id = progress.add_task("Enriching flights", total=len(records))

        def iter_with_progress() -> Iterable[FlightRecord]:
            for record in records:
                yield record
                progress.advance(task_id)

        return service.enrich(iter_with_progress())


if __name__ == "__main__":
    main()
