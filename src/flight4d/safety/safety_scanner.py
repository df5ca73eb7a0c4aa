"""Full-horizon safety scan over a simulation context.

The scan walks ``[sim_start, sim_end]`` at a fixed step that is independent of
the trajectories' own sampling step. At each instant it samples every active
flight, records the first instant with a non-empty conflict set and keeps
tracking the global closest approach until the end of the horizon, even after
a conflict has been found.

Steps are independent, so a caller wanting to abort a long scan passes a
``should_continue`` callable that is checked between steps; the partial report
is returned flagged as cancelled.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Iterable, List, Optional, Tuple

import pandas as pd

from .conflict_detector import ClosestApproach, ConflictPair, closest_approach, find_conflict_pairs
from .separation_config import SeparationMinima

if TYPE_CHECKING:  # pragma: no cover
    from .simulation_context import SimulationContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FirstConflict:
    """Earliest scanned instant with at least one loss of separation."""

    t: float
    ids: Tuple[str, ...]
    pairs: Tuple[ConflictPair, ...] = ()


@dataclass(frozen=True)
class ScanStep:
    t: float
    active_count: int
    conflict_ids: Tuple[str, ...]


@dataclass
class SafetyReport:
    first_conflict: Optional[FirstConflict] = None
    closest_approach: Optional[ClosestApproach] = None
    steps_scanned: int = 0
    steps_evaluated: int = 0
    cancelled: bool = False
    timeline: List[ScanStep] = field(default_factory=list)

    @property
    def has_conflict(self) -> bool:
        return self.first_conflict is not None

    def timeline_frame(self) -> pd.DataFrame:
        """Per-step rows: time, active flight count, conflict count and ids."""
        rows = [
            {
                "t": step.t,
                "active_count": step.active_count,
                "conflict_count": len(step.conflict_ids),
                "conflict_ids": " ".join(step.conflict_ids),
            }
            for step in self.timeline
        ]
        return pd.DataFrame(rows, columns=["t", "active_count", "conflict_count", "conflict_ids"])

    def summary(self) -> dict:
        first = self.first_conflict
        closest = self.closest_approach
        return {
            "firstConflict": None if first is None else {"t": first.t, "ids": list(first.ids)},
            "closestApproach": None
            if closest is None
            else {
                "idA": closest.id_a,
                "idB": closest.id_b,
                "horizontalNm": closest.horizontal_nm,
                "verticalFt": closest.vertical_ft,
                "t": closest.t,
            },
        }


def scan_times(sim_start: float, sim_end: float, step_sec: float) -> List[float]:
    """Instants ``sim_start + k * step_sec`` that fall within ``[sim_start, sim_end]``."""
    if step_sec <= 0:
        raise ValueError("step_sec must be positive.")
    if sim_end < sim_start:
        return []
    count = int(math.floor((sim_end - sim_start) / step_sec))
    return [sim_start + k * step_sec for k in range(count + 1)]


def scan(
    context: "SimulationContext",
    step_sec: float = 60.0,
    minima: SeparationMinima | None = None,
    *,
    times: Optional[Iterable[float]] = None,
    should_continue: Optional[Callable[[], bool]] = None,
    record_timeline: bool = False,
) -> SafetyReport:
    """Scan the whole simulated horizon for losses of separation."""
    minima = minima or context.minima
    if times is None:
        times = scan_times(context.sim_start, context.sim_end, step_sec)

    report = SafetyReport()
    for t in times:
        if should_continue is not None and not should_continue():
            report.cancelled = True
            logger.info("Safety scan cancelled after %d steps", report.steps_scanned)
            break
        report.steps_scanned += 1
        positions = context.active_flights_at(t)
        if len(positions) < 2:
            if record_timeline:
                report.timeline.append(ScanStep(t=t, active_count=len(positions), conflict_ids=()))
            continue
        report.steps_evaluated += 1

        pairs = find_conflict_pairs(positions, minima, t)
        conflict_ids = tuple(sorted({pid for pair in pairs for pid in (pair.id_a, pair.id_b)}))
        if conflict_ids and report.first_conflict is None:
            report.first_conflict = FirstConflict(t=t, ids=conflict_ids, pairs=tuple(pairs))
            logger.debug("First conflict at t=%s: %s", t, ", ".join(conflict_ids))

        candidate = closest_approach(positions, t)
        if candidate is not None and candidate.is_closer_than(report.closest_approach):
            report.closest_approach = candidate

        if record_timeline:
            report.timeline.append(
                ScanStep(t=t, active_count=len(positions), conflict_ids=conflict_ids)
            )

    logger.info(
        "Scanned %d steps (%d with >=2 active flights); first conflict: %s",
        report.steps_scanned,
        report.steps_evaluated,
        "none" if report.first_conflict is None else report.first_conflict.t,
    )
    return report


__all__ = ["FirstConflict", "SafetyReport", "ScanStep", "scan", "scan_times"]
