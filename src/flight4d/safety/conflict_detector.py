"""Pairwise loss-of-separation checks for aircraft positions at one instant."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import combinations
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from flight4d.trajectory.domain_types import SampledPosition
from flight4d.trajectory.geodesy import distance_nm

from .separation_config import SeparationMinima


@dataclass(frozen=True)
class ConflictPair:
    """Two flights violating separation at time ``t``."""

    id_a: str
    id_b: str
    horizontal_nm: float
    vertical_ft: float
    t: Optional[float] = None


@dataclass(frozen=True)
class ClosestApproach:
    """Minimum-separation pair; horizontal distance first, vertical breaks ties."""

    id_a: str
    id_b: str
    horizontal_nm: float
    vertical_ft: float
    t: Optional[float] = None

    def sort_key(self) -> Tuple[float, float]:
        return (self.horizontal_nm, self.vertical_ft)

    def is_closer_than(self, other: Optional["ClosestApproach"]) -> bool:
        return other is None or self.sort_key() < other.sort_key()


def horizontal_separation_nm(a: SampledPosition, b: SampledPosition) -> float:
    """Great-circle distance between two aircraft in nautical miles."""
    return distance_nm(a.position, b.position)


def vertical_separation_ft(a: SampledPosition, b: SampledPosition) -> float:
    return float(abs(a.alt_ft - b.alt_ft))


def pair_separation(a: SampledPosition, b: SampledPosition) -> Tuple[float, float]:
    return horizontal_separation_nm(a, b), vertical_separation_ft(a, b)


def is_loss_of_separation(
    horizontal_nm: float, vertical_ft: float, minima: SeparationMinima = SeparationMinima()
) -> bool:
    """True if aircraft are too close horizontally AND vertically.

    Both comparisons are strict: a pair exactly at a minimum is separated.
    """
    return horizontal_nm < minima.horizontal_nm and vertical_ft < minima.vertical_ft


def _distinct_pairs(
    positions: Sequence[SampledPosition],
) -> Iterable[Tuple[SampledPosition, SampledPosition]]:
    for a, b in combinations(positions, 2):
        if a.id != b.id:
            yield a, b


def find_conflict_pairs(
    positions: Sequence[SampledPosition],
    minima: SeparationMinima = SeparationMinima(),
    t: Optional[float] = None,
) -> List[ConflictPair]:
    """Return every unordered pair in loss of separation. O(n^2)."""
    pairs: List[ConflictPair] = []
    for a, b in _distinct_pairs(positions):
        horizontal, vertical = pair_separation(a, b)
        if is_loss_of_separation(horizontal, vertical, minima):
            pairs.append(
                ConflictPair(id_a=a.id, id_b=b.id, horizontal_nm=horizontal, vertical_ft=vertical, t=t)
            )
    return pairs


def detect_conflicts(
    positions: Sequence[SampledPosition], minima: SeparationMinima = SeparationMinima()
) -> Set[str]:
    """Return the ids of all flights involved in at least one violating pair."""
    ids: Set[str] = set()
    for pair in find_conflict_pairs(positions, minima):
        ids.add(pair.id_a)
        ids.add(pair.id_b)
    return ids


def closest_approach(
    positions: Sequence[SampledPosition], t: Optional[float] = None
) -> Optional[ClosestApproach]:
    """Return the pair with the smallest separation, or ``None`` with fewer than two aircraft."""
    best: Optional[ClosestApproach] = None
    for a, b in _distinct_pairs(positions):
        horizontal, vertical = pair_separation(a, b)
        candidate = ClosestApproach(
            id_a=a.id, id_b=b.id, horizontal_nm=horizontal, vertical_ft=vertical, t=t
        )
        if candidate.is_closer_than(best):
            best = candidate
    return best


__all__ = [
    "ClosestApproach",
    "ConflictPair",
    "closest_approach",
    "detect_conflicts",
    "find_conflict_pairs",
    "horizontal_separation_nm",
    "is_loss_of_separation",
    "pair_separation",
    "vertical_separation_ft",
]
