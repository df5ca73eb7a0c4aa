"""Separation monitoring over enriched flight sets."""

from .conflict_detector import (
    ClosestApproach,
    ConflictPair,
    closest_approach,
    detect_conflicts,
    find_conflict_pairs,
    is_loss_of_separation,
)
from .safety_scanner import FirstConflict, SafetyReport, ScanStep, scan, scan_times
from .separation_config import SeparationMinima, SimulationConfig
from .simulation_context import SimulationContext

__all__ = [
    "ClosestApproach",
    "ConflictPair",
    "FirstConflict",
    "SafetyReport",
    "ScanStep",
    "SeparationMinima",
    "SimulationConfig",
    "SimulationContext",
    "closest_approach",
    "detect_conflicts",
    "find_conflict_pairs",
    "is_loss_of_separation",
    "scan",
    "scan_times",
]
