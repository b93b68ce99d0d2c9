"""
Tournament scoring and rating engine.

Persistence-agnostic: every function either works on plain snapshots or talks
to storage through a ScoringRepository.
"""

from .game_count import game_count
from .handicap import compute_handicap, handicap_from_results
from .lifecycle import complete_tournament
from .placement import qualification_total, resolve_placements
from .ports import ScoringRepository
from .rating import (
    aggregate_leaderboard,
    assign_rating_points,
    build_leaderboard,
    normalize_points_distribution,
    points_for,
)
from .types import ALLOWED_TRANSITIONS, TournamentStatus

__all__ = [
    "ALLOWED_TRANSITIONS",
    "ScoringRepository",
    "TournamentStatus",
    "aggregate_leaderboard",
    "assign_rating_points",
    "build_leaderboard",
    "complete_tournament",
    "compute_handicap",
    "game_count",
    "handicap_from_results",
    "normalize_points_distribution",
    "points_for",
    "qualification_total",
    "resolve_placements",
]
