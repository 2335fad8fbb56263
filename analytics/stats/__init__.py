"""Statistical analytics: stat derivation, levels, and milestone projection.

This package is designed to be:
- Deterministic (no wall-clock reads; dates are explicit arguments)
- Total over its documented inputs (missing data degrades to 0 or None)
"""

from __future__ import annotations

from .metrics import compute_stat, find_baseline, get_stat
from .progression import ProgressionError, QuotientProgression, StatProgression, compute_stat_progression
from .stars import bedwars_level_from_exp
from .types import PlayerDataPIT, StatsPIT

__all__ = [
    "PlayerDataPIT",
    "StatsPIT",
    "ProgressionError",
    "StatProgression",
    "QuotientProgression",
    "bedwars_level_from_exp",
    "get_stat",
    "find_baseline",
    "compute_stat",
    "compute_stat_progression",
]
