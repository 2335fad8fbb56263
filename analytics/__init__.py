"""Top-level package for derived player analytics.

This package is *read-only* with respect to its inputs: snapshots fetched
from the history API are immutable values, and every module computes derived
views (per-stat values, session deltas, milestone projections) from them.
"""

from __future__ import annotations

from . import stats

__all__ = ["stats"]
