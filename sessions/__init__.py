"""Play-session reconstruction.

A session is the span between two snapshots of the same player. Recorded
sessions come from the session tracker; gaps the tracker did not see are
filled with extrapolated sessions.

Public API
----------
- Session
- add_extrapolated_sessions

Implementation details live in sessions.extrapolate.
"""

from .extrapolate import add_extrapolated_sessions, different_stats, stats_consecutive
from .types import Session, Sessions

__all__ = [
    "Session",
    "Sessions",
    "add_extrapolated_sessions",
    "different_stats",
    "stats_consecutive",
]
