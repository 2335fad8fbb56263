from __future__ import annotations

"""Fill the gaps between recorded sessions.

The history envelope is the first and last snapshot of the queried window.
Every stretch of the window not covered by a recorded session, and in which
the player's stats changed, becomes an extrapolated session. Stretches
without any change are left out; they would be empty sessions.
"""

import logging
from typing import List, Optional, Sequence

from analytics.stats.types import PlayerDataPIT

from .types import Session, Sessions

logger = logging.getLogger(__name__)


def stats_consecutive(a: PlayerDataPIT, b: PlayerDataPIT) -> bool:
    return abs(a.overall.games_played - b.overall.games_played) <= 1


def different_stats(a: PlayerDataPIT, b: PlayerDataPIT) -> bool:
    return a.overall.games_played != b.overall.games_played or a.experience != b.experience


def _extrapolated(start: PlayerDataPIT, end: PlayerDataPIT) -> Session:
    return Session(
        start=start,
        end=end,
        extrapolated=True,
        consecutive=stats_consecutive(start, end),
    )


def add_extrapolated_sessions(
    sessions: Sequence[Session],
    history: Optional[Sequence[PlayerDataPIT]],
) -> Sessions:
    """Return `sessions` with extrapolated sessions inserted where stats changed.

    `sessions` must be chronological and non-overlapping. Without a two-point
    `history` envelope nothing can be extrapolated and `sessions` is returned
    as is.
    """

    if not history or len(history) != 2:
        # Gaps between recorded sessions could still be filled; not done for now
        logger.debug("add_extrapolated_sessions: no 2-point history envelope; skipping")
        return list(sessions)

    history_start, history_end = history

    if len(sessions) == 0:
        if not different_stats(history_start, history_end):
            return []
        return [_extrapolated(history_start, history_end)]

    out: List[Session] = []

    first_session_start = sessions[0].start
    if different_stats(history_start, first_session_start):
        out.append(_extrapolated(history_start, first_session_start))

    for previous_session, next_session in zip(sessions, sessions[1:]):
        out.append(previous_session)
        if different_stats(previous_session.end, next_session.start):
            out.append(_extrapolated(previous_session.end, next_session.start))
    out.append(sessions[-1])

    last_session_end = sessions[-1].end
    if different_stats(last_session_end, history_end):
        out.append(_extrapolated(last_session_end, history_end))

    return out
