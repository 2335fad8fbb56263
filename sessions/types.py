from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import List

from analytics.stats.types import PlayerDataPIT


@dataclass(frozen=True, slots=True)
class Session:
    """Interval of play bounded by two snapshots.

    `extrapolated` sessions were synthesized to cover a gap between recorded
    sessions. `consecutive` means at most one game separates the endpoints,
    so no game result was missed.
    """

    start: PlayerDataPIT
    end: PlayerDataPIT
    extrapolated: bool = False
    consecutive: bool = False

    @property
    def duration(self) -> timedelta:
        return self.end.queried_at - self.start.queried_at


Sessions = List[Session]
