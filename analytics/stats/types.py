from __future__ import annotations

"""Typed containers used by the stats analytics layer.

A history query returns a list of point-in-time snapshots for one player:

    {
        "id": str,
        "dataFormatVersion": 1,
        "uuid": str,
        "queriedAt": ISO timestamp,
        "experience": int | None,
        "solo" | "doubles" | "threes" | "fours" | "overall": {
            "winstreak": int | None,
            "gamesPlayed": int | None,
            ...
        }
    }

This module defines:
- The closed key enumerations (stats, gamemodes, variants)
- Normalized frozen dataclasses used internally (`StatsPIT`, `PlayerDataPIT`)
- Small coercion helpers shared by the computations

Counters are normalized to plain ints when the snapshot is built. Only
`winstreak` stays nullable so that "hidden by the player" and "zero" remain
distinguishable.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Literal, Optional, Sequence, Tuple


# ----------------------------
# Keys
# ----------------------------


OverallStatKey = Literal["experience", "stars"]
GamemodeStatKey = Literal[
    "winstreak",
    "gamesPlayed",
    "wins",
    "losses",
    "bedsBroken",
    "bedsLost",
    "finalKills",
    "finalDeaths",
    "kills",
    "deaths",
    "fkdr",
    "kdr",
    "index",
]
StatKey = Literal[
    "experience",
    "stars",
    "winstreak",
    "gamesPlayed",
    "wins",
    "losses",
    "bedsBroken",
    "bedsLost",
    "finalKills",
    "finalDeaths",
    "kills",
    "deaths",
    "fkdr",
    "kdr",
    "index",
]
GamemodeKey = Literal["solo", "doubles", "threes", "fours", "overall"]
VariantKey = Literal["session", "overall"]

OVERALL_STAT_KEYS: Tuple[OverallStatKey, ...] = ("experience", "stars")
GAMEMODE_STAT_KEYS: Tuple[GamemodeStatKey, ...] = (
    "winstreak",
    "gamesPlayed",
    "wins",
    "losses",
    "bedsBroken",
    "bedsLost",
    "finalKills",
    "finalDeaths",
    "kills",
    "deaths",
    "fkdr",
    "kdr",
    "index",
)
ALL_STAT_KEYS: Tuple[StatKey, ...] = OVERALL_STAT_KEYS + GAMEMODE_STAT_KEYS
ALL_GAMEMODE_KEYS: Tuple[GamemodeKey, ...] = ("solo", "doubles", "threes", "fours", "overall")
ALL_VARIANT_KEYS: Tuple[VariantKey, ...] = ("session", "overall")

# Raw per-gamemode counters and the StatsPIT attribute holding each one.
COUNTER_FIELDS: dict[str, str] = {
    "winstreak": "winstreak",
    "gamesPlayed": "games_played",
    "wins": "wins",
    "losses": "losses",
    "bedsBroken": "beds_broken",
    "bedsLost": "beds_lost",
    "finalKills": "final_kills",
    "finalDeaths": "final_deaths",
    "kills": "kills",
    "deaths": "deaths",
}


# ----------------------------
# Normalized snapshot records
# ----------------------------


@dataclass(frozen=True, slots=True)
class StatsPIT:
    """Cumulative counters for one gamemode at one point in time."""

    winstreak: Optional[int] = None
    games_played: int = 0
    wins: int = 0
    losses: int = 0
    beds_broken: int = 0
    beds_lost: int = 0
    final_kills: int = 0
    final_deaths: int = 0
    kills: int = 0
    deaths: int = 0

    def counter(self, stat: str) -> Optional[int]:
        """Return the raw counter for a camelCase stat key."""
        return getattr(self, COUNTER_FIELDS[stat])


@dataclass(frozen=True, slots=True)
class PlayerDataPIT:
    """One player's stats as observed at `queried_at`.

    Notes:
        - `experience` is coalesced to 0 when the source omits it.
        - `queried_at` should be timezone aware; comparisons between naive and
          aware datetimes raise in Python.
    """

    id: str
    uuid: str
    queried_at: datetime
    experience: float = 0
    solo: StatsPIT = field(default_factory=StatsPIT)
    doubles: StatsPIT = field(default_factory=StatsPIT)
    threes: StatsPIT = field(default_factory=StatsPIT)
    fours: StatsPIT = field(default_factory=StatsPIT)
    overall: StatsPIT = field(default_factory=StatsPIT)
    data_format_version: int = 1

    def gamemode(self, key: GamemodeKey) -> StatsPIT:
        return getattr(self, key)

    @property
    def queried_at_ms(self) -> int:
        return to_epoch_ms(self.queried_at)


History = List[PlayerDataPIT]


# ----------------------------
# Helpers
# ----------------------------


def coerce_int(value: Any, default: int = 0) -> int:
    try:
        if value is None:
            return default
        return int(value)
    except (TypeError, ValueError):
        return default


def coerce_optional_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def quotient(dividend: float, divisor: float) -> float:
    """Ratio where a zero divisor yields the dividend itself.

    A player with 0 deaths has an unbounded ratio; reporting the kill count
    keeps the value finite and still ordered sensibly.
    """
    if divisor == 0:
        return dividend
    return dividend / divisor


def to_epoch_ms(value: datetime) -> int:
    return int(round(value.timestamp() * 1000))


def sort_history(history: Sequence[PlayerDataPIT]) -> History:
    """Return a chronologically sorted copy (stable for equal timestamps)."""
    return sorted(history, key=lambda pd: pd.queried_at)
