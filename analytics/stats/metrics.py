from __future__ import annotations

"""Stat registry and computations.

This module defines the set of supported stats and how each one is read off
a snapshot ("overall") or derived as a delta within a history window
("session").

Dispatch is driven by `StatDefinition.kind`:
- overall:     account-wide value (experience, stars); no gamemode breakdown
- counter:     raw per-gamemode counter, absent -> 0
- concealable: raw counter that may be hidden upstream, absent -> None
- quotient:    dividend / divisor with the zero-divisor convention
- composite:   index = fkdr^2 * stars

Session quotients are re-derived from the session deltas of their components.
Subtracting two overall ratios would not give the ratio within the window.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Literal, Optional, Sequence, Tuple

from .stars import bedwars_level_from_exp
from .types import (
    ALL_GAMEMODE_KEYS,
    ALL_STAT_KEYS,
    GamemodeKey,
    PlayerDataPIT,
    StatKey,
    VariantKey,
    quotient,
)

StatKind = Literal["overall", "counter", "concealable", "quotient", "composite"]


@dataclass(frozen=True)
class StatDefinition:
    """Definition of a single stat.

    `dividend`/`divisor` are only set for quotient stats.
    """

    key: StatKey
    kind: StatKind
    full_label: str
    short_label: str
    dividend: Optional[StatKey] = None
    divisor: Optional[StatKey] = None

    @property
    def overall_only(self) -> bool:
        return self.kind == "overall"


def build_stat_registry() -> Dict[str, StatDefinition]:
    """Return the full stat registry, keyed by stat key in display order."""

    stats: List[StatDefinition] = [
        StatDefinition("experience", "overall", "experience", "EXP"),
        StatDefinition("stars", "overall", "stars", "stars"),
        StatDefinition("winstreak", "concealable", "winstreak", "WS"),
        StatDefinition("gamesPlayed", "counter", "games played", "games"),
        StatDefinition("wins", "counter", "wins", "wins"),
        StatDefinition("losses", "counter", "losses", "losses"),
        StatDefinition("bedsBroken", "counter", "beds broken", "beds"),
        StatDefinition("bedsLost", "counter", "beds lost", "beds lost"),
        StatDefinition("finalKills", "counter", "final kills", "finals"),
        StatDefinition("finalDeaths", "counter", "final deaths", "final deaths"),
        StatDefinition("kills", "counter", "kills", "kills"),
        StatDefinition("deaths", "counter", "deaths", "deaths"),
        StatDefinition("fkdr", "quotient", "final kill/death ratio", "FKDR", "finalKills", "finalDeaths"),
        StatDefinition("kdr", "quotient", "kill/death ratio", "KDR", "kills", "deaths"),
        StatDefinition("index", "composite", "index (FKDR^2 * stars)", "index"),
    ]

    return {s.key: s for s in stats}


STAT_REGISTRY: Dict[str, StatDefinition] = build_stat_registry()

# Keys of the raw counters that advance linearly over time.
LINEAR_STAT_KEYS = tuple(
    s.key for s in STAT_REGISTRY.values() if s.kind == "counter"
)
QUOTIENT_STAT_KEYS = tuple(
    s.key for s in STAT_REGISTRY.values() if s.kind == "quotient"
)


def get_stat_definition(stat: str) -> StatDefinition:
    """Look up a stat. Raises KeyError for unknown keys."""
    return STAT_REGISTRY[stat]


def list_stats(*, kinds: Optional[Iterable[StatKind]] = None) -> List[StatDefinition]:
    """Registry entries in display order, optionally filtered by kind."""
    kind_set = set(kinds) if kinds is not None else None
    return [
        STAT_REGISTRY[k]
        for k in ALL_STAT_KEYS
        if kind_set is None or STAT_REGISTRY[k].kind in kind_set
    ]


def composite_index(fkdr: float, stars: float) -> float:
    return fkdr**2 * stars


def get_stat(player_data: PlayerDataPIT, gamemode: GamemodeKey, stat: StatKey) -> Optional[float]:
    """Read one stat off a snapshot. Never raises for a known stat key."""

    definition = get_stat_definition(stat)
    stats = player_data.gamemode(gamemode)

    if definition.kind == "overall":
        experience = player_data.experience if player_data.experience is not None else 0
        if stat == "experience":
            return experience
        return bedwars_level_from_exp(experience)

    if definition.kind == "quotient":
        dividend = stats.counter(definition.dividend) or 0
        divisor = stats.counter(definition.divisor) or 0
        return quotient(dividend, divisor)

    if definition.kind == "composite":
        fkdr = get_stat(player_data, gamemode, "fkdr") or 0
        stars = get_stat(player_data, gamemode, "stars") or 0
        return composite_index(fkdr, stars)

    if definition.kind == "concealable":
        return stats.counter(stat)

    value = stats.counter(stat)
    return value if value is not None else 0


def find_baseline(history: Sequence[PlayerDataPIT], gamemode: GamemodeKey, stat: StatKey) -> Optional[float]:
    """Earliest non-null value of `stat` in `history`.

    Single pass; `history` does not need to be sorted. Ties on `queried_at`
    keep the first snapshot.
    """
    baseline: Optional[float] = None
    baseline_at = None
    for player_data in history:
        value = get_stat(player_data, gamemode, stat)
        if value is None:
            continue
        if baseline_at is None or player_data.queried_at < baseline_at:
            baseline = value
            baseline_at = player_data.queried_at
    return baseline


Baselines = Dict[Tuple[str, str], Optional[float]]

# Stats whose session value is a plain delta against a baseline.
_BASELINE_KINDS = ("overall", "counter", "concealable")


def find_baselines(history: Sequence[PlayerDataPIT]) -> Baselines:
    """Baselines for every (gamemode, stat) pair that has one, in one pass.

    Equivalent to calling `find_baseline` per pair. Use it when computing
    session values for many snapshots of the same history.
    """
    keys = [
        (gamemode, definition.key)
        for gamemode in ALL_GAMEMODE_KEYS
        for definition in list_stats(kinds=_BASELINE_KINDS)
    ]
    baselines: Baselines = {key: None for key in keys}
    baseline_at: Dict[Tuple[str, str], datetime] = {}
    for player_data in history:
        for gamemode, stat in keys:
            value = get_stat(player_data, gamemode, stat)
            if value is None:
                continue
            seen_at = baseline_at.get((gamemode, stat))
            if seen_at is None or player_data.queried_at < seen_at:
                baselines[(gamemode, stat)] = value
                baseline_at[(gamemode, stat)] = player_data.queried_at
    return baselines


def compute_stat(
    player_data: PlayerDataPIT,
    gamemode: GamemodeKey,
    stat: StatKey,
    variant: VariantKey,
    history: Sequence[PlayerDataPIT],
    *,
    baselines: Optional[Baselines] = None,
) -> Optional[float]:
    """Compute `stat` as an all-time value or as a delta within `history`.

    `baselines` (from `find_baselines(history)`) skips the per-call scan of
    `history`.
    """

    if variant == "overall":
        return get_stat(player_data, gamemode, stat)

    definition = get_stat_definition(stat)

    if definition.kind == "quotient":
        dividend = compute_stat(player_data, gamemode, definition.dividend, variant, history, baselines=baselines) or 0
        divisor = compute_stat(player_data, gamemode, definition.divisor, variant, history, baselines=baselines) or 0
        return quotient(dividend, divisor)

    if definition.kind == "composite":
        fkdr = compute_stat(player_data, gamemode, "fkdr", variant, history, baselines=baselines) or 0
        stars = compute_stat(player_data, gamemode, "stars", variant, history, baselines=baselines) or 0
        return composite_index(fkdr, stars)

    if baselines is not None:
        baseline = baselines[(gamemode, stat)]
    else:
        baseline = find_baseline(history, gamemode, stat)
    value = get_stat(player_data, gamemode, stat)
    if baseline is None or value is None:
        return None
    return value - baseline
