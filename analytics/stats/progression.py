from __future__ import annotations

"""Milestone projection for a single stat.

Given a two-point tracking window (start, end) and the player's current
snapshot, estimate how many days it takes for a stat to reach its next
round-number milestone at the pace observed during the window.

Stat kinds
----------
- stars:    next prestige (multiple of 100 levels), paced by exp per day
- linear:   next multiple of the current value's power of ten
- quotient: next integer above/below the current ratio, solved in closed form
- index, winstreak: not implemented

Results are returned, never raised: a `StatProgression` (or its quotient
subclass) on success, a `ProgressionError` carrying a reason otherwise. A
milestone that can never be reached at the current pace is a success with
`days_until_milestone == inf`.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import ClassVar, Optional, Sequence, Union

from . import config as s_cfg
from .metrics import get_stat, get_stat_definition
from .types import GamemodeKey, PlayerDataPIT, StatKey, quotient

logger = logging.getLogger(__name__)

ERR_NO_DATA = "No data"
ERR_NOT_ENOUGH_DATA = "Not enough data"
ERR_TOO_MANY_POINTS = "Expected at most 2 data points"
ERR_NO_CURRENT_STATS = "No current stats"
ERR_NO_PROGRESS = "No progress"
ERR_NOT_IMPLEMENTED = "Not implemented"

SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True, slots=True)
class ProgressionError:
    reason: str

    error: ClassVar[bool] = True


@dataclass(frozen=True, slots=True)
class StatProgression:
    """Projection of one stat towards its next milestone."""

    stat: StatKey
    tracking_start: datetime
    tracking_end: datetime
    current_value: float
    next_milestone_value: float
    trending_upward: bool
    days_until_milestone: float
    progress_per_day: float

    error: ClassVar[bool] = False

    @property
    def reachable(self) -> bool:
        return math.isfinite(self.days_until_milestone)

    def projected_milestone_date(self, reference: datetime) -> Optional[datetime]:
        """Date the milestone is reached when counting from `reference`."""
        if not self.reachable:
            return None
        try:
            return reference + timedelta(days=self.days_until_milestone)
        except OverflowError:
            return None


@dataclass(frozen=True, slots=True)
class QuotientProgression(StatProgression):
    """Projection for a ratio stat (fkdr, kdr).

    `session_quotient` is the ratio of the window's deltas, using the same
    zero-divisor convention as the overall ratio.
    """

    dividend_per_day: float
    divisor_per_day: float
    session_quotient: float


ProgressionResult = Union[StatProgression, ProgressionError]


@dataclass(frozen=True, slots=True)
class _TrackingWindow:
    start: PlayerDataPIT
    end: PlayerDataPIT
    current: PlayerDataPIT
    tracking_end: datetime
    days_elapsed: float


def _error(reason: str, stat: str) -> ProgressionError:
    logger.debug("stat progression unavailable stat=%s reason=%s", stat, reason)
    return ProgressionError(reason)


def next_magnitude_milestone(value: float) -> float:
    """Next multiple of the value's power of ten strictly above it.

    427 -> 500, 1000 -> 2000, 0.4 -> 1.
    """
    if value < 1:
        return math.floor(value) + 1
    magnitude = 10 ** math.floor(math.log10(value))
    return (math.floor(value / magnitude) + 1) * magnitude


def compute_stat_progression(
    tracking_history: Optional[Sequence[PlayerDataPIT]],
    current_stats: Optional[PlayerDataPIT],
    stat: StatKey,
    gamemode: GamemodeKey,
    *,
    tracking_end: Optional[datetime] = None,
) -> ProgressionResult:
    """Project `stat` towards its next milestone.

    `tracking_history` must hold exactly the first and last snapshot of the
    tracking window. The pace is measured from the first snapshot to
    `tracking_end` when given, else to the second snapshot.
    """

    if tracking_history is None or len(tracking_history) == 0:
        return _error(ERR_NO_DATA, stat)

    if len(tracking_history) == 1:
        return _error(ERR_NOT_ENOUGH_DATA, stat)

    if len(tracking_history) > 2:
        return _error(ERR_TOO_MANY_POINTS, stat)

    if current_stats is None:
        return _error(ERR_NO_CURRENT_STATS, stat)

    start, end = tracking_history
    window_end = tracking_end if tracking_end is not None else end.queried_at
    days_elapsed = (window_end - start.queried_at).total_seconds() / SECONDS_PER_DAY
    if days_elapsed <= 0:
        return _error(ERR_NOT_ENOUGH_DATA, stat)

    window = _TrackingWindow(
        start=start,
        end=end,
        current=current_stats,
        tracking_end=window_end,
        days_elapsed=days_elapsed,
    )

    if stat == "stars":
        return _stars_progression(window, gamemode)

    definition = get_stat_definition(stat)
    if stat == "experience" or definition.kind == "counter":
        return _linear_progression(window, stat, gamemode)
    if definition.kind == "quotient":
        return _quotient_progression(window, stat, gamemode)

    # index, winstreak
    return _error(ERR_NOT_IMPLEMENTED, stat)


def _stars_progression(window: _TrackingWindow, gamemode: GamemodeKey) -> ProgressionResult:
    start_exp = get_stat(window.start, gamemode, "experience")
    end_exp = get_stat(window.end, gamemode, "experience")
    current_exp = get_stat(window.current, gamemode, "experience")
    current_stars = get_stat(window.current, gamemode, "stars")

    exp_per_day = (end_exp - start_exp) / window.days_elapsed

    # NOTE: Slightly inaccurate over short windows; ignores the cheaper easy levels
    stars_per_day = exp_per_day / (s_cfg.PRESTIGE_EXP / s_cfg.LEVELS_PER_PRESTIGE)

    next_prestige = math.floor(current_stars / s_cfg.LEVELS_PER_PRESTIGE) + 1
    exp_to_next_prestige = next_prestige * s_cfg.PRESTIGE_EXP - current_exp
    if exp_per_day == 0:
        days_until_milestone = math.inf
    else:
        days_until_milestone = exp_to_next_prestige / exp_per_day

    return StatProgression(
        stat="stars",
        tracking_start=window.start.queried_at,
        tracking_end=window.tracking_end,
        current_value=current_stars,
        next_milestone_value=next_prestige * s_cfg.LEVELS_PER_PRESTIGE,
        trending_upward=True,
        days_until_milestone=days_until_milestone,
        progress_per_day=stars_per_day,
    )


def _linear_progression(window: _TrackingWindow, stat: StatKey, gamemode: GamemodeKey) -> ProgressionResult:
    start_value = get_stat(window.start, gamemode, stat) or 0
    end_value = get_stat(window.end, gamemode, stat) or 0
    current_value = get_stat(window.current, gamemode, stat) or 0

    increase_per_day = (end_value - start_value) / window.days_elapsed
    if increase_per_day == 0:
        return _error(ERR_NO_PROGRESS, stat)

    next_milestone_value = next_magnitude_milestone(current_value)
    days_until_milestone = (next_milestone_value - current_value) / increase_per_day

    return StatProgression(
        stat=stat,
        tracking_start=window.start.queried_at,
        tracking_end=window.tracking_end,
        current_value=current_value,
        next_milestone_value=next_milestone_value,
        trending_upward=True,
        days_until_milestone=days_until_milestone,
        progress_per_day=increase_per_day,
    )


def _quotient_progression(window: _TrackingWindow, stat: StatKey, gamemode: GamemodeKey) -> ProgressionResult:
    definition = get_stat_definition(stat)
    dividend_key = definition.dividend
    divisor_key = definition.divisor

    session_dividend = get_stat(window.end, gamemode, dividend_key) - get_stat(window.start, gamemode, dividend_key)
    session_divisor = get_stat(window.end, gamemode, divisor_key) - get_stat(window.start, gamemode, divisor_key)
    session_quotient = quotient(session_dividend, session_divisor)

    current_dividend = get_stat(window.current, gamemode, dividend_key)
    current_divisor = get_stat(window.current, gamemode, divisor_key)
    current_quotient = quotient(current_dividend, current_divisor)

    dividend_per_day = session_dividend / window.days_elapsed
    divisor_per_day = session_divisor / window.days_elapsed

    if current_divisor == 0 and session_divisor == 0:
        # The ratio is just the dividend for now -> project the dividend alone
        dividend_progression = _linear_progression(window, dividend_key, gamemode)
        if isinstance(dividend_progression, ProgressionError):
            return dividend_progression
        return QuotientProgression(
            stat=stat,
            tracking_start=dividend_progression.tracking_start,
            tracking_end=dividend_progression.tracking_end,
            current_value=dividend_progression.current_value,
            next_milestone_value=dividend_progression.next_milestone_value,
            trending_upward=True,
            days_until_milestone=dividend_progression.days_until_milestone,
            progress_per_day=dividend_progression.progress_per_day,
            dividend_per_day=dividend_per_day,
            divisor_per_day=divisor_per_day,
            session_quotient=session_quotient,
        )

    no_session_progress = session_dividend == 0 and session_divisor == 0

    # Value the ratio converges to if the window's pace continues forever.
    # Gaining dividend without any divisor grows the ratio without bound.
    if session_divisor == 0 and session_dividend > 0:
        limit = math.inf
    else:
        limit = session_quotient

    trending_upward = limit >= current_quotient or no_session_progress

    if trending_upward:
        next_milestone_value = math.floor(current_quotient) + 1
    else:
        next_milestone_value = math.ceil(current_quotient) - 1

    # Variables:
    # k0 = current_dividend, k = dividend_per_day
    # d0 = current_divisor,  d = divisor_per_day
    # M  = next_milestone_value, t = days until milestone
    #
    # (k0 + kt) / (d0 + dt) = M
    # k0 + kt = Md0 + Mdt
    # (k - Md) t = Md0 - k0
    # t = (Md0 - k0) / (k - Md)
    #
    # k - Md == 0 exactly when M is the limit; past the limit t is negative.
    stalled = (
        limit == current_quotient
        or no_session_progress
        or (trending_upward and next_milestone_value >= limit)
        or (not trending_upward and next_milestone_value <= limit)
    )

    days_until_milestone = math.inf
    if not stalled:
        days_until_milestone = (next_milestone_value * current_divisor - current_dividend) / (
            dividend_per_day - next_milestone_value * divisor_per_day
        )
        # Only possible with a zero current divisor but a growing session divisor
        if days_until_milestone <= 0:
            days_until_milestone = math.inf

    if math.isinf(days_until_milestone):
        progress_per_day = 0.0
    else:
        # TODO: the ratio's pace changes over time; this is the average until the milestone
        progress_per_day = (next_milestone_value - current_quotient) / days_until_milestone

    return QuotientProgression(
        stat=stat,
        tracking_start=window.start.queried_at,
        tracking_end=window.tracking_end,
        current_value=current_quotient,
        next_milestone_value=next_milestone_value,
        trending_upward=trending_upward,
        days_until_milestone=days_until_milestone,
        progress_per_day=progress_per_day,
        dividend_per_day=dividend_per_day,
        divisor_per_day=divisor_per_day,
        session_quotient=session_quotient,
    )
