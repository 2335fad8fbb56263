from __future__ import annotations

"""Glue between the wire models and the analytics engine.

Routes stay thin: they validate the request shape (pydantic) and call one
function here. This module converts payloads into domain values, enforces
request limits, runs the computation, and serializes the result.
"""

import logging
import math
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import config
from analytics.stats.labels import (
    get_full_stat_label,
    get_gamemode_label,
    get_short_stat_label,
    get_variant_label,
)
from analytics.stats.metrics import compute_stat, list_stats
from analytics.stats.progression import (
    ProgressionResult,
    QuotientProgression,
    compute_stat_progression,
)
from analytics.stats.stars import bedwars_level_from_exp
from analytics.stats.types import (
    ALL_GAMEMODE_KEYS,
    ALL_STAT_KEYS,
    ALL_VARIANT_KEYS,
    GamemodeKey,
    History,
    StatKey,
    VariantKey,
    sort_history,
)
from app.schemas.playerdata import PlayerDataPITModel, SessionModel, session_payload
from charts.history import generate_chart_data
from intervals import IntervalType, TimeInterval, time_intervals_from_definition
from sessions.extrapolate import add_extrapolated_sessions

from .errors import EMPTY_HISTORY, HISTORY_TOO_LARGE, UNSUPPORTED_DATA_FORMAT, StatsRequestError

logger = logging.getLogger(__name__)


def _finite_or_none(value: float) -> Optional[float]:
    if value is None or not math.isfinite(value):
        return None
    return value


def _check_size(count: int, *, field: str) -> None:
    limit = config.get_max_history_points()
    if count > limit:
        raise StatsRequestError(
            HISTORY_TOO_LARGE,
            f"{field} has {count} snapshots; at most {limit} are accepted",
            status_code=413,
            details={"field": field, "count": count, "limit": limit},
        )


def history_from_models(models: Sequence[PlayerDataPITModel], *, field: str = "history") -> History:
    """Convert a history payload, dropping unsupported data formats.

    The result is sorted by time.
    """
    _check_size(len(models), field=field)

    history: History = []
    for model in models:
        if model.data_format_version != config.SUPPORTED_DATA_FORMAT_VERSION:
            logger.warning(
                "dropping snapshot with unsupported data format: id=%s version=%s",
                model.id,
                model.data_format_version,
            )
            continue
        history.append(model.to_domain())
    return sort_history(history)


def _snapshot_from_model(model: PlayerDataPITModel, *, field: str):
    if model.data_format_version != config.SUPPORTED_DATA_FORMAT_VERSION:
        raise StatsRequestError(
            UNSUPPORTED_DATA_FORMAT,
            f"{field} uses data format {model.data_format_version}; "
            f"only {config.SUPPORTED_DATA_FORMAT_VERSION} is supported",
            status_code=422,
        )
    return model.to_domain()


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------


def describe_keys() -> Dict[str, Any]:
    return {
        "stats": [
            {
                "key": d.key,
                "kind": d.kind,
                "overallOnly": d.overall_only,
                "label": get_full_stat_label(d.key, capitalize=True),
                "shortLabel": get_short_stat_label(d.key, capitalize=True),
            }
            for d in list_stats()
        ],
        "gamemodes": [{"key": g, "label": get_gamemode_label(g, capitalize=True)} for g in ALL_GAMEMODE_KEYS],
        "variants": [{"key": v, "label": get_variant_label(v, capitalize=True)} for v in ALL_VARIANT_KEYS],
    }


def compute_stats(
    snapshot: PlayerDataPITModel,
    history: Sequence[PlayerDataPITModel],
    *,
    gamemode: GamemodeKey,
    variant: VariantKey,
    stats: Optional[Sequence[StatKey]] = None,
) -> Dict[str, Optional[float]]:
    player_data = _snapshot_from_model(snapshot, field="snapshot")
    window = history_from_models(history)
    if variant == "session" and not window:
        raise StatsRequestError(EMPTY_HISTORY, "session values need a non-empty history window")

    keys = list(stats) if stats is not None else list(ALL_STAT_KEYS)
    return {stat: compute_stat(player_data, gamemode, stat, variant, window) for stat in keys}


def level_from_experience(experience: float) -> float:
    return bedwars_level_from_exp(experience)


def progression_payload(result: ProgressionResult, *, reference_date: Optional[datetime] = None) -> Dict[str, Any]:
    """Serialize a progression result.

    Unreachable milestones have `daysUntilMilestone: null` and
    `reachable: false`; strict JSON has no Infinity.
    """
    if result.error:
        return {"error": True, "reason": result.reason}

    reference = reference_date if reference_date is not None else result.tracking_end
    projected = result.projected_milestone_date(reference)
    payload: Dict[str, Any] = {
        "error": False,
        "stat": result.stat,
        "trackingStart": result.tracking_start.isoformat(),
        "trackingEnd": result.tracking_end.isoformat(),
        "currentValue": result.current_value,
        "nextMilestoneValue": result.next_milestone_value,
        "trendingUpward": result.trending_upward,
        "reachable": result.reachable,
        "daysUntilMilestone": _finite_or_none(result.days_until_milestone),
        "progressPerDay": result.progress_per_day,
        "projectedMilestoneDate": projected.isoformat() if projected is not None else None,
    }
    if isinstance(result, QuotientProgression):
        payload["dividendPerDay"] = result.dividend_per_day
        payload["divisorPerDay"] = result.divisor_per_day
        payload["sessionQuotient"] = result.session_quotient
    return payload


def stat_progression(
    tracking_history: Optional[Sequence[PlayerDataPITModel]],
    current: Optional[PlayerDataPITModel],
    *,
    stat: StatKey,
    gamemode: GamemodeKey,
    tracking_end: Optional[datetime] = None,
    reference_date: Optional[datetime] = None,
) -> Dict[str, Any]:
    # Keep the raw length: the projector reports 1 or 3+ points itself
    history = None
    if tracking_history is not None:
        _check_size(len(tracking_history), field="trackingHistory")
        history = [m.to_domain() for m in tracking_history]
    current_stats = _snapshot_from_model(current, field="current") if current is not None else None

    result = compute_stat_progression(history, current_stats, stat, gamemode, tracking_end=tracking_end)
    return progression_payload(result, reference_date=reference_date)


# ---------------------------------------------------------------------------
# Sessions / charts / intervals
# ---------------------------------------------------------------------------


def extrapolate_sessions(
    sessions: Sequence[SessionModel],
    history: Optional[Sequence[PlayerDataPITModel]],
) -> List[Dict[str, Any]]:
    _check_size(len(sessions), field="sessions")
    recorded = sorted((s.to_domain() for s in sessions), key=lambda s: s.start.queried_at)
    envelope = None
    if history is not None:
        _check_size(len(history), field="history")
        envelope = sort_history([m.to_domain() for m in history])
    return [session_payload(s) for s in add_extrapolated_sessions(recorded, envelope)]


def chart_data(histories: Sequence[Sequence[PlayerDataPITModel]]) -> List[Dict[str, Any]]:
    _check_size(sum(len(h) for h in histories), field="histories")
    return generate_chart_data([history_from_models(h, field="histories") for h in histories])


def _interval_payload(interval: TimeInterval) -> Dict[str, str]:
    return {"start": interval.start.isoformat(), "end": interval.end.isoformat()}


def time_intervals(kind: IntervalType, date: datetime) -> Dict[str, Dict[str, str]]:
    intervals = time_intervals_from_definition(kind, date)
    return {
        "day": _interval_payload(intervals.day),
        "week": _interval_payload(intervals.week),
        "month": _interval_payload(intervals.month),
    }
