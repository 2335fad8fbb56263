from __future__ import annotations

"""History chart rows.

Each row is a flat dict keyed by data key, plus the sample time in epoch
milliseconds under "queriedAt":

    {"queriedAt": 1706745600000, "history-<uuid>-session-overall-fkdr": 1.5, ...}

Rows from several players' histories are merged onto one time axis. Samples
that would be drawn on top of each other are clustered onto a shared
timestamp first, so the chart does not render indistinguishable points.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

import config
from analytics.stats.metrics import compute_stat, find_baselines, get_stat_definition
from analytics.stats.types import (
    ALL_GAMEMODE_KEYS,
    ALL_STAT_KEYS,
    ALL_VARIANT_KEYS,
    GamemodeKey,
    PlayerDataPIT,
    StatKey,
    VariantKey,
)

QUERIED_AT = "queriedAt"

ChartDataEntry = Dict[str, Any]
ChartData = List[ChartDataEntry]


def make_data_key(*, uuid: str, variant: VariantKey, gamemode: GamemodeKey, stat: StatKey) -> str:
    """Key of one series. Overall-only stats have no gamemode segment."""
    if get_stat_definition(stat).overall_only:
        return f"history-{uuid}-{variant}-{stat}"
    return f"history-{uuid}-{variant}-{gamemode}-{stat}"


def generate_chart_data_from_single_history(history: Sequence[PlayerDataPIT]) -> ChartData:
    baselines = find_baselines(history)
    data: ChartData = []
    for player_data in history:
        entry: ChartDataEntry = {QUERIED_AT: player_data.queried_at_ms}
        for variant in ALL_VARIANT_KEYS:
            for gamemode in ALL_GAMEMODE_KEYS:
                for stat in ALL_STAT_KEYS:
                    key = make_data_key(uuid=player_data.uuid, variant=variant, gamemode=gamemode, stat=stat)
                    entry[key] = compute_stat(
                        player_data, gamemode, stat, variant, history, baselines=baselines
                    )
        data.append(entry)
    return data


def cluster_threshold_ms(chart_data: Sequence[Mapping[str, Any]]) -> float:
    time_span = chart_data[-1][QUERIED_AT] - chart_data[0][QUERIED_AT]
    return max(time_span * config.CLUSTER_SPAN_FRACTION, config.CLUSTER_MIN_THRESHOLD_MS)


def cluster_chart_data(chart_data: Sequence[Mapping[str, Any]], *, threshold_ms: Optional[float] = None) -> ChartData:
    """Snap close samples onto the latest timestamp of their cluster.

    `chart_data` must be sorted by "queriedAt". The output has the same
    length and order; only "queriedAt" values change.

    Scanning from the end, a sample absorbs every earlier sample within the
    threshold of it (inclusive). Evenly spaced samples exactly one threshold
    apart therefore cluster in threes, not in pairs.
    """

    if len(chart_data) == 0:
        return []

    threshold = cluster_threshold_ms(chart_data) if threshold_ms is None else threshold_ms

    clustered: ChartData = []
    i = len(chart_data) - 1
    while i >= 0:
        anchor_time = chart_data[i][QUERIED_AT]
        to_cluster = 1  # Including the anchor
        while i - to_cluster >= 0 and anchor_time - chart_data[i - to_cluster][QUERIED_AT] <= threshold:
            to_cluster += 1

        for offset in range(to_cluster):
            clustered.append({**chart_data[i - offset], QUERIED_AT: anchor_time})

        i -= to_cluster

    clustered.reverse()
    return clustered


def merge_chart_data(chart_data: Sequence[Mapping[str, Any]]) -> ChartData:
    """Collapse consecutive rows with the same timestamp; later rows win."""
    merged: ChartData = []
    for entry in chart_data:
        if merged and merged[-1][QUERIED_AT] == entry[QUERIED_AT]:
            merged[-1] = {**merged[-1], **entry}
        else:
            merged.append(dict(entry))
    return merged


def generate_chart_data(histories: Sequence[Sequence[PlayerDataPIT]]) -> ChartData:
    chart_data = [
        entry
        for history in histories
        for entry in generate_chart_data_from_single_history(history)
    ]
    chart_data.sort(key=lambda entry: entry[QUERIED_AT])

    if len(chart_data) == 0:
        return []

    return merge_chart_data(cluster_chart_data(chart_data))
