from __future__ import annotations

"""Service-wide settings.

Tuning constants live at module level. Anything deployment-specific is read
from the environment on demand so tests can monkeypatch ``os.environ``.

Environment
-----------
- ``FLASHLIGHT_CORS_ORIGINS``: comma separated origins (default ``*``)
- ``FLASHLIGHT_MAX_HISTORY_POINTS``: max snapshots accepted per request
- ``FLASHLIGHT_LOG_LEVEL``: root log level for the app entry point
"""

import os
from typing import List

# Only this history payload layout is understood by the stats layer.
SUPPORTED_DATA_FORMAT_VERSION: int = 1

# ---------------------------------------------------------------------------
# Chart clustering
# ---------------------------------------------------------------------------

# Samples closer than max(span * FRACTION, MIN_THRESHOLD) share one timestamp.
CLUSTER_SPAN_FRACTION: float = 1.0 / 100.0
CLUSTER_MIN_THRESHOLD_MS: int = 60 * 1000

# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

DEFAULT_MAX_HISTORY_POINTS: int = 1000
DEFAULT_LOG_LEVEL: str = "INFO"


def get_cors_origins() -> List[str]:
    raw = (os.environ.get("FLASHLIGHT_CORS_ORIGINS") or "*").strip()
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]


def get_max_history_points() -> int:
    """Upper bound on snapshots accepted in one request.

    Non-numeric or non-positive values fall back to the default.
    """
    raw = os.environ.get("FLASHLIGHT_MAX_HISTORY_POINTS")
    if raw is None:
        return DEFAULT_MAX_HISTORY_POINTS
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return DEFAULT_MAX_HISTORY_POINTS
    if value <= 0:
        return DEFAULT_MAX_HISTORY_POINTS
    return value


_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_log_level() -> str:
    level = (os.environ.get("FLASHLIGHT_LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper()
    if level not in _LOG_LEVELS:
        return DEFAULT_LOG_LEVEL
    return level
