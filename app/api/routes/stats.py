from __future__ import annotations

from fastapi import APIRouter

from app.schemas.stats import ComputeStatsRequest, LevelRequest, ProgressionRequest
from app.services import stats_facade

router = APIRouter()


@router.get("/api/stats/keys")
async def api_stats_keys():
    """Stat / gamemode / variant keys with display labels."""
    return stats_facade.describe_keys()


@router.post("/api/stats/compute")
async def api_stats_compute(req: ComputeStatsRequest):
    """Stat values for one snapshot.

    For the "session" variant each counter is a delta against the earliest
    snapshot in `history`; ratios are recomputed from those deltas.
    """
    values = stats_facade.compute_stats(
        req.snapshot,
        req.history,
        gamemode=req.gamemode,
        variant=req.variant,
        stats=req.stats,
    )
    return {"values": values}


@router.post("/api/stats/level")
async def api_stats_level(req: LevelRequest):
    return {"stars": stats_facade.level_from_experience(req.experience)}


@router.post("/api/stats/progression")
async def api_stats_progression(req: ProgressionRequest):
    """Milestone projection.

    Insufficient data is not an HTTP error: the body is
    `{"error": true, "reason": ...}` so the UI can show a placeholder.
    """
    return stats_facade.stat_progression(
        req.tracking_history,
        req.current,
        stat=req.stat,
        gamemode=req.gamemode,
        tracking_end=req.tracking_end,
        reference_date=req.reference_date,
    )
