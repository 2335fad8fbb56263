from __future__ import annotations

from fastapi import APIRouter

from app.schemas.stats import ExtrapolateSessionsRequest
from app.services import stats_facade

router = APIRouter()


@router.post("/api/sessions/extrapolate")
async def api_sessions_extrapolate(req: ExtrapolateSessionsRequest):
    """Recorded sessions plus extrapolated sessions covering the gaps."""
    return {"sessions": stats_facade.extrapolate_sessions(req.sessions, req.history)}
