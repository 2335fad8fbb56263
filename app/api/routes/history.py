from __future__ import annotations

from fastapi import APIRouter

from app.schemas.stats import ChartDataRequest, IntervalsRequest
from app.services import stats_facade

router = APIRouter()


@router.post("/api/history/chart")
async def api_history_chart(req: ChartDataRequest):
    return {"data": stats_facade.chart_data(req.histories)}


@router.post("/api/intervals")
async def api_intervals(req: IntervalsRequest):
    return stats_facade.time_intervals(req.type, req.date)
