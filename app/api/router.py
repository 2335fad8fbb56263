from fastapi import APIRouter

from app.api.routes import core, history, sessions, stats

api_router = APIRouter()
api_router.include_router(core.router)
api_router.include_router(stats.router)
api_router.include_router(sessions.router)
api_router.include_router(history.router)
