from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
from app.api.router import api_router
from app.services.errors import StatsRequestError

logging.basicConfig(
    level=config.get_log_level(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Flashlight analytics")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get_cors_origins(),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StatsRequestError)
async def _stats_request_error_handler(request: Request, exc: StatsRequestError):
    logger.info("rejected %s %s: %s", request.method, request.url.path, exc.code)
    detail = {"code": exc.code, "message": exc.message}
    if exc.details is not None:
        detail["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content={"detail": detail})


app.include_router(api_router)
