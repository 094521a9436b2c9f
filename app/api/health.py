from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter

from app.config import settings

router = APIRouter(tags=["health"])

_STARTED_AT = time.time()


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health")
async def health() -> Dict[str, Any]:
    return {
        "status": "healthy",
        "timestamp": _now_iso(),
        "uptime": round(time.time() - _STARTED_AT, 3),
    }


@router.get("/api/health")
@router.get("/api/health/")
async def api_health() -> Dict[str, Any]:
    return {
        "status": "ok",
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "time_utc": _now_iso(),
        "uptime_s": round(time.time() - _STARTED_AT, 3),
    }


@router.get("/api/health/ready")
async def ready() -> Dict[str, Any]:
    # Stateless: nothing to check besides the process being up
    return {"status": "ready"}
