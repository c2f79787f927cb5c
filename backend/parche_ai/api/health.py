"""
Health check routes.
Readiness/liveness probes for the load balancer.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from sqlalchemy import text
from datetime import datetime, timezone
from typing import Optional
import time
import logging

from parche_ai.core.config import settings
from parche_ai.db.database import get_db
from parche_ai.core.rate_limiting import limiter, HEALTH_LIMIT

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])

_STARTUP_TIME = time.time()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("")
@limiter.limit(HEALTH_LIMIT)
async def health_check(request: Request, db: Optional[Session] = Depends(get_db)):
    """
    Database connectivity, plan count, uptime and whether the remote
    completion endpoint is configured. Safe when db is None.
    """
    health = {
        "status": "healthy",
        "database": "unavailable",
        "plans": 0,
        "remote_completion": "enabled" if settings.remote_completion_url else "disabled",
        "uptime_seconds": int(time.time() - _STARTUP_TIME),
        "timestamp": _now(),
    }

    if db is None:
        health["status"] = "degraded"
        return health

    try:
        result = db.execute(text("SELECT COUNT(*) FROM plans")).scalar()
        health["database"] = "available"
        health["plans"] = result or 0
    except Exception as e:
        logger.error(f"Database health check failed: {str(e)}")
        health["status"] = "degraded"

    return health


@router.get("/ready")
@limiter.limit(HEALTH_LIMIT)
async def readiness_check(request: Request, db: Optional[Session] = Depends(get_db)):
    """Ready only when the database answers."""
    if db is None:
        return {"ready": False, "error": "database unavailable", "timestamp": _now()}
    try:
        db.execute(text("SELECT 1"))
        return {"ready": True, "timestamp": _now()}
    except Exception as e:
        logger.error(f"Readiness check failed: {str(e)}")
        return {"ready": False, "error": str(e), "timestamp": _now()}


@router.get("/live")
async def liveness_check():
    return {"alive": True, "uptime_seconds": int(time.time() - _STARTUP_TIME), "timestamp": _now()}
