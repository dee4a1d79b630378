"""
Liveness and readiness probes.

/health only says the process answers. /ready also requires a reachable
database that already holds every shop table.
"""
from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, HTTPException, status

from ..db import check_db_connection, missing_tables

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check() -> Dict[str, Any]:
    return {"status": "healthy", "timestamp": datetime.utcnow().isoformat()}


@router.get("/ready")
def readiness_check() -> Dict[str, Any]:
    """
    Report whether orders can be taken.

    Raises:
        HTTPException: 503 when the database is down or tables are missing
    """
    connected = check_db_connection()
    missing = missing_tables() if connected else []
    ready = connected and not missing

    report = {
        "status": "ready" if ready else "not_ready",
        "database": "connected" if connected else "disconnected",
        "schema": "complete" if connected and not missing else "incomplete",
        "missing_tables": missing,
        "timestamp": datetime.utcnow().isoformat(),
    }
    if not ready:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=report)
    return report
