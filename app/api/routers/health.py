# app/api/routers/health.py
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter(tags=["health"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health")
def health():
    """Liveness - proces zyje."""
    return {"status": "healthy", "timestamp": _now()}


@router.get("/ready")
def ready(request: Request):
    """Readiness - baza i redis odpowiadaja."""
    database_ok = request.app.state.db.ping()
    store_ok = request.app.state.session_store.ping()

    body = {
        "status": "ready" if database_ok and store_ok else "not ready",
        "timestamp": _now(),
        "database": "connected" if database_ok else "disconnected",
        "sessionStore": "connected" if store_ok else "disconnected",
    }
    return JSONResponse(status_code=200 if database_ok and store_ok else 503, content=body)
