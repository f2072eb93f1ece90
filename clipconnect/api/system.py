"""Service info and health endpoints."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from clipconnect.api.deps import get_store
from clipconnect.config import settings
from clipconnect.store import RecordStore

VERSION = "0.1.0"

router = APIRouter(tags=["system"])


@router.get("/")
def root():
    """Service banner."""
    return {
        "name": settings.server_name,
        "version": VERSION,
        "mode": settings.session_mode,
        "status": "running",
    }


@router.get("/health")
def health(store: RecordStore = Depends(get_store)):
    """Liveness plus a storage round-trip."""
    if not store.ping():
        return JSONResponse(status_code=503, content={"status": "degraded", "storage": "unreachable"})
    return {"status": "ok", "storage": "ok"}
