"""
System health check endpoint.
Returns status of backend + storage.
"""

from fastapi import APIRouter, Depends
from app.config import settings
from app.storage import Storage, get_storage
from app.utils.clock import utcnow

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(storage: Storage = Depends(get_storage)):
    result = {
        "status": "ok",
        "timestamp": utcnow().isoformat(),
        "backend": "ok",
        "storage": settings.STORAGE_BACKEND,
        "database": "ok" if storage.ping() else "unreachable",
    }
    if result["database"] != "ok":
        result["status"] = "degraded"
    return result
