"""
Liveness endpoint. Does not call the hosted service.
"""
from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

health_router = APIRouter(tags=["health"])


@health_router.get("/health")
def health():
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}
