"""Health endpoint for probed processes — the server side of ``http_check``."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, FastAPI

router = APIRouter()


@router.get("/health")
def health() -> dict[str, Any]:
    """Report liveness and the local clock."""
    return {"OK": True, "Now": datetime.now(timezone.utc).isoformat()}


def create_health_app(name: str = "probe-target") -> FastAPI:
    """Create a minimal app exposing GET /health."""
    app = FastAPI(title=name, version="0.1.0")
    app.include_router(router)
    return app
