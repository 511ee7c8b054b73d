from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.api.deps import get_post_store

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness check.

    Returns:
        dict: A dictionary with a single "status" key set to "ok".
    """

    return {"status": "ok"}


@router.get("/health/ready")
async def readiness_check() -> JSONResponse:
    """Readiness check: reports 503 while the post store is unreachable.

    Stores without a connectivity probe (the in-memory store) count as ready.
    """

    store = get_post_store()
    probe = getattr(store, "health_check", None)
    ready = await probe() if probe is not None else True

    return JSONResponse(
        status_code=200 if ready else 503,
        content={"status": "ok" if ready else "unavailable", "post_store": type(store).__name__},
    )
