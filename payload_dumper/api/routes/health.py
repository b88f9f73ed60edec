from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(request: Request) -> dict:
    """Liveness check.

    Returns:
        dict: ``status`` set to "ok" and the class name of the active dumper.
    """

    dumper = getattr(request.app.state, "dumper", None)
    return {"status": "ok", "dumper": type(dumper).__name__ if dumper is not None else None}
