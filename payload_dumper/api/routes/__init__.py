from __future__ import annotations

from payload_dumper.api.routes.dump_quota import build_quota_router
from payload_dumper.api.routes.health import router as health_router

__all__ = ["build_quota_router", "health_router"]
