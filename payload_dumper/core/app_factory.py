"""Application factory for the FastAPI app.

Centralizes app construction (dumper, middleware, handlers, routers) so
tests can build isolated apps around their own dumper instances.
"""

from __future__ import annotations

import logging

from fastapi import Depends, FastAPI

from payload_dumper.adapters.dump.base import AbstractDumper
from payload_dumper.adapters.dump.factory import create_dumper
from payload_dumper.adapters.dump.limited import QuotaLimitedDumper
from payload_dumper.api.routes import build_quota_router, health_router
from payload_dumper.core.auth import verify_api_key
from payload_dumper.core.config import settings
from payload_dumper.core.exception_handlers import setup_exception_handlers
from payload_dumper.core.logging import configure_logging
from payload_dumper.core.middleware import request_id_middleware

logger = logging.getLogger(__name__)


def create_app(dumper: AbstractDumper | None = None) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        dumper: Dumper to serve; built from settings when omitted.

    Returns:
        Configured app. The dumper is available as ``app.state.dumper``; the
        quota control route is mounted only for quota-limited dumpers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    if dumper is None:
        dumper = create_dumper(settings.dump)

    app = FastAPI(
        title="Payload Dumper",
        description=(
            "Bounded diagnostic capture of request/response payloads. "
            "Exposes a control endpoint to grant a dump quota at runtime."
        ),
        version="0.1.0",
    )
    app.state.dumper = dumper

    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(health_router)
    if isinstance(dumper, QuotaLimitedDumper):
        app.include_router(
            build_quota_router(
                dumper,
                path=settings.dump.quota_path,
                dependencies=[Depends(verify_api_key)],
            )
        )
        logger.info("dump.quota_route_mounted", extra={"path": settings.dump.quota_path})

    return app
