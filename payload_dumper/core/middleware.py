"""HTTP middleware for request correlation and access logging.

Operator calls to the quota route change what the process writes to disk,
so every request is logged with its outcome. The middleware:
- Reuses the incoming correlation header or generates a UUID
- Stores request_id in contextvars so dump and quota logs carry it
- Logs one ``http.request`` record per request (method, path, status, duration)
- Echoes request_id and the duration in response headers

Usage:
    app.middleware("http")(request_id_middleware)
"""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request, Response

from payload_dumper.core.config import settings
from payload_dumper.core.logging import clear_request_id, set_request_id

logger = logging.getLogger(__name__)

DURATION_HEADER = "X-Request-Duration-ms"


async def request_id_middleware(request: Request, call_next) -> Response:
    """Correlate, time, and log a single request.

    Args:
        request: The incoming HTTP request object.
        call_next: The next middleware/route handler in the stack.

    Returns:
        Response carrying the correlation and duration headers.
    """

    header_name = settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    start = time.perf_counter()
    try:
        response: Response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        # Client errors are operator mistakes on the control route; surface them.
        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            level,
            "http.request",
            extra={
                "request_method": request.method,
                "request_path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )
    finally:
        clear_request_id()

    response.headers[header_name] = request_id
    response.headers.setdefault(DURATION_HEADER, f"{duration_ms:.2f}")
    return response
