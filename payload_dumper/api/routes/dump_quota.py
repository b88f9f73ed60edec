"""Runtime control endpoint for a quota-limited dumper.

GET reports the remaining quota. PUT replaces it and expects a payload like::

    {"capacity": 5, "seconds": 86400}

Changing the quota while the process is serving traffic is safe: the route
and the dumper share the dumper's lock.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from fastapi import APIRouter, Request
from fastapi.params import Depends
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from payload_dumper.adapters.dump.limited import QuotaLimitedDumper
from payload_dumper.core.errors import MethodNotAllowedAppError, ValidationAppError
from payload_dumper.schemas.quota import ErrorResponse, QuotaPayload

logger = logging.getLogger(__name__)

DEFAULT_QUOTA_PATH = "/debug/dump-quota"

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    405: {"model": ErrorResponse},
}


def _describe_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)


def parse_quota_update(body: bytes) -> QuotaPayload:
    """Decode and validate a quota update body.

    Args:
        body: Raw request body.

    Returns:
        QuotaPayload with a non-zero capacity and duration.

    Raises:
        ValidationAppError: If the body is malformed or a value is missing/zero.
    """
    try:
        payload = QuotaPayload.model_validate_json(body)
    except ValidationError as exc:
        raise ValidationAppError(
            code="quota_malformed_body",
            message=f"Request body must be well-formed JSON: {_describe_validation_error(exc)}",
        ) from exc

    if payload.capacity == 0:
        raise ValidationAppError(code="quota_missing_capacity", message="Must specify a capacity.")
    if payload.seconds == 0:
        raise ValidationAppError(
            code="quota_missing_duration",
            message="Must specify a duration in seconds",
        )
    return payload


def build_quota_router(
    dumper: QuotaLimitedDumper,
    *,
    path: str = DEFAULT_QUOTA_PATH,
    dependencies: Sequence[Depends] | None = None,
) -> APIRouter:
    """Build a router exposing ``dumper``'s quota at ``path``.

    Args:
        dumper: The quota-limited dumper this router reads and resets.
        path: Route path for the control endpoint.
        dependencies: Extra route dependencies (e.g., API key verification).

    Returns:
        APIRouter with GET/PUT handlers and a 405 fallback for any other method.
    """
    router = APIRouter(tags=["Dump"], dependencies=list(dependencies or []))

    @router.get(path, response_model=QuotaPayload, responses=_ERROR_RESPONSES)
    async def read_quota() -> QuotaPayload:
        """Report the remaining dump quota and seconds until it expires."""
        # Threadpool: the lock may be held by a dump that is mid-write.
        snapshot = await run_in_threadpool(dumper.snapshot)
        return QuotaPayload(capacity=snapshot.capacity, seconds=snapshot.seconds)

    @router.put(path, response_model=QuotaPayload, responses=_ERROR_RESPONSES)
    async def update_quota(request: Request) -> QuotaPayload:
        """Replace the dump quota and echo the applied values."""
        body = await request.body()
        payload = parse_quota_update(body)
        await run_in_threadpool(dumper.reset, payload.capacity, payload.seconds)

        logger.info(
            "dump.quota_updated",
            extra={
                "dumper": dumper.name,
                "capacity": payload.capacity,
                "seconds": payload.seconds,
            },
        )
        return payload

    async def unsupported_method(request: Request) -> None:
        raise MethodNotAllowedAppError(
            code="method_not_allowed",
            message="Only GET and PUT are supported.",
            details={"method": request.method},
        )

    # Plain route without a method list: catches every method GET and PUT did not.
    router.add_route(path, unsupported_method, include_in_schema=False)

    return router
