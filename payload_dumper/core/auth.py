"""API key authentication for operator endpoints.

The quota control endpoint changes what the process writes to disk, so it
can be guarded by a shared key. Keys are validated against a comma-separated
list from environment variables; the check is off unless
``APP_API_KEY_REQUIRED=true``.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Annotated

from fastapi import Header

from payload_dumper.core.config import settings
from payload_dumper.core.errors import AuthenticationAppError

logger = logging.getLogger(__name__)


def parse_api_keys(keys_string: str | None) -> set[str]:
    """Parse comma-separated API keys into a set.

    Examples:
        >>> sorted(parse_api_keys("key1, key2 , key3 "))
        ['key1', 'key2', 'key3']
        >>> parse_api_keys(None)
        set()
    """
    if not keys_string:
        return set()

    return {key.strip() for key in keys_string.split(",") if key.strip()}


def _hash_key(key: str) -> str:
    return hashlib.sha256(key.encode()).hexdigest()[:16]


def validate_api_key(provided_key: str | None) -> None:
    """Validate that the provided API key matches a configured key.

    Args:
        provided_key: API key to validate (None when the header is absent).

    Raises:
        AuthenticationAppError: If the key is missing or invalid, or no keys are configured.
    """
    if not settings.app.api_key_required:
        return

    valid_keys = parse_api_keys(settings.app.api_keys)

    if not valid_keys:
        logger.error(
            "auth.failed",
            extra={"reason": "api_keys_not_configured"},
        )
        raise AuthenticationAppError(
            code="api_keys_not_configured",
            message="API key authentication is enabled but no valid keys are configured",
        )

    if not provided_key:
        logger.warning("auth.failed", extra={"reason": "missing_api_key"})
        raise AuthenticationAppError(
            code="missing_api_key",
            message="Missing API key. Provide X-API-Key header.",
        )

    if provided_key not in valid_keys:
        logger.warning(
            "auth.failed",
            extra={"reason": "invalid_api_key", "api_key_hash": _hash_key(provided_key)},
        )
        raise AuthenticationAppError(
            code="invalid_api_key",
            message="Invalid or missing API key",
        )


async def verify_api_key(
    x_api_key: Annotated[str | None, Header(alias="X-API-Key")] = None,
) -> None:
    """FastAPI dependency for API key authentication.

    Usage:
        router = build_quota_router(dumper, dependencies=[Depends(verify_api_key)])

    Raises:
        AuthenticationAppError: Rendered as 403 by the exception handlers.
    """
    validate_api_key(x_api_key)
    if settings.app.api_key_required:
        logger.debug("auth.success", extra={"api_key_hash": _hash_key(x_api_key or "")})
