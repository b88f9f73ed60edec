"""Pydantic schemas for the dump quota control endpoint."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# Wire values are decoded as an unsigned 64-bit count and a signed 64-bit duration.
MAX_CAPACITY = 2**64 - 1
MIN_SECONDS = -(2**63)
MAX_SECONDS = 2**63 - 1


class QuotaPayload(BaseModel):
    """Quota as exchanged with operators.

    On reads ``capacity`` is the remaining number of dumps and ``seconds``
    the time left before expiry. On updates they are the new quota.
    Missing fields default to zero and are then rejected by the route.
    """

    model_config = ConfigDict(strict=True)

    capacity: int = Field(
        0,
        ge=0,
        le=MAX_CAPACITY,
        description="Number of dumps permitted (remaining, on reads).",
    )
    seconds: int = Field(
        0,
        ge=MIN_SECONDS,
        le=MAX_SECONDS,
        description="Validity period in seconds (time left on reads; negative once expired).",
    )


class ErrorResponse(BaseModel):
    """Error body returned by the control endpoint."""

    error: str = Field(..., description="Human-readable error message.")
