"""Application-level exception types.

Dump adapters never raise these: storage failures are absorbed and
reported as discarded dumps. They cover configuration and the HTTP
control surface.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class AppError(Exception):
    """Base error for application failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for logs.
    """

    code: str
    message: str
    details: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when request input validation fails."""


class AuthenticationAppError(AppError):
    """Raised when authentication/authorization fails."""


class MethodNotAllowedAppError(AppError):
    """Raised when a route receives an unsupported HTTP method."""


class ConfigurationAppError(AppError):
    """Raised when settings cannot be turned into a working component."""
