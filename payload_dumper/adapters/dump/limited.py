"""Quota-limited dumper.

Each instance starts with an exhausted quota. An operator grants a number
of dumps valid for a period (see the dump quota route), after which the
dumper goes back to discarding.

Notes:
- Per-process only: each instance owns its quota and its files.
- Thread-safe: dumps, resets, and snapshots share one lock, and dumps hold
  it across the write.
"""

from __future__ import annotations

import logging
import tempfile
import threading
import time
from dataclasses import dataclass
from typing import Callable

from payload_dumper.adapters.dump.base import (
    AbstractDumper,
    DumpResult,
    ensure_payload,
    write_dump_file,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuotaSnapshot:
    """Point-in-time view of a quota.

    Attributes:
        capacity: Dumps still permitted.
        seconds: Whole seconds until expiry (zero or negative once expired).
    """

    capacity: int
    seconds: int


class QuotaLimitedDumper(AbstractDumper):
    """Dumper allowed at most ``capacity`` dumps until an expiry time.

    Every admitted call consumes one unit of quota before the write is
    attempted, so a failed write still counts against the quota.
    """

    def __init__(
        self,
        name: str,
        *,
        directory: str | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the dumper with an exhausted quota.

        Args:
            name: Filename prefix for generated dump files.
            directory: Target directory; defaults to the system temp dir.
            clock: Time source function returning UNIX time in seconds.
        """
        self._name = name
        self._directory = directory
        self._clock = clock
        self._lock = threading.Lock()
        self._remaining = 0
        self._expires_at = clock()

    @property
    def name(self) -> str:
        return self._name

    def reset(self, capacity: int, seconds: float) -> None:
        """Replace the quota.

        Args:
            capacity: Number of dumps to permit.
            seconds: Validity period starting now.

        Raises:
            ValueError: If capacity is negative.
            OverflowError: If seconds cannot be added to the clock.
        """
        if capacity < 0:
            raise ValueError("capacity must be >= 0")

        with self._lock:
            # Compute first so a failed conversion leaves the old quota intact.
            expires_at = self._clock() + seconds
            self._remaining = capacity
            self._expires_at = expires_at

        logger.info(
            "dump.quota_reset",
            extra={"dumper": self._name, "capacity": capacity, "seconds": seconds},
        )

    def snapshot(self) -> QuotaSnapshot:
        """Return the remaining quota and seconds until it expires."""
        with self._lock:
            remaining = self._remaining
            seconds = int(self._expires_at - self._clock())
        return QuotaSnapshot(capacity=remaining, seconds=seconds)

    def _admit_locked(self) -> bool:
        if self._clock() > self._expires_at or self._remaining == 0:
            return False
        self._remaining -= 1
        return True

    def dump(self, data: bytes) -> DumpResult:
        """Write ``data`` to a fresh temp file if the quota allows it.

        Args:
            data: Payload bytes.

        Returns:
            DumpResult with the new file path, or discarded when the quota is
            exhausted, expired, or the write fails.

        Raises:
            TypeError: If data is not bytes-like; no quota is consumed.
        """
        ensure_payload(data)

        # Held across the write: quota checks and resets observe a total order.
        with self._lock:
            if not self._admit_locked():
                logger.debug(
                    "dump.quota_denied",
                    extra={"dumper": self._name, "remaining": self._remaining},
                )
                return DumpResult.discarded()

            try:
                fd, path = tempfile.mkstemp(prefix=self._name, dir=self._directory)
            except OSError as exc:
                logger.warning(
                    "dump.open_failed",
                    extra={
                        "dumper": self._name,
                        "error_type": type(exc).__name__,
                        "error_msg": str(exc),
                    },
                )
                return DumpResult.discarded()

            return write_dump_file(fd, path, data, dumper=self._name)
