"""Rotating dumper writing into a fixed ring of file slots.

Notes:
- Disk usage is bounded: at most ``capacity`` files per instance.
- Thread-safe: a lock is held for the entire call, write included.
- Not meant for high-frequency dumping; concurrent callers queue on the lock.
"""

from __future__ import annotations

import logging
import os
import tempfile
import threading

from payload_dumper.adapters.dump.base import (
    AbstractDumper,
    DumpResult,
    ensure_payload,
    write_dump_file,
)

logger = logging.getLogger(__name__)

_OPEN_FLAGS = os.O_RDWR | os.O_CREAT | os.O_TRUNC
_FILE_MODE = 0o600


class RotatingFileDumper(AbstractDumper):
    """Dumper cycling through ``capacity`` named slots.

    Slot files are named ``<name><index>`` inside ``directory``. The N-th
    call targets slot ``(N - 1) % capacity`` and overwrites whatever the
    slot held before. The slot counter advances before the write, so a
    failed write still uses up its slot.
    """

    def __init__(self, name: str, capacity: int, *, directory: str | None = None) -> None:
        """Initialize the rotating dumper.

        Args:
            name: Filename prefix for the slot files.
            capacity: Number of slots in the ring.
            directory: Target directory; defaults to the system temp dir.

        Raises:
            ValueError: If capacity is invalid.
        """
        if capacity < 1:
            raise ValueError("capacity must be >= 1")

        self._name = name
        self._capacity = capacity
        self._directory = directory or tempfile.gettempdir()
        self._lock = threading.Lock()
        self._cnt = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def directory(self) -> str:
        return self._directory

    def slot_path(self, index: int) -> str:
        """Return the file path for slot ``index``."""
        return os.path.join(self._directory, f"{self._name}{index % self._capacity}")

    def dump(self, data: bytes) -> DumpResult:
        """Write ``data`` into the next slot of the ring.

        Args:
            data: Payload bytes.

        Returns:
            DumpResult with the slot path, or discarded on any storage failure.

        Raises:
            TypeError: If data is not bytes-like; no slot is used.
        """
        ensure_payload(data)

        # Held across the write: calls are fully serialized per instance.
        with self._lock:
            path = self.slot_path(self._cnt)
            self._cnt += 1

            try:
                fd = os.open(path, _OPEN_FLAGS, _FILE_MODE)
            except OSError as exc:
                logger.warning(
                    "dump.open_failed",
                    extra={
                        "dumper": self._name,
                        "path": path,
                        "error_type": type(exc).__name__,
                        "error_msg": str(exc),
                    },
                )
                return DumpResult.discarded()

            return write_dump_file(fd, path, data, dumper=self._name)
