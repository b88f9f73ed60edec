"""Dumper interfaces and the shared file write path.

The host should depend on this abstraction (not a concrete dumper) so that
dumping can be disabled, bounded by rotation, or bounded by a quota purely
through configuration.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Identifier reported when a payload was not persisted.
DISCARDED_ID = "discarded"


class ShortWriteError(OSError):
    """Raised when the OS accepted fewer bytes than requested."""


@dataclass(frozen=True)
class DumpResult:
    """Outcome of a dump call.

    Attributes:
        persisted: Whether the payload reached storage.
        path: Filesystem path of the artifact when persisted, else None.
    """

    persisted: bool
    path: str | None = None

    @classmethod
    def discarded(cls) -> DumpResult:
        return cls(persisted=False, path=None)

    @classmethod
    def stored(cls, path: str) -> DumpResult:
        return cls(persisted=True, path=path)

    @property
    def identifier(self) -> str:
        """Opaque identifier: the artifact path, or ``DISCARDED_ID``."""
        if self.persisted and self.path is not None:
            return self.path
        return DISCARDED_ID

    def __bool__(self) -> bool:
        return self.persisted


class AbstractDumper(ABC):
    """Interface for payload dumpers."""

    @abstractmethod
    def dump(self, data: bytes) -> DumpResult:
        """Persist ``data`` and report where it went.

        Implementations never raise for storage problems; a failed or
        refused dump is reported as ``DumpResult.discarded()``.

        Args:
            data: Raw payload bytes.

        Returns:
            DumpResult describing whether (and where) the payload was stored.
        """
        raise NotImplementedError


def ensure_payload(data: object) -> None:
    """Reject non bytes-like payloads before any quota or slot is used.

    Raises:
        TypeError: If ``data`` is not bytes, bytearray or memoryview.
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"payload must be bytes-like, not {type(data).__name__}")


def _remove_quietly(path: str) -> None:
    try:
        os.remove(path)
    except OSError:
        logger.debug("dump.cleanup_failed", extra={"path": path})


def write_dump_file(fd: int, path: str, data: bytes, *, dumper: str) -> DumpResult:
    """Write ``data`` to an already opened descriptor and close it.

    Partial writes are resumed until every byte is written. The descriptor
    is always closed. A failed write, a write that makes no progress, or a
    failed close removes the file so no truncated artifact is left behind.

    Args:
        fd: Open file descriptor owned by this call.
        path: Path the descriptor refers to.
        data: Payload bytes.
        dumper: Dumper name used in log records.

    Returns:
        ``DumpResult.stored(path)`` on success, ``DumpResult.discarded()`` otherwise.
    """

    error: OSError | None = None
    view = memoryview(data).cast("B")
    try:
        total = 0
        # os.write may accept only part of the buffer; resume until done.
        while total < len(view):
            written = os.write(fd, view[total:])
            if written == 0:
                raise ShortWriteError(f"wrote {total} of {len(view)} bytes")
            total += written
    except OSError as exc:
        error = exc
    finally:
        try:
            os.close(fd)
        except OSError as exc:
            if error is None:
                error = exc

    if error is not None:
        logger.warning(
            "dump.write_failed",
            extra={
                "dumper": dumper,
                "path": path,
                "error_type": type(error).__name__,
                "error_msg": str(error),
                "size_bytes": len(view),
            },
        )
        _remove_quietly(path)
        return DumpResult.discarded()

    logger.info(
        "dump.stored",
        extra={"dumper": dumper, "path": path, "size_bytes": len(view)},
    )
    return DumpResult.stored(path)
