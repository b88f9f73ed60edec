"""Dumper used when dumping is disabled."""

from __future__ import annotations

from payload_dumper.adapters.dump.base import AbstractDumper, DumpResult


class DiscardDumper(AbstractDumper):
    """Drops every payload without touching storage."""

    def dump(self, data: bytes) -> DumpResult:
        return DumpResult.discarded()

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return "DiscardDumper()"


DISCARD = DiscardDumper()
