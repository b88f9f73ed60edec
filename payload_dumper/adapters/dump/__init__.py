"""Payload dump adapters.

Callers depend on :class:`AbstractDumper` only, so the host can switch
between discarding, rotating slots, and quota-limited capture through
configuration without touching the request path.
"""

from __future__ import annotations

from payload_dumper.adapters.dump.base import DISCARDED_ID, AbstractDumper, DumpResult
from payload_dumper.adapters.dump.discard import DISCARD, DiscardDumper
from payload_dumper.adapters.dump.limited import QuotaLimitedDumper, QuotaSnapshot
from payload_dumper.adapters.dump.rotating import RotatingFileDumper

__all__ = [
    "DISCARD",
    "DISCARDED_ID",
    "AbstractDumper",
    "DiscardDumper",
    "DumpResult",
    "QuotaLimitedDumper",
    "QuotaSnapshot",
    "RotatingFileDumper",
]
