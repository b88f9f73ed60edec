"""Factory for building the configured dumper."""

from __future__ import annotations

import logging

from payload_dumper.adapters.dump.base import AbstractDumper
from payload_dumper.adapters.dump.discard import DISCARD
from payload_dumper.adapters.dump.limited import QuotaLimitedDumper
from payload_dumper.adapters.dump.rotating import RotatingFileDumper
from payload_dumper.core.config import DumpSettings, settings
from payload_dumper.core.errors import ConfigurationAppError

logger = logging.getLogger(__name__)


def create_dumper(dump_settings: DumpSettings | None = None) -> AbstractDumper:
    """Instantiate the dumper selected by configuration.

    Args:
        dump_settings: Optional settings; defaults to the global settings.

    Returns:
        AbstractDumper: Discard, rotating, or quota-limited dumper.

    Raises:
        ConfigurationAppError: If the mode is unknown or its options are invalid.
    """
    cfg = dump_settings or settings.dump
    mode = cfg.mode.lower()

    if mode == "discard":
        dumper: AbstractDumper = DISCARD
    elif mode == "rotating":
        try:
            dumper = RotatingFileDumper(
                cfg.name,
                cfg.rotating_capacity,
                directory=cfg.directory,
            )
        except ValueError as exc:
            raise ConfigurationAppError(
                code="dump_invalid_capacity",
                message=str(exc),
                details={"capacity": cfg.rotating_capacity},
            ) from exc
    elif mode == "limited":
        dumper = QuotaLimitedDumper(cfg.name, directory=cfg.directory)
    else:
        raise ConfigurationAppError(
            code="dump_unknown_mode",
            message=(
                f"Unknown dump mode: '{cfg.mode}'. Supported modes: discard, rotating, limited"
            ),
        )

    logger.info(
        "dump.dumper_created",
        extra={"mode": mode, "dumper_name": cfg.name, "directory": cfg.directory},
    )
    return dumper
