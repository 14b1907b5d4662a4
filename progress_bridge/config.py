from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from progress_bridge.engine.identity import DEFAULT_MAX_DEPTH


load_dotenv()


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class BridgeConfig:
    messages_path: Optional[Path]
    max_depth: int
    log_level: int
    operation_id: str


def _parse_max_depth(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"PROGRESS_BRIDGE_MAX_DEPTH must be an integer, got '{raw}'") from None
    if value <= 0:
        raise ConfigError(f"PROGRESS_BRIDGE_MAX_DEPTH must be positive, got {value}")
    return value


def _parse_log_level(raw: str) -> int:
    level = logging.getLevelName(raw.strip().upper())
    if not isinstance(level, int):
        raise ConfigError(f"Unknown PROGRESS_BRIDGE_LOG_LEVEL '{raw}'")
    return level


def get_config() -> BridgeConfig:
    messages = os.getenv("PROGRESS_BRIDGE_MESSAGES")
    return BridgeConfig(
        messages_path=Path(messages) if messages else None,
        max_depth=_parse_max_depth(os.getenv("PROGRESS_BRIDGE_MAX_DEPTH", str(DEFAULT_MAX_DEPTH))),
        log_level=_parse_log_level(os.getenv("PROGRESS_BRIDGE_LOG_LEVEL", "WARNING")),
        operation_id=os.getenv("PROGRESS_BRIDGE_OPERATION_ID", "progress"),
    )
