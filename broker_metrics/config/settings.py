from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv

from .heuristics import DEFAULT_HEURISTICS, HealthHeuristics


class AlignmentMode(str, Enum):
    """How several counter series of one snapshot are merged."""
    INDEX = "index"
    TIMESTAMP = "timestamp"


@dataclass(frozen=True)
class EngineSettings:
    include_disk_metrics: bool = False
    alignment: AlignmentMode = AlignmentMode.INDEX

    # Cadence is owned by the poller; kept here so both sides read one value.
    poll_interval_seconds: int = 300
    chart_poll_interval_seconds: int = 30

    heuristics: HealthHeuristics = DEFAULT_HEURISTICS


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def get_settings() -> EngineSettings:
    # Load env file (if present) but still allow overriding via real environment variables.
    env_file = os.getenv("BROKER_METRICS_ENV_FILE", ".env")
    if env_file and Path(env_file).exists():
        load_dotenv(env_file, override=False)

    include_disk = _env_bool("BROKER_METRICS_INCLUDE_DISK", "false")
    alignment = AlignmentMode(os.getenv("BROKER_METRICS_ALIGNMENT", "index").strip().lower())
    poll_interval = int(os.getenv("BROKER_METRICS_POLL_INTERVAL_SECONDS", "300"))
    chart_poll_interval = int(os.getenv("BROKER_METRICS_CHART_POLL_INTERVAL_SECONDS", "30"))

    return EngineSettings(
        include_disk_metrics=include_disk,
        alignment=alignment,
        poll_interval_seconds=poll_interval,
        chart_poll_interval_seconds=chart_poll_interval,
    )
