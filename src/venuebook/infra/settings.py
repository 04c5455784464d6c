"""Engine settings loaded from environment variables.

RECURRENCE_MAX_INSTANCES   cap on candidate dates per recurring series
RECURRENCE_MAX_SPAN_DAYS   cap on days between series start and end
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_MAX_INSTANCES = 365
DEFAULT_MAX_SPAN_DAYS = 730


@dataclass(frozen=True)
class EngineSettings:
    """Hard ceilings for recurrence expansion.

    Attributes:
        max_instances: Maximum candidate dates a single series may visit.
        max_span_days: Maximum days from base start to pattern end date.
    """

    max_instances: int = DEFAULT_MAX_INSTANCES
    max_span_days: int = DEFAULT_MAX_SPAN_DAYS

    def __post_init__(self) -> None:
        if self.max_instances < 1:
            raise ValueError("max_instances must be >= 1")
        if self.max_span_days < 1:
            raise ValueError("max_span_days must be >= 1")


def _int_from_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_engine_settings() -> EngineSettings:
    """Build EngineSettings from the environment, falling back to defaults."""
    return EngineSettings(
        max_instances=_int_from_env("RECURRENCE_MAX_INSTANCES", DEFAULT_MAX_INSTANCES),
        max_span_days=_int_from_env("RECURRENCE_MAX_SPAN_DAYS", DEFAULT_MAX_SPAN_DAYS),
    )
