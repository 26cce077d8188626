"""Coordinator settings with environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .runtime.telemetry import ENV_PREFIX, record_event


def _read(environ: Mapping[str, str], name: str) -> Optional[str]:
    return environ.get(f"{ENV_PREFIX}{name}")


def _read_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = _read(environ, name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        record_event(
            "config.invalid",
            level="warning",
            data={"name": name, "value": raw},
        )
        return default


def _read_int(environ: Mapping[str, str], name: str, default: int) -> int:
    value = _read_float(environ, name, float(default))
    return int(value) if value >= 1 else default


@dataclass(frozen=True, slots=True)
class CoordinatorSettings:
    """Tunables shared by one coordinator instance.

    ``copy_separator`` joins the text of consecutive selected regions,
    ``rounding_threshold`` is the fraction at which a point-to-index lookup
    rounds to the next insertion point, ``region_gap`` is the vertical space
    left between stacked region frames and ``default_columns`` is the wrap
    width used by grid layouts.
    """

    copy_separator: str = "\n\n"
    rounding_threshold: float = 0.5
    region_gap: float = 1.0
    default_columns: int = 72

    def __post_init__(self) -> None:
        if not 0.0 < self.rounding_threshold <= 1.0:
            raise ValueError("rounding_threshold must be in (0, 1].")
        if self.region_gap < 0:
            raise ValueError("region_gap cannot be negative.")
        if self.default_columns < 1:
            raise ValueError("default_columns must be positive.")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CoordinatorSettings":
        env = os.environ if environ is None else environ
        defaults = cls()
        separator = _read(env, "COPY_SEPARATOR")
        threshold = _read_float(env, "ROUNDING_THRESHOLD", defaults.rounding_threshold)
        if not 0.0 < threshold <= 1.0:
            threshold = defaults.rounding_threshold
        gap = _read_float(env, "REGION_GAP", defaults.region_gap)
        return cls(
            copy_separator=(
                separator.encode().decode("unicode_escape")
                if separator is not None
                else defaults.copy_separator
            ),
            rounding_threshold=threshold,
            region_gap=gap if gap >= 0 else defaults.region_gap,
            default_columns=_read_int(env, "COLUMNS", defaults.default_columns),
        )


__all__ = ["CoordinatorSettings"]
