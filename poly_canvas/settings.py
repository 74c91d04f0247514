"""Session configuration and interaction constants."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

# Pointer interaction
PAN_SPEED: float = 3.0
ZOOM_SENSITIVITY: float = 0.001

# Host frame timer
FRAME_INTERVAL_MS: int = 16

# Inclusive (min, max) per field, shared by validation and the settings panel.
SETTING_RANGES: dict[str, tuple[float, float]] = {
    "point_spacing": (100, 500),
    "graph_step": (1, 200),
    "point_radius": (5, 100),
    "text_scale": (3, 20),
    "lerp_weight": (0.0, 1.0),
    "polynomial_order": (1, 20),
    "display_precision": (0, 10),
}

_INTEGER_FIELDS = frozenset({"polynomial_order", "display_precision"})


@dataclass(frozen=True, slots=True)
class GraphSettings:
    point_spacing: float = 300.0   # world units per point-space unit
    graph_step: float = 10.0       # world units between curve samples
    point_radius: float = 40.0     # world units
    text_scale: float = 10.0
    lerp_weight: float = 0.1
    polynomial_order: int = 5
    display_precision: int = 2     # digits shown in the equation readout

    def __post_init__(self) -> None:
        for name, (lo, hi) in SETTING_RANGES.items():
            value = getattr(self, name)
            if name in _INTEGER_FIELDS and (isinstance(value, bool) or not isinstance(value, int)):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if not (lo <= value <= hi):
                raise ValueError(f"{name} must be in [{lo}, {hi}], got {value}")

    def as_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
