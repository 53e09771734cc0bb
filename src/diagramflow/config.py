"""
Configuration for the layout and routing engine.

All distances are in canvas units (pixels in the editor).
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

# =============================================================================
# LAYOUT CONFIGURATION - Adjust these values to tune placement and routing
# =============================================================================

# --- Placement ---

# Perpendicular coordinate of the first layer
BASE_OFFSET = 100.0

# Distance between consecutive layers
LAYER_SPACING = 120.0

# Gap between sibling nodes inside one layer
SIBLING_SPACING = 80.0

# Main-axis coordinate every layer is centred on
BASELINE = 400.0

# --- Routing ---

# Length of boundary connectors drawn off a node's left/right edge,
# also the gap between back-edge lanes
STAND_OFF_DISTANCE = 80.0

# Distance of the shared top/bottom rail from the outermost node
RAIL_DISTANCE = 60.0

# Below this vertical delta a connect edge is drawn as one straight segment
SAME_AXIS_THRESHOLD = 10.0

# Connect edges leave the source slightly below its centre
CONNECT_OFFSET = 18.0

# A target must sit this much higher than its source to count as a back edge
BACK_EDGE_MARGIN = 40.0

# Back edges turn in this far above their target before entering it
APPROACH_DISTANCE = 20.0

# Perpendicular offset of the label from the middle segment
LABEL_OFFSET = 20.0

# --- Placeholders ---

# Distance of external anchors from the diagram's bounding box
PLACEHOLDER_OFFSET = 100.0

# Node ids starting with this prefix are external anchors
EXTERNAL_PREFIX = "external"

# =============================================================================


class ConfigError(ValueError):
    """Raised for unknown or invalid configuration options."""


_NUMERIC_OPTIONS = (
    "base_offset",
    "layer_spacing",
    "sibling_spacing",
    "baseline",
    "stand_off_distance",
    "rail_distance",
    "same_axis_threshold",
    "connect_offset",
    "back_edge_margin",
    "approach_distance",
    "label_offset",
    "placeholder_offset",
)


@dataclass
class LayoutConfig:
    """
    Options recognised by the engine. Every field can be overridden by the
    caller, otherwise the module defaults apply.
    """

    base_offset: float = BASE_OFFSET
    layer_spacing: float = LAYER_SPACING
    sibling_spacing: float = SIBLING_SPACING
    baseline: float = BASELINE
    stand_off_distance: float = STAND_OFF_DISTANCE
    rail_distance: float = RAIL_DISTANCE
    same_axis_threshold: float = SAME_AXIS_THRESHOLD
    connect_offset: float = CONNECT_OFFSET
    back_edge_margin: float = BACK_EDGE_MARGIN
    approach_distance: float = APPROACH_DISTANCE
    label_offset: float = LABEL_OFFSET
    placeholder_offset: float = PLACEHOLDER_OFFSET
    external_prefix: str = EXTERNAL_PREFIX
    break_cycles: bool = True

    def __post_init__(self):
        for name in _NUMERIC_OPTIONS:
            value = getattr(self, name)
            if isinstance(value, (int, float)):
                continue
            try:
                setattr(self, name, float(value))
            except (TypeError, ValueError):
                raise ConfigError(f"{name} must be a number, got {value!r}") from None
        for name in ("layer_spacing", "sibling_spacing", "stand_off_distance"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must not be negative")
        if self.same_axis_threshold < 0:
            raise ConfigError("same_axis_threshold must not be negative")
        if not self.external_prefix:
            raise ConfigError("external_prefix must not be empty")

    @classmethod
    def from_options(
        cls, options: Optional[Mapping[str, Any]] = None, **overrides: Any
    ) -> "LayoutConfig":
        """
        Build a config from editor options.

        Option names may be given in camelCase (``layerSpacing``) or
        snake_case (``layer_spacing``).

        Args:
            options: Mapping of option names to values.
            **overrides: Additional options, applied after ``options``.

        Returns:
            A validated LayoutConfig.

        Raises:
            ConfigError: If an option name is not recognised or its value is
                invalid.
        """
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        merged = dict(options or {})
        merged.update(overrides)

        for key, value in merged.items():
            name = _snake_case(key)
            if name not in known:
                raise ConfigError(f"Unknown layout option: {key!r}")
            values[name] = value

        return cls(**values)

    def merged(self, **overrides: Any) -> "LayoutConfig":
        """Return a copy with some options replaced."""
        current = {f.name: getattr(self, f.name) for f in fields(self)}
        for key, value in overrides.items():
            name = _snake_case(key)
            if name not in current:
                raise ConfigError(f"Unknown layout option: {key!r}")
            current[name] = value
        return LayoutConfig(**current)


def _snake_case(name: str) -> str:
    out = []
    for ch in name:
        if ch.isupper():
            out.append("_")
            out.append(ch.lower())
        else:
            out.append(ch)
    return "".join(out)
