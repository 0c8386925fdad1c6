import inspect
import math
import numbers
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import numpy as np

from ..config.errors import ScreenConfigError
from . import transforms

DEFAULT_SEGMENT_COUNT = 22
DEFAULT_SCREEN_WIDTH = 16.0
DEFAULT_SCREEN_HEIGHT = 9.0
DEFAULT_CURVE_FACTOR = 0.3
DEFAULT_PANEL_THICKNESS = 0.1


@dataclass(frozen=True)
class GroupPose:
    """Parent transform applied to the whole screen as a rigid unit."""
    position: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    rotation: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)  # x, y, z, w
    scale: Tuple[float, float, float] = (1.0, 1.0, 1.0)

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "GroupPose":
        """
        Create from a YAML mapping.

        'rotation' may be Euler degrees [x, y, z] or a quaternion [x, y, z, w].
        """
        if not d:
            return cls()
        position = _vec3(d.get("position", (0.0, 0.0, 0.0)), "position")
        scale = _vec3(d.get("scale", (1.0, 1.0, 1.0)), "scale")

        rotation = d.get("rotation", (0.0, 0.0, 0.0))
        if len(rotation) == 3:
            quat = transforms.from_euler_degrees(*(float(a) for a in rotation))
        elif len(rotation) == 4:
            quat = transforms.normalize([float(a) for a in rotation])
        else:
            raise ScreenConfigError(
                f"'rotation' must have 3 (Euler degrees) or 4 (quaternion) values, got {len(rotation)}")

        return cls(position=position, rotation=tuple(float(c) for c in quat), scale=scale)

    def as_arrays(self):
        return np.array(self.position), np.array(self.rotation), np.array(self.scale)


def _vec3(values, name: str) -> Tuple[float, float, float]:
    if len(values) != 3:
        raise ScreenConfigError(f"'{name}' must have 3 values, got {len(values)}")
    return tuple(float(v) for v in values)


@dataclass(frozen=True)
class ScreenConfig:
    segment_count: int = DEFAULT_SEGMENT_COUNT
    screen_width: float = DEFAULT_SCREEN_WIDTH
    screen_height: float = DEFAULT_SCREEN_HEIGHT
    curve_factor: Optional[float] = None
    panel_thickness: float = DEFAULT_PANEL_THICKNESS
    group_pose: GroupPose = field(default_factory=GroupPose)

    @classmethod
    def from_dict(cls, d: dict) -> "ScreenConfig":
        """
        Create from YAML dict, ignoring unknown keys.

        Numeric values arriving as strings (e.g. from ${ENV:...} substitution)
        are converted here; anything unconvertible is a ScreenConfigError.
        """
        valid_keys = inspect.signature(cls).parameters
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        for key in ("screen_width", "screen_height", "curve_factor", "panel_thickness"):
            if isinstance(filtered.get(key), str):
                filtered[key] = _parse_number(key, filtered[key], float)
        if isinstance(filtered.get("segment_count"), str):
            filtered["segment_count"] = _parse_number("segment_count", filtered["segment_count"], int)
        if "group_pose" in filtered and not isinstance(filtered["group_pose"], GroupPose):
            filtered["group_pose"] = GroupPose.from_dict(filtered["group_pose"])
        return cls(**filtered)

    @property
    def resolved_curve_factor(self) -> float:
        return DEFAULT_CURVE_FACTOR if self.curve_factor is None else self.curve_factor

    @property
    def segment_width(self) -> float:
        return self.screen_width / self.segment_count

    def validate(self) -> "ScreenConfig":
        validate_screen_parameters(self.segment_count, self.screen_width,
                                   self.screen_height, self.panel_thickness,
                                   self.curve_factor)
        return self


def _parse_number(name: str, text: str, kind):
    try:
        return kind(text.strip())
    except ValueError:
        raise ScreenConfigError(f"{name} must be a number, got {text!r}") from None


def _is_real(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def validate_segment_count(segment_count) -> None:
    if isinstance(segment_count, bool) or not isinstance(segment_count, numbers.Integral):
        raise ScreenConfigError(f"segment_count must be an integer, got {segment_count!r}")
    if segment_count <= 0:
        raise ScreenConfigError(f"segment_count must be at least 1, got {segment_count}")


def validate_screen_parameters(segment_count, screen_width, screen_height=1.0,
                               panel_thickness=DEFAULT_PANEL_THICKNESS,
                               curve_factor=None) -> None:
    """Fail fast on parameters that cannot form a screen."""
    validate_segment_count(segment_count)
    for name, value in (("screen_width", screen_width),
                        ("screen_height", screen_height),
                        ("panel_thickness", panel_thickness)):
        if not _is_real(value) or not math.isfinite(value) or value <= 0:
            raise ScreenConfigError(f"{name} must be a positive number, got {value!r}")
    # None means "use the default"; zero and negative values are valid curves
    if curve_factor is not None and not (_is_real(curve_factor) and math.isfinite(curve_factor)):
        raise ScreenConfigError(f"curve_factor must be a finite number, got {curve_factor!r}")
