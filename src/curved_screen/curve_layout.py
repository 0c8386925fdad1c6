"""Curve layout for the segments of a curved screen.

Segments are flat panels whose centres sit on the parabola

    z = curve_factor * (x / screen_width)^2 * screen_width

centred at x = 0. Each panel is turned about the vertical axis so its face is
tangent to the curve at its centre, and widened by 1 / cos(angle) so its
projection onto the x axis still covers exactly one nominal segment width.
Tangent lines of a parabola drawn at two points meet halfway between them,
so neighbouring panels share an edge and no seam opens up.

The approximation degrades as tangents approach +/-90 degrees. With
|curve_factor| <= 1 every tangent stays below 45 degrees; larger values are
computed as requested and only warned about.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from curved_screen.core.logging_setup import get_logger
from curved_screen.core import transforms
from curved_screen.core.screen_settings import (
    DEFAULT_CURVE_FACTOR,
    DEFAULT_PANEL_THICKNESS,
    ScreenConfig,
    validate_screen_parameters,
)

logger = get_logger(__name__)

# Tangents steeper than this make panels visibly wide and shallow
SAFE_TANGENT_DEGREES = 45.0


@dataclass(frozen=True)
class SegmentPose:
    """Local transform of one panel relative to the screen group."""
    index: int
    position: Tuple[float, float, float]
    rotation: Tuple[float, float, float, float]  # x, y, z, w
    rotation_y_degrees: float
    angle: float  # tangent angle, radians
    derivative: float
    nominal_width: float
    scale: Tuple[float, float, float]

    @property
    def x(self) -> float:
        return self.position[0]

    @property
    def z(self) -> float:
        return self.position[2]

    @property
    def adjusted_width(self) -> float:
        return self.scale[0]

    def __repr__(self):
        return (f"SegmentPose({self.index}: x={self.x:.4f}, z={self.z:.4f}, "
                f"yaw={self.rotation_y_degrees:.2f}°, width={self.adjusted_width:.4f})")


def segment_center_x(segment_index: int, segment_count: int, screen_width: float) -> float:
    """Horizontal centre of a segment; outer edges land on +/- screen_width / 2."""
    return -screen_width / 2 + (segment_index + 0.5) * (screen_width / segment_count)


def curve_depth(x: float, screen_width: float, curve_factor: float) -> float:
    """Parabola depth at x, normalised so curvature does not depend on absolute width."""
    return curve_factor * (x / screen_width) * (x / screen_width) * screen_width


def curve_slope(x: float, screen_width: float, curve_factor: float) -> float:
    return 2 * curve_factor * x / screen_width


def calculate_segment_transform(segment_index: int,
                                segment_count: int,
                                screen_width: float,
                                screen_height: float,
                                curve_factor: float,
                                panel_thickness: float = DEFAULT_PANEL_THICKNESS) -> SegmentPose:
    """Pose of a single segment on the curve. Inputs are assumed validated."""
    x = segment_center_x(segment_index, segment_count, screen_width)
    z = curve_depth(x, screen_width, curve_factor)
    derivative = curve_slope(x, screen_width, curve_factor)
    angle = math.atan(derivative)

    rotation_y = -math.degrees(angle)
    rotation = transforms.from_euler_degrees(0.0, rotation_y, 0.0)

    nominal_width = screen_width / segment_count
    adjusted_width = nominal_width / math.cos(angle)

    return SegmentPose(
        index=segment_index,
        position=(x, 0.0, z),
        rotation=tuple(float(c) for c in rotation),
        rotation_y_degrees=rotation_y,
        angle=angle,
        derivative=derivative,
        nominal_width=nominal_width,
        scale=(adjusted_width, screen_height, panel_thickness),
    )


def compute_segment_poses(segment_count: int,
                          screen_width: float,
                          screen_height: float,
                          curve_factor: Optional[float] = None,
                          panel_thickness: float = DEFAULT_PANEL_THICKNESS) -> List[SegmentPose]:
    """
    Compute the local pose of every segment, left to right.

    Args:
        segment_count: Number of flat panels approximating the curve (>= 1)
        screen_width: Total width of the assembled screen (> 0)
        screen_height: Height of every panel (> 0)
        curve_factor: Parabola steepness, 0 is flat. None uses the default 0.3
        panel_thickness: Fixed depth of each panel

    Returns:
        List of SegmentPose, one per index

    Raises:
        ScreenConfigError: before producing any pose if the parameters are invalid
    """
    validate_screen_parameters(segment_count, screen_width, screen_height, panel_thickness, curve_factor)
    if curve_factor is None:
        curve_factor = DEFAULT_CURVE_FACTOR

    poses = [
        calculate_segment_transform(i, segment_count, screen_width, screen_height,
                                    curve_factor, panel_thickness)
        for i in range(segment_count)
    ]

    for pose in poses:
        logger.coord(f"  {pose}")

    steepest = max(abs(p.angle) for p in poses)
    if math.degrees(steepest) > SAFE_TANGENT_DEGREES:
        logger.warning(f"curve_factor {curve_factor} gives a {math.degrees(steepest):.1f}° edge tangent; "
                       f"panels widen by {1 / math.cos(steepest):.2f}x and the curve will look faceted")

    logger.debug(f"Computed {segment_count} segment poses (width={screen_width}, "
                 f"height={screen_height}, curve_factor={curve_factor})")
    return poses


def compute_layout(config: ScreenConfig) -> List[SegmentPose]:
    """Compute segment poses for a ScreenConfig."""
    return compute_segment_poses(config.segment_count, config.screen_width, config.screen_height,
                                 config.resolved_curve_factor, config.panel_thickness)
