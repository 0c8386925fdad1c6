"""
Layout validation for generated curved screens.

This module measures how well a set of flat panels follows the curve: the
gaps left at each seam, how steep the tangents get and how much the edge
panels had to be widened. It reports problems and never alters the layout.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

import numpy as np

from curved_screen.core.logging_setup import get_logger
from curved_screen.core import transforms
from curved_screen.core.screen_settings import validate_segment_count

logger = get_logger(__name__)


@dataclass
class LayoutReport:
    """Report from layout validation."""
    segment_count: int
    seam_gaps: List[float]
    max_seam_gap: float
    max_tangent_degrees: float
    max_width_gain: float
    width_sum: float
    passed: bool
    issues: List[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        if self.passed:
            return (f"✓ Layout OK: {self.segment_count} segments, max seam gap {self.max_seam_gap:.2e}, "
                    f"steepest tangent {self.max_tangent_degrees:.1f}°")
        return f"✗ Layout has {len(self.issues)} issue(s): " + "; ".join(self.issues)

    def __repr__(self):
        status = "PASSED" if self.passed else "FAILED"
        return (f"LayoutReport({status}: "
                f"max_gap={self.max_seam_gap:.2e}, "
                f"max_tangent={self.max_tangent_degrees:.1f}°, "
                f"{len(self.issues)} issues)")


def panel_edges(pose) -> np.ndarray:
    """Left and right edge midpoints of a panel, in the group frame. Shape (2, 3)."""
    half = np.asarray(transforms.rotate_vector(pose.rotation, (pose.scale[0] / 2, 0.0, 0.0)))
    center = np.asarray(pose.position, dtype=float)
    return np.array([center - half, center + half])


def calculate_seam_gaps(poses: Sequence) -> np.ndarray:
    """Distance between each panel's right edge and the next panel's left edge."""
    if len(poses) < 2:
        return np.zeros(0)
    edges = np.array([panel_edges(p) for p in poses])
    return np.linalg.norm(edges[1:, 0] - edges[:-1, 1], axis=1)


def validate_layout(poses: Sequence,
                    screen_width: float,
                    max_tangent_degrees: float = 45.0,
                    seam_tolerance: float = 1e-6) -> LayoutReport:
    """
    Validate that a pose sequence forms a continuous, well-behaved screen.

    Args:
        poses: SegmentPose sequence in index order
        screen_width: Requested total width
        max_tangent_degrees: Steepest tangent considered visually acceptable
        seam_tolerance: Largest seam gap treated as closed

    Returns:
        LayoutReport
    """
    issues = []
    seam_gaps = calculate_seam_gaps(poses)
    max_gap = float(seam_gaps.max()) if len(seam_gaps) else 0.0

    angles = np.array([abs(p.angle) for p in poses])
    max_tangent = float(np.degrees(angles.max())) if len(angles) else 0.0
    max_gain = float(1.0 / np.cos(angles).min()) if len(angles) else 1.0
    width_sum = float(sum(p.nominal_width for p in poses))

    if max_gap > seam_tolerance:
        worst = int(np.argmax(seam_gaps))
        issues.append(f"seam between segments {worst} and {worst + 1} is open by {max_gap:.4g}")

    if max_tangent > max_tangent_degrees:
        issues.append(f"steepest tangent {max_tangent:.1f}° exceeds {max_tangent_degrees:.1f}°")

    if not math.isclose(width_sum, screen_width, rel_tol=1e-9):
        issues.append(f"segment widths sum to {width_sum:.6f}, expected {screen_width:.6f}")

    xs = np.array([p.position[0] for p in poses])
    if np.any(np.diff(xs) <= 0):
        issues.append("segment centres are not strictly increasing in x")

    report = LayoutReport(
        segment_count=len(poses),
        seam_gaps=seam_gaps.tolist(),
        max_seam_gap=max_gap,
        max_tangent_degrees=max_tangent,
        max_width_gain=max_gain,
        width_sum=width_sum,
        passed=not issues,
        issues=issues,
    )

    if report.passed:
        logger.info(report.message)
    else:
        logger.warning(report.message)
    return report


def suggest_curve_factor(segment_count: int, max_tangent_degrees: float = 45.0) -> float:
    """
    Largest curve factor that keeps every segment tangent within the limit.

    The outermost centres sit at |x| = w/2 * (1 - 1/n), where the slope is
    curve_factor * (1 - 1/n), independent of the screen width.
    """
    validate_segment_count(segment_count)
    reach = 1.0 - 1.0 / segment_count
    if reach <= 0:
        return float("inf")
    return math.tan(math.radians(max_tangent_degrees)) / reach


def check_uv_coverage(quads: Sequence, tolerance: float = 1e-12) -> Dict[str, Any]:
    """
    Check that UV strips tile [0, 1] with no gap or overlap.

    Quads are taken in physical (segment index) order: each quad's u_start
    edge must meet the next quad's u_end edge.

    Returns:
        Dictionary with:
        - 'valid': bool
        - 'gaps': list of (index, gap) where neighbouring strips do not meet
        - 'u_min', 'u_max': extent of the union
        - 'message': str
    """
    gaps = []
    for i in range(len(quads) - 1):
        gap = quads[i].u_start - quads[i + 1].u_end
        if abs(gap) > tolerance:
            gaps.append((i, gap))

    widths_ok = all(q.u_end - q.u_start > 0 for q in quads)
    u_min = min((q.u_start for q in quads), default=0.0)
    u_max = max((q.u_end for q in quads), default=0.0)
    covers = abs(u_min) <= tolerance and abs(u_max - 1.0) <= tolerance

    valid = bool(quads) and not gaps and widths_ok and covers
    if valid:
        message = f"✓ {len(quads)} strips tile [0, 1]"
    else:
        message = (f"✗ UV strips do not tile [0, 1]: extent [{u_min:.4f}, {u_max:.4f}], "
                   f"{len(gaps)} discontinuities")

    return {
        'valid': valid,
        'gaps': gaps,
        'u_min': u_min,
        'u_max': u_max,
        'message': message,
    }
