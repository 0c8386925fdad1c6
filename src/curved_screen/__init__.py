"""Curved screen layout: flat panels on a parabola, one texture sliced across them."""

from .core.screen_settings import GroupPose, ScreenConfig, DEFAULT_CURVE_FACTOR
from .config.errors import ConfigError, ScreenConfigError, SegmentCountMismatchError
from .curve_layout import SegmentPose, compute_segment_poses, compute_layout
from .uv_slicer import BoxFace, UVQuad, compute_segment_uv, box_uvs
from .screen_builder import MaterialSettings, ScreenAssembly, build_curved_screen
from .curvature_validation import LayoutReport, validate_layout

__version__ = "0.1.0"

__all__ = [
    'GroupPose',
    'ScreenConfig',
    'DEFAULT_CURVE_FACTOR',
    'ConfigError',
    'ScreenConfigError',
    'SegmentCountMismatchError',
    'SegmentPose',
    'compute_segment_poses',
    'compute_layout',
    'BoxFace',
    'UVQuad',
    'compute_segment_uv',
    'box_uvs',
    'MaterialSettings',
    'ScreenAssembly',
    'build_curved_screen',
    'LayoutReport',
    'validate_layout',
]
