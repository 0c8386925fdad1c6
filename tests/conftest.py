# conftest.py
import os
import sys
import tempfile

import numpy as np
import pytest

# Add source directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

# Keep test logs out of the home directory
os.environ.setdefault("CURVED_SCREEN_LOG_DIR", tempfile.mkdtemp(prefix="curvedscreen-logs-"))


@pytest.fixture
def reference_screen():
    """The 22-panel 16:9 screen used by the original scene"""
    return {
        'segment_count': 22,
        'screen_width': 16.0,
        'screen_height': 9.0,
        'curve_factor': 0.3,
    }


@pytest.fixture
def reference_poses(reference_screen):
    from curved_screen.curve_layout import compute_segment_poses
    return compute_segment_poses(**reference_screen)


class GeometryChecker:
    """Helper class for checking layout geometry"""

    @staticmethod
    def centres(poses) -> np.ndarray:
        return np.array([p.position for p in poses])

    @staticmethod
    def is_symmetric(poses, tolerance: float = 1e-9) -> bool:
        """Mirror-image segments have opposite x and angle, equal z"""
        n = len(poses)
        for i in range(n // 2):
            a, b = poses[i], poses[n - 1 - i]
            if abs(a.x + b.x) > tolerance:
                return False
            if abs(a.z - b.z) > tolerance:
                return False
            if abs(a.angle + b.angle) > tolerance:
                return False
        return True


@pytest.fixture
def geometry_checker():
    return GeometryChecker()


@pytest.fixture(autouse=True)
def reset_logging():
    """Tests that run the command line leave no handlers behind"""
    yield
    from curved_screen.core.logging_setup import shutdown_logging
    shutdown_logging()
