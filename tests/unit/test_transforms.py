# tests/unit/test_transforms.py
"""Test quaternion helpers and local/world conversion"""
import math

import numpy as np
import pytest

from curved_screen.core import transforms


def _axis_quat(axis, degrees):
    half = math.radians(degrees) / 2
    axis = np.asarray(axis, dtype=float)
    return np.append(axis * math.sin(half), math.cos(half))


class TestQuaternions:

    def test_identity(self):
        assert transforms.from_euler_degrees(0, 0, 0) == pytest.approx(transforms.identity())

    def test_yaw(self):
        q = transforms.from_euler_degrees(0, 90, 0)
        assert q == pytest.approx([0.0, math.sqrt(0.5), 0.0, math.sqrt(0.5)])
        assert transforms.rotate_vector(q, (1, 0, 0)) == pytest.approx([0, 0, -1], abs=1e-12)
        assert transforms.yaw_degrees(q) == pytest.approx(90.0)

    def test_pitch(self):
        q = transforms.from_euler_degrees(90, 0, 0)
        assert transforms.rotate_vector(q, (0, 1, 0)) == pytest.approx([0, 0, 1], abs=1e-12)

    def test_euler_order_is_z_then_x_then_y(self):
        x, y, z = 30.0, 45.0, 60.0
        expected = transforms.multiply(
            transforms.multiply(_axis_quat((0, 1, 0), y), _axis_quat((1, 0, 0), x)),
            _axis_quat((0, 0, 1), z),
        )
        assert transforms.from_euler_degrees(x, y, z) == pytest.approx(expected)

    def test_unit_length(self):
        q = transforms.from_euler_degrees(12.0, -170.0, 33.0)
        assert np.linalg.norm(q) == pytest.approx(1.0)

    def test_multiply_composes_rotations(self):
        a = transforms.from_euler_degrees(0, 30, 0)
        b = transforms.from_euler_degrees(0, 60, 0)
        assert transforms.yaw_degrees(transforms.multiply(a, b)) == pytest.approx(90.0)

    def test_normalize_rejects_zero(self):
        with pytest.raises(ValueError):
            transforms.normalize([0, 0, 0, 0])


class TestPlacement:

    def test_to_world_identity_parent(self):
        rotation = transforms.from_euler_degrees(0, 15, 0)
        position, world_rotation, scale = transforms.to_world(
            (1, 0, 2), rotation, (0.5, 9, 0.1),
            (0, 0, 0), transforms.identity(), (1, 1, 1))
        assert position == pytest.approx([1, 0, 2])
        assert world_rotation == pytest.approx(rotation)
        assert scale == pytest.approx([0.5, 9, 0.1])

    def test_to_world_rotated_parent(self):
        parent_rotation = transforms.from_euler_degrees(0, 90, 0)
        position, rotation, scale = transforms.to_world(
            (1, 0, 0), transforms.identity(), (1, 1, 1),
            (1, 2, 3), parent_rotation, (2, 2, 2))
        assert position == pytest.approx([1, 2, 1], abs=1e-12)
        assert transforms.yaw_degrees(rotation) == pytest.approx(90.0)
        assert scale == pytest.approx([2, 2, 2])
