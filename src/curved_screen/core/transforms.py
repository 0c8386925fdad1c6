"""Quaternion and placement helpers for segment and group transforms.

Quaternions are numpy arrays ordered (x, y, z, w), the layout the host
engine uses for its rotation component. Euler angles are in degrees and are
applied Z first, then X, then Y.
"""
from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np

Vector3 = Tuple[float, float, float]


def identity() -> np.ndarray:
    return np.array([0.0, 0.0, 0.0, 1.0])


def from_euler_degrees(x: float, y: float, z: float) -> np.ndarray:
    """Build a rotation quaternion from Euler angles in degrees."""
    hx, hy, hz = (math.radians(a) / 2.0 for a in (x, y, z))
    c1, c2, c3 = math.cos(hx), math.cos(hy), math.cos(hz)
    s1, s2, s3 = math.sin(hx), math.sin(hy), math.sin(hz)

    return np.array([
        s1 * c2 * c3 + c1 * s2 * s3,
        c1 * s2 * c3 - s1 * c2 * s3,
        c1 * c2 * s3 - s1 * s2 * c3,
        c1 * c2 * c3 + s1 * s2 * s3,
    ])


def normalize(q: Sequence[float]) -> np.ndarray:
    q = np.asarray(q, dtype=float)
    norm = np.linalg.norm(q)
    if norm < 1e-15:
        raise ValueError("Cannot normalize a zero-length quaternion")
    return q / norm


def multiply(q1: Sequence[float], q2: Sequence[float]) -> np.ndarray:
    """Hamilton product q1 * q2 (apply q2 first, then q1)."""
    x1, y1, z1, w1 = q1
    x2, y2, z2, w2 = q2
    return np.array([
        w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
        w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
        w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
        w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
    ])


def rotate_vector(q: Sequence[float], v: Sequence[float]) -> np.ndarray:
    """Rotate vector v by unit quaternion q."""
    q = np.asarray(q, dtype=float)
    v = np.asarray(v, dtype=float)
    u = q[:3]
    w = q[3]
    # v' = v + 2w(u x v) + 2u x (u x v)
    t = 2.0 * np.cross(u, v)
    return v + w * t + np.cross(u, t)


def yaw_degrees(q: Sequence[float]) -> float:
    """Rotation about the vertical axis for a yaw-only quaternion."""
    x, y, z, w = q
    return math.degrees(2.0 * math.atan2(y, w))


def to_world(local_position: Sequence[float],
             local_rotation: Sequence[float],
             local_scale: Sequence[float],
             parent_position: Sequence[float],
             parent_rotation: Sequence[float],
             parent_scale: Sequence[float]) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Convert a child transform to world coordinates under its parent.

    Scale is composed component-wise, matching how the host engine
    propagates a parent's scale to its children.
    """
    p_scale = np.asarray(parent_scale, dtype=float)
    scaled = p_scale * np.asarray(local_position, dtype=float)
    position = np.asarray(parent_position, dtype=float) + rotate_vector(parent_rotation, scaled)
    rotation = normalize(multiply(parent_rotation, local_rotation))
    scale = p_scale * np.asarray(local_scale, dtype=float)
    return position, rotation, scale
