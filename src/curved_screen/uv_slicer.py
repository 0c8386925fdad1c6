"""Texture slicing for curved screen segments.

The source texture is cut into equal vertical strips, one per segment. Each
segment is a box primitive whose visible face is the RIGHT face; seen from
the front that face runs opposite to ascending x, so strips are assigned in
reverse index order. Within a strip, u runs end-to-start across the face's
corners so the strip itself is not mirrored.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Tuple

from curved_screen.config.errors import ScreenConfigError

UV = Tuple[float, float]

CORNERS_PER_FACE = 4
FLOATS_PER_FACE = CORNERS_PER_FACE * 2


class BoxFace(IntEnum):
    """Face order of the host's box primitive UV array."""
    TOP = 0
    BOTTOM = 1
    BACK = 2
    FRONT = 3
    RIGHT = 4
    LEFT = 5


@dataclass(frozen=True)
class UVQuad:
    """UV corners of a segment's visible face, in the host's face-vertex order."""
    segment_index: int
    u_start: float
    u_end: float
    corners: Tuple[UV, UV, UV, UV]

    def as_list(self) -> List[float]:
        return [c for corner in self.corners for c in corner]

    def __repr__(self):
        return f"UVQuad({self.segment_index}: u=[{self.u_start:.4f}, {self.u_end:.4f}])"


def _check_count(total_segments: int) -> None:
    if total_segments <= 0:
        raise ScreenConfigError(f"total_segments must be at least 1, got {total_segments}")


def _check_index(segment_index: int, total_segments: int) -> None:
    _check_count(total_segments)
    if not 0 <= segment_index < total_segments:
        raise ScreenConfigError(
            f"segment_index {segment_index} out of range for {total_segments} segments")


def compute_segment_uv(segment_index: int, total_segments: int) -> UVQuad:
    """UV quad covering this segment's strip of the source texture."""
    _check_index(segment_index, total_segments)

    reversed_index = (total_segments - 1) - segment_index
    u_start = reversed_index / total_segments
    u_end = (reversed_index + 1) / total_segments

    # top-left, top-right, bottom-right, bottom-left
    corners = (
        (u_end, 1.0),
        (u_start, 1.0),
        (u_start, 0.0),
        (u_end, 0.0),
    )
    return UVQuad(segment_index, u_start, u_end, corners)


def compute_all_uvs(total_segments: int) -> List[UVQuad]:
    _check_count(total_segments)
    return [compute_segment_uv(i, total_segments) for i in range(total_segments)]


def box_uvs(segment_index: int,
            total_segments: int,
            visible_face: BoxFace = BoxFace.RIGHT) -> List[float]:
    """
    Full UV array for a box primitive: 6 faces x 4 corners x (u, v).

    Every face except the visible one collapses onto (0, 0) so it never
    samples the texture.
    """
    quad = compute_segment_uv(segment_index, total_segments)
    uvs = [0.0] * (len(BoxFace) * FLOATS_PER_FACE)
    start = int(visible_face) * FLOATS_PER_FACE
    uvs[start:start + FLOATS_PER_FACE] = quad.as_list()
    return uvs


def face_uvs(uvs: List[float], face: BoxFace) -> List[float]:
    """The eight floats belonging to one face of a box UV array."""
    start = int(face) * FLOATS_PER_FACE
    return uvs[start:start + FLOATS_PER_FACE]
