"""Assemble a curved screen description for a host engine.

The assembly is plain data: one group node carrying the group pose and one
child node per segment with its local transform, box UV array and the shared
material. The host creates the renderable objects from it.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from curved_screen.core.logging_setup import get_logger
from curved_screen.core import transforms
from curved_screen.core.screen_settings import GroupPose, ScreenConfig
from curved_screen.config.errors import SegmentCountMismatchError
from curved_screen.curve_layout import SegmentPose, compute_layout
from curved_screen.uv_slicer import BoxFace, UVQuad, box_uvs, compute_all_uvs

logger = get_logger(__name__)


@dataclass(frozen=True)
class MaterialSettings:
    """Unlit-looking PBR material: the texture is also emissive so it glows like a screen."""
    texture: Any = None
    roughness: float = 1.0
    specular_intensity: float = 0.0
    metallic: float = 0.0
    emissive_intensity: float = 1.0
    emissive_color: Tuple[float, float, float] = (1.0, 1.0, 1.0)

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]], texture: Any = None) -> "MaterialSettings":
        d = dict(d or {})
        if texture is not None:
            d['texture'] = texture
        known = {k: v for k, v in d.items() if k in cls.__dataclass_fields__}
        if 'emissive_color' in known:
            known['emissive_color'] = tuple(float(c) for c in known['emissive_color'])
        return cls(**known)

    @property
    def emissive_texture(self) -> Any:
        return self.texture

    def to_dict(self) -> Dict[str, Any]:
        return {
            'texture': self.texture,
            'roughness': self.roughness,
            'specular_intensity': self.specular_intensity,
            'metallic': self.metallic,
            'emissive_texture': self.emissive_texture,
            'emissive_intensity': self.emissive_intensity,
            'emissive_color': list(self.emissive_color),
        }


@dataclass
class SegmentNode:
    name: str
    parent: str
    pose: SegmentPose
    uv: UVQuad
    uvs: List[float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'parent': self.parent,
            'position': list(self.pose.position),
            'rotation': list(self.pose.rotation),
            'scale': list(self.pose.scale),
            'uvs': list(self.uvs),
        }


@dataclass
class ScreenAssembly:
    """Container for an assembled screen."""
    name: str
    config: ScreenConfig
    material: MaterialSettings
    nodes: List[SegmentNode] = field(default_factory=list)

    @property
    def group_pose(self) -> GroupPose:
        return self.config.group_pose

    @property
    def poses(self) -> List[SegmentPose]:
        return [n.pose for n in self.nodes]

    @property
    def uv_quads(self) -> List[UVQuad]:
        return [n.uv for n in self.nodes]

    def world_transforms(self) -> List[Tuple[np.ndarray, np.ndarray, np.ndarray]]:
        """(position, rotation, scale) of every segment in world coordinates."""
        parent_position, parent_rotation, parent_scale = self.group_pose.as_arrays()
        return [
            transforms.to_world(n.pose.position, n.pose.rotation, n.pose.scale,
                                parent_position, parent_rotation, parent_scale)
            for n in self.nodes
        ]

    def to_dict(self) -> Dict[str, Any]:
        pose = self.group_pose
        return {
            'group': {
                'name': self.name,
                'position': list(pose.position),
                'rotation': list(pose.rotation),
                'scale': list(pose.scale),
            },
            'material': self.material.to_dict(),
            'segments': [n.to_dict() for n in self.nodes],
        }

    def __repr__(self):
        return f"ScreenAssembly('{self.name}', {len(self.nodes)} segments)"


def build_curved_screen(config: ScreenConfig,
                        texture: Any = None,
                        name: str = "curved_screen",
                        material: Optional[MaterialSettings] = None,
                        visible_face: BoxFace = BoxFace.RIGHT) -> ScreenAssembly:
    """
    Build the full description of a curved screen.

    Args:
        config: Screen parameters and group pose
        texture: Opaque texture reference shared by every segment
        name: Group name, also the prefix of segment names
        material: Material settings; texture overrides material.texture when given
        visible_face: Box face that carries the texture

    Returns:
        ScreenAssembly with one node per segment, left to right
    """
    config.validate()
    if material is None:
        material = MaterialSettings(texture=texture)
    elif texture is not None:
        material = MaterialSettings.from_dict(material.to_dict(), texture=texture)

    logger.info(f"Building '{name}': {config.segment_count} segments, "
                f"{config.screen_width} x {config.screen_height}, "
                f"curve_factor={config.resolved_curve_factor}")

    poses = compute_layout(config)
    quads = compute_all_uvs(config.segment_count)

    assembly = ScreenAssembly(name=name, config=config, material=material)
    width = len(str(config.segment_count - 1))
    for pose, quad in combine(poses, quads):
        assembly.nodes.append(SegmentNode(
            name=f"{name}_segment_{pose.index:0{width}d}",
            parent=name,
            pose=pose,
            uv=quad,
            uvs=box_uvs(pose.index, config.segment_count, visible_face),
        ))

    logger.info(f"✓ Built {assembly}")
    return assembly


def combine(poses: List[SegmentPose], quads: List[UVQuad]) -> List[Tuple[SegmentPose, UVQuad]]:
    """Pair poses with UV quads, refusing sequences generated for different counts."""
    if len(poses) != len(quads):
        raise SegmentCountMismatchError(f"{len(poses)} poses but {len(quads)} UV quads")
    for pose, quad in zip(poses, quads):
        if pose.index != quad.segment_index:
            raise SegmentCountMismatchError(
                f"pose {pose.index} paired with UV quad {quad.segment_index}")
    return list(zip(poses, quads))
