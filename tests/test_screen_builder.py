# tests/test_screen_builder.py
"""Test assembling a curved screen description"""
import json

import numpy as np
import pytest

from curved_screen.config.errors import ScreenConfigError, SegmentCountMismatchError
from curved_screen.core import transforms
from curved_screen.core.screen_settings import GroupPose, ScreenConfig
from curved_screen.curve_layout import compute_segment_poses
from curved_screen.screen_builder import MaterialSettings, build_curved_screen, combine
from curved_screen.uv_slicer import BoxFace, compute_all_uvs, face_uvs


VIDEO = "https://player.example.com/stream.m3u8"


class TestBuildCurvedScreen:

    def test_reference_screen(self):
        screen = build_curved_screen(ScreenConfig(), texture=VIDEO, name="main")
        assert len(screen.nodes) == 22
        assert screen.nodes[0].name == "main_segment_00"
        assert screen.nodes[-1].name == "main_segment_21"
        assert all(node.parent == "main" for node in screen.nodes)
        assert screen.material.texture == VIDEO
        assert screen.material.emissive_texture == VIDEO

    def test_nodes_pair_pose_and_uv_by_index(self):
        screen = build_curved_screen(ScreenConfig(segment_count=7, curve_factor=0.2))
        for i, node in enumerate(screen.nodes):
            assert node.pose.index == node.uv.segment_index == i
            assert face_uvs(node.uvs, BoxFace.RIGHT) == node.uv.as_list()
        assert screen.poses == compute_segment_poses(7, 16.0, 9.0, 0.2)

    def test_default_material(self):
        material = build_curved_screen(ScreenConfig(segment_count=2)).material
        assert material.roughness == 1.0
        assert material.specular_intensity == 0.0
        assert material.metallic == 0.0
        assert material.emissive_intensity == 1.0
        assert material.emissive_color == (1.0, 1.0, 1.0)

    def test_texture_overrides_material_texture(self):
        material = MaterialSettings(texture="old.png", roughness=0.5)
        screen = build_curved_screen(ScreenConfig(segment_count=2), texture="new.png", material=material)
        assert screen.material.texture == "new.png"
        assert screen.material.roughness == 0.5

    def test_invalid_config_builds_nothing(self):
        with pytest.raises(ScreenConfigError):
            build_curved_screen(ScreenConfig(segment_count=0))

    def test_non_numeric_curve_factor_builds_nothing(self):
        with pytest.raises(ScreenConfigError, match="curve_factor"):
            build_curved_screen(ScreenConfig(curve_factor="0.5"))

    def test_to_dict_is_json_serialisable(self):
        screen = build_curved_screen(ScreenConfig(segment_count=3), texture=VIDEO, name="wall")
        data = json.loads(json.dumps(screen.to_dict()))
        assert data['group']['name'] == "wall"
        assert data['group']['rotation'] == [0.0, 0.0, 0.0, 1.0]
        assert data['material']['texture'] == VIDEO
        assert len(data['segments']) == 3
        assert all(len(s['uvs']) == 48 for s in data['segments'])
        assert data['segments'][1]['position'] == pytest.approx([0.0, 0.0, 0.0], abs=1e-12)


class TestWorldTransforms:

    def test_identity_group_keeps_local_pose(self):
        screen = build_curved_screen(ScreenConfig(segment_count=5))
        for node, (position, rotation, scale) in zip(screen.nodes, screen.world_transforms()):
            assert position == pytest.approx(node.pose.position)
            assert rotation == pytest.approx(node.pose.rotation)
            assert scale == pytest.approx(node.pose.scale)

    def test_group_pose_moves_whole_screen(self):
        group = GroupPose.from_dict({'position': [0.875, 5.3, 16.0], 'rotation': [0, 90, 0]})
        screen = build_curved_screen(ScreenConfig(segment_count=22, group_pose=group))
        world = screen.world_transforms()

        # Centre pair straddles the group origin
        midpoint = (world[10][0] + world[11][0]) / 2
        assert midpoint[0] == pytest.approx(0.875 + midpoint_depth(screen), abs=1e-9)
        assert midpoint[1] == pytest.approx(5.3)
        assert midpoint[2] == pytest.approx(16.0, abs=1e-9)

        # Rigid motion preserves distances between segment centres
        local = np.array([n.pose.position for n in screen.nodes])
        moved = np.array([w[0] for w in world])
        assert np.linalg.norm(np.diff(moved, axis=0), axis=1) == pytest.approx(
            np.linalg.norm(np.diff(local, axis=0), axis=1))

        for node, (_, rotation, _) in zip(screen.nodes, world):
            assert transforms.yaw_degrees(rotation) == pytest.approx(90.0 + node.pose.rotation_y_degrees)


def midpoint_depth(screen):
    """Local z of the centre pair, which turns into world x under a 90° yaw"""
    return (screen.nodes[10].pose.z + screen.nodes[11].pose.z) / 2


class TestCombine:

    def test_length_mismatch(self):
        poses = compute_segment_poses(22, 16.0, 9.0)
        with pytest.raises(SegmentCountMismatchError):
            combine(poses, compute_all_uvs(21))

    def test_index_mismatch(self):
        poses = compute_segment_poses(4, 16.0, 9.0)
        quads = compute_all_uvs(4)
        quads.reverse()
        with pytest.raises(SegmentCountMismatchError):
            combine(poses, quads)

    def test_mismatch_is_screen_config_error(self):
        assert issubclass(SegmentCountMismatchError, ScreenConfigError)
