"""Tests for the scene model, node providers and math helpers."""

from __future__ import annotations

import base64
import json
import math
from pathlib import Path

import pytest
from PIL import Image
from pydantic import ValidationError

from sceneobj import mathutils
from sceneobj.models.scene import (
    Capability,
    Mesh,
    RendererState,
    Scene,
    SceneNode,
    Texture,
    Transform,
)
from sceneobj.scene.provider import GroupNode, ModelNodeProvider, roots_of


# ---------------------------------------------------------------------------
# Math helpers
# ---------------------------------------------------------------------------


class TestMathUtils:
    def test_rotate_identity(self):
        assert mathutils.rotate(mathutils.IDENTITY, (1.0, 2.0, 3.0)) == (1.0, 2.0, 3.0)

    def test_rotate_90_about_y(self):
        q = mathutils.quat_from_euler(0, 90, 0)
        x, y, z = mathutils.rotate(q, (1.0, 0.0, 0.0))
        assert x == pytest.approx(0.0, abs=1e-9)
        assert y == pytest.approx(0.0, abs=1e-9)
        assert z == pytest.approx(-1.0)

    def test_rotate_90_about_z(self):
        q = mathutils.quat_from_euler(0, 0, 90)
        x, y, z = mathutils.rotate(q, (1.0, 0.0, 0.0))
        assert (x, y, z) == pytest.approx((0.0, 1.0, 0.0), abs=1e-9)

    def test_quat_mul_composes_rotations(self):
        q90 = mathutils.quat_from_euler(0, 0, 90)
        q180 = mathutils.quat_mul(q90, q90)
        assert mathutils.rotate(q180, (1.0, 0.0, 0.0)) == pytest.approx(
            (-1.0, 0.0, 0.0), abs=1e-9,
        )

    def test_normalize(self):
        n = mathutils.normalize((3.0, 0.0, 4.0))
        assert n == pytest.approx((0.6, 0.0, 0.8))
        assert mathutils.length(n) == pytest.approx(1.0)

    def test_normalize_zero_vector(self):
        assert mathutils.normalize((0.0, 0.0, 0.0)) == (0.0, 0.0, 0.0)

    def test_mirror_x(self):
        assert mathutils.mirror_x((1.0, 2.0, 3.0)) == (-1.0, 2.0, 3.0)

    @pytest.mark.parametrize(
        ("scale", "expected"),
        [
            ((1.0, 1.0, 1.0), 1),
            ((-1.0, 1.0, 1.0), -1),
            ((-1.0, 1.0, -1.0), 1),
            ((5.0, 1.0, 5.0), 1),
            ((-5.0, 1.0, 5.0), -1),
            ((0.5, 1.0, -0.5), 0),
            ((0.0, 1.0, 1.0), 0),
            ((1.0, -1.0, 1.0), 1),
        ],
    )
    def test_face_order(self, scale, expected):
        assert mathutils.face_order(scale) == expected


# ---------------------------------------------------------------------------
# Scene model
# ---------------------------------------------------------------------------


class TestMeshModel:
    def test_normals_must_align(self):
        with pytest.raises(ValidationError):
            Mesh(vertices=[(0, 0, 0), (1, 0, 0)], normals=[(0, 1, 0)])

    def test_uvs_may_be_empty(self):
        mesh = Mesh(vertices=[(0, 0, 0)], normals=[(0, 1, 0)])
        assert mesh.uvs == []
        assert mesh.vertex_count == 1

    def test_uvs_must_align_when_present(self):
        with pytest.raises(ValidationError):
            Mesh(vertices=[(0, 0, 0)], normals=[(0, 1, 0)], uvs=[(0, 0), (1, 1)])


class TestSceneNodeModel:
    def test_capabilities_from_names(self):
        node = SceneNode(name="Cam", capabilities=["camera", "LIGHT"])
        assert node.capabilities & Capability.CAMERA
        assert node.capabilities & Capability.LIGHT
        assert not node.capabilities & Capability.SKYBOX

    def test_renderers_imply_capabilities(self):
        node = SceneNode(
            name="Body",
            mesh_renderer=RendererState(),
            skinned_renderer=RendererState(enabled=False),
        )
        assert node.capabilities & Capability.MESH_RENDERER
        assert node.capabilities & Capability.SKINNED_MESH_RENDERER

    def test_renderer_draws(self):
        assert RendererState().draws
        assert not RendererState(visible=False).draws
        assert not RendererState(enabled=False).draws


class TestSceneLoading:
    def test_from_file(self, tmp_path: Path):
        Image.new("RGBA", (4, 2), (255, 0, 0, 255)).save(tmp_path / "brick.png")
        raw = bytes([0, 255, 0, 255] * 4)

        data = {
            "name": "Yard",
            "roots": [
                {
                    "name": "Wall",
                    "transform": {"position": [1, 2, 3], "scale": [2, 2, 2]},
                    "mesh_renderer": {"enabled": True, "visible": True},
                    "meshes": [
                        {
                            "name": "quad",
                            "vertices": [[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0]],
                            "normals": [[0, 0, 1]] * 4,
                            "uvs": [[0, 0], [1, 0], [1, 1], [0, 1]],
                            "submeshes": [[[0, 1, 2], [0, 2, 3]]],
                        }
                    ],
                    "materials": [
                        {
                            "name": "Brick Red",
                            "diffuse_color": {"r": 1, "g": 0.5, "b": 0.25},
                            "diffuse_map": {"name": "brick", "image": "brick.png"},
                            "bump_map": {
                                "name": "grass",
                                "width": 2,
                                "height": 2,
                                "pixels_b64": base64.b64encode(raw).decode("ascii"),
                            },
                        }
                    ],
                    "children": [{"name": "Sun", "capabilities": ["light"]}],
                }
            ],
        }
        scene_path = tmp_path / "scene.json"
        scene_path.write_text(json.dumps(data), encoding="utf-8")

        scene = Scene.from_file(scene_path)

        assert scene.name == "Yard"
        wall = scene.roots[0]
        assert wall.transform.position == (1.0, 2.0, 3.0)
        assert wall.meshes[0].submeshes[0] == [(0, 1, 2), (0, 2, 3)]
        material = wall.materials[0]
        assert material.diffuse_map.width == 4
        assert material.diffuse_map.height == 2
        assert len(material.diffuse_map.pixels) == 4 * 2 * 4
        assert material.bump_map.pixels == raw
        assert wall.children[0].capabilities & Capability.LIGHT

    def test_euler_rotation(self):
        transform = Transform.model_validate({"rotation": [0, 0, 90]})
        assert transform.rotation == pytest.approx(mathutils.quat_from_euler(0, 0, 90))
        assert transform.rotation[3] == pytest.approx(math.sqrt(0.5))

    def test_texture_from_image(self):
        img = Image.new("RGB", (3, 3), (10, 20, 30))
        tex = Texture.from_image("tile", img)
        assert tex.width == 3
        assert tex.pixels[:4] == bytes([10, 20, 30, 255])
        assert not tex.readable


# ---------------------------------------------------------------------------
# Providers
# ---------------------------------------------------------------------------


class TestModelNodeProvider:
    def test_root_uses_local_transform(self):
        node = SceneNode(
            name="Root",
            transform=Transform(position=(1, 2, 3), scale=(2, 3, 4)),
        )
        provider = ModelNodeProvider(node)
        assert provider.world_position == (1, 2, 3)
        assert provider.world_scale == (2, 3, 4)
        assert provider.active_in_hierarchy

    def test_child_world_transform(self):
        child = SceneNode(name="Child", transform=Transform(position=(1, 0, 0)))
        parent = SceneNode(
            name="Parent",
            transform=Transform(
                position=(10, 0, 0),
                rotation=mathutils.quat_from_euler(0, 0, 90),
                scale=(2, 2, 2),
            ),
            children=[child],
        )
        (child_provider,) = ModelNodeProvider(parent).children()

        assert child_provider.world_position == pytest.approx((10.0, 2.0, 0.0), abs=1e-9)
        assert child_provider.world_scale == (2, 2, 2)
        x, y, z = mathutils.rotate(child_provider.world_rotation, (1.0, 0.0, 0.0))
        assert (x, y, z) == pytest.approx((0.0, 1.0, 0.0), abs=1e-9)

    def test_negative_scale_accumulates(self):
        child = SceneNode(name="Child", transform=Transform(scale=(-1, 1, 1)))
        parent = SceneNode(
            name="Parent", transform=Transform(scale=(1, 1, -2)), children=[child],
        )
        (child_provider,) = ModelNodeProvider(parent).children()
        assert child_provider.world_scale == (-1, 1, -2)

    def test_inactive_parent_deactivates_children(self):
        child = SceneNode(name="Child")
        parent = SceneNode(name="Parent", active_self=False, children=[child])
        (child_provider,) = ModelNodeProvider(parent).children()

        assert child_provider.active_self
        assert not child_provider.active_in_hierarchy

    def test_roots_of(self):
        scene = Scene(roots=[SceneNode(name="A"), SceneNode(name="B")])
        assert [p.name for p in roots_of(scene)] == ["A", "B"]


class TestGroupNode:
    def test_group_is_neutral(self):
        roots = roots_of(Scene(roots=[SceneNode(name="A"), SceneNode(name="B")]))
        group = GroupNode(roots)

        assert group.children() == roots
        assert group.world_scale == (1.0, 1.0, 1.0)
        assert group.active_in_hierarchy
        assert not group.meshes
        assert math.isclose(group.world_rotation[3], 1.0)
