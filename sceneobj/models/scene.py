"""Scene data model — nodes, meshes, materials, textures.

These models describe the host scene the exporter reads.  They are never
mutated during an export; hosts that keep their own scene graph implement
:class:`sceneobj.scene.provider.NodeProvider` instead of building them.
"""

from __future__ import annotations

import base64
import enum
import json
from pathlib import Path
from typing import Any

from PIL import Image
from pydantic import BaseModel, Field, field_validator, model_validator

from sceneobj import mathutils


class Capability(enum.Flag):
    """Component types attached to a node."""

    NONE = 0
    MESH_RENDERER = enum.auto()
    SKINNED_MESH_RENDERER = enum.auto()
    SKYBOX = enum.auto()
    UI_ELEMENT = enum.auto()
    GUI_ELEMENT = enum.auto()
    CAMERA = enum.auto()
    LIGHT = enum.auto()

    @classmethod
    def from_names(cls, names: list[str]) -> Capability:
        flags = cls.NONE
        for name in names:
            flags |= cls[name.upper()]
        return flags


class RendererState(BaseModel):
    """Enabled / visible state of one renderer component."""

    enabled: bool = True
    visible: bool = True

    @property
    def draws(self) -> bool:
        return self.enabled and self.visible


class Color(BaseModel):
    """Linear RGBA color, components in 0-1."""

    r: float = 1.0
    g: float = 1.0
    b: float = 1.0
    a: float = 1.0


class Transform(BaseModel):
    """Local transform relative to the parent node.

    ``rotation`` is a quaternion ``(x, y, z, w)``; a 3-tuple is read as Euler
    angles in degrees.
    """

    position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    rotation: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)
    scale: tuple[float, float, float] = (1.0, 1.0, 1.0)

    @field_validator("rotation", mode="before")
    @classmethod
    def _euler_to_quat(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)) and len(value) == 3:
            return mathutils.quat_from_euler(*(float(v) for v in value))
        return value


class Texture(BaseModel):
    """Texture resource; ``pixels`` holds RGBA8 rows, top row first."""

    name: str
    width: int = Field(ge=0)
    height: int = Field(ge=0)
    pixels: bytes = b""
    readable: bool = False

    @classmethod
    def from_image(cls, name: str, image: Image.Image, *, readable: bool = False) -> Texture:
        rgba = image.convert("RGBA")
        return cls(
            name=name,
            width=rgba.width,
            height=rgba.height,
            pixels=rgba.tobytes(),
            readable=readable,
        )


class MaterialRef(BaseModel):
    """Material bound to a renderer slot."""

    name: str
    diffuse_color: Color | None = None
    specular_color: Color | None = None
    diffuse_map: Texture | None = None
    specular_map: Texture | None = None
    bump_map: Texture | None = None


class Mesh(BaseModel):
    """Local-space triangle mesh with one index list per submesh."""

    name: str = ""
    vertices: list[tuple[float, float, float]] = Field(default_factory=list)
    normals: list[tuple[float, float, float]] = Field(default_factory=list)
    uvs: list[tuple[float, float]] = Field(default_factory=list)
    submeshes: list[list[tuple[int, int, int]]] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_alignment(self) -> Mesh:
        count = len(self.vertices)
        if len(self.normals) != count:
            raise ValueError(
                f"mesh {self.name!r}: {len(self.normals)} normals for {count} vertices"
            )
        if self.uvs and len(self.uvs) != count:
            raise ValueError(
                f"mesh {self.name!r}: {len(self.uvs)} uvs for {count} vertices"
            )
        return self

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)


class SceneNode(BaseModel):
    """One node of the transform hierarchy."""

    name: str
    transform: Transform = Field(default_factory=Transform)
    active_self: bool = True
    layer: str = "Default"
    capabilities: Capability = Capability.NONE
    mesh_renderer: RendererState | None = None
    skinned_renderer: RendererState | None = None
    meshes: list[Mesh] = Field(default_factory=list)
    materials: list[MaterialRef | None] = Field(default_factory=list)
    children: list[SceneNode] = Field(default_factory=list)

    @field_validator("capabilities", mode="before")
    @classmethod
    def _parse_capabilities(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, Capability):
            return Capability(value)
        if isinstance(value, (list, tuple)):
            return Capability.from_names(list(value))
        return value

    @model_validator(mode="after")
    def _renderer_capabilities(self) -> SceneNode:
        if self.mesh_renderer is not None:
            self.capabilities |= Capability.MESH_RENDERER
        if self.skinned_renderer is not None:
            self.capabilities |= Capability.SKINNED_MESH_RENDERER
        return self


class Scene(BaseModel):
    """A scene: an ordered list of root nodes."""

    name: str = "Scene"
    roots: list[SceneNode] = Field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any], base_dir: str | Path = ".") -> Scene:
        """Build a Scene from a JSON-style dict.

        Textures may carry ``pixels_b64`` (raw RGBA8) or ``image`` (a path,
        relative to *base_dir*, of any image Pillow can open).
        """
        return cls.model_validate(_resolve_textures(data, Path(base_dir)))

    @classmethod
    def from_file(cls, path: str | Path) -> Scene:
        """Load a scene description from a JSON file."""
        path = Path(path)
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls.from_dict(data, base_dir=path.parent)


def _resolve_textures(data: Any, base_dir: Path) -> Any:
    """Replace texture descriptors with loaded pixel data, recursively."""
    if isinstance(data, list):
        return [_resolve_textures(item, base_dir) for item in data]
    if not isinstance(data, dict):
        return data

    if "pixels_b64" in data:
        resolved = {k: v for k, v in data.items() if k != "pixels_b64"}
        resolved["pixels"] = base64.b64decode(data["pixels_b64"])
        return resolved
    if "image" in data and "name" in data:
        with Image.open(base_dir / data["image"]) as img:
            img.load()
            texture = Texture.from_image(
                data["name"], img, readable=bool(data.get("readable", False)),
            )
        return texture.model_dump()

    return {k: _resolve_textures(v, base_dir) for k, v in data.items()}
