"""GeometryBaker — world-space vertices, normals and faces for one instance.

Vertices are scaled, rotated about the world origin, translated and then
mirrored on X to move from the host's left-handed frame to OBJ's right-handed
one.  Normals get the direction of the scale only and are never translated.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from sceneobj import mathutils
from sceneobj.export.base import ExportError, sanitize_name
from sceneobj.export.filter import MeshInstance
from sceneobj.mathutils import Vec2, Vec3

logger = logging.getLogger(__name__)

Face = tuple[int, int, int]


@dataclass
class SubmeshFaces:
    """Faces of one submesh, as 1-based global indices in emitted order."""

    material_name: str
    faces: list[Face] = field(default_factory=list)


@dataclass
class BakedMesh:
    """World-space geometry of one mesh instance."""

    vertices: list[Vec3] = field(default_factory=list)
    normals: list[Vec3] = field(default_factory=list)
    uvs: list[Vec2] = field(default_factory=list)
    submeshes: list[SubmeshFaces] = field(default_factory=list)
    face_order: int = 1

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    def to_lines(self, fmt: Callable[[float], str]) -> list[str]:
        """Render ``v``/``vn``/``vt``/``usemtl``/``f`` lines."""
        lines: list[str] = []
        for x, y, z in self.vertices:
            lines.append(f"v {fmt(x)} {fmt(y)} {fmt(z)}")
        for x, y, z in self.normals:
            lines.append(f"vn {fmt(x)} {fmt(y)} {fmt(z)}")
        for u, v in self.uvs:
            lines.append(f"vt {fmt(u)} {fmt(v)}")
        for submesh in self.submeshes:
            lines.append(f"usemtl {submesh.material_name}")
            for a, b, c in submesh.faces:
                lines.append(f"f {_triple(a)} {_triple(b)} {_triple(c)}")
        return lines


def _triple(index: int) -> str:
    return f"{index}/{index}/{index}"


class GeometryBaker:
    """Bakes mesh instances into world space."""

    def bake(self, instance: MeshInstance, offset: int) -> BakedMesh:
        """Bake *instance*; *offset* is the running vertex count of the export."""
        mesh = instance.mesh
        if mesh.vertex_count == 0:
            logger.debug("Mesh '%s' on '%s' has no vertices", mesh.name, instance.node.name)
            return BakedMesh()

        node = instance.node
        position = node.world_position
        rotation = node.world_rotation
        scale = node.world_scale
        unit_scale = mathutils.normalize(scale)

        baked = BakedMesh(face_order=mathutils.face_order(scale))

        for vertex in mesh.vertices:
            v = mathutils.mul(vertex, scale)
            v = mathutils.rotate(rotation, v)
            v = mathutils.add(v, position)
            baked.vertices.append(mathutils.mirror_x(v))

        for normal in mesh.normals:
            n = mathutils.mul(normal, unit_scale)
            n = mathutils.rotate(rotation, n)
            baked.normals.append(mathutils.mirror_x(n))

        baked.uvs = list(mesh.uvs)

        mesh_name = sanitize_name(node.name)
        count = mesh.vertex_count
        for sub_index, triangles in enumerate(mesh.submeshes):
            submesh = SubmeshFaces(
                material_name=_material_name(instance, mesh_name, sub_index),
            )
            for triangle in triangles:
                if any(i < 0 or i >= count for i in triangle):
                    raise ExportError(
                        f"Mesh '{mesh.name}' on '{node.name}': triangle {triangle} "
                        f"out of range for {count} vertices"
                    )
                first, second, third = (i + 1 + offset for i in triangle)
                if baked.face_order < 0:
                    submesh.faces.append((third, second, first))
                else:
                    submesh.faces.append((first, second, third))
            baked.submeshes.append(submesh)

        return baked


def _material_name(instance: MeshInstance, mesh_name: str, sub_index: int) -> str:
    """Material referenced by submesh *sub_index*, synthetic when unbound."""
    materials = instance.materials
    if sub_index < len(materials) and materials[sub_index] is not None:
        return sanitize_name(materials[sub_index].name)
    return f"{mesh_name}_sm{sub_index}"
