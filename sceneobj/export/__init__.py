"""OBJ export pipeline — filter, bake, serialize materials, extract textures."""

from sceneobj.export.base import (
    ExportError,
    ExportResult,
    TextureExported,
    TextureFailed,
    sanitize_name,
)
from sceneobj.export.filter import MeshInstance, SceneFilter
from sceneobj.export.geometry import BakedMesh, GeometryBaker
from sceneobj.export.materials import MaterialLibraryBuilder
from sceneobj.export.session import ExportSession, export_scene
from sceneobj.export.textures import (
    RenderBackend,
    SoftwareRenderBackend,
    TextureExtractor,
)

__all__ = [
    "BakedMesh",
    "ExportError",
    "ExportResult",
    "ExportSession",
    "GeometryBaker",
    "MaterialLibraryBuilder",
    "MeshInstance",
    "RenderBackend",
    "SceneFilter",
    "SoftwareRenderBackend",
    "TextureExported",
    "TextureExtractor",
    "TextureFailed",
    "export_scene",
    "sanitize_name",
]
