"""sceneobj — snapshot a hierarchical 3D scene to Wavefront OBJ + MTL."""

__version__ = "1.0.0"

from sceneobj.bridge import ExportBridge
from sceneobj.config import ExportSettings, load_settings
from sceneobj.export.base import ExportError, ExportResult
from sceneobj.export.session import ExportSession, export_scene
from sceneobj.models.scene import (
    Capability,
    Color,
    MaterialRef,
    Mesh,
    RendererState,
    Scene,
    SceneNode,
    Texture,
    Transform,
)
from sceneobj.scene.provider import NodeProvider

__all__ = [
    "__version__",
    # Entry points
    "ExportBridge",
    "ExportSession",
    "export_scene",
    # Results and errors
    "ExportError",
    "ExportResult",
    # Settings
    "ExportSettings",
    "load_settings",
    # Scene model
    "Capability",
    "Color",
    "MaterialRef",
    "Mesh",
    "NodeProvider",
    "RendererState",
    "Scene",
    "SceneNode",
    "Texture",
    "Transform",
]
