"""Host scene access — read-only node providers."""

from sceneobj.scene.provider import GroupNode, ModelNodeProvider, NodeProvider, roots_of

__all__ = [
    "GroupNode",
    "ModelNodeProvider",
    "NodeProvider",
    "roots_of",
]
