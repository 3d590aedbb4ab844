"""SceneFilter — selects the exportable mesh instances of a scene."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

from sceneobj.config import BLOCKED_LAYERS, EXCLUDED_CAPABILITIES
from sceneobj.models.scene import Capability, MaterialRef, Mesh
from sceneobj.scene.provider import GroupNode, NodeProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MeshInstance:
    """One (node, mesh, material slots) triple exported as one OBJ group."""

    node: NodeProvider
    mesh: Mesh
    materials: Sequence[MaterialRef | None]


class SceneFilter:
    """Depth-first traversal yielding the visible, exportable mesh instances.

    Parameters
    ----------
    blocked_layers:
        Upper-case layer names whose nodes are skipped.
    excluded:
        Capabilities that disqualify a node (cameras, lights, UI, sky).
    """

    def __init__(
        self,
        *,
        blocked_layers: Iterable[str] = BLOCKED_LAYERS,
        excluded: Capability = EXCLUDED_CAPABILITIES,
    ) -> None:
        self._blocked_layers = frozenset(layer.upper() for layer in blocked_layers)
        self._excluded = excluded

    def iter_instances(self, roots: Sequence[NodeProvider]) -> Iterator[MeshInstance]:
        """Yield mesh instances of *roots* in depth-first, hierarchy order."""
        if not roots:
            return
        top = roots[0] if len(roots) == 1 else GroupNode(roots)

        stack: list[NodeProvider] = [top]
        while stack:
            node = stack.pop()
            if node.meshes:
                reason = self.rejection_reason(node)
                if reason is None:
                    for mesh in node.meshes:
                        yield MeshInstance(node=node, mesh=mesh, materials=node.materials)
                else:
                    logger.debug("Skipping node '%s': %s", node.name, reason)
            stack.extend(reversed(node.children()))

    def rejection_reason(self, node: NodeProvider) -> str | None:
        """Return why *node* is excluded, or None when it is exportable."""
        if node.layer.upper() in self._blocked_layers:
            return f"layer {node.layer!r} is blocked"
        if not node.active_in_hierarchy or not node.active_self:
            return "inactive"
        if node.capabilities & self._excluded:
            return "excluded component attached"
        if not _draws(node):
            return "no enabled, visible renderer"
        return None


def _draws(node: NodeProvider) -> bool:
    """True when a mesh or skinned mesh renderer would draw the node."""
    for state in (node.mesh_renderer, node.skinned_renderer):
        if state is not None and state.enabled and state.visible:
            return True
    return False
