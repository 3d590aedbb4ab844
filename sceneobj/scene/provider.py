"""Read-only node provider interface consumed by the exporter.

The exporter never touches a concrete scene graph.  Hosts implement
:class:`NodeProvider` over their own node type; :class:`ModelNodeProvider`
does so for the pydantic models in :mod:`sceneobj.models.scene`.
"""

from __future__ import annotations

import abc
from collections.abc import Sequence

from sceneobj import mathutils
from sceneobj.mathutils import Quat, Vec3
from sceneobj.models.scene import (
    Capability,
    MaterialRef,
    Mesh,
    RendererState,
    Scene,
    SceneNode,
)


class NodeProvider(abc.ABC):
    """World-space view of one scene node."""

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Node name as shown by the host."""

    @property
    @abc.abstractmethod
    def world_position(self) -> Vec3:
        """Position of the node in world space."""

    @property
    @abc.abstractmethod
    def world_rotation(self) -> Quat:
        """Orientation of the node in world space."""

    @property
    @abc.abstractmethod
    def world_scale(self) -> Vec3:
        """Accumulated (lossy) scale of the node in world space."""

    @property
    @abc.abstractmethod
    def active_self(self) -> bool:
        """The node's own active flag."""

    @property
    @abc.abstractmethod
    def active_in_hierarchy(self) -> bool:
        """True when the node and every ancestor are active."""

    @property
    @abc.abstractmethod
    def layer(self) -> str:
        """Layer name."""

    @property
    @abc.abstractmethod
    def capabilities(self) -> Capability:
        """Component types attached to the node."""

    @property
    @abc.abstractmethod
    def mesh_renderer(self) -> RendererState | None:
        """Standard mesh renderer state, if attached."""

    @property
    @abc.abstractmethod
    def skinned_renderer(self) -> RendererState | None:
        """Skinned mesh renderer state, if attached."""

    @property
    @abc.abstractmethod
    def meshes(self) -> Sequence[Mesh]:
        """Meshes carried by the node."""

    @property
    @abc.abstractmethod
    def materials(self) -> Sequence[MaterialRef | None]:
        """Renderer material slots, in slot order."""

    @abc.abstractmethod
    def children(self) -> Sequence[NodeProvider]:
        """Child nodes in hierarchy order."""


class ModelNodeProvider(NodeProvider):
    """NodeProvider over a :class:`SceneNode`, composing world transforms."""

    def __init__(self, node: SceneNode, parent: ModelNodeProvider | None = None) -> None:
        self._node = node
        self._parent = parent

        local = node.transform
        if parent is None:
            self._position: Vec3 = local.position
            self._rotation: Quat = local.rotation
            self._scale: Vec3 = local.scale
            self._active_in_hierarchy = node.active_self
        else:
            offset = mathutils.rotate(
                parent.world_rotation, mathutils.mul(parent.world_scale, local.position),
            )
            self._position = mathutils.add(parent.world_position, offset)
            self._rotation = mathutils.quat_mul(parent.world_rotation, local.rotation)
            self._scale = mathutils.mul(parent.world_scale, local.scale)
            self._active_in_hierarchy = parent.active_in_hierarchy and node.active_self

    def __repr__(self) -> str:
        return f"ModelNodeProvider({self._node.name!r})"

    @property
    def name(self) -> str:
        return self._node.name

    @property
    def world_position(self) -> Vec3:
        return self._position

    @property
    def world_rotation(self) -> Quat:
        return self._rotation

    @property
    def world_scale(self) -> Vec3:
        return self._scale

    @property
    def active_self(self) -> bool:
        return self._node.active_self

    @property
    def active_in_hierarchy(self) -> bool:
        return self._active_in_hierarchy

    @property
    def layer(self) -> str:
        return self._node.layer

    @property
    def capabilities(self) -> Capability:
        return self._node.capabilities

    @property
    def mesh_renderer(self) -> RendererState | None:
        return self._node.mesh_renderer

    @property
    def skinned_renderer(self) -> RendererState | None:
        return self._node.skinned_renderer

    @property
    def meshes(self) -> Sequence[Mesh]:
        return self._node.meshes

    @property
    def materials(self) -> Sequence[MaterialRef | None]:
        return self._node.materials

    def children(self) -> list[ModelNodeProvider]:
        return [ModelNodeProvider(child, self) for child in self._node.children]


class GroupNode(NodeProvider):
    """Synthetic parent used to traverse several roots as one hierarchy."""

    def __init__(self, roots: Sequence[NodeProvider]) -> None:
        self._roots = list(roots)

    name = "__group__"
    world_position = mathutils.ZERO
    world_rotation = mathutils.IDENTITY
    world_scale = mathutils.ONE
    active_self = True
    active_in_hierarchy = True
    layer = "Default"
    capabilities = Capability.NONE
    mesh_renderer = None
    skinned_renderer = None
    meshes: Sequence[Mesh] = ()
    materials: Sequence[MaterialRef | None] = ()

    def children(self) -> list[NodeProvider]:
        return list(self._roots)


def roots_of(scene: Scene) -> list[ModelNodeProvider]:
    """Wrap the roots of *scene* as providers."""
    return [ModelNodeProvider(root) for root in scene.roots]
