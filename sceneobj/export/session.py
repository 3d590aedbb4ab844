"""ExportSession — one OBJ + MTL export of a scene."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from sceneobj.config import ExportSettings
from sceneobj.export.base import ExportResult, sanitize_name
from sceneobj.export.filter import SceneFilter
from sceneobj.export.geometry import GeometryBaker
from sceneobj.export.materials import MaterialLibraryBuilder
from sceneobj.export.textures import (
    RenderBackend,
    SoftwareRenderBackend,
    TextureExtractor,
)
from sceneobj.models.scene import Scene
from sceneobj.scene.provider import NodeProvider, roots_of

logger = logging.getLogger(__name__)


class ExportSession:
    """Drives filtering, baking and material serialization for one export.

    A session holds the running vertex offset and the material dedup cache
    and is meant to be discarded after :meth:`run`.

    Parameters
    ----------
    export_path:
        Destination ``.obj`` path; the ``.mtl`` file is written beside it
        with the same base name.
    settings:
        Export settings; defaults apply when omitted.
    backend:
        Render backend used to read texture pixels.
    """

    def __init__(
        self,
        export_path: str | Path,
        settings: ExportSettings | None = None,
        backend: RenderBackend | None = None,
    ) -> None:
        path = Path(export_path)
        self.export_dir = path.parent
        self.base_name = path.stem
        self.settings = settings or ExportSettings()

        self._filter = SceneFilter(blocked_layers=self.settings.blocked_layers)
        self._baker = GeometryBaker()
        self._materials = MaterialLibraryBuilder(
            TextureExtractor(
                self.export_dir,
                backend or SoftwareRenderBackend(),
                textures_dir=self.settings.textures_dir,
            ),
            self.settings.format_float,
        )
        self._obj_lines: list[str] = [f"mtllib {self.base_name}.mtl"]
        self._offset = 0
        self._done = False

    @property
    def obj_path(self) -> Path:
        return self.export_dir / f"{self.base_name}.obj"

    @property
    def mtl_path(self) -> Path:
        return self.export_dir / f"{self.base_name}.mtl"

    def run(self, roots: Sequence[NodeProvider]) -> ExportResult:
        """Export every mesh instance under *roots* and write both files."""
        if self._done:
            raise RuntimeError("ExportSession objects are single-use")
        self._done = True

        self.export_dir.mkdir(parents=True, exist_ok=True)

        instance_count = 0
        for index, instance in enumerate(self._filter.iter_instances(roots)):
            self._obj_lines.append(f"g {sanitize_name(instance.node.name)}_{index}")

            for material in instance.materials:
                if material is not None:
                    self._materials.register(material)

            baked = self._baker.bake(instance, self._offset)
            self._obj_lines.extend(baked.to_lines(self.settings.format_float))
            self._offset += baked.vertex_count
            instance_count += 1

        self.obj_path.write_text("\n".join(self._obj_lines) + "\n", encoding="utf-8")
        self.mtl_path.write_text(self._materials.text(), encoding="utf-8")

        logger.info(
            "Exported %d mesh instances (%d vertices, %d materials) to %s",
            instance_count,
            self._offset,
            self._materials.material_count,
            self.obj_path,
        )
        return ExportResult(
            file_path=self.obj_path,
            mtl_path=self.mtl_path,
            instance_count=instance_count,
            vertex_count=self._offset,
            material_count=self._materials.material_count,
            message="OBJ exported successfully.",
        )


def export_scene(
    scene: Scene,
    export_path: str | Path,
    settings: ExportSettings | None = None,
    backend: RenderBackend | None = None,
) -> ExportResult:
    """Export *scene* to ``export_path`` (``.obj``) and its sibling ``.mtl``."""
    return ExportSession(export_path, settings, backend).run(roots_of(scene))
