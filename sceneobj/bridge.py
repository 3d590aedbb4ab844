"""ExportBridge — the host-facing "Save OBJ" trigger."""

from __future__ import annotations

import logging
from pathlib import Path

from sceneobj.config import DEFAULT_BASE_NAME, DEFAULT_EXPORT_DIR, ExportSettings
from sceneobj.export.base import ExportResult
from sceneobj.export.session import ExportSession
from sceneobj.export.textures import RenderBackend
from sceneobj.models.scene import Scene
from sceneobj.scene.provider import NodeProvider, roots_of

logger = logging.getLogger(__name__)

__all__ = ["ExportBridge", "ExportResult"]


class ExportBridge:
    """Entry point hosts call when the user asks for an OBJ snapshot.

    Failures of the whole export are logged here, once, and reported as an
    unsuccessful :class:`ExportResult`.  Files already written stay on disk.

    Parameters
    ----------
    settings:
        Export settings; ``log_level`` is applied to the ``sceneobj`` logger.
    backend:
        Render backend with access to the host's rendering context.
    """

    def __init__(
        self,
        *,
        settings: ExportSettings | None = None,
        backend: RenderBackend | None = None,
    ) -> None:
        self._settings = settings or ExportSettings()
        self._backend = backend
        logging.getLogger("sceneobj").setLevel(self._settings.log_level)

    @staticmethod
    def default_path() -> Path:
        return DEFAULT_EXPORT_DIR / f"{DEFAULT_BASE_NAME}.obj"

    def save_obj(self, scene: Scene, path: str | Path | None = None) -> ExportResult:
        """Export *scene* to *path* (default ``./export/save.obj``)."""
        return self.save_roots(scene.name, roots_of(scene), path)

    def save_roots(
        self,
        scene_name: str,
        roots: list[NodeProvider],
        path: str | Path | None = None,
    ) -> ExportResult:
        """Export host-provided root nodes under the label *scene_name*."""
        target = Path(path) if path is not None else self.default_path()

        try:
            session = ExportSession(target, self._settings, self._backend)
            result = session.run(roots)
        except Exception as exc:
            logger.error("Export of '%s' failed: %s", scene_name, exc, exc_info=True)
            return ExportResult(
                file_path=None,
                success=False,
                message=f"Export failed: {exc}",
            )

        logger.info("Saved scene '%s' to '%s'", scene_name, target)
        return result
