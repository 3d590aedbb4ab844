"""MaterialLibraryBuilder — deduplicated ``.mtl`` blocks for one export."""

from __future__ import annotations

import logging
from collections.abc import Callable

from sceneobj.config import ILLUM_MODEL
from sceneobj.export.base import TextureExported, TextureFailed, sanitize_name
from sceneobj.export.textures import TextureExtractor
from sceneobj.models.scene import MaterialRef, Texture

logger = logging.getLogger(__name__)


class MaterialLibraryBuilder:
    """Accumulates one ``newmtl`` block per unique sanitized material name.

    Blocks are emitted in first-encounter order and separated by a blank line.
    """

    def __init__(
        self,
        extractor: TextureExtractor,
        fmt: Callable[[float], str],
    ) -> None:
        self._extractor = extractor
        self._fmt = fmt
        self._seen: set[str] = set()
        self._blocks: list[str] = []

    @property
    def material_count(self) -> int:
        return len(self._blocks)

    def __contains__(self, name: str) -> bool:
        return sanitize_name(name) in self._seen

    def register(self, material: MaterialRef) -> bool:
        """Serialize *material* unless its name was already registered.

        Returns True when a new block was added.
        """
        key = sanitize_name(material.name)
        if key in self._seen:
            return False
        self._seen.add(key)
        self._blocks.append(self.serialize(material))
        return True

    def serialize(self, material: MaterialRef) -> str:
        """Render the ``.mtl`` block for *material* (textures are extracted)."""
        fmt = self._fmt
        lines = [f"newmtl {sanitize_name(material.name)}"]

        color = material.diffuse_color
        if color is not None:
            lines.append(f"Kd {fmt(color.r)} {fmt(color.g)} {fmt(color.b)}")
            if color.a < 1.0:
                lines.append(f"Tr {fmt(1.0 - color.a)}")
                lines.append(f"d {fmt(color.a)}")

        spec = material.specular_color
        if spec is not None:
            lines.append(f"Ks {fmt(spec.r)} {fmt(spec.g)} {fmt(spec.b)}")

        for keyword, texture in (
            ("map_Kd", material.diffuse_map),
            ("map_Ks", material.specular_map),
            ("map_Bump", material.bump_map),
        ):
            path = self._texture_path(material, texture)
            if path is not None:
                lines.append(f"{keyword} {path}")

        lines.append(f"illum {ILLUM_MODEL}")
        return "\n".join(lines) + "\n"

    def text(self) -> str:
        """The whole material library; empty when nothing was registered."""
        return "".join(block + "\n" for block in self._blocks)

    def _texture_path(self, material: MaterialRef, texture: Texture | None) -> str | None:
        if texture is None:
            return None
        result = self._extractor.extract(texture)
        if isinstance(result, TextureExported):
            return result.path
        if isinstance(result, TextureFailed):
            logger.info(
                "Material '%s' exported without texture '%s'",
                material.name,
                texture.name,
            )
        return None
