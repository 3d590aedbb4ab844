"""TextureExtractor — renders textures offscreen and saves them as PNG.

Texture pixels are not assumed to be readable.  Each texture is blitted into
a temporary render target, read back into a fresh Pillow image and encoded.
The render target is released on every exit path.
"""

from __future__ import annotations

import abc
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from PIL import Image

from sceneobj.config import TEXTURES_DIR
from sceneobj.export.base import (
    TextureExported,
    TextureFailed,
    TextureResult,
    sanitize_name,
)
from sceneobj.models.scene import Texture

logger = logging.getLogger(__name__)


class RenderBackendError(Exception):
    """The render backend could not blit or read back a texture."""


class RenderTarget:
    """Offscreen RGBA surface owned by a :class:`RenderBackend`."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.surface: Image.Image | None = Image.new("RGBA", (width, height))

    @property
    def released(self) -> bool:
        return self.surface is None


class RenderBackend(abc.ABC):
    """Host rendering access used to make texture pixels readable."""

    @abc.abstractmethod
    def acquire(self, width: int, height: int) -> RenderTarget:
        """Return a temporary render target of the given size."""

    @abc.abstractmethod
    def release(self, target: RenderTarget) -> None:
        """Give a render target back to the backend."""

    @abc.abstractmethod
    def blit(self, texture: Texture, target: RenderTarget) -> None:
        """Draw *texture* into *target*, covering it entirely."""

    @abc.abstractmethod
    def read_pixels(self, target: RenderTarget) -> Image.Image:
        """Copy the contents of *target* into a new readable image."""

    @contextmanager
    def temporary_target(self, width: int, height: int) -> Iterator[RenderTarget]:
        target = self.acquire(width, height)
        try:
            yield target
        finally:
            self.release(target)


class SoftwareRenderBackend(RenderBackend):
    """CPU backend drawing textures with Pillow."""

    def __init__(self) -> None:
        self.live_targets = 0

    def acquire(self, width: int, height: int) -> RenderTarget:
        if width <= 0 or height <= 0:
            raise RenderBackendError(f"cannot allocate a {width}x{height} render target")
        self.live_targets += 1
        return RenderTarget(width, height)

    def release(self, target: RenderTarget) -> None:
        if target.surface is not None:
            target.surface.close()
            target.surface = None
            self.live_targets -= 1

    def blit(self, texture: Texture, target: RenderTarget) -> None:
        if target.surface is None:
            raise RenderBackendError("render target already released")
        expected = texture.width * texture.height * 4
        if len(texture.pixels) != expected:
            raise RenderBackendError(
                f"texture has {len(texture.pixels)} bytes, expected {expected}"
            )
        source = Image.frombytes("RGBA", (texture.width, texture.height), texture.pixels)
        if source.size != target.surface.size:
            source = source.resize(target.surface.size)
        target.surface.paste(source, (0, 0))

    def read_pixels(self, target: RenderTarget) -> Image.Image:
        if target.surface is None:
            raise RenderBackendError("render target already released")
        return target.surface.copy()


class TextureExtractor:
    """Writes textures under ``<export_dir>/textures`` for one export.

    Results are cached by sanitized texture name, so a texture shared by
    several materials is rendered once per export.
    """

    def __init__(
        self,
        export_dir: Path,
        backend: RenderBackend,
        *,
        textures_dir: str = TEXTURES_DIR,
    ) -> None:
        self._export_dir = Path(export_dir)
        self._textures_dir = textures_dir
        self._backend = backend
        self._cache: dict[str, TextureResult] = {}

    def extract(self, texture: Texture) -> TextureResult:
        """Save *texture* as PNG and return its path relative to the export dir."""
        key = sanitize_name(texture.name)
        if key not in self._cache:
            self._cache[key] = self._extract(texture, key)
        return self._cache[key]

    def _extract(self, texture: Texture, file_stem: str) -> TextureResult:
        try:
            out_dir = self._export_dir / self._textures_dir
            out_dir.mkdir(parents=True, exist_ok=True)
            out_path = out_dir / f"{file_stem}.png"

            image = self._readable_copy(texture)
            try:
                image.save(out_path, format="PNG")
            finally:
                image.close()
        except Exception as exc:
            logger.warning("Couldn't save texture '%s': %s", texture.name, exc)
            return TextureFailed(reason=str(exc))

        logger.debug("Saved texture '%s' to %s", texture.name, out_path)
        return TextureExported(path=f"./{self._textures_dir}/{file_stem}.png")

    def _readable_copy(self, texture: Texture) -> Image.Image:
        with self._backend.temporary_target(texture.width, texture.height) as target:
            self._backend.blit(texture, target)
            return self._backend.read_pixels(target)
