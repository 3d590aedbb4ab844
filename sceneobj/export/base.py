"""Shared types for the OBJ export pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union


class ExportError(Exception):
    """Raised when scene data cannot be exported as-is."""


def sanitize_name(name: str) -> str:
    """Make *name* a single OBJ/MTL token by replacing spaces with underscores."""
    return name.replace(" ", "_")


@dataclass(frozen=True)
class TextureExported:
    """A texture written to disk; *path* is relative to the export directory."""

    path: str


@dataclass(frozen=True)
class TextureFailed:
    """A texture that could not be extracted."""

    reason: str


TextureResult = Union[TextureExported, TextureFailed]


@dataclass
class ExportResult:
    """Result of one OBJ export."""

    file_path: Path | None
    mtl_path: Path | None = None
    instance_count: int = 0
    vertex_count: int = 0
    material_count: int = 0
    success: bool = True
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_path": str(self.file_path) if self.file_path else None,
            "mtl_path": str(self.mtl_path) if self.mtl_path else None,
            "instance_count": self.instance_count,
            "vertex_count": self.vertex_count,
            "material_count": self.material_count,
            "success": self.success,
            "message": self.message,
        }
