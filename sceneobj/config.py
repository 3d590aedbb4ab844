"""Global configuration: paths, constants, settings."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from sceneobj.models.scene import Capability

logger = logging.getLogger(__name__)

# Default destination used by the host trigger (./export/save.obj)
DEFAULT_EXPORT_DIR = Path("export")
DEFAULT_BASE_NAME = "save"

# Sub-folder (relative to the export directory) receiving extracted textures
TEXTURES_DIR = "textures"

# Layers whose nodes never reach the output (compared upper-cased)
BLOCKED_LAYERS = frozenset({
    "UI", "GUI", "MENUI", "MENU", "CURSOR", "FLARES", "FLARE", "BACKGROUND",
})

# Any of these capabilities disqualifies a node
EXCLUDED_CAPABILITIES = (
    Capability.SKYBOX
    | Capability.UI_ELEMENT
    | Capability.GUI_ELEMENT
    | Capability.CAMERA
    | Capability.LIGHT
)

# Illumination model written for every material block
ILLUM_MODEL = 2

# Digits after the decimal point for every float in .obj / .mtl output
DEFAULT_FLOAT_PRECISION = 6

_ENV_PREFIX = "SCENEOBJ_"


class ExportSettings(BaseModel):
    """Tunable export behaviour."""

    float_precision: int = Field(default=DEFAULT_FLOAT_PRECISION, ge=0, le=12)
    blocked_layers: frozenset[str] = BLOCKED_LAYERS
    textures_dir: str = TEXTURES_DIR
    log_level: str = "INFO"

    @field_validator("blocked_layers", mode="before")
    @classmethod
    def _upper_layers(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = [part for part in value.split(",") if part.strip()]
        if isinstance(value, (list, tuple, set, frozenset)):
            return frozenset(str(v).strip().upper() for v in value)
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value!r}")
        return level

    def format_float(self, value: float) -> str:
        """Fixed-precision text for *value*, never printing ``-0``."""
        text = f"{value:.{self.float_precision}f}"
        if text.startswith("-") and float(text) == 0.0:
            return text[1:]
        return text


def load_settings(project_root: str | Path = ".") -> ExportSettings:
    """Load merged settings: defaults -> .sceneobj/config.json -> env vars."""
    root = Path(project_root)
    data: dict[str, Any] = {}

    config_json = root / ".sceneobj" / "config.json"
    if config_json.is_file():
        try:
            loaded = json.loads(config_json.read_text(encoding="utf-8"))
            if isinstance(loaded, dict):
                data.update(loaded)
        except (json.JSONDecodeError, OSError):
            logger.debug("Could not read %s", config_json, exc_info=True)

    for field_name in ExportSettings.model_fields:
        env_val = os.environ.get(_ENV_PREFIX + field_name.upper())
        if env_val is not None:
            data[field_name] = env_val

    return ExportSettings.model_validate(data)
