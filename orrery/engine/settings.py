"""settings.json loading."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

from pygame.math import Vector3

LOGGER = logging.getLogger(__name__)

SETTINGS_PATH = Path("settings.json")

DEFAULT_SETTINGS: Dict[str, Any] = {
    "resolution": [800, 600],
    "backgroundColor": [0.2, 0.2, 0.4],
    "starField": True,
    "starCount": 800,
    "modelPath": "assets/models/planet.obj",
    "timeStep": 0.016,
    "frameDelayMs": 16,
}


def load_settings(path: Path = SETTINGS_PATH) -> Dict[str, Any]:
    """Raw settings merged over the defaults; a missing or bad file gives defaults."""

    settings = dict(DEFAULT_SETTINGS)
    if not path.exists():
        return settings
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        LOGGER.warning("Ignoring malformed %s: %s", path, exc)
        return settings
    if isinstance(data, dict):
        settings.update(data)
    return settings


@dataclass
class RenderSettings:
    resolution: tuple[int, int] = (800, 600)
    background_color: Vector3 = field(default_factory=lambda: Vector3(0.2, 0.2, 0.4))
    star_field: bool = True
    star_count: int = 800
    model_path: Path = Path("assets/models/planet.obj")
    time_step: float = 0.016
    frame_delay: float = 0.016

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RenderSettings":
        width, height = data.get("resolution", DEFAULT_SETTINGS["resolution"])
        return cls(
            resolution=(int(width), int(height)),
            background_color=Vector3(data.get("backgroundColor", DEFAULT_SETTINGS["backgroundColor"])),
            star_field=bool(data.get("starField", True)),
            star_count=max(0, int(data.get("starCount", 800))),
            model_path=Path(data.get("modelPath", DEFAULT_SETTINGS["modelPath"])),
            time_step=float(data.get("timeStep", 0.016)),
            frame_delay=max(0.0, float(data.get("frameDelayMs", 16)) / 1000.0),
        )

    @classmethod
    def load(cls, path: Path = SETTINGS_PATH) -> "RenderSettings":
        return cls.from_dict(load_settings(path))


__all__ = ["DEFAULT_SETTINGS", "RenderSettings", "SETTINGS_PATH", "load_settings"]
