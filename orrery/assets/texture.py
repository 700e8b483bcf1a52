"""Decoded RGBA bitmaps with nearest and bilinear sampling."""
from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path

import pygame
from pygame.math import Vector3

from orrery.render.errors import TextureLoadError

FALLBACK_COLOR = (1.0, 1.0, 1.0)


def _wrap(value: float) -> float:
    return value - math.floor(value)


@dataclass
class Texture:
    """RGBA pixels, rows top to bottom; ``v = 0`` samples the top row."""

    width: int
    height: int
    data: bytes

    @classmethod
    def load(cls, path: Path | str) -> "Texture":
        path = Path(path)
        try:
            image = pygame.image.load(str(path))
        except (pygame.error, OSError, FileNotFoundError) as exc:
            raise TextureLoadError(f"Cannot decode texture {path}: {exc}") from exc
        width, height = image.get_size()
        if width <= 0 or height <= 0:
            raise TextureLoadError(f"Texture {path} is empty")
        return cls(width=width, height=height, data=pygame.image.tobytes(image, "RGBA"))

    def get_pixel(self, x: int, y: int) -> Vector3:
        idx = (y * self.width + x) * 4
        if idx < 0 or idx + 2 >= len(self.data):
            return Vector3(FALLBACK_COLOR)
        return Vector3(
            self.data[idx] / 255.0,
            self.data[idx + 1] / 255.0,
            self.data[idx + 2] / 255.0,
        )

    def sample(self, u: float, v: float) -> Vector3:
        """Nearest-texel lookup with wrapping UVs."""

        x = min(int(_wrap(u) * self.width), self.width - 1)
        y = min(int(_wrap(v) * self.height), self.height - 1)
        return self.get_pixel(x, y)

    def sample_bilinear(self, u: float, v: float) -> Vector3:
        x = _wrap(u) * self.width - 0.5
        y = _wrap(v) * self.height - 0.5

        x0 = int(max(math.floor(x), 0.0))
        y0 = int(max(math.floor(y), 0.0))
        x1 = min(x0 + 1, self.width - 1)
        y1 = min(y0 + 1, self.height - 1)
        fx = x - math.floor(x)
        fy = y - math.floor(y)

        c00 = self.get_pixel(x0, y0)
        c10 = self.get_pixel(x1, y0)
        c01 = self.get_pixel(x0, y1)
        c11 = self.get_pixel(x1, y1)

        top = c00 + (c10 - c00) * fx
        bottom = c01 + (c11 - c01) * fx
        return top + (bottom - top) * fy


__all__ = ["Texture"]
