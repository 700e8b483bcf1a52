"""CPU framebuffer backed by a pygame surface."""
from __future__ import annotations

import logging
from typing import Optional, Protocol

import pygame
from pygame.math import Vector3

from orrery.render.errors import RenderError, SurfaceNotBoundError

LOGGER = logging.getLogger(__name__)

STAR_COUNT = 800
STAR_SEED = 12345
LCG_MULTIPLIER = 1103515245
LCG_INCREMENT = 12345
LCG_MODULUS = 2 ** 31
BRIGHT_STAR_THRESHOLD = 0.8

Star = tuple[int, int, float]


class Presenter(Protocol):
    def upload(self, data: bytes, size: tuple[int, int]) -> None:
        ...


def _channel(value: float) -> int:
    return int(max(0.0, min(1.0, value)) * 255.0)


def generate_stars(width: int, height: int, count: int = STAR_COUNT, seed: int = STAR_SEED) -> list[Star]:
    """Deterministic star positions and brightness from a linear congruential generator."""

    stars: list[Star] = []
    if width <= 0 or height <= 0:
        return stars
    for _ in range(count):
        seed = (LCG_MULTIPLIER * seed + LCG_INCREMENT) % LCG_MODULUS
        x = seed % width
        seed = (LCG_MULTIPLIER * seed + LCG_INCREMENT) % LCG_MODULUS
        y = seed % height
        seed = (LCG_MULTIPLIER * seed + LCG_INCREMENT) % LCG_MODULUS
        brightness = 0.3 + (seed % 70) / 100.0
        stars.append((x, y, brightness))
    return stars


class Framebuffer:
    """Fixed-size RGB pixel buffer that the pipeline paints into.

    The wire format handed to the presenter is ``width * height * 4`` bytes,
    rows top to bottom, each pixel R, G, B, A with A always 255.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        star_field: bool = True,
        star_count: int = STAR_COUNT,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Framebuffer size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.background_color = Vector3(0.0, 0.0, 0.0)
        self.star_field_enabled = star_field
        self.star_field: list[Star] = generate_stars(width, height, star_count) if star_field else []
        self._surface = pygame.Surface((width, height), 0, 32)
        self._presenter: Optional[Presenter] = None
        self._surface.fill((0, 0, 0))

    @property
    def surface(self) -> pygame.Surface:
        return self._surface

    def set_background_color(self, color: Vector3) -> None:
        self.background_color = Vector3(color)

    def clear(self) -> None:
        bg = self.background_color
        self._surface.fill((_channel(bg.x), _channel(bg.y), _channel(bg.z)))
        if self.star_field_enabled:
            self._draw_stars()

    def _draw_stars(self) -> None:
        surface = self._surface
        max_x = self.width - 1
        max_y = self.height - 1
        for x, y, brightness in self.star_field:
            core = int(255.0 * brightness)
            surface.set_at((x, y), (core, core, int(255.0 * brightness * 0.9)))
            if brightness <= BRIGHT_STAR_THRESHOLD:
                continue
            halo = int(255.0 * brightness * 0.5)
            halo_color = (halo, halo, int(255.0 * brightness * 0.45))
            if x > 0:
                surface.set_at((x - 1, y), halo_color)
            if x < max_x:
                surface.set_at((x + 1, y), halo_color)
            if y > 0:
                surface.set_at((x, y - 1), halo_color)
            if y < max_y:
                surface.set_at((x, y + 1), halo_color)

    def point(self, x: int, y: int, color: Vector3) -> bool:
        """Write one pixel; out-of-range coordinates are ignored.

        Returns whether the pixel was written.
        """

        if x < 0 or y < 0 or x >= self.width or y >= self.height:
            return False
        self._surface.set_at((x, y), (_channel(color[0]), _channel(color[1]), _channel(color[2])))
        return True

    def pixel(self, x: int, y: int) -> tuple[int, int, int]:
        r, g, b, _ = self._surface.get_at((x, y))
        return (r, g, b)

    def to_rgba_bytes(self) -> bytes:
        data = pygame.image.tobytes(self._surface, "RGBA")
        expected = self.width * self.height * 4
        if len(data) != expected:
            raise RenderError(f"Framebuffer export produced {len(data)} bytes, expected {expected}")
        return data

    def bind_presenter(self, presenter: Presenter) -> None:
        self._presenter = presenter

    def publish(self) -> None:
        """Hand this frame's pixels to the bound presenter."""

        if self._presenter is None:
            raise SurfaceNotBoundError()
        self._presenter.upload(self.to_rgba_bytes(), (self.width, self.height))


__all__ = ["Framebuffer", "Presenter", "Star", "generate_stars"]
