"""Heads-up display drawing."""
from __future__ import annotations

from typing import Optional

import pygame

from orrery.render.pipeline import RenderStats
from orrery.world.system import ViewState

TITLE = "Solar System - Software Rasterizer"
CONTROLS = (
    "Arrows pan  A/S zoom",
    "Q/W E/R T/Y rotate X/Y/Z",
    "Space spin  O orbits  Esc quit",
)


def status_lines(time: float, view: ViewState, fps: float, stats: Optional[RenderStats] = None) -> list[str]:
    lines = [
        TITLE,
        f"FPS: {fps:.1f}  t={time:.2f}",
        f"Zoom: {view.zoom:.2f}  Spin: {'on' if view.auto_rotate else 'off'}  "
        f"Orbits: {'on' if view.auto_orbit else 'off'}",
    ]
    if stats is not None:
        lines.append(f"Triangles: {stats.triangles}  Fragments: {stats.fragments}")
    return lines


class HUD:
    def __init__(self, size: tuple[int, int]) -> None:
        self.surface = pygame.Surface(size, pygame.SRCALPHA)
        self.font = pygame.font.SysFont("consolas", 16)
        self.show_controls = True

    def draw(self, time: float, view: ViewState, fps: float, stats: Optional[RenderStats] = None) -> pygame.Surface:
        surface = self.surface
        surface.fill((0, 0, 0, 0))
        y = 10
        for line in status_lines(time, view, fps, stats):
            text = self.font.render(line, True, (200, 220, 255))
            surface.blit(text, (10, y))
            y += 18
        if self.show_controls:
            height = surface.get_height()
            for i, line in enumerate(reversed(CONTROLS)):
                text = self.font.render(line, True, (170, 220, 180))
                surface.blit(text, (10, height - 24 - i * 18))
        return surface

    def to_rgba_bytes(self) -> bytes:
        return pygame.image.tobytes(self.surface, "RGBA")


__all__ = ["HUD", "status_lines"]
