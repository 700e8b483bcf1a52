"""Per-vertex and per-fragment records flowing through the pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field

from pygame.math import Vector2, Vector3


@dataclass
class Vertex:
    """Mesh vertex plus the slots populated by the vertex stage."""

    position: Vector3
    normal: Vector3 = field(default_factory=Vector3)
    tex_coords: Vector2 = field(default_factory=Vector2)
    color: Vector3 = field(default_factory=lambda: Vector3(1.0, 1.0, 1.0))
    transformed_position: Vector3 = field(default_factory=Vector3)
    transformed_normal: Vector3 = field(default_factory=Vector3)

    @classmethod
    def new(cls, position: Vector3, normal: Vector3, tex_coords: Vector2) -> "Vertex":
        return cls(
            position=Vector3(position),
            normal=Vector3(normal),
            tex_coords=Vector2(tex_coords),
            transformed_position=Vector3(position),
            transformed_normal=Vector3(normal),
        )


@dataclass
class Fragment:
    """A covered pixel with interpolated depth; color is filled by shading."""

    x: int
    y: int
    depth: float
    color: Vector3 = field(default_factory=lambda: Vector3(1.0, 1.0, 1.0))


__all__ = ["Fragment", "Vertex"]
