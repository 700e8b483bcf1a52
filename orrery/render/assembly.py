"""Primitive assembly for triangle-list vertex streams."""
from __future__ import annotations

from typing import Sequence

from orrery.render.vertex import Vertex

Triangle = tuple[Vertex, Vertex, Vertex]


def assemble_triangles(vertices: Sequence[Vertex]) -> list[Triangle]:
    """Group consecutive triples; a trailing partial triple is dropped."""

    triangles: list[Triangle] = []
    for i in range(0, len(vertices) - 2, 3):
        triangles.append((vertices[i], vertices[i + 1], vertices[i + 2]))
    return triangles


__all__ = ["Triangle", "assemble_triangles"]
