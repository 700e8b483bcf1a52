"""Procedural meshes for bodies that do not come from a model file."""
from __future__ import annotations

import math

from pygame.math import Vector2, Vector3

from orrery.render.vertex import Vertex

TWO_PI = math.pi * 2.0


def _sphere_vertex(stack: int, slice_: int, stacks: int, slices: int) -> Vertex:
    theta = stack / stacks * math.pi
    phi = slice_ / slices * TWO_PI
    direction = Vector3(math.sin(theta) * math.cos(phi), math.cos(theta), math.sin(theta) * math.sin(phi))
    return Vertex.new(direction, direction, Vector2(slice_ / slices, stack / stacks))


def generate_uv_sphere(stacks: int = 16, slices: int = 24) -> list[Vertex]:
    """Unit sphere as a flat triangle-list stream."""

    if stacks < 2 or slices < 3:
        raise ValueError("A sphere needs at least 2 stacks and 3 slices")
    vertices: list[Vertex] = []
    for stack in range(stacks):
        for slice_ in range(slices):
            top_left = _sphere_vertex(stack, slice_, stacks, slices)
            top_right = _sphere_vertex(stack, slice_ + 1, stacks, slices)
            bottom_left = _sphere_vertex(stack + 1, slice_, stacks, slices)
            bottom_right = _sphere_vertex(stack + 1, slice_ + 1, stacks, slices)
            if stack > 0:
                vertices.extend((top_left, bottom_left, top_right))
            if stack < stacks - 1:
                vertices.extend((top_right, bottom_left, bottom_right))
    return vertices


def generate_flat_ring(inner_radius: float, outer_radius: float, segments: int) -> list[Vertex]:
    """Flat annulus in the XZ plane, two triangles per segment."""

    up = Vector3(0.0, 1.0, 0.0)
    vertices: list[Vertex] = []
    for i in range(segments):
        angle1 = i / segments * TWO_PI
        angle2 = (i + 1) / segments * TWO_PI
        cos1, sin1 = math.cos(angle1), math.sin(angle1)
        cos2, sin2 = math.cos(angle2), math.sin(angle2)

        inner1 = Vector3(inner_radius * cos1, 0.0, inner_radius * sin1)
        outer1 = Vector3(outer_radius * cos1, 0.0, outer_radius * sin1)
        outer2 = Vector3(outer_radius * cos2, 0.0, outer_radius * sin2)
        inner2 = Vector3(inner_radius * cos2, 0.0, inner_radius * sin2)

        vertices.append(Vertex.new(inner1, up, Vector2(0.0, 0.0)))
        vertices.append(Vertex.new(outer1, up, Vector2(1.0, 0.0)))
        vertices.append(Vertex.new(outer2, up, Vector2(1.0, 1.0)))
        vertices.append(Vertex.new(inner1, up, Vector2(0.0, 0.0)))
        vertices.append(Vertex.new(outer2, up, Vector2(1.0, 1.0)))
        vertices.append(Vertex.new(inner2, up, Vector2(0.0, 1.0)))
    return vertices


def generate_torus_ring(
    major_radius: float,
    minor_radius: float,
    major_segments: int,
    minor_segments: int,
) -> list[Vertex]:
    """Torus surface grid of ``(major + 1) * (minor + 1)`` vertices.

    This is a point grid, not a triangle stream; pair it with
    ``torus_indices`` to build a model.
    """

    vertices: list[Vertex] = []
    for i in range(major_segments + 1):
        u = i / major_segments * TWO_PI
        cos_u, sin_u = math.cos(u), math.sin(u)
        for j in range(minor_segments + 1):
            v = j / minor_segments * TWO_PI
            cos_v, sin_v = math.cos(v), math.sin(v)
            position = Vector3(
                (major_radius + minor_radius * cos_v) * cos_u,
                minor_radius * sin_v,
                (major_radius + minor_radius * cos_v) * sin_u,
            )
            normal = Vector3(cos_v * cos_u, sin_v, cos_v * sin_u)
            vertices.append(Vertex.new(position, normal, Vector2(u / TWO_PI, v / TWO_PI)))
    return vertices


def torus_indices(major_segments: int, minor_segments: int) -> list[int]:
    row = minor_segments + 1
    indices: list[int] = []
    for i in range(major_segments):
        for j in range(minor_segments):
            a = i * row + j
            b = (i + 1) * row + j
            indices.extend((a, b, a + 1, a + 1, b, b + 1))
    return indices


__all__ = ["generate_flat_ring", "generate_torus_ring", "generate_uv_sphere", "torus_indices"]
