"""Vertex stage: model transform and perspective divide."""
from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from pygame.math import Vector3

from orrery.math.matrix import Vector4, multiply_matrix_vector4
from orrery.render.uniforms import Uniforms
from orrery.render.vertex import Vertex

W_EPSILON = 1e-8


def transform_vertex(vertex: Vertex, uniforms: Uniforms) -> Vertex:
    """Return a copy of ``vertex`` with ``transformed_position`` populated.

    The normal is passed through untouched. Rotating it properly would need
    the inverse-transpose of the upper 3x3 of the model matrix.
    """

    position = vertex.position
    clip = multiply_matrix_vector4(
        uniforms.model_matrix,
        Vector4(position.x, position.y, position.z, 1.0),
    )
    if abs(clip.w) > W_EPSILON:
        transformed = Vector3(clip.x / clip.w, clip.y / clip.w, clip.z / clip.w)
    else:
        transformed = Vector3(clip.x, clip.y, clip.z)
    return replace(
        vertex,
        transformed_position=transformed,
        transformed_normal=Vector3(vertex.normal),
    )


def transform_vertices(vertices: Iterable[Vertex], uniforms: Uniforms) -> list[Vertex]:
    return [transform_vertex(vertex, uniforms) for vertex in vertices]


__all__ = ["transform_vertex", "transform_vertices"]
