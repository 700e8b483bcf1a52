"""Bounding-box scan conversion of screen-space triangles."""
from __future__ import annotations

from math import ceil, floor
from typing import Callable

from pygame.math import Vector3

from orrery.render.vertex import Fragment, Vertex

WEIGHT_EPSILON = 1e-4

DepthInterpolator = Callable[[float, float, float, float, float, float], float]


def edge_sign(px: float, py: float, a: Vector3, b: Vector3) -> float:
    """Edge function of point ``p`` against the oriented edge ``a -> b``."""

    return (px - b.x) * (a.y - b.y) - (a.x - b.x) * (py - b.y)


def edge_weighted_depth(d1: float, d2: float, d3: float, z1: float, z2: float, z3: float) -> float:
    """Blend depths with ``|d_i| / sum(|d|)`` weights, in vertex order.

    This is not a true barycentric blend: edge ``i`` is opposite a different
    vertex than the one it weights, so only centred points of regular
    triangles come out exact. It is the renderer's reference behaviour.
    """

    a1, a2, a3 = abs(d1), abs(d2), abs(d3)
    total = max(a1 + a2 + a3, WEIGHT_EPSILON)
    return z1 * (a1 / total) + z2 * (a2 / total) + z3 * (a3 / total)


def barycentric_depth(d1: float, d2: float, d3: float, z1: float, z2: float, z3: float) -> float:
    """Corrected alternative: signed-area barycentric depth.

    ``d1`` belongs to edge v1->v2 and therefore weights v3, ``d2`` weights v1
    and ``d3`` weights v2.
    """

    total = d1 + d2 + d3
    if abs(total) < WEIGHT_EPSILON:
        return (z1 + z2 + z3) / 3.0
    return z1 * (d2 / total) + z2 * (d3 / total) + z3 * (d1 / total)


def bounding_box(p1: Vector3, p2: Vector3, p3: Vector3) -> tuple[int, int, int, int]:
    min_x = floor(min(p1.x, p2.x, p3.x))
    max_x = ceil(max(p1.x, p2.x, p3.x))
    min_y = floor(min(p1.y, p2.y, p3.y))
    max_y = ceil(max(p1.y, p2.y, p3.y))
    return min_x, min_y, max_x, max_y


def rasterize_triangle(
    v1: Vertex,
    v2: Vertex,
    v3: Vertex,
    interpolate_depth: DepthInterpolator = edge_weighted_depth,
) -> list[Fragment]:
    """Emit a fragment for every integer point inside or on the triangle.

    Both windings are accepted and shared edges are emitted by each
    neighbouring triangle.
    """

    p1 = v1.transformed_position
    p2 = v2.transformed_position
    p3 = v3.transformed_position
    min_x, min_y, max_x, max_y = bounding_box(p1, p2, p3)

    fragments: list[Fragment] = []
    for y in range(min_y, max_y + 1):
        for x in range(min_x, max_x + 1):
            d1 = edge_sign(x, y, p1, p2)
            d2 = edge_sign(x, y, p2, p3)
            d3 = edge_sign(x, y, p3, p1)

            has_neg = d1 < 0.0 or d2 < 0.0 or d3 < 0.0
            has_pos = d1 > 0.0 or d2 > 0.0 or d3 > 0.0
            if has_neg and has_pos:
                continue
            depth = interpolate_depth(d1, d2, d3, p1.z, p2.z, p3.z)
            fragments.append(Fragment(x, y, depth))
    return fragments


__all__ = [
    "DepthInterpolator",
    "barycentric_depth",
    "bounding_box",
    "edge_sign",
    "edge_weighted_depth",
    "rasterize_triangle",
]
