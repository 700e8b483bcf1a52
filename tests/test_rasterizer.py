"""Tests for bounding-box scan conversion."""
from __future__ import annotations

import math
import sys
from pathlib import Path

import pytest
from pygame.math import Vector2, Vector3

sys.path.append(str(Path(__file__).resolve().parents[1]))

from orrery.render.rasterizer import (
    barycentric_depth,
    bounding_box,
    edge_weighted_depth,
    rasterize_triangle,
)
from orrery.render.vertex import Vertex


def _vertex(x: float, y: float, z: float = 0.0) -> Vertex:
    return Vertex.new(Vector3(x, y, z), Vector3(), Vector2())


def test_right_triangle_covers_fifteen_points():
    fragments = rasterize_triangle(_vertex(0, 0), _vertex(4, 0), _vertex(0, 4))
    covered = {(f.x, f.y) for f in fragments}
    expected = {(x, y) for x in range(5) for y in range(5) if x + y <= 4}
    assert covered == expected
    assert len(fragments) == 15


def test_winding_does_not_matter():
    clockwise = rasterize_triangle(_vertex(0, 0), _vertex(0, 4), _vertex(4, 0))
    counter = rasterize_triangle(_vertex(0, 0), _vertex(4, 0), _vertex(0, 4))
    assert {(f.x, f.y) for f in clockwise} == {(f.x, f.y) for f in counter}


def test_fragments_stay_inside_bounding_box():
    p1, p2, p3 = _vertex(0.5, 0.5), _vertex(6.2, 1.1), _vertex(2.3, 5.7)
    min_x, min_y, max_x, max_y = bounding_box(
        p1.transformed_position, p2.transformed_position, p3.transformed_position
    )
    assert (min_x, min_y, max_x, max_y) == (0, 0, 7, 6)
    fragments = rasterize_triangle(p1, p2, p3)
    assert fragments
    for fragment in fragments:
        assert min_x <= fragment.x <= max_x
        assert min_y <= fragment.y <= max_y


def test_constant_depth_is_preserved():
    fragments = rasterize_triangle(_vertex(0, 0, 0.7), _vertex(8, 0, 0.7), _vertex(0, 8, 0.7))
    assert all(f.depth == pytest.approx(0.7) for f in fragments)


def test_degenerate_triangles_do_not_fill_area():
    line = rasterize_triangle(_vertex(0, 0), _vertex(2, 0), _vertex(4, 0))
    assert len(line) <= 5
    assert all(f.y == 0 for f in line)

    point = rasterize_triangle(_vertex(1.5, 1.5), _vertex(1.5, 1.5), _vertex(1.5, 1.5))
    assert len(point) <= 4
    assert all(math.isfinite(f.depth) for f in point)


def test_edge_weighted_depth_differs_from_barycentric():
    # Edge values of pixel (1, 1) against (0,0) (4,0) (0,4).
    assert edge_weighted_depth(4.0, 8.0, 4.0, 0.0, 1.0, 2.0) == pytest.approx(1.0)
    assert barycentric_depth(4.0, 8.0, 4.0, 0.0, 1.0, 2.0) == pytest.approx(0.75)


def test_barycentric_interpolator_can_be_selected():
    fragments = rasterize_triangle(
        _vertex(0, 0, 0.0),
        _vertex(4, 0, 1.0),
        _vertex(0, 4, 2.0),
        interpolate_depth=barycentric_depth,
    )
    by_pixel = {(f.x, f.y): f.depth for f in fragments}
    assert by_pixel[(1, 1)] == pytest.approx(0.75)
    assert by_pixel[(4, 0)] == pytest.approx(1.0)
    assert by_pixel[(0, 4)] == pytest.approx(2.0)


def test_fragment_color_is_placeholder_white():
    fragments = rasterize_triangle(_vertex(0, 0), _vertex(2, 0), _vertex(0, 2))
    assert all(f.color == Vector3(1.0, 1.0, 1.0) for f in fragments)
