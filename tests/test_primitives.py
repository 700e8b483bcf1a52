"""Tests for generated meshes."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from orrery.world.primitives import (
    generate_flat_ring,
    generate_torus_ring,
    generate_uv_sphere,
    torus_indices,
)


def test_uv_sphere_is_unit_triangle_stream():
    vertices = generate_uv_sphere(8, 12)
    assert len(vertices) % 3 == 0
    assert len(vertices) == 3 * (2 * 12 * (8 - 1))
    for vertex in vertices:
        assert vertex.position.length() == pytest.approx(1.0)


def test_uv_sphere_rejects_tiny_grids():
    with pytest.raises(ValueError):
        generate_uv_sphere(1, 12)


def test_flat_ring_radii():
    vertices = generate_flat_ring(0.55, 1.0, 16)
    assert len(vertices) == 16 * 6
    for vertex in vertices:
        radius = vertex.position.length()
        assert 0.55 - 1e-9 <= radius <= 1.0 + 1e-9
        assert vertex.position.y == 0.0


def test_torus_grid_and_indices():
    vertices = generate_torus_ring(2.0, 0.5, 8, 4)
    indices = torus_indices(8, 4)
    assert len(vertices) == 9 * 5
    assert len(indices) == 8 * 4 * 6
    assert max(indices) < len(vertices)
    for vertex in vertices:
        assert 1.5 - 1e-9 <= (vertex.position.x ** 2 + vertex.position.z ** 2) ** 0.5 <= 2.5 + 1e-9
