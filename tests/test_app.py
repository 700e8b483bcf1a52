"""Tests for application mesh setup."""
from __future__ import annotations

import math
import sys
from pathlib import Path

from pygame.math import Vector3

sys.path.append(str(Path(__file__).resolve().parents[1]))

from orrery.app import RING_SEGMENTS, TORUS_SEGMENTS, load_meshes
from orrery.render.materials import RingMaterial
from orrery.render.uniforms import BodyType
from orrery.world.system import MESH_RING, MESH_SPHERE, MESH_TORUS, SolarSystem, ViewState


def test_missing_model_falls_back_to_sphere(tmp_path, caplog):
    meshes = load_meshes(tmp_path / "missing.obj")
    assert len(meshes[MESH_SPHERE]) > 0
    assert len(meshes[MESH_SPHERE]) % 3 == 0
    assert len(meshes[MESH_RING]) == RING_SEGMENTS * 6
    assert any("generated sphere" in record.getMessage() for record in caplog.records)


def test_model_file_is_expanded(tmp_path):
    obj = tmp_path / "tri.obj"
    obj.write_text("v 0 0 0\nv 1 0 0\nv 0 1 0\nv 1 1 0\nf 1 2 3 4\n")
    meshes = load_meshes(obj)
    assert len(meshes[MESH_SPHERE]) == 6


def test_torus_ring_fits_ring_material_annulus(tmp_path):
    meshes = load_meshes(tmp_path / "missing.obj")
    torus = meshes[MESH_TORUS]
    major, minor = TORUS_SEGMENTS
    assert len(torus) == major * minor * 6
    ring = RingMaterial()
    for vertex in torus:
        radius = math.hypot(vertex.position.x, vertex.position.z)
        assert ring.inner_radius < radius < ring.outer_radius


def test_torus_ring_body_is_drawn():
    draws = SolarSystem().frame(4.0, ViewState(), Vector3(400.0, 300.0, 0.0))
    rings = [draw.body for draw in draws if draw.body.mesh == MESH_TORUS]
    assert [body.name for body in rings] == ["Glacia Ring"]
    assert rings[0].body_type == BodyType.RING
