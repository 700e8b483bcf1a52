"""Tests for view state and orbital placement."""
from __future__ import annotations

import math
import sys
from pathlib import Path

import pytest
from pygame.math import Vector3

sys.path.append(str(Path(__file__).resolve().parents[1]))

from orrery.render.uniforms import BodyType
from orrery.world.system import (
    MESH_RING,
    MESH_SPHERE,
    MESH_TORUS,
    CelestialBody,
    SolarSystem,
    ViewState,
    default_bodies,
    draw_list,
)

CENTER = Vector3(400.0, 300.0, 0.0)


def _by_name(draws):
    return {draw.body.name: draw for draw in draws}


def test_zoom_is_clamped():
    assert ViewState().zoomed(10.0).zoom == 3.0
    assert ViewState().zoomed(-10.0).zoom == 0.3
    assert ViewState().zoomed(0.05).zoom == pytest.approx(1.05)


def test_view_transitions_return_copies():
    view = ViewState()
    panned = view.panned(10.0, -10.0)
    assert panned.camera_offset == (10.0, -10.0, 0.0)
    assert view.camera_offset == (0.0, 0.0, 0.0)
    assert view.rotated(dx=0.1).rotation == (0.1, 0.0, 0.0)
    assert not view.with_auto_rotate_toggled().auto_rotate
    assert not view.with_auto_orbit_toggled().auto_orbit
    assert view.with_auto_orbit_toggled().with_auto_orbit_toggled().auto_orbit


def test_bodies_sit_at_centre_without_orbits():
    system = SolarSystem()
    draws = system.frame(12.0, ViewState(auto_orbit=False), CENTER)
    assert len(draws) == len(default_bodies())
    for draw in draws:
        assert draw.position == CENTER


def test_camera_offset_moves_everything():
    system = SolarSystem()
    view = ViewState(auto_orbit=False).panned(15.0, 5.0)
    for draw in system.frame(1.0, view, CENTER):
        assert draw.position == Vector3(415.0, 305.0, 0.0)


def test_planet_follows_orbit_formula():
    time = 20.0
    terra = _by_name(SolarSystem().frame(time, ViewState(), CENTER))["Terra"]
    body = terra.body
    angle = time * body.orbit_speed
    expected = CENTER + Vector3(
        math.cos(angle) * body.orbit_radius,
        math.sin(angle) * body.orbit_radius,
        math.sin(angle * body.inclination) * body.orbit_radius * 0.5,
    )
    assert terra.position.distance_to(expected) == pytest.approx(0.0, abs=1e-9)


def test_moon_orbits_its_parent():
    draws = _by_name(SolarSystem().frame(33.0, ViewState(), CENTER))
    luna = draws["Luna"]
    offset = luna.position - draws["Terra"].position
    assert 0.0 < offset.length() <= luna.body.orbit_radius * math.sqrt(1.25) + 1e-9
    assert draws["Jove Ring"].position == draws["Jove"].position
    assert draws["Glacia Ring"].position == draws["Glacia"].position


def test_model_matrix_uses_zoomed_scale():
    view = ViewState(auto_rotate=False, auto_orbit=False).zoomed(1.0)
    sol = _by_name(SolarSystem().frame(5.0, view, CENTER))["Sol"]
    matrix = sol.uniforms.model_matrix
    assert matrix[0][0] == pytest.approx(40.0 * 2.0)
    assert matrix[0][3] == pytest.approx(CENTER.x)
    assert matrix[1][3] == pytest.approx(CENTER.y)
    assert sol.uniforms.body_type == BodyType.STAR
    assert sol.uniforms.time == 5.0


def test_unknown_parent_rejected():
    with pytest.raises(KeyError):
        SolarSystem([CelestialBody("Lost", BodyType.MOON, 1.0, parent="Nowhere")])


def test_draw_list_picks_mesh_by_kind():
    sphere, ring, torus = [object()], [object()], [object()]
    draws = SolarSystem().frame(0.0, ViewState(), CENTER)
    pairs = draw_list(draws, {MESH_SPHERE: sphere, MESH_RING: ring, MESH_TORUS: torus})
    meshes = {draw.body.name: mesh for draw, (_, mesh) in zip(draws, pairs)}
    assert meshes["Jove Ring"] is ring
    assert meshes["Sol"] is sphere
    assert meshes["Glacia Ring"] is torus
