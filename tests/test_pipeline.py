"""Tests for per-body rendering and painter's-order compositing."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest
from pygame.math import Vector2, Vector3

sys.path.append(str(Path(__file__).resolve().parents[1]))

from orrery.math.matrix import create_model_matrix, identity_matrix, invert_affine
from orrery.render.framebuffer import Framebuffer
from orrery.render.pipeline import RenderStats, render_body, render_frame, surface_vertex
from orrery.render.rasterizer import rasterize_triangle
from orrery.render.uniforms import BodyType, Uniforms
from orrery.render.vertex import Fragment, Vertex

FLAT = 99


def _vertex(x: float, y: float) -> Vertex:
    return Vertex.new(Vector3(x, y, 0.0), Vector3(0.0, 0.0, 1.0), Vector2())


def _framebuffer(size: int = 40) -> Framebuffer:
    framebuffer = Framebuffer(size, size, star_field=False)
    framebuffer.set_background_color(Vector3(0.0, 0.0, 0.0))
    return framebuffer


def _uniforms(body_type: int) -> Uniforms:
    return Uniforms(model_matrix=identity_matrix(), time=1.25, body_type=body_type)


BIG = [_vertex(0, 0), _vertex(39, 0), _vertex(0, 39)]
SMALL = [_vertex(2, 2), _vertex(10, 2), _vertex(2, 10)]


def _pixels(framebuffer: Framebuffer, vertices) -> dict:
    return {
        (f.x, f.y): framebuffer.pixel(f.x, f.y)
        for f in rasterize_triangle(*vertices)
    }


def test_later_body_wins_at_overlap():
    alone = _framebuffer()
    render_frame(alone, [(_uniforms(BodyType.STAR), SMALL)])

    layered = _framebuffer()
    render_frame(layered, [(_uniforms(FLAT), BIG), (_uniforms(BodyType.STAR), SMALL)])

    assert _pixels(layered, SMALL) == _pixels(alone, SMALL)
    assert layered.pixel(30, 5) == (255, 255, 255)


def test_earlier_body_is_hidden_when_drawn_first():
    framebuffer = _framebuffer()
    render_frame(framebuffer, [(_uniforms(BodyType.STAR), SMALL), (_uniforms(FLAT), BIG)])
    assert set(_pixels(framebuffer, SMALL).values()) == {(255, 255, 255)}


def test_render_frame_clears_previous_content():
    framebuffer = _framebuffer()
    render_frame(framebuffer, [(_uniforms(FLAT), BIG)])
    render_frame(framebuffer, [])
    assert framebuffer.pixel(5, 5) == (0, 0, 0)


def test_render_body_counts_work():
    framebuffer = _framebuffer(10)
    vertices = [_vertex(0, 0), _vertex(4, 0), _vertex(0, 4), _vertex(7, 7), _vertex(8, 8)]
    stats = render_body(framebuffer, _uniforms(FLAT), vertices)
    assert stats.bodies == 1
    assert stats.vertices == 5
    assert stats.triangles == 1
    assert stats.fragments == 15
    assert stats.pixels_written == 15


def test_offscreen_fragments_are_not_written():
    framebuffer = _framebuffer(10)
    stats = render_body(framebuffer, _uniforms(FLAT), [_vertex(-5, -5), _vertex(5, -5), _vertex(-5, 5)])
    assert stats.fragments > stats.pixels_written > 0


def test_frame_stats_accumulate():
    total = RenderStats()
    framebuffer = _framebuffer()
    render_frame(framebuffer, [(_uniforms(FLAT), SMALL), (_uniforms(FLAT), SMALL)], total)
    render_frame(framebuffer, [(_uniforms(FLAT), SMALL)], total)
    assert total.bodies == 3
    assert total.triangles == 3
    assert total.average_fragments() == pytest.approx(total.fragments / 3)
    total.reset()
    assert total.fragments == 0
    assert total.average_fragments() == 0.0


def test_surface_vertex_maps_back_to_object_space():
    model = create_model_matrix(Vector3(100.0, 50.0, 0.0), 10.0, Vector3())
    vertex = surface_vertex(Fragment(110, 50, 0.0), invert_affine(model))
    assert vertex.position.x == pytest.approx(1.0)
    assert vertex.position.y == pytest.approx(0.0)
    assert vertex.tex_coords.x == pytest.approx(1.0)
    assert vertex.tex_coords.y == pytest.approx(0.5)
    assert vertex.transformed_position == Vector3(110.0, 50.0, 0.0)


def test_surface_vertex_without_inverse_is_origin():
    vertex = surface_vertex(Fragment(3, 4, 0.5), None)
    assert vertex.position == Vector3(0.0, 0.0, 0.0)
