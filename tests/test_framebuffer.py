"""Tests for the CPU framebuffer and star field."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest
from pygame.math import Vector3

sys.path.append(str(Path(__file__).resolve().parents[1]))

from orrery.render.errors import RenderError, SurfaceNotBoundError
from orrery.render.framebuffer import Framebuffer, generate_stars

BLACK = (0, 0, 0)


class RecordingPresenter:
    def __init__(self) -> None:
        self.frames: list[tuple[bytes, tuple[int, int]]] = []

    def upload(self, data: bytes, size: tuple[int, int]) -> None:
        self.frames.append((data, size))


def _blank(width: int = 10, height: int = 10) -> Framebuffer:
    framebuffer = Framebuffer(width, height, star_field=False)
    framebuffer.set_background_color(Vector3(0.0, 0.0, 0.0))
    framebuffer.clear()
    return framebuffer


def test_clear_then_point_then_clear():
    framebuffer = _blank()
    assert framebuffer.point(5, 5, Vector3(1.0, 0.0, 0.0))
    for y in range(10):
        for x in range(10):
            expected = (255, 0, 0) if (x, y) == (5, 5) else BLACK
            assert framebuffer.pixel(x, y) == expected

    framebuffer.clear()
    assert all(framebuffer.pixel(x, y) == BLACK for y in range(10) for x in range(10))


def test_out_of_range_writes_are_ignored():
    framebuffer = _blank()
    for x, y in ((-1, 0), (0, -1), (10, 0), (0, 10), (100, 100)):
        assert not framebuffer.point(x, y, Vector3(1.0, 1.0, 1.0))
    assert all(framebuffer.pixel(x, y) == BLACK for y in range(10) for x in range(10))


def test_point_clamps_channels():
    framebuffer = _blank()
    framebuffer.point(1, 1, Vector3(0.5, 2.0, -1.0))
    assert framebuffer.pixel(1, 1) == (127, 255, 0)


def test_background_color_fills_on_clear():
    framebuffer = Framebuffer(4, 3, star_field=False)
    framebuffer.set_background_color(Vector3(0.2, 0.2, 0.4))
    framebuffer.clear()
    assert framebuffer.pixel(3, 2) == (51, 51, 102)


def test_rgba_export_layout():
    framebuffer = _blank()
    framebuffer.point(5, 5, Vector3(1.0, 0.0, 0.0))
    data = framebuffer.to_rgba_bytes()
    assert len(data) == 10 * 10 * 4
    offset = (5 * 10 + 5) * 4
    assert tuple(data[offset:offset + 4]) == (255, 0, 0, 255)
    assert tuple(data[0:4]) == (0, 0, 0, 255)


def test_invalid_size_rejected():
    with pytest.raises(ValueError):
        Framebuffer(0, 10)


def test_star_generation_is_deterministic():
    first = generate_stars(200, 100, 50)
    assert first == generate_stars(200, 100, 50)
    assert len(first) == 50
    for x, y, brightness in first:
        assert 0 <= x < 200
        assert 0 <= y < 100
        assert 0.3 <= brightness <= 0.99
    assert generate_stars(0, 100, 50) == []


def test_bright_stars_draw_a_plus():
    framebuffer = Framebuffer(10, 10, star_field=False)
    framebuffer.star_field = [(5, 5, 0.9), (2, 2, 0.5)]
    framebuffer.star_field_enabled = True
    framebuffer.clear()

    assert framebuffer.pixel(5, 5) == (229, 229, 206)
    for x, y in ((4, 5), (6, 5), (5, 4), (5, 6)):
        assert framebuffer.pixel(x, y) == (114, 114, 103)
    assert framebuffer.pixel(2, 2) == (127, 127, 114)
    assert framebuffer.pixel(1, 2) == BLACK


def test_star_at_edge_stays_in_bounds():
    framebuffer = Framebuffer(4, 4, star_field=False)
    framebuffer.star_field = [(0, 0, 0.95)]
    framebuffer.star_field_enabled = True
    framebuffer.clear()
    assert framebuffer.pixel(1, 0) != BLACK
    assert framebuffer.pixel(0, 1) != BLACK


def test_publish_requires_presenter():
    framebuffer = _blank()
    with pytest.raises(SurfaceNotBoundError):
        framebuffer.publish()
    assert issubclass(SurfaceNotBoundError, RenderError)


def test_publish_hands_bytes_to_presenter():
    framebuffer = _blank(6, 4)
    presenter = RecordingPresenter()
    framebuffer.bind_presenter(presenter)
    framebuffer.publish()
    data, size = presenter.frames[0]
    assert size == (6, 4)
    assert len(data) == 6 * 4 * 4
