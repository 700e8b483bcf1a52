"""Interactive solar system viewer built on the software pipeline."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional, Sequence

import pygame
from pygame.math import Vector3

from orrery.assets.model import Model
from orrery.engine.input import InputBindings, InputMapper
from orrery.engine.logger import init_logger
from orrery.engine.loop import FrameLoop
from orrery.engine.settings import SETTINGS_PATH, RenderSettings, load_settings
from orrery.render.errors import MeshLoadError
from orrery.render.framebuffer import Framebuffer
from orrery.render.hud import HUD
from orrery.render.pipeline import RenderStats, render_frame
from orrery.render.presenter import TexturePresenter, ensure_default_state
from orrery.render.vertex import Vertex
from orrery.world.primitives import generate_flat_ring, generate_torus_ring, generate_uv_sphere, torus_indices
from orrery.world.system import MESH_RING, MESH_SPHERE, MESH_TORUS, SolarSystem, ViewState, draw_list

LOGGER = logging.getLogger(__name__)

RING_INNER_RADIUS = 0.55
RING_OUTER_RADIUS = 1.0
RING_SEGMENTS = 64
# Tube centred in the ring material's 0.55..1.0 annulus.
TORUS_MAJOR_RADIUS = 0.775
TORUS_MINOR_RADIUS = 0.05
TORUS_SEGMENTS = (48, 6)


def torus_stream() -> list[Vertex]:
    major, minor = TORUS_SEGMENTS
    grid = generate_torus_ring(TORUS_MAJOR_RADIUS, TORUS_MINOR_RADIUS, major, minor)
    return Model(vertices=grid, indices=torus_indices(major, minor)).vertex_array()


def load_meshes(model_path: Path) -> Dict[str, Sequence[Vertex]]:
    """Body meshes keyed by mesh kind; a broken model falls back to a UV sphere."""

    try:
        model = Model.load(model_path)
        sphere: Sequence[Vertex] = model.vertex_array()
        LOGGER.info("Loaded %s: %d triangles", model_path, model.triangle_count)
    except MeshLoadError as exc:
        LOGGER.warning("Using generated sphere: %s", exc)
        sphere = generate_uv_sphere()
    return {
        MESH_SPHERE: sphere,
        MESH_RING: generate_flat_ring(RING_INNER_RADIUS, RING_OUTER_RADIUS, RING_SEGMENTS),
        MESH_TORUS: torus_stream(),
    }


def main(settings_path: Optional[Path] = None) -> None:
    path = settings_path or SETTINGS_PATH
    raw_settings = load_settings(path)
    settings = RenderSettings.from_dict(raw_settings)
    logger = init_logger(raw_settings)
    render_log = logger.channel("render")
    frame_log = logger.channel("frame")
    input_log = logger.channel("input")

    pygame.init()
    pygame.display.gl_set_attribute(
        pygame.GL_CONTEXT_PROFILE_MASK, pygame.GL_CONTEXT_PROFILE_CORE
    )
    pygame.display.gl_set_attribute(pygame.GL_CONTEXT_MAJOR_VERSION, 3)
    pygame.display.gl_set_attribute(pygame.GL_CONTEXT_MINOR_VERSION, 3)

    width, height = settings.resolution
    pygame.display.set_mode((width, height), pygame.OPENGL | pygame.DOUBLEBUF)
    pygame.display.set_caption("Orrery")
    ensure_default_state()
    clock = pygame.time.Clock()

    framebuffer = Framebuffer(
        width,
        height,
        star_field=settings.star_field,
        star_count=settings.star_count,
    )
    framebuffer.set_background_color(settings.background_color)
    frame_presenter = TexturePresenter()
    hud_presenter = TexturePresenter()
    framebuffer.bind_presenter(frame_presenter)
    hud = HUD((width, height))

    meshes = load_meshes(settings.model_path)
    system = SolarSystem()
    input_mapper = InputMapper(InputBindings.load(path))
    center = Vector3(width / 2.0, height / 2.0, 0.0)
    render_log.info("Rendering %d bodies at %dx%d", len(system.bodies), width, height)

    view = ViewState()
    stats = RenderStats()

    def process_events() -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                loop.stop()
                return
            input_mapper.handle_event(event)
        if input_mapper.consume_press("quit"):
            input_log.info("Quit requested")
            loop.stop()

    def step(time: float) -> None:
        nonlocal view
        view = input_mapper.apply(view)
        draws = system.frame(time, view, center)
        frame_stats = render_frame(framebuffer, draw_list(draws, meshes), stats)
        framebuffer.publish()
        frame_presenter.draw()
        hud.draw(time, view, clock.get_fps(), frame_stats)
        hud_presenter.upload(hud.to_rgba_bytes(), (width, height))
        hud_presenter.draw()
        pygame.display.flip()
        clock.tick()
        frame_log.debug("t=%.3f fragments=%d", time, frame_stats.fragments)

    loop = FrameLoop(
        step,
        process_events,
        time_step=settings.time_step,
        frame_delay=settings.frame_delay,
    )

    try:
        loop.run()
    finally:
        render_log.info(
            "Stopped after %d frames, %.0f fragments per body on average",
            loop.frames,
            stats.average_fragments(),
        )
        hud_presenter.release()
        frame_presenter.release()
        pygame.quit()


__all__ = ["load_meshes", "main", "torus_stream"]
