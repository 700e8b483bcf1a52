"""Per-body draw calls: vertex stage, assembly, rasterization and shading."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from pygame.math import Vector2, Vector3

from orrery.math.matrix import Matrix4, invert_affine, transform_point
from orrery.render.assembly import assemble_triangles
from orrery.render.framebuffer import Framebuffer
from orrery.render.materials import material_for
from orrery.render.rasterizer import DepthInterpolator, edge_weighted_depth, rasterize_triangle
from orrery.render.transform import transform_vertices
from orrery.render.uniforms import Uniforms
from orrery.render.vertex import Fragment, Vertex

LOGGER = logging.getLogger(__name__)


@dataclass
class RenderStats:
    """Counters for one or more rendered frames."""

    bodies: int = 0
    vertices: int = 0
    triangles: int = 0
    fragments: int = 0
    pixels_written: int = 0

    def accumulate(self, other: "RenderStats") -> None:
        self.bodies += other.bodies
        self.vertices += other.vertices
        self.triangles += other.triangles
        self.fragments += other.fragments
        self.pixels_written += other.pixels_written

    def reset(self) -> None:
        self.bodies = 0
        self.vertices = 0
        self.triangles = 0
        self.fragments = 0
        self.pixels_written = 0

    def average_fragments(self) -> float:
        if self.bodies <= 0:
            return 0.0
        return self.fragments / self.bodies


def surface_vertex(fragment: Fragment, inverse_model: Optional[Matrix4]) -> Vertex:
    """Build the vertex a material sees for ``fragment``.

    ``position`` is the fragment mapped back into object space, and
    ``tex_coords`` is that point projected onto the XZ plane, remapped from
    [-1, 1] to [0, 1].
    """

    screen = Vector3(fragment.x, fragment.y, fragment.depth)
    if inverse_model is None:
        local = Vector3()
    else:
        local = transform_point(inverse_model, screen)
    return Vertex(
        position=local,
        normal=Vector3(0.0, 1.0, 0.0),
        tex_coords=Vector2(local.x * 0.5 + 0.5, local.z * 0.5 + 0.5),
        transformed_position=screen,
        transformed_normal=Vector3(0.0, 1.0, 0.0),
    )


def render_body(
    framebuffer: Framebuffer,
    uniforms: Uniforms,
    vertices: Sequence[Vertex],
    stats: Optional[RenderStats] = None,
    interpolate_depth: DepthInterpolator = edge_weighted_depth,
) -> RenderStats:
    """Draw one body over whatever the framebuffer already holds."""

    body_stats = RenderStats(bodies=1, vertices=len(vertices))

    transformed = transform_vertices(vertices, uniforms)
    triangles = assemble_triangles(transformed)
    body_stats.triangles = len(triangles)

    inverse_model = invert_affine(uniforms.model_matrix)
    material = material_for(uniforms.body_type)
    time = uniforms.time
    for v1, v2, v3 in triangles:
        for fragment in rasterize_triangle(v1, v2, v3, interpolate_depth):
            body_stats.fragments += 1
            fragment.color = material.shade(fragment, surface_vertex(fragment, inverse_model), time)
            if framebuffer.point(fragment.x, fragment.y, fragment.color):
                body_stats.pixels_written += 1

    if stats is not None:
        stats.accumulate(body_stats)
    return body_stats


def render_frame(
    framebuffer: Framebuffer,
    draws: Iterable[tuple[Uniforms, Sequence[Vertex]]],
    stats: Optional[RenderStats] = None,
) -> RenderStats:
    """Clear, then draw bodies in order. Later bodies paint over earlier ones."""

    frame_stats = RenderStats()
    framebuffer.clear()
    for uniforms, vertices in draws:
        render_body(framebuffer, uniforms, vertices, frame_stats)
    LOGGER.debug(
        "Frame drawn: %d bodies, %d triangles, %d fragments",
        frame_stats.bodies,
        frame_stats.triangles,
        frame_stats.fragments,
    )
    if stats is not None:
        stats.accumulate(frame_stats)
    return frame_stats


__all__ = ["RenderStats", "render_body", "render_frame", "surface_vertex"]
