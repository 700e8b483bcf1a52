"""Orbital animation: per-frame model matrices for every body."""
from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, Optional, Sequence

from pygame.math import Vector3

from orrery.math.matrix import create_model_matrix, rotate_point_around_center
from orrery.render.uniforms import BodyType, Uniforms
from orrery.render.vertex import Vertex

MIN_ZOOM = 0.3
MAX_ZOOM = 3.0

MESH_SPHERE = "sphere"
MESH_RING = "ring"
MESH_TORUS = "torus"


@dataclass(frozen=True)
class ViewState:
    """Camera and animation toggles for one frame. Transitions return copies."""

    camera_offset: tuple[float, float, float] = (0.0, 0.0, 0.0)
    zoom: float = 1.0
    rotation: tuple[float, float, float] = (0.0, 0.0, 0.0)
    auto_rotate: bool = True
    auto_orbit: bool = True

    def panned(self, dx: float, dy: float, dz: float = 0.0) -> "ViewState":
        x, y, z = self.camera_offset
        return replace(self, camera_offset=(x + dx, y + dy, z + dz))

    def zoomed(self, delta: float) -> "ViewState":
        return replace(self, zoom=max(MIN_ZOOM, min(MAX_ZOOM, self.zoom + delta)))

    def rotated(self, dx: float = 0.0, dy: float = 0.0, dz: float = 0.0) -> "ViewState":
        x, y, z = self.rotation
        return replace(self, rotation=(x + dx, y + dy, z + dz))

    def with_auto_rotate_toggled(self) -> "ViewState":
        return replace(self, auto_rotate=not self.auto_rotate)

    def with_auto_orbit_toggled(self) -> "ViewState":
        return replace(self, auto_orbit=not self.auto_orbit)


@dataclass(frozen=True)
class CelestialBody:
    name: str
    body_type: int
    scale: float
    orbit_radius: float = 0.0
    orbit_speed: float = 0.0
    rotation_speed: float = 0.0
    inclination: float = 0.0
    parent: Optional[str] = None
    mesh: str = MESH_SPHERE
    axial_tilt: float = 0.0


@dataclass
class BodyDraw:
    body: CelestialBody
    uniforms: Uniforms
    position: Vector3 = field(default_factory=Vector3)


def default_bodies() -> list[CelestialBody]:
    """Sol with its planets; children follow their parent entry."""

    return [
        CelestialBody("Sol", BodyType.STAR, scale=40.0, rotation_speed=0.02),
        CelestialBody(
            "Cytherea", BodyType.VENUS, scale=14.0, orbit_radius=70.0,
            orbit_speed=0.05, rotation_speed=0.01, inclination=0.3,
        ),
        CelestialBody(
            "Terra", BodyType.ROCKY_PLANET, scale=18.0, orbit_radius=110.0,
            orbit_speed=0.035, rotation_speed=0.03, inclination=0.4,
        ),
        CelestialBody(
            "Luna", BodyType.MOON, scale=6.0, orbit_radius=28.0, orbit_speed=0.12,
            rotation_speed=0.02, inclination=0.6, parent="Terra",
        ),
        CelestialBody(
            "Jove", BodyType.GAS_GIANT, scale=32.0, orbit_radius=170.0,
            orbit_speed=0.018, rotation_speed=0.02, inclination=0.8,
        ),
        CelestialBody(
            "Jove Ring", BodyType.RING, scale=60.0, parent="Jove",
            mesh=MESH_RING, axial_tilt=0.45,
        ),
        CelestialBody(
            "Glacia", BodyType.ICE_GIANT, scale=22.0, orbit_radius=230.0,
            orbit_speed=0.012, rotation_speed=0.025, inclination=1.2,
        ),
        CelestialBody(
            "Glacia Ring", BodyType.RING, scale=34.0, parent="Glacia",
            mesh=MESH_TORUS, axial_tilt=1.1,
        ),
    ]


class SolarSystem:
    """Computes body placement for a given time and view."""

    def __init__(self, bodies: Optional[Sequence[CelestialBody]] = None) -> None:
        self.bodies: list[CelestialBody] = list(bodies) if bodies is not None else default_bodies()
        names = {body.name for body in self.bodies}
        for body in self.bodies:
            if body.parent is not None and body.parent not in names:
                raise KeyError(f"Body '{body.name}' orbits unknown parent '{body.parent}'")

    def _orbit_offset(self, body: CelestialBody, time: float) -> Vector3:
        angle = time * body.orbit_speed
        return Vector3(
            math.cos(angle) * body.orbit_radius,
            math.sin(angle) * body.orbit_radius,
            math.sin(angle * body.inclination) * body.orbit_radius * 0.5,
        )

    def _place(
        self,
        body: CelestialBody,
        time: float,
        view: ViewState,
        center: Vector3,
        placed: Dict[str, Vector3],
    ) -> Vector3:
        anchor = center
        if body.parent is not None:
            if body.parent not in placed:
                parent = next(b for b in self.bodies if b.name == body.parent)
                placed[parent.name] = self._place(parent, time, view, center, placed)
            anchor = placed[body.parent]
        if view.auto_orbit and body.orbit_radius > 0.0:
            return anchor + self._orbit_offset(body, time)
        return Vector3(anchor)

    def frame(self, time: float, view: ViewState, center: Vector3) -> list[BodyDraw]:
        """Uniforms for every body in draw order.

        ``center`` is the screen-space system centre before the camera
        offset is applied.
        """

        origin = center + Vector3(view.camera_offset)
        system_rotation = Vector3(view.rotation)
        placed: Dict[str, Vector3] = {}
        draws: list[BodyDraw] = []
        for body in self.bodies:
            if body.name not in placed:
                placed[body.name] = self._place(body, time, view, origin, placed)
            position = rotate_point_around_center(placed[body.name], origin, system_rotation)
            spin = time * body.rotation_speed if view.auto_rotate else 0.0
            rotation = Vector3(body.axial_tilt, spin, 0.0)
            model_matrix = create_model_matrix(position, body.scale * view.zoom, rotation)
            draws.append(
                BodyDraw(
                    body=body,
                    uniforms=Uniforms(model_matrix=model_matrix, time=time, body_type=body.body_type),
                    position=position,
                )
            )
        return draws


def draw_list(
    draws: Iterable[BodyDraw],
    meshes: Dict[str, Sequence[Vertex]],
) -> list[tuple[Uniforms, Sequence[Vertex]]]:
    """Pair each body's uniforms with the vertex stream of its mesh kind."""

    return [(draw.uniforms, meshes[draw.body.mesh]) for draw in draws]


__all__ = [
    "BodyDraw",
    "CelestialBody",
    "MESH_RING",
    "MESH_SPHERE",
    "MESH_TORUS",
    "SolarSystem",
    "ViewState",
    "default_bodies",
    "draw_list",
]
