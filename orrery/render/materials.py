"""Procedural per-body surface materials.

Each body kind is a small frozen dataclass holding only the parameters its
layers need. ``shade`` dispatches on the body type tag; anything unknown
falls through to flat white.

Sphere materials map the fragment's object-space surface point to
equirectangular UVs and stack fbm-driven layers with ``mix``. The ring
material works on planar tex coords instead.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol

from pygame.math import Vector2, Vector3

from orrery.render.noise import clamp, fbm, fract, hash1, mix, noise, smoothstep
from orrery.render.uniforms import BodyType
from orrery.render.vertex import Fragment, Vertex

BLACK = Vector3(0.0, 0.0, 0.0)
UV_CENTER = Vector2(0.5, 0.5)
DIRECTION_EPSILON = 1e-6


def _color(r: float, g: float, b: float):
    return field(default_factory=lambda: Vector3(r, g, b))


def spherical_uv(position: Vector3) -> Optional[Vector2]:
    """Equirectangular UV of the direction of ``position``.

    Returns ``None`` for a vector too short to normalise.
    """

    length = position.length()
    if length < DIRECTION_EPSILON:
        return None
    dx = position.x / length
    dy = clamp(position.y / length, -1.0, 1.0)
    dz = position.z / length
    u = (math.atan2(dx, dz) / math.pi + 1.0) / 2.0
    v = math.asin(dy) / math.pi + 0.5
    return Vector2(u, v)


def uv_distance(uv: Vector2, center: Vector2, aspect: float = 1.0) -> float:
    """Distance between UVs with ``u`` wrapping around the sphere."""

    du = abs(uv.x - center.x)
    du = min(du, 1.0 - du) * aspect
    dv = uv.y - center.y
    return math.sqrt(du * du + dv * dv)


def rim_factor(uv: Vector2) -> float:
    """Distance from the UV centre, about 0 mid-disc and ~0.7 at the corners."""

    return (uv - UV_CENTER).length()


class Shader(Protocol):
    def shade(self, fragment: Fragment, vertex: Vertex, time: float) -> Vector3:
        ...


@dataclass(frozen=True)
class FlatMaterial:
    color: Vector3 = _color(1.0, 1.0, 1.0)

    def shade(self, fragment: Fragment, vertex: Vertex, time: float) -> Vector3:
        return Vector3(self.color)


@dataclass(frozen=True)
class StarMaterial:
    """Turbulent plasma with granulation, sunspots, filaments and a limb glow."""

    core: Vector3 = _color(1.0, 0.55, 0.1)
    surface: Vector3 = _color(1.0, 0.85, 0.3)
    granule: Vector3 = _color(1.0, 0.97, 0.75)
    spot: Vector3 = _color(0.35, 0.12, 0.02)
    flare: Vector3 = _color(1.0, 1.0, 0.9)
    corona: Vector3 = _color(1.0, 0.4, 0.05)
    spots: tuple[tuple[float, float, float], ...] = (
        (0.2, 0.42, 0.05),
        (0.63, 0.58, 0.04),
        (0.81, 0.35, 0.03),
    )
    pulse_speed: float = 1.5

    def shade(self, fragment: Fragment, vertex: Vertex, time: float) -> Vector3:
        uv = spherical_uv(vertex.position)
        if uv is None:
            return Vector3(BLACK)

        plasma = fbm(Vector2(uv.x * 6.0 + time * 0.05, uv.y * 6.0 - time * 0.03), 5)
        color = mix(self.core, self.surface, plasma)

        cells = noise(Vector2(uv.x * 40.0 + time * 0.2, uv.y * 40.0 - time * 0.1))
        color = mix(color, self.granule, smoothstep(0.55, 0.9, cells) * 0.35)

        for spot_u, spot_v, radius in self.spots:
            distance = uv_distance(uv, Vector2(spot_u, spot_v), aspect=2.0)
            mask = 1.0 - smoothstep(radius * 0.4, radius, distance)
            if mask <= 0.0:
                continue
            ragged = 0.6 + 0.4 * fbm(Vector2(uv.x * 30.0, uv.y * 30.0), 3)
            color = mix(color, self.spot, mask * ragged * 0.85)

        filament = fbm(Vector2(uv.x * 12.0 - time * 0.1, uv.y * 3.0), 4)
        color = mix(color, self.flare, smoothstep(0.62, 0.85, filament) * 0.5)

        color = mix(color, self.corona, smoothstep(0.3, 0.7, rim_factor(uv)) * 0.4)

        return color * (0.95 + 0.05 * math.sin(time * self.pulse_speed))


@dataclass(frozen=True)
class RockyPlanetMaterial:
    """Oceans, continents, mountains, ice caps, drifting clouds over haze and air glow."""

    deep_ocean: Vector3 = _color(0.02, 0.08, 0.3)
    shallow_ocean: Vector3 = _color(0.05, 0.35, 0.6)
    sand: Vector3 = _color(0.8, 0.75, 0.5)
    grass: Vector3 = _color(0.15, 0.45, 0.12)
    desert: Vector3 = _color(0.6, 0.5, 0.25)
    rock: Vector3 = _color(0.4, 0.33, 0.28)
    snow: Vector3 = _color(0.95, 0.95, 0.97)
    cloud: Vector3 = _color(1.0, 1.0, 1.0)
    atmosphere: Vector3 = _color(0.4, 0.65, 1.0)
    sea_level: float = 0.5
    cloud_speed: float = 0.02

    def shade(self, fragment: Fragment, vertex: Vertex, time: float) -> Vector3:
        uv = spherical_uv(vertex.position)
        if uv is None:
            return Vector3(BLACK)

        sea = self.sea_level
        elevation = fbm(Vector2(uv.x * 8.0, uv.y * 4.0), 6)

        ocean = mix(self.deep_ocean, self.shallow_ocean, smoothstep(sea - 0.15, sea, elevation))
        climate = fbm(Vector2(uv.x * 16.0 + 30.0, uv.y * 8.0 + 30.0), 4)
        land = mix(self.grass, self.desert, smoothstep(0.4, 0.65, climate))
        land = mix(land, self.rock, smoothstep(0.62, 0.72, elevation))
        land = mix(land, self.snow, smoothstep(0.74, 0.8, elevation))

        land_mask = smoothstep(sea - 0.01, sea + 0.01, elevation)
        color = mix(ocean, land, land_mask)

        shore = 1.0 - smoothstep(0.0, 0.025, abs(elevation - sea))
        color = mix(color, self.sand, shore * land_mask * 0.8)

        latitude = abs(uv.y - 0.5) * 2.0
        ice = smoothstep(0.8, 0.9, latitude + (climate - 0.5) * 0.1)
        color = mix(color, self.snow, ice)

        cover = fbm(Vector2(uv.x * 10.0 + time * self.cloud_speed, uv.y * 6.0), 5)
        color = mix(color, self.cloud, smoothstep(0.5, 0.75, cover) * 0.8 + cover * 0.1)

        return mix(color, self.atmosphere, smoothstep(0.3, 0.55, rim_factor(uv)) * 0.3)


@dataclass(frozen=True)
class GasGiantMaterial:
    """Latitude bands, turbulent band edges, a great storm and rim darkening."""

    band_dark: Vector3 = _color(0.55, 0.35, 0.2)
    band_light: Vector3 = _color(0.93, 0.85, 0.7)
    swirl: Vector3 = _color(0.75, 0.55, 0.4)
    storm: Vector3 = _color(0.75, 0.25, 0.12)
    storm_eye: Vector3 = _color(0.95, 0.6, 0.45)
    band_count: float = 9.0
    storm_center: tuple[float, float] = (0.3, 0.38)
    storm_radius: float = 0.08
    flow_speed: float = 0.03

    def shade(self, fragment: Fragment, vertex: Vertex, time: float) -> Vector3:
        uv = spherical_uv(vertex.position)
        if uv is None:
            return Vector3(BLACK)

        warp = fbm(Vector2(uv.x * 4.0 + time * self.flow_speed, uv.y * 8.0), 4)
        band = math.sin((uv.y + warp * 0.08) * self.band_count * math.pi) * 0.5 + 0.5
        color = mix(self.band_dark, self.band_light, band)

        edge = 1.0 - abs(band * 2.0 - 1.0)
        eddies = fbm(Vector2(uv.x * 20.0 - time * self.flow_speed * 3.0, uv.y * 30.0), 3)
        color = mix(color, self.swirl, edge * eddies * 0.4)

        center = Vector2(fract(self.storm_center[0] + time * self.flow_speed * 0.5), self.storm_center[1])
        distance = uv_distance(uv, center, aspect=2.0) / self.storm_radius
        storm_mask = 1.0 - smoothstep(0.6, 1.0, distance)
        if storm_mask > 0.0:
            angle = math.atan2(uv.y - center.y, uv.x - center.x) + distance * 3.0 - time * 0.5
            spiral = noise(Vector2(math.cos(angle) * 3.0 + 10.0, math.sin(angle) * 3.0 + distance * 4.0))
            storm = mix(self.storm, self.storm_eye, (1.0 - smoothstep(0.0, 0.5, distance)) * spiral)
            color = mix(color, storm, storm_mask)

        return color * (1.0 - smoothstep(0.35, 0.7, rim_factor(uv)) * 0.5)


@dataclass(frozen=True)
class IceGiantMaterial:
    """Faint cyan banding under a methane haze with a bright polar hood."""

    deep: Vector3 = _color(0.15, 0.35, 0.7)
    pale: Vector3 = _color(0.55, 0.8, 0.9)
    haze: Vector3 = _color(0.7, 0.9, 0.95)
    hood: Vector3 = _color(0.85, 0.95, 1.0)
    spot: Vector3 = _color(0.05, 0.15, 0.4)
    glow: Vector3 = _color(0.5, 0.85, 1.0)
    spot_center: tuple[float, float] = (0.7, 0.4)

    def shade(self, fragment: Fragment, vertex: Vertex, time: float) -> Vector3:
        uv = spherical_uv(vertex.position)
        if uv is None:
            return Vector3(BLACK)

        drift = fbm(Vector2(uv.x * 3.0 + time * 0.015, uv.y * 5.0), 4)
        band = math.sin((uv.y + drift * 0.05) * 5.0 * math.pi) * 0.5 + 0.5
        color = mix(self.deep, self.pale, band * 0.6 + drift * 0.4)

        methane = fbm(Vector2(uv.x * 6.0 - time * 0.01, uv.y * 6.0), 3)
        color = mix(color, self.haze, smoothstep(0.4, 0.8, methane) * 0.35)

        hood = smoothstep(0.75, 0.92, uv.y)
        color = mix(color, self.hood, hood * 0.7)

        distance = uv_distance(uv, Vector2(*self.spot_center), aspect=2.0)
        color = mix(color, self.spot, (1.0 - smoothstep(0.02, 0.06, distance)) * 0.6)

        return mix(color, self.glow, smoothstep(0.3, 0.6, rim_factor(uv)) * 0.35)


@dataclass(frozen=True)
class VenusMaterial:
    """Thick sheared sulphur cloud deck with streaks and terminator dimming."""

    dark: Vector3 = _color(0.7, 0.55, 0.3)
    pale: Vector3 = _color(0.98, 0.9, 0.65)
    streak: Vector3 = _color(0.55, 0.4, 0.2)
    night: Vector3 = _color(0.15, 0.1, 0.05)
    shear: float = 2.0

    def shade(self, fragment: Fragment, vertex: Vertex, time: float) -> Vector3:
        uv = spherical_uv(vertex.position)
        if uv is None:
            return Vector3(BLACK)

        flow = Vector2(uv.x * 5.0 + time * 0.04 + uv.y * self.shear, uv.y * 10.0)
        deck = fbm(flow, 6)
        color = mix(self.dark, self.pale, deck)

        streaks = fbm(Vector2(uv.x * 2.0 - time * 0.02, uv.y * 24.0), 3)
        color = mix(color, self.streak, smoothstep(0.55, 0.8, streaks) * 0.3)

        daylight = math.cos((uv.x - 0.5) * math.pi) * 0.5 + 0.5
        return mix(self.night, color, 0.45 + 0.55 * smoothstep(0.0, 0.6, daylight))


@dataclass(frozen=True)
class MoonMaterial:
    """Grey regolith with dark maria and hashed impact craters."""

    dust_dark: Vector3 = _color(0.35, 0.35, 0.36)
    dust_light: Vector3 = _color(0.72, 0.71, 0.7)
    maria: Vector3 = _color(0.22, 0.22, 0.24)
    crater_floor: Vector3 = _color(0.25, 0.25, 0.26)
    crater_rim: Vector3 = _color(0.85, 0.85, 0.84)
    crater_scale: tuple[float, float] = (14.0, 7.0)

    def shade(self, fragment: Fragment, vertex: Vertex, time: float) -> Vector3:
        uv = spherical_uv(vertex.position)
        if uv is None:
            return Vector3(BLACK)

        color = mix(self.dust_dark, self.dust_light, fbm(Vector2(uv.x * 12.0, uv.y * 6.0), 5))

        basins = fbm(Vector2(uv.x * 3.0 + 7.0, uv.y * 1.5 + 7.0), 4)
        color = mix(color, self.maria, smoothstep(0.55, 0.65, basins) * 0.8)

        color = self._craters(color, uv)

        return color * (1.0 - smoothstep(0.35, 0.7, rim_factor(uv)) * 0.4)

    def _craters(self, color: Vector3, uv: Vector2) -> Vector3:
        px = uv.x * self.crater_scale[0]
        py = uv.y * self.crater_scale[1]
        cell_x = math.floor(px)
        cell_y = math.floor(py)
        for oy in (-1, 0, 1):
            for ox in (-1, 0, 1):
                cx = cell_x + ox
                cy = cell_y + oy
                seed = cx * 127.1 + cy * 311.7
                if hash1(seed + 3.3) < 0.45:
                    continue
                center_x = cx + hash1(seed)
                center_y = cy + hash1(seed + 13.7)
                radius = 0.15 + 0.3 * hash1(seed + 5.1)
                distance = math.hypot(px - center_x, py - center_y) / radius
                if distance >= 1.0:
                    continue
                floor_mask = 1.0 - smoothstep(0.6, 0.9, distance)
                rim_mask = smoothstep(0.7, 0.9, distance) * (1.0 - smoothstep(0.9, 1.0, distance))
                color = mix(color, self.crater_floor, floor_mask * 0.5)
                color = mix(color, self.crater_rim, rim_mask * 0.5)
        return color


@dataclass(frozen=True)
class RingMaterial:
    """Banded annulus driven by the radial distance of planar tex coords."""

    inner_color: Vector3 = _color(0.55, 0.48, 0.38)
    outer_color: Vector3 = _color(0.85, 0.78, 0.62)
    band_color: Vector3 = _color(0.4, 0.33, 0.25)
    gap_color: Vector3 = _color(0.05, 0.04, 0.04)
    inner_radius: float = 0.55
    outer_radius: float = 1.0
    band_frequency: float = 7.0
    gap_position: float = 0.62
    gap_width: float = 0.035

    def shade(self, fragment: Fragment, vertex: Vertex, time: float) -> Vector3:
        radius = (vertex.tex_coords - UV_CENTER).length() * 2.0
        span = self.outer_radius - self.inner_radius
        if span <= 0.0 or radius < self.inner_radius or radius > self.outer_radius:
            return Vector3(self.gap_color)
        t = (radius - self.inner_radius) / span

        color = mix(self.inner_color, self.outer_color, t)

        bands = math.sin(t * self.band_frequency * math.pi * 2.0) * 0.5 + 0.5
        angle = math.atan2(vertex.tex_coords.y - 0.5, vertex.tex_coords.x - 0.5)
        dust = fbm(Vector2(radius * 60.0, angle * 4.0 + time * 0.05), 3)
        color = mix(color, self.band_color, bands * 0.35 + (dust - 0.5) * 0.3)

        gap = 1.0 - smoothstep(0.0, self.gap_width, abs(t - self.gap_position))
        color = mix(color, self.gap_color, gap * 0.85)

        edge = smoothstep(0.0, 0.08, t) * (1.0 - smoothstep(0.9, 1.0, t))
        return color * (0.35 + 0.65 * edge)


FLAT_WHITE = FlatMaterial()

MATERIALS: Dict[int, Shader] = {
    BodyType.STAR: StarMaterial(),
    BodyType.ROCKY_PLANET: RockyPlanetMaterial(),
    BodyType.GAS_GIANT: GasGiantMaterial(),
    BodyType.MOON: MoonMaterial(),
    BodyType.RING: RingMaterial(),
    BodyType.ICE_GIANT: IceGiantMaterial(),
    BodyType.VENUS: VenusMaterial(),
}


def material_for(body_type: int) -> Shader:
    return MATERIALS.get(body_type, FLAT_WHITE)


def shade(fragment: Fragment, vertex: Vertex, time: float, body_type: int) -> Vector3:
    """Color of one fragment for the given body type."""

    return material_for(body_type).shade(fragment, vertex, time)


__all__ = [
    "FLAT_WHITE",
    "FlatMaterial",
    "GasGiantMaterial",
    "IceGiantMaterial",
    "MATERIALS",
    "Shader",
    "MoonMaterial",
    "RingMaterial",
    "RockyPlanetMaterial",
    "StarMaterial",
    "VenusMaterial",
    "material_for",
    "rim_factor",
    "shade",
    "spherical_uv",
    "uv_distance",
]
