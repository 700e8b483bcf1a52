"""Deterministic value noise and fractal Brownian motion.

Every function here is pure: identical inputs always produce bit-identical
outputs, so procedural surfaces replay exactly frame to frame.
"""
from __future__ import annotations

import math
from typing import TypeVar

from pygame.math import Vector2, Vector3

HASH_SCALE = 43758.5453
LATTICE_ROW = 57.0

Blendable = TypeVar("Blendable", float, Vector3)


def fract(x: float) -> float:
    return x - math.floor(x)


def clamp(x: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, x))


def hash1(x: float) -> float:
    """Pseudo-random value in [0, 1) for a scalar seed."""

    return fract(math.sin(x * HASH_SCALE))


def noise(p: Vector2) -> float:
    """Smoothly interpolated lattice value noise in [0, 1)."""

    ix = math.floor(p.x)
    iy = math.floor(p.y)
    fx = p.x - ix
    fy = p.y - iy
    ux = fx * fx * (3.0 - 2.0 * fx)
    uy = fy * fy * (3.0 - 2.0 * fy)

    n = ix + iy * LATTICE_ROW
    a = hash1(n)
    b = hash1(n + 1.0)
    c = hash1(n + LATTICE_ROW)
    d = hash1(n + LATTICE_ROW + 1.0)

    bottom = a + (b - a) * ux
    top = c + (d - c) * ux
    return bottom + (top - bottom) * uy


def fbm(p: Vector2, octaves: int) -> float:
    """Sum of ``octaves`` noise layers, normalised back into [0, 1)."""

    if octaves <= 0:
        return 0.0
    value = 0.0
    amplitude = 0.5
    frequency = 1.0
    total = 0.0
    for _ in range(octaves):
        value += amplitude * noise(Vector2(p.x * frequency, p.y * frequency))
        total += amplitude
        amplitude *= 0.5
        frequency *= 2.0
    return value / total


def mix(a: Blendable, b: Blendable, t: float) -> Blendable:
    """Linear interpolation, per channel for colors. ``t`` is not clamped."""

    return a + (b - a) * t


def smoothstep(edge0: float, edge1: float, x: float) -> float:
    if edge0 == edge1:
        return 0.0 if x < edge0 else 1.0
    t = clamp((x - edge0) / (edge1 - edge0))
    return t * t * (3.0 - 2.0 * t)


__all__ = [
    "clamp",
    "fbm",
    "fract",
    "hash1",
    "mix",
    "noise",
    "smoothstep",
]
