"""Per-draw-call inputs shared by the vertex and material stages."""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from orrery.math.matrix import Matrix4


class BodyType(IntEnum):
    STAR = 0
    ROCKY_PLANET = 1
    GAS_GIANT = 2
    MOON = 3
    RING = 4
    ICE_GIANT = 5
    VENUS = 6


@dataclass(frozen=True)
class Uniforms:
    model_matrix: Matrix4
    time: float
    body_type: int


__all__ = ["BodyType", "Uniforms"]
