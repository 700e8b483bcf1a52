"""Row-major 4x4 matrix helpers for the software pipeline."""
from __future__ import annotations

import math
from typing import NamedTuple, Optional

from pygame.math import Vector3

Matrix4 = list[list[float]]


class Vector4(NamedTuple):
    """Homogeneous point or direction."""

    x: float
    y: float
    z: float
    w: float


def new_matrix4(
    r0c0: float, r0c1: float, r0c2: float, r0c3: float,
    r1c0: float, r1c1: float, r1c2: float, r1c3: float,
    r2c0: float, r2c1: float, r2c2: float, r2c3: float,
    r3c0: float, r3c1: float, r3c2: float, r3c3: float,
) -> Matrix4:
    """Build a matrix from 16 values given in mathematical row order."""

    return [
        [r0c0, r0c1, r0c2, r0c3],
        [r1c0, r1c1, r1c2, r1c3],
        [r2c0, r2c1, r2c2, r2c3],
        [r3c0, r3c1, r3c2, r3c3],
    ]


def new_matrix3(
    r0c0: float, r0c1: float, r0c2: float,
    r1c0: float, r1c1: float, r1c2: float,
    r2c0: float, r2c1: float, r2c2: float,
) -> Matrix4:
    """Embed a 3x3 linear transform in a 4x4 matrix."""

    return new_matrix4(
        r0c0, r0c1, r0c2, 0.0,
        r1c0, r1c1, r1c2, 0.0,
        r2c0, r2c1, r2c2, 0.0,
        0.0, 0.0, 0.0, 1.0,
    )


def identity_matrix() -> Matrix4:
    return new_matrix3(1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0)


def _mat_mul(a: Matrix4, b: Matrix4) -> Matrix4:
    result = [[0.0 for _ in range(4)] for _ in range(4)]
    for i in range(4):
        for j in range(4):
            total = 0.0
            for k in range(4):
                total += a[i][k] * b[k][j]
            result[i][j] = total
    return result


def multiply_matrices(*matrices: Matrix4) -> Matrix4:
    """Compose matrices left to right, so the rightmost applies first."""

    result: Optional[Matrix4] = None
    for matrix in matrices:
        if result is None:
            result = matrix
        else:
            result = _mat_mul(result, matrix)
    if result is None:
        raise ValueError("No matrices provided for multiplication")
    return result


def multiply_matrix_vector4(matrix: Matrix4, vector: Vector4) -> Vector4:
    x, y, z, w = vector
    return Vector4(
        matrix[0][0] * x + matrix[0][1] * y + matrix[0][2] * z + matrix[0][3] * w,
        matrix[1][0] * x + matrix[1][1] * y + matrix[1][2] * z + matrix[1][3] * w,
        matrix[2][0] * x + matrix[2][1] * y + matrix[2][2] * z + matrix[2][3] * w,
        matrix[3][0] * x + matrix[3][1] * y + matrix[3][2] * z + matrix[3][3] * w,
    )


def translation_matrix(translation: Vector3) -> Matrix4:
    return new_matrix4(
        1.0, 0.0, 0.0, translation.x,
        0.0, 1.0, 0.0, translation.y,
        0.0, 0.0, 1.0, translation.z,
        0.0, 0.0, 0.0, 1.0,
    )


def scale_matrix(scale: float) -> Matrix4:
    return new_matrix3(scale, 0.0, 0.0, 0.0, scale, 0.0, 0.0, 0.0, scale)


def rotation_matrix(rotation: Vector3) -> Matrix4:
    """Euler rotation in radians, applied X first, then Y, then Z."""

    sin_x, cos_x = math.sin(rotation.x), math.cos(rotation.x)
    sin_y, cos_y = math.sin(rotation.y), math.cos(rotation.y)
    sin_z, cos_z = math.sin(rotation.z), math.cos(rotation.z)

    rotation_x = new_matrix3(
        1.0, 0.0, 0.0,
        0.0, cos_x, -sin_x,
        0.0, sin_x, cos_x,
    )
    rotation_y = new_matrix3(
        cos_y, 0.0, sin_y,
        0.0, 1.0, 0.0,
        -sin_y, 0.0, cos_y,
    )
    rotation_z = new_matrix3(
        cos_z, -sin_z, 0.0,
        sin_z, cos_z, 0.0,
        0.0, 0.0, 1.0,
    )
    return multiply_matrices(rotation_z, rotation_y, rotation_x)


def create_model_matrix(translation: Vector3, scale: float, rotation: Vector3) -> Matrix4:
    """Return ``translate * rotate * scale`` for a column point."""

    return multiply_matrices(
        translation_matrix(translation),
        rotation_matrix(rotation),
        scale_matrix(scale),
    )


def invert_affine(matrix: Matrix4) -> Optional[Matrix4]:
    """Invert a matrix whose bottom row is (0, 0, 0, 1).

    Returns ``None`` when the linear part is singular.
    """

    a, b, c = matrix[0][0], matrix[0][1], matrix[0][2]
    d, e, f = matrix[1][0], matrix[1][1], matrix[1][2]
    g, h, i = matrix[2][0], matrix[2][1], matrix[2][2]
    co_a = e * i - f * h
    co_b = -(d * i - f * g)
    co_c = d * h - e * g
    det = a * co_a + b * co_b + c * co_c
    if abs(det) < 1e-12:
        return None
    inv_det = 1.0 / det
    r00 = co_a * inv_det
    r01 = -(b * i - c * h) * inv_det
    r02 = (b * f - c * e) * inv_det
    r10 = co_b * inv_det
    r11 = (a * i - c * g) * inv_det
    r12 = -(a * f - c * d) * inv_det
    r20 = co_c * inv_det
    r21 = -(a * h - b * g) * inv_det
    r22 = (a * e - b * d) * inv_det
    tx, ty, tz = matrix[0][3], matrix[1][3], matrix[2][3]
    return new_matrix4(
        r00, r01, r02, -(r00 * tx + r01 * ty + r02 * tz),
        r10, r11, r12, -(r10 * tx + r11 * ty + r12 * tz),
        r20, r21, r22, -(r20 * tx + r21 * ty + r22 * tz),
        0.0, 0.0, 0.0, 1.0,
    )


def transform_point(matrix: Matrix4, point: Vector3) -> Vector3:
    """Apply an affine matrix to a point (w = 1) without a perspective divide."""

    result = multiply_matrix_vector4(matrix, Vector4(point.x, point.y, point.z, 1.0))
    return Vector3(result.x, result.y, result.z)


def rotate_point_around_center(point: Vector3, center: Vector3, rotation: Vector3) -> Vector3:
    """Rotate ``point`` about ``center`` by X, then Y, then Z."""

    p = point - center
    sin_x, cos_x = math.sin(rotation.x), math.cos(rotation.x)
    sin_y, cos_y = math.sin(rotation.y), math.cos(rotation.y)
    sin_z, cos_z = math.sin(rotation.z), math.cos(rotation.z)

    p = Vector3(p.x, p.y * cos_x - p.z * sin_x, p.y * sin_x + p.z * cos_x)
    p = Vector3(p.x * cos_y + p.z * sin_y, p.y, -p.x * sin_y + p.z * cos_y)
    p = Vector3(p.x * cos_z - p.y * sin_z, p.x * sin_z + p.y * cos_z, p.z)
    return p + center


__all__ = [
    "Matrix4",
    "Vector4",
    "create_model_matrix",
    "identity_matrix",
    "invert_affine",
    "multiply_matrices",
    "multiply_matrix_vector4",
    "new_matrix3",
    "new_matrix4",
    "rotate_point_around_center",
    "rotation_matrix",
    "scale_matrix",
    "transform_point",
    "translation_matrix",
]
