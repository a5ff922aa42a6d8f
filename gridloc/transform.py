"""Rigid transforms in 3-D built from a translation and a quaternion."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

Vector = Tuple[float, float, float]
Quaternion = Tuple[float, float, float, float]


def quaternion_from_yaw(yaw: float) -> Quaternion:
    """Quaternion ``(x, y, z, w)`` for a rotation of ``yaw`` about the z axis."""
    return (0.0, 0.0, math.sin(yaw / 2.0), math.cos(yaw / 2.0))


def yaw_from_quaternion(x: float, y: float, z: float, w: float) -> float:
    """Rotation about the z axis contained in the quaternion ``(x, y, z, w)``."""
    return math.atan2(2.0 * (w * z + x * y), w * w + x * x - y * y - z * z)


def _normalized(q: Sequence[float]) -> Quaternion:
    if len(q) != 4:
        raise ValueError("a quaternion has four components")
    norm = math.sqrt(sum(c * c for c in q))
    if norm == 0.0:
        raise ValueError("a zero quaternion describes no rotation")
    x, y, z, w = (c / norm for c in q)
    return (x, y, z, w)


def _quat_mul(a: Quaternion, b: Quaternion) -> Quaternion:
    x1, y1, z1, w1 = a
    x2, y2, z2, w2 = b
    return (
        w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
        w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
        w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
        w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
    )


def _cross(a: Vector, b: Vector) -> Vector:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _rotate(q: Quaternion, v: Vector) -> Vector:
    axis = (q[0], q[1], q[2])
    t = tuple(2.0 * c for c in _cross(axis, v))
    u = _cross(axis, t)  # type: ignore[arg-type]
    return (
        v[0] + q[3] * t[0] + u[0],
        v[1] + q[3] * t[1] + u[1],
        v[2] + q[3] * t[2] + u[2],
    )


@dataclass(frozen=True)
class Transform:
    """A rotation followed by a translation; ``a * b`` applies ``b`` first."""

    translation: Vector = (0.0, 0.0, 0.0)
    rotation: Quaternion = (0.0, 0.0, 0.0, 1.0)

    def __post_init__(self) -> None:
        if len(self.translation) != 3:
            raise ValueError("a translation has three components")
        object.__setattr__(self, "translation", tuple(float(c) for c in self.translation))
        object.__setattr__(self, "rotation", _normalized(self.rotation))

    def __mul__(self, other: "Transform") -> "Transform":
        if not isinstance(other, Transform):
            return NotImplemented
        moved = _rotate(self.rotation, other.translation)
        translation = tuple(a + b for a, b in zip(moved, self.translation))
        return Transform(translation, _quat_mul(self.rotation, other.rotation))

    def inverse(self) -> "Transform":
        """The transform that undoes this one."""
        x, y, z, w = self.rotation
        conjugate = (-x, -y, -z, w)
        back = _rotate(conjugate, self.translation)
        return Transform((-back[0], -back[1], -back[2]), conjugate)

    def apply(self, point: Sequence[float]) -> Vector:
        """Map a 2-D or 3-D point through the transform; returns ``(x, y, z)``."""
        if len(point) == 2:
            vec: Vector = (float(point[0]), float(point[1]), 0.0)
        elif len(point) == 3:
            vec = (float(point[0]), float(point[1]), float(point[2]))
        else:
            raise ValueError("a point has two or three components")
        rotated = _rotate(self.rotation, vec)
        return (
            rotated[0] + self.translation[0],
            rotated[1] + self.translation[1],
            rotated[2] + self.translation[2],
        )

    def yaw(self) -> float:
        """Rotation of the transform about the z axis."""
        return yaw_from_quaternion(*self.rotation)