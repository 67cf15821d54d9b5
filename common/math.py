"""
Small vector / quaternion toolkit shared by the controller and its tests.
Quaternions are scalar-first (w, x, y, z) and rotate body vectors into the world frame.
"""

from __future__ import annotations

import math
from typing import Tuple

import numpy as np

GRAVITY = 9.81  # m/s^2


def wrap_angle(angle: float) -> float:
    """Wrap an angle to [-pi, pi)."""
    return (angle + math.pi) % (2.0 * math.pi) - math.pi


class Vector3D:
    """Thin wrapper around a length-3 float array."""

    __slots__ = ("v",)

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        self.v = np.array([x, y, z], dtype=float)

    @property
    def x(self) -> float:
        return float(self.v[0])

    @property
    def y(self) -> float:
        return float(self.v[1])

    @property
    def z(self) -> float:
        return float(self.v[2])

    def __add__(self, other: "Vector3D") -> "Vector3D":
        return Vector3D(*(self.v + other.v))

    def __sub__(self, other: "Vector3D") -> "Vector3D":
        return Vector3D(*(self.v - other.v))

    def __neg__(self) -> "Vector3D":
        return Vector3D(*(-self.v))

    def __mul__(self, scalar: float) -> "Vector3D":
        return Vector3D(*(self.v * scalar))

    __rmul__ = __mul__

    def __iter__(self):
        return iter(self.v.tolist())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector3D):
            return NotImplemented
        return bool(np.array_equal(self.v, other.v))

    def __repr__(self) -> str:
        return f"Vector3D({self.v[0]:.6g}, {self.v[1]:.6g}, {self.v[2]:.6g})"

    def dot(self, other: "Vector3D") -> float:
        return float(np.dot(self.v, other.v))

    def cross(self, other: "Vector3D") -> "Vector3D":
        return Vector3D(*np.cross(self.v, other.v))

    def norm(self) -> float:
        return float(np.linalg.norm(self.v))

    def normalized(self) -> "Vector3D":
        n = self.norm()
        if n == 0.0:
            raise ValueError("cannot normalize a zero vector")
        return Vector3D(*(self.v / n))

    def copy(self) -> "Vector3D":
        return Vector3D(*self.v)


class Quaternion:
    """Unit quaternion (w, x, y, z)."""

    __slots__ = ("q",)

    def __init__(self, w: float = 1.0, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        self.q = np.array([w, x, y, z], dtype=float)

    @classmethod
    def from_euler(cls, roll: float, pitch: float, yaw: float) -> "Quaternion":
        """Build from roll/pitch/yaw (rad), rotation applied as Rz(yaw) Ry(pitch) Rx(roll)."""
        cr, sr = math.cos(roll / 2.0), math.sin(roll / 2.0)
        cp, sp = math.cos(pitch / 2.0), math.sin(pitch / 2.0)
        cy, sy = math.cos(yaw / 2.0), math.sin(yaw / 2.0)
        return cls(
            cr * cp * cy + sr * sp * sy,
            sr * cp * cy - cr * sp * sy,
            cr * sp * cy + sr * cp * sy,
            cr * cp * sy - sr * sp * cy,
        )

    @classmethod
    def from_axis_angle(cls, axis, angle: float) -> "Quaternion":
        axis = np.asarray(axis, dtype=float)
        n = np.linalg.norm(axis)
        if n == 0.0:
            return cls()
        axis = axis / n
        s = math.sin(angle / 2.0)
        return cls(math.cos(angle / 2.0), *(axis * s))

    @property
    def w(self) -> float:
        return float(self.q[0])

    def __mul__(self, other):
        if isinstance(other, Quaternion):
            w1, x1, y1, z1 = self.q
            w2, x2, y2, z2 = other.q
            return Quaternion(
                w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
                w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
                w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
                w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
            )
        return Quaternion(*(self.q * float(other)))

    def __repr__(self) -> str:
        w, x, y, z = self.q
        return f"Quaternion(w={w:.6g}, x={x:.6g}, y={y:.6g}, z={z:.6g})"

    def conjugate(self) -> "Quaternion":
        w, x, y, z = self.q
        return Quaternion(w, -x, -y, -z)

    def normalize(self) -> None:
        n = np.linalg.norm(self.q)
        if n > 0.0:
            self.q = self.q / n

    def copy(self) -> "Quaternion":
        return Quaternion(*self.q)

    def as_rotation_matrix(self) -> np.ndarray:
        w, x, y, z = self.q
        return np.array([
            [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
            [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
            [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
        ])

    def rotate(self, vec: Vector3D) -> Vector3D:
        """Rotate a vector by this quaternion (body -> world)."""
        return Vector3D(*(self.as_rotation_matrix() @ vec.v))

    def to_euler(self) -> Tuple[float, float, float]:
        """Return (roll, pitch, yaw) in rad, inverse of from_euler."""
        w, x, y, z = self.q
        roll = math.atan2(2.0 * (w * x + y * z), 1.0 - 2.0 * (x * x + y * y))
        sinp = max(-1.0, min(1.0, 2.0 * (w * y - z * x)))
        pitch = math.asin(sinp)
        yaw = math.atan2(2.0 * (w * z + x * y), 1.0 - 2.0 * (y * y + z * z))
        return roll, pitch, yaw

    def yaw(self) -> float:
        return self.to_euler()[2]


def skew(vec: np.ndarray) -> np.ndarray:
    """Skew-symmetric (hat) matrix of a 3-vector."""
    x, y, z = vec
    return np.array([
        [0.0, -z, y],
        [z, 0.0, -x],
        [-y, x, 0.0],
    ])


def vee(mat: np.ndarray) -> np.ndarray:
    """Inverse of skew: pick (m21, m02, m10)."""
    return np.array([mat[2, 1], mat[0, 2], mat[1, 0]])


__all__ = ["GRAVITY", "wrap_angle", "Vector3D", "Quaternion", "skew", "vee"]
