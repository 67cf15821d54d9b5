"""
Control module: differential-flatness trajectory tracking law.

Outer loop: desired force = PID correction + m * a_ref + m * g.
Inner loop: desired attitude from force + yaw, geometric attitude error, P-law on body rates.
"""
import math

import numpy as np

from common.math import Quaternion, Vector3D, vee
from common.types import AcroCommand, ControlReference, YawMode
from flatflight.modes import SUPPORTED_YAW_MODES

DEFAULT_TOLERANCE = 1e-6


class DegenerateAttitudeError(ValueError):
    """Desired attitude cannot be built from the current force and heading."""


class UnknownYawModeError(ValueError):
    pass


def resolve_yaw(yaw_mode: YawMode, reference: ControlReference, attitude: Quaternion, dt: float) -> float:
    """
    Yaw angle to track this tick.
    ANGLE: the reference angle as is. RATE: measured yaw advanced by yaw_rate * dt.
    """
    if yaw_mode not in SUPPORTED_YAW_MODES:
        raise UnknownYawModeError(f"Unknown yaw mode {yaw_mode}")
    if yaw_mode is YawMode.RATE:
        return attitude.yaw() + reference.yaw[1] * dt
    return reference.yaw[0]


def desired_force(force_error: Vector3D, mass: float, acceleration_ref: Vector3D, gravity: np.ndarray) -> np.ndarray:
    """Total world-frame force: feedback + feed-forward acceleration + gravity compensation."""
    return force_error.v + mass * acceleration_ref.v + mass * np.asarray(gravity, dtype=float)


def desired_rotation(force: np.ndarray, yaw: float, tolerance: float = DEFAULT_TOLERANCE) -> np.ndarray:
    """
    Columns [xb, yb, zb] of the desired attitude: zb along the force, xb as close to the
    heading (cos yaw, sin yaw, 0) as the thrust axis allows.
    """
    force_norm = np.linalg.norm(force)
    if force_norm < tolerance:
        raise DegenerateAttitudeError(f"desired force magnitude {force_norm:.3g} below {tolerance:.3g}")
    zb = force / force_norm

    heading = np.array([math.cos(yaw), math.sin(yaw), 0.0])
    yb = np.cross(zb, heading)
    yb_norm = np.linalg.norm(yb)
    if yb_norm < tolerance:
        raise DegenerateAttitudeError("heading is parallel to the desired thrust axis")
    yb = yb / yb_norm

    xb = np.cross(yb, zb)
    xb = xb / np.linalg.norm(xb)
    return np.column_stack([xb, yb, zb])


def rotation_error(rot: np.ndarray, rot_des: np.ndarray) -> np.ndarray:
    """e_R = 1/2 vee(R_des^T R - R^T R_des)."""
    return 0.5 * vee(rot_des.T @ rot - rot.T @ rot_des)


def trajectory_control(
    force: np.ndarray,
    attitude: Quaternion,
    yaw: float,
    angular_kp: np.ndarray,
    tolerance: float = DEFAULT_TOLERANCE,
) -> AcroCommand:
    """Body rates and thrust for a desired force and yaw given the measured attitude."""
    rot = attitude.as_rotation_matrix()
    rot_des = desired_rotation(force, yaw, tolerance)
    e_rot = rotation_error(rot, rot_des)

    body_z = rot[:, 2] / np.linalg.norm(rot[:, 2])
    thrust = float(np.dot(force, body_z))
    rates = -np.asarray(angular_kp) @ e_rot
    return AcroCommand(body_rates=Vector3D(*rates), thrust=thrust)


__all__ = [
    "DegenerateAttitudeError",
    "UnknownYawModeError",
    "resolve_yaw",
    "desired_force",
    "desired_rotation",
    "rotation_error",
    "trajectory_control",
]
