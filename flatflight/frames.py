"""
Frame conversion for incoming velocities.

The state source reports twist either in the local ENU world frame or in the body
FLU frame; the controller only ever works in ENU.
"""

from __future__ import annotations

from common.interface import FrameTransformer
from common.math import Quaternion, Vector3D


class AttitudeFrameTransformer(FrameTransformer):
    """Rotates body-frame velocities into the world frame with the vehicle attitude."""

    def __init__(self, enu_frame_id: str = "odom", flu_frame_id: str = "base_link"):
        self.enu_frame_id = enu_frame_id
        self.flu_frame_id = flu_frame_id

    def to_world(self, velocity: Vector3D, frame_id: str, attitude: Quaternion) -> Vector3D:
        if frame_id in ("", self.enu_frame_id):
            return velocity.copy()
        if frame_id == self.flu_frame_id:
            return attitude.rotate(velocity)
        raise ValueError(f"Cannot convert from frame '{frame_id}' to '{self.enu_frame_id}'")


__all__ = ["AttitudeFrameTransformer"]
