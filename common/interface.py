"""
Interface definitions for controllers and the collaborators they consume.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from common.math import Quaternion, Vector3D
from common.types import (
    ControlMode,
    ControlResult,
    Parameter,
    PoseStamped,
    SetParametersResult,
    TrajectoryPoint,
    TwistStamped,
)


class Controller(ABC):
    """Abstract base for pluggable control laws driven by a host loop."""

    @abstractmethod
    def update_params(self, params: Sequence[Parameter]) -> SetParametersResult:
        """Apply a batch of named parameter updates."""

    @abstractmethod
    def update_state(self, pose: PoseStamped, twist: TwistStamped) -> bool:
        """Replace the current vehicle state. Returns False if the update was dropped."""

    @abstractmethod
    def update_reference(self, point: TrajectoryPoint) -> bool:
        """Replace the current control reference. Returns False if the update was not stored."""

    @abstractmethod
    def set_mode(self, in_mode: ControlMode, out_mode: ControlMode) -> bool:
        """Switch the active input/output mode."""

    @abstractmethod
    def compute_output(self, dt: float) -> ControlResult:
        """Compute one command from the latest state and reference."""


class ForceErrorCalculator(ABC):
    """Maps position + velocity error to a corrective world-frame force."""

    @abstractmethod
    def set_gain_kp_x(self, value: float) -> None: ...

    @abstractmethod
    def set_gain_kp_y(self, value: float) -> None: ...

    @abstractmethod
    def set_gain_kp_z(self, value: float) -> None: ...

    @abstractmethod
    def set_gain_ki_x(self, value: float) -> None: ...

    @abstractmethod
    def set_gain_ki_y(self, value: float) -> None: ...

    @abstractmethod
    def set_gain_ki_z(self, value: float) -> None: ...

    @abstractmethod
    def set_gain_kd_x(self, value: float) -> None: ...

    @abstractmethod
    def set_gain_kd_y(self, value: float) -> None: ...

    @abstractmethod
    def set_gain_kd_z(self, value: float) -> None: ...

    @abstractmethod
    def set_antiwindup(self, value: float) -> None: ...

    @abstractmethod
    def set_alpha(self, value: float) -> None: ...

    @abstractmethod
    def set_reset_integral_saturation_flag(self, value: bool) -> None: ...

    @abstractmethod
    def reset(self) -> None:
        """Clear integrator and derivative history."""

    @abstractmethod
    def compute_control(
        self,
        position: Vector3D,
        position_ref: Vector3D,
        velocity: Vector3D,
        velocity_ref: Vector3D,
        dt: Optional[float] = None,
    ) -> Vector3D:
        """Return the corrective force for the given errors."""


class FrameTransformer(ABC):
    """Converts velocities reported in an arbitrary frame into the world frame."""

    @abstractmethod
    def to_world(self, velocity: Vector3D, frame_id: str, attitude: Quaternion) -> Vector3D:
        """Express velocity (given in frame_id) in the world frame."""
