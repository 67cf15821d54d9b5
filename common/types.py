"""
Shared data structures for the state source ↔ controller ↔ command sink boundaries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence, Tuple, Union

from common.math import Quaternion, Vector3D


class ControlModeKind(Enum):
    UNSET = 0
    HOVER = 1
    POSITION = 2
    SPEED = 3
    SPEED_IN_A_PLANE = 4
    ATTITUDE = 5
    ACRO = 6
    TRAJECTORY = 7


class YawMode(Enum):
    NONE = 0
    ANGLE = 1
    RATE = 2


class ReferenceFrame(Enum):
    UNDEFINED = 0
    LOCAL_ENU = 1
    BODY_FLU = 2
    GLOBAL_LAT_LONG = 3


@dataclass(frozen=True)
class ControlMode:
    """Requested or active {control mode, yaw mode, reference frame} tuple."""

    control_mode: ControlModeKind = ControlModeKind.UNSET
    yaw_mode: YawMode = YawMode.NONE
    reference_frame: ReferenceFrame = ReferenceFrame.UNDEFINED


@dataclass(frozen=True)
class Header:
    stamp: float = 0.0
    frame_id: str = ""


@dataclass(frozen=True)
class PoseStamped:
    """Position (world frame) and attitude as delivered by the state source."""

    header: Header
    position: Vector3D
    orientation: Quaternion


@dataclass(frozen=True)
class TwistStamped:
    """Linear / angular velocity expressed in header.frame_id."""

    header: Header
    linear: Vector3D
    angular: Vector3D = field(default_factory=Vector3D)


@dataclass(frozen=True)
class TrajectoryPoint:
    """
    Reference sample. Each vector is [x, y, z, yaw-term]:
    - positions[3]: yaw angle (rad)
    - velocities[3]: yaw rate (rad/s)
    - accelerations[3]: yaw acceleration (rad/s^2)
    """

    positions: Sequence[float]
    velocities: Sequence[float]
    accelerations: Sequence[float]


@dataclass
class VehicleState:
    """Latest vehicle state; position and velocity in the world (ENU) frame."""

    position: Vector3D = field(default_factory=Vector3D)
    velocity: Vector3D = field(default_factory=Vector3D)
    attitude: Quaternion = field(default_factory=Quaternion)
    position_header: Header = field(default_factory=Header)
    velocity_header: Header = field(default_factory=Header)


@dataclass
class ControlReference:
    position: Vector3D = field(default_factory=Vector3D)
    velocity: Vector3D = field(default_factory=Vector3D)
    acceleration: Vector3D = field(default_factory=Vector3D)
    yaw: Tuple[float, float, float] = (0.0, 0.0, 0.0)  # angle, rate, acceleration


@dataclass
class AcroCommand:
    """Body-rate (roll, pitch, yaw) + collective thrust command."""

    body_rates: Vector3D = field(default_factory=Vector3D)
    thrust: float = 0.0


@dataclass(frozen=True)
class ControllerOutput:
    """Command tagged with the invocation time and the output frame."""

    header: Header
    body_rates: Vector3D
    thrust: float


ParameterValue = Union[bool, int, float, str]


@dataclass(frozen=True)
class Parameter:
    name: str
    value: ParameterValue


@dataclass(frozen=True)
class SetParametersResult:
    successful: bool = True
    reason: str = "success"


class ControlOutcome(Enum):
    OK = "ok"
    STATE_NOT_RECEIVED = "state not received yet"
    PARAMETERS_NOT_READ = "parameters not read yet"
    REFERENCE_NOT_RECEIVED = "state changed, but reference not received yet"
    UNKNOWN_YAW_MODE = "unknown yaw mode"
    UNKNOWN_CONTROL_MODE = "unknown control mode"
    DEGENERATE_ATTITUDE = "degenerate desired attitude"


@dataclass(frozen=True)
class ControlResult:
    """Per-tick result of the compute step. output is None unless outcome is OK."""

    outcome: ControlOutcome
    output: Optional[ControllerOutput] = None
    yaw_setpoint: Optional[float] = None

    @property
    def ok(self) -> bool:
        return self.outcome is ControlOutcome.OK

    def __bool__(self) -> bool:
        return self.ok
