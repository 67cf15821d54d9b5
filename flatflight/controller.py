"""
Differential-flatness trajectory controller: owns gains, state, reference and modes,
and turns them into a body-rate + thrust command on every compute step.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from common.interface import Controller, ForceErrorCalculator, FrameTransformer
from common.logger import Throttle, get_logger
from common.realtime import Clock, monotonic_time
from common.math import Vector3D
from common.types import (
    AcroCommand,
    ControlMode,
    ControlModeKind,
    ControlOutcome,
    ControlReference,
    ControlResult,
    ControllerOutput,
    Header,
    Parameter,
    PoseStamped,
    SetParametersResult,
    TrajectoryPoint,
    TwistStamped,
    VehicleState,
)
from flatflight.config import ControllerSettings, load_parameters
from flatflight.control import (
    DegenerateAttitudeError,
    UnknownYawModeError,
    desired_force,
    resolve_yaw,
    trajectory_control,
)
from flatflight.frames import AttitudeFrameTransformer
from flatflight.modes import SUPPORTED_CONTROL_MODES, negotiate
from flatflight.parameters import DEFAULT_PARAMETERS, Gains, ParameterStore
from flatflight.pid import PIDController3D
from flatflight.readiness import ReadinessFlags

logger = get_logger("controller")


def _vector3(values: Sequence[float], what: str) -> Vector3D:
    if len(values) < 4:
        raise ValueError(f"{what} needs 4 entries [x, y, z, yaw], got {len(values)}")
    return Vector3D(float(values[0]), float(values[1]), float(values[2]))


class DifferentialFlatnessController(Controller):
    """
    Single-owner controller. Updates and compute_output() are expected to be called
    sequentially; wrap in flatflight.sync.LockedController when they are not.
    """

    def __init__(
        self,
        settings: Optional[ControllerSettings] = None,
        force_calculator: Optional[ForceErrorCalculator] = None,
        transformer: Optional[FrameTransformer] = None,
        clock: Clock = monotonic_time,
        required_parameters: Iterable[str] = DEFAULT_PARAMETERS,
    ):
        self.settings = settings or ControllerSettings()
        self.clock = clock
        self.force_calculator = force_calculator or PIDController3D(clock=clock)
        self.transformer = transformer or AttitudeFrameTransformer(
            self.settings.enu_frame_id, self.settings.flu_frame_id
        )
        self.gains = Gains(gravity=self.settings.gravity)
        self.parameters = ParameterStore(self.gains, self.force_calculator, required_parameters)
        self.flags = ReadinessFlags(parameters_read=self.parameters.complete)
        self.mode_in = ControlMode()
        self.mode_out = ControlMode()
        self._throttle = Throttle(self.settings.throttle_period, clock)

        self.state = VehicleState()
        self.reference = ControlReference()
        self.command = AcroCommand()
        self.reset()

    @classmethod
    def from_settings(
        cls, settings: Optional[ControllerSettings] = None, **kwargs
    ) -> "DifferentialFlatnessController":
        """
        Build a controller and apply settings.parameters_file, if any.
        Settings default to the FLATFLIGHT_* environment variables.
        """
        if settings is None:
            settings = ControllerSettings.from_env()
        controller = cls(settings=settings, **kwargs)
        if settings.parameters_file:
            controller.update_params(load_parameters(settings.parameters_file))
            logger.info(f"Loaded parameters from {settings.parameters_file}")
        return controller

    @property
    def pending_parameters(self) -> List[str]:
        return list(self.parameters.pending)

    # -- Parameters ------------------------------------------------------------

    def update_params(self, params: Sequence[Parameter]) -> SetParametersResult:
        result = self.parameters.update(params)
        if self.parameters.complete:
            self.flags.parameters_read = True
        return result

    # -- State / reference -----------------------------------------------------

    def reset(self) -> None:
        """Neutral state, reference at the current position, zero command, fresh PID."""
        self._reset_state()
        self._reset_reference()
        self._reset_command()
        self.force_calculator.reset()

    def _reset_state(self) -> None:
        self.state = VehicleState()

    def _reset_reference(self) -> None:
        self.reference = ControlReference(
            position=self.state.position.copy(),
            velocity=Vector3D(),
            acceleration=Vector3D(),
            yaw=(self.state.attitude.yaw(), 0.0, 0.0),
        )

    def _reset_command(self) -> None:
        self.command = AcroCommand()

    def update_state(self, pose: PoseStamped, twist: TwistStamped) -> bool:
        """Store pose and world-frame velocity. A twist that cannot be converted is dropped."""
        attitude = pose.orientation.copy()
        try:
            velocity = self.transformer.to_world(twist.linear, twist.header.frame_id, attitude)
        except ValueError as exc:
            logger.error(f"Dropping state update: {exc}")
            return False
        self.state = VehicleState(
            position=pose.position.copy(),
            velocity=velocity,
            attitude=attitude,
            position_header=pose.header,
            velocity_header=Header(stamp=twist.header.stamp, frame_id=self.settings.enu_frame_id),
        )
        self.flags.state_received = True
        return True

    def update_reference(self, point: TrajectoryPoint) -> bool:
        """Store a trajectory point. Returns False when the point was ignored or malformed."""
        if self.mode_in.control_mode is not ControlModeKind.TRAJECTORY:
            return False
        try:
            reference = ControlReference(
                position=_vector3(point.positions, "positions"),
                velocity=_vector3(point.velocities, "velocities"),
                acceleration=_vector3(point.accelerations, "accelerations"),
                yaw=(float(point.positions[3]), float(point.velocities[3]), float(point.accelerations[3])),
            )
        except (TypeError, ValueError) as exc:
            logger.error(f"Dropping reference update: {exc}")
            return False
        self.reference = reference
        self.flags.reference_received = True
        return True

    # -- Modes -----------------------------------------------------------------

    def set_mode(self, in_mode: ControlMode, out_mode: ControlMode) -> bool:
        self.mode_in, clears_sync = negotiate(in_mode)
        if clears_sync:
            self.flags.clear_sync()
        self.mode_out = out_mode
        self.reset()
        logger.info(f"Mode set: in={self.mode_in} out={self.mode_out}")
        return True

    # -- Compute ---------------------------------------------------------------

    def compute_output(self, dt: float) -> ControlResult:
        outcome = self.flags.check()
        if outcome is not ControlOutcome.OK:
            self._report_not_ready(outcome)
            return ControlResult(outcome)

        logger.debug(f"dt: {dt:f}")
        self._reset_command()

        try:
            yaw = resolve_yaw(self.mode_in.yaw_mode, self.reference, self.state.attitude, dt)
        except UnknownYawModeError:
            self._report_error(ControlOutcome.UNKNOWN_YAW_MODE)
            return ControlResult(ControlOutcome.UNKNOWN_YAW_MODE)
        self.reference.yaw = (yaw, self.reference.yaw[1], self.reference.yaw[2])

        if self.mode_in.control_mode not in SUPPORTED_CONTROL_MODES:
            self._report_error(ControlOutcome.UNKNOWN_CONTROL_MODE)
            return ControlResult(ControlOutcome.UNKNOWN_CONTROL_MODE, yaw_setpoint=yaw)

        force_error = self.force_calculator.compute_control(
            self.state.position,
            self.reference.position,
            self.state.velocity,
            self.reference.velocity,
            dt,
        )
        force = desired_force(force_error, self.gains.mass, self.reference.acceleration, self.gains.gravity_vector)
        try:
            self.command = trajectory_control(
                force,
                self.state.attitude,
                yaw,
                self.gains.angular_kp,
                self.settings.degenerate_tolerance,
            )
        except DegenerateAttitudeError as exc:
            self._report_error(ControlOutcome.DEGENERATE_ATTITUDE, str(exc))
            return ControlResult(ControlOutcome.DEGENERATE_ATTITUDE, yaw_setpoint=yaw)

        return ControlResult(ControlOutcome.OK, self._output(), yaw)

    def _output(self) -> ControllerOutput:
        header = Header(stamp=self.clock(), frame_id=self.settings.flu_frame_id)
        return ControllerOutput(header=header, body_rates=self.command.body_rates.copy(), thrust=self.command.thrust)

    # -- Reporting -------------------------------------------------------------

    def _report_not_ready(self, outcome: ControlOutcome) -> None:
        if not self._throttle.ready(outcome.name):
            return
        if outcome is ControlOutcome.PARAMETERS_NOT_READ:
            logger.warning(f"Parameters not read yet, missing: {', '.join(self.parameters.pending)}")
        else:
            logger.warning(outcome.value.capitalize())

    def _report_error(self, outcome: ControlOutcome, detail: str = "") -> None:
        if not self._throttle.ready(outcome.name):
            return
        message = outcome.value.capitalize()
        logger.error(f"{message}: {detail}" if detail else message)


__all__ = ["DifferentialFlatnessController"]
