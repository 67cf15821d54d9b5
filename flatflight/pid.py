"""
Three-axis PID used as the force-error calculator of the trajectory controller.
"""
from __future__ import annotations

from typing import Optional

import numpy as np

from common.interface import ForceErrorCalculator
from common.math import Vector3D
from common.realtime import Clock, ElapsedTimer, monotonic_time


class PIDController3D(ForceErrorCalculator):
    """
    Per-axis PID on position error with the velocity error as derivative term.
    - antiwindup: integral clamped to +/- antiwindup when positive (0 disables)
    - reset_integral: zero an axis' integral when its position error changes sign
    - alpha: low-pass factor on the derivative term (1.0 = unfiltered)
    """

    def __init__(self, clock: Clock = monotonic_time):
        self.kp = np.zeros(3)
        self.ki = np.zeros(3)
        self.kd = np.zeros(3)
        self.antiwindup = 0.0
        self.alpha = 1.0
        self.reset_integral = False
        self._timer = ElapsedTimer(clock)
        self._integral = np.zeros(3)
        self._prev_error = np.zeros(3)
        self._filtered_derivative = np.zeros(3)
        self._has_history = False

    # -- Gain setters ----------------------------------------------------------

    def set_gain_kp_x(self, value: float) -> None:
        self.kp[0] = value

    def set_gain_kp_y(self, value: float) -> None:
        self.kp[1] = value

    def set_gain_kp_z(self, value: float) -> None:
        self.kp[2] = value

    def set_gain_ki_x(self, value: float) -> None:
        self.ki[0] = value

    def set_gain_ki_y(self, value: float) -> None:
        self.ki[1] = value

    def set_gain_ki_z(self, value: float) -> None:
        self.ki[2] = value

    def set_gain_kd_x(self, value: float) -> None:
        self.kd[0] = value

    def set_gain_kd_y(self, value: float) -> None:
        self.kd[1] = value

    def set_gain_kd_z(self, value: float) -> None:
        self.kd[2] = value

    def set_antiwindup(self, value: float) -> None:
        self.antiwindup = float(value)

    def set_alpha(self, value: float) -> None:
        self.alpha = float(value)

    def set_reset_integral_saturation_flag(self, value: bool) -> None:
        self.reset_integral = bool(value)

    # -- Runtime ---------------------------------------------------------------

    def reset(self):
        """Clear integral and derivative state."""
        self._integral = np.zeros(3)
        self._prev_error = np.zeros(3)
        self._filtered_derivative = np.zeros(3)
        self._has_history = False
        self._timer.reset()

    @property
    def integral(self) -> np.ndarray:
        return self._integral.copy()

    def compute_control(
        self,
        position: Vector3D,
        position_ref: Vector3D,
        velocity: Vector3D,
        velocity_ref: Vector3D,
        dt: Optional[float] = None,
    ) -> Vector3D:
        if dt is None:
            dt = self._timer.elapsed()

        error = position_ref.v - position.v
        self._integral = self._integral + error * dt

        if self.reset_integral and self._has_history:
            crossed = np.sign(error) != np.sign(self._prev_error)
            self._integral[crossed] = 0.0

        if self.antiwindup > 0.0:
            self._integral = np.clip(self._integral, -self.antiwindup, self.antiwindup)

        derivative = velocity_ref.v - velocity.v
        if self._has_history:
            derivative = self.alpha * derivative + (1.0 - self.alpha) * self._filtered_derivative
        self._filtered_derivative = derivative

        self._prev_error = error
        self._has_history = True

        output = self.kp * error + self.ki * self._integral + self.kd * derivative
        return Vector3D(*output)


__all__ = ["PIDController3D"]
