"""Serialized access to a controller shared between threads."""

from __future__ import annotations

import threading
from typing import Sequence

from common.interface import Controller
from common.types import (
    ControlMode,
    ControlResult,
    Parameter,
    PoseStamped,
    SetParametersResult,
    TrajectoryPoint,
    TwistStamped,
)


class LockedController(Controller):
    """Guards every operation of the wrapped controller with a single lock."""

    def __init__(self, controller: Controller) -> None:
        self._controller = controller
        self._lock = threading.Lock()

    def update_params(self, params: Sequence[Parameter]) -> SetParametersResult:
        with self._lock:
            return self._controller.update_params(params)

    def update_state(self, pose: PoseStamped, twist: TwistStamped) -> bool:
        with self._lock:
            return self._controller.update_state(pose, twist)

    def update_reference(self, point: TrajectoryPoint) -> bool:
        with self._lock:
            return self._controller.update_reference(point)

    def set_mode(self, in_mode: ControlMode, out_mode: ControlMode) -> bool:
        with self._lock:
            return self._controller.set_mode(in_mode, out_mode)

    def compute_output(self, dt: float) -> ControlResult:
        with self._lock:
            return self._controller.compute_output(dt)


__all__ = ["LockedController"]
