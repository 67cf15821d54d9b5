"""
Gain storage and the additive parameter-update protocol.

Names are resolved once against ParameterKey; each key owns a setter built when the
store is constructed, so an update is a dictionary lookup plus one call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence

import numpy as np

from common.interface import ForceErrorCalculator
from common.logger import get_logger
from common.math import GRAVITY
from common.types import Parameter, ParameterValue, SetParametersResult

logger = get_logger("parameters")

CONTROLLER_PREFIX = "trajectory_control"


class ParameterKey(Enum):
    MASS = "mass"
    RESET_INTEGRAL = "trajectory_control.reset_integral"
    ANTIWINDUP_CTE = "trajectory_control.antiwindup_cte"
    ALPHA = "trajectory_control.alpha"
    KP_X = "trajectory_control.kp.x"
    KP_Y = "trajectory_control.kp.y"
    KP_Z = "trajectory_control.kp.z"
    KI_X = "trajectory_control.ki.x"
    KI_Y = "trajectory_control.ki.y"
    KI_Z = "trajectory_control.ki.z"
    KD_X = "trajectory_control.kd.x"
    KD_Y = "trajectory_control.kd.y"
    KD_Z = "trajectory_control.kd.z"
    ROLL_KP = "trajectory_control.roll_control.kp"
    PITCH_KP = "trajectory_control.pitch_control.kp"
    YAW_KP = "trajectory_control.yaw_control.kp"

    @classmethod
    def lookup(cls, name: str) -> Optional["ParameterKey"]:
        """Return the key for a dotted name, or None if the name is not recognized."""
        try:
            return cls(name)
        except ValueError:
            return None


DEFAULT_PARAMETERS: List[str] = [key.value for key in ParameterKey]


def parse_flag(value: ParameterValue) -> bool:
    """Strict boolean: True/False or the strings "true"/"false" (any case)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ValueError(f"expected a boolean, got {value!r}")


def is_routed(name: str) -> bool:
    """True for names this controller owns: 'mass' or 'trajectory_control.<sub>'."""
    return name == ParameterKey.MASS.value or name.split(".", 1)[0] == CONTROLLER_PREFIX


@dataclass
class Gains:
    mass: float = 0.0
    gravity: float = GRAVITY
    angular_kp: np.ndarray = field(default_factory=lambda: np.zeros((3, 3)))

    @property
    def gravity_vector(self) -> np.ndarray:
        """Acceleration that compensates gravity (world z-up)."""
        return np.array([0.0, 0.0, self.gravity])


class ParameterStore:
    """Owns the gain table and tracks which required parameters are still pending."""

    def __init__(
        self,
        gains: Gains,
        force_calculator: ForceErrorCalculator,
        required: Iterable[str] = DEFAULT_PARAMETERS,
    ):
        self.gains = gains
        self.force_calculator = force_calculator
        self.pending: List[str] = list(required)
        self.complete = len(self.pending) == 0
        self._setters: Dict[ParameterKey, Callable[[ParameterValue], None]] = self._build_setters()

    def _build_setters(self) -> Dict[ParameterKey, Callable[[ParameterValue], None]]:
        pid = self.force_calculator
        gains = self.gains

        def angular(axis: int) -> Callable[[ParameterValue], None]:
            def setter(value: ParameterValue) -> None:
                gains.angular_kp[axis, axis] = float(value)
            return setter

        def set_mass(value: ParameterValue) -> None:
            gains.mass = float(value)

        return {
            ParameterKey.MASS: set_mass,
            ParameterKey.RESET_INTEGRAL: lambda v: pid.set_reset_integral_saturation_flag(parse_flag(v)),
            ParameterKey.ANTIWINDUP_CTE: lambda v: pid.set_antiwindup(float(v)),
            ParameterKey.ALPHA: lambda v: pid.set_alpha(float(v)),
            ParameterKey.KP_X: lambda v: pid.set_gain_kp_x(float(v)),
            ParameterKey.KP_Y: lambda v: pid.set_gain_kp_y(float(v)),
            ParameterKey.KP_Z: lambda v: pid.set_gain_kp_z(float(v)),
            ParameterKey.KI_X: lambda v: pid.set_gain_ki_x(float(v)),
            ParameterKey.KI_Y: lambda v: pid.set_gain_ki_y(float(v)),
            ParameterKey.KI_Z: lambda v: pid.set_gain_ki_z(float(v)),
            ParameterKey.KD_X: lambda v: pid.set_gain_kd_x(float(v)),
            ParameterKey.KD_Y: lambda v: pid.set_gain_kd_y(float(v)),
            ParameterKey.KD_Z: lambda v: pid.set_gain_kd_z(float(v)),
            ParameterKey.ROLL_KP: angular(0),
            ParameterKey.PITCH_KP: angular(1),
            ParameterKey.YAW_KP: angular(2),
        }

    def update(self, params: Sequence[Parameter]) -> SetParametersResult:
        """
        Apply parameters in order. Never rejects the batch: a value that cannot be
        converted is logged and skipped, and its name stays pending.
        """
        for param in params:
            if not is_routed(param.name):
                logger.debug(f"Ignoring parameter {param.name}")
                continue
            key = ParameterKey.lookup(param.name)
            if key is not None:
                try:
                    self._setters[key](param.value)
                except (TypeError, ValueError) as exc:
                    logger.warning(f"Skipping parameter {param.name}={param.value!r}: {exc}")
                    continue
            if not self.complete:
                self._mark_seen(param.name)
        return SetParametersResult(successful=True, reason="success")

    def _mark_seen(self, name: str) -> None:
        if name in self.pending:
            self.pending = [p for p in self.pending if p != name]
        if not self.pending:
            self.complete = True
            logger.info("All required parameters read")


__all__ = ["ParameterKey", "DEFAULT_PARAMETERS", "Gains", "ParameterStore", "is_routed", "parse_flag"]
