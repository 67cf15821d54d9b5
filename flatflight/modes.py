"""Mode negotiation: which requested modes are accepted and how."""

from __future__ import annotations

from typing import Tuple

from common.types import ControlMode, ControlModeKind, ReferenceFrame, YawMode

SUPPORTED_CONTROL_MODES = frozenset({ControlModeKind.TRAJECTORY})
SUPPORTED_YAW_MODES = frozenset({YawMode.ANGLE, YawMode.RATE})


def negotiate(requested: ControlMode) -> Tuple[ControlMode, bool]:
    """
    Return the mode to activate and whether state/reference must be resupplied.
    Hover always holds a fixed yaw in the local ENU frame and keeps the sync flags.
    """
    if requested.control_mode is ControlModeKind.HOVER:
        hover = ControlMode(
            control_mode=ControlModeKind.HOVER,
            yaw_mode=YawMode.ANGLE,
            reference_frame=ReferenceFrame.LOCAL_ENU,
        )
        return hover, False
    return requested, True


__all__ = ["negotiate", "SUPPORTED_CONTROL_MODES", "SUPPORTED_YAW_MODES"]
