"""Readiness gate: the three preconditions that must hold before a command is computed."""

from __future__ import annotations

from dataclasses import dataclass

from common.types import ControlOutcome


@dataclass
class ReadinessFlags:
    parameters_read: bool = False
    state_received: bool = False
    reference_received: bool = False

    def check(self) -> ControlOutcome:
        """First unmet precondition (state, parameters, reference), or OK."""
        if not self.state_received:
            return ControlOutcome.STATE_NOT_RECEIVED
        if not self.parameters_read:
            return ControlOutcome.PARAMETERS_NOT_READ
        if not self.reference_received:
            return ControlOutcome.REFERENCE_NOT_RECEIVED
        return ControlOutcome.OK

    def clear_sync(self) -> None:
        """Force state and reference to be resupplied; parameters stay read."""
        self.state_received = False
        self.reference_received = False


__all__ = ["ReadinessFlags"]
