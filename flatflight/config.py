"""
Controller settings and parameter files.

Settings come from environment variables (FLATFLIGHT_*). Gains come from a JSON
document of nested objects whose paths become dotted parameter names:

    {"mass": 1.0, "trajectory_control": {"kp": {"x": 2.0, "y": 2.0, "z": 3.0}}}
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Mapping, Optional, Union

from common.math import GRAVITY
from common.types import Parameter
from flatflight.parameters import DEFAULT_PARAMETERS

__all__ = ["ControllerSettings", "DEFAULT_PARAMETERS", "flatten_parameters", "load_parameters"]


@dataclass
class ControllerSettings:
    enu_frame_id: str = "odom"
    flu_frame_id: str = "base_link"
    gravity: float = GRAVITY
    throttle_period: float = 5.0  # seconds between repeated warnings
    degenerate_tolerance: float = 1e-6
    parameters_file: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ControllerSettings":
        env = os.environ if environ is None else environ
        return cls(
            enu_frame_id=env.get("FLATFLIGHT_ENU_FRAME", cls.enu_frame_id),
            flu_frame_id=env.get("FLATFLIGHT_FLU_FRAME", cls.flu_frame_id),
            gravity=float(env.get("FLATFLIGHT_GRAVITY", cls.gravity)),
            parameters_file=env.get("FLATFLIGHT_PARAMS") or None,
        )


def flatten_parameters(tree: Mapping[str, Any], prefix: str = "") -> List[Parameter]:
    """Flatten nested mappings into Parameters with dotted names, preserving order."""
    params: List[Parameter] = []
    for key, value in tree.items():
        name = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            params.extend(flatten_parameters(value, name))
        else:
            params.append(Parameter(name, value))
    return params


def load_parameters(path: Union[str, Path]) -> List[Parameter]:
    """Read a JSON parameter file. Raises ValueError on malformed content."""
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid parameter file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"parameter file {path} must hold a JSON object")
    return flatten_parameters(data)
