import threading
import unittest

from common.math import Quaternion, Vector3D
from common.types import (
    ControlMode,
    ControlModeKind,
    Header,
    Parameter,
    PoseStamped,
    ReferenceFrame,
    TrajectoryPoint,
    TwistStamped,
    YawMode,
)
from flatflight.controller import DifferentialFlatnessController
from flatflight.parameters import DEFAULT_PARAMETERS
from flatflight.sync import LockedController


class TestLockedController(unittest.TestCase):
    def test_concurrent_updates_and_compute(self):
        ctrl = LockedController(DifferentialFlatnessController())
        params = [Parameter(name, 1.0 if name == "mass" else 0.0) for name in DEFAULT_PARAMETERS]
        params[1] = Parameter("trajectory_control.reset_integral", False)
        ctrl.update_params(params)
        mode = ControlMode(ControlModeKind.TRAJECTORY, YawMode.ANGLE, ReferenceFrame.LOCAL_ENU)
        self.assertTrue(ctrl.set_mode(mode, mode))

        pose = PoseStamped(Header(0.0, "odom"), Vector3D(0, 0, 1), Quaternion())
        twist = TwistStamped(Header(0.0, "odom"), Vector3D())
        point = TrajectoryPoint([0, 0, 1, 0], [0, 0, 0, 0], [0, 0, 0, 0])

        def feed():
            for _ in range(200):
                ctrl.update_state(pose, twist)
                ctrl.update_reference(point)

        worker = threading.Thread(target=feed)
        worker.start()
        results = [ctrl.compute_output(0.01) for _ in range(200)]
        worker.join()

        for result in results:
            if result.ok:
                self.assertAlmostEqual(result.output.thrust, 9.81)
        self.assertTrue(ctrl.compute_output(0.01).ok)


if __name__ == '__main__':
    unittest.main()
