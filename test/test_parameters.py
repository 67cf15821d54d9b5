import unittest

import numpy as np

from common.types import Parameter
from flatflight.parameters import DEFAULT_PARAMETERS, Gains, ParameterKey, ParameterStore
from flatflight.pid import PIDController3D


def full_parameter_set(mass=1.0):
    params = [Parameter("mass", mass), Parameter("trajectory_control.reset_integral", False)]
    for name in DEFAULT_PARAMETERS:
        if name not in ("mass", "trajectory_control.reset_integral"):
            params.append(Parameter(name, 0.0))
    return params


class TestParameterStore(unittest.TestCase):
    def setUp(self):
        self.gains = Gains()
        self.pid = PIDController3D()
        self.store = ParameterStore(self.gains, self.pid)

    def test_gain_table_routing(self):
        result = self.store.update([
            Parameter("mass", 1.5),
            Parameter("trajectory_control.kp.x", 1.0),
            Parameter("trajectory_control.kp.y", 2.0),
            Parameter("trajectory_control.kp.z", 3.0),
            Parameter("trajectory_control.ki.y", 0.2),
            Parameter("trajectory_control.kd.z", 0.7),
            Parameter("trajectory_control.antiwindup_cte", 4.0),
            Parameter("trajectory_control.alpha", 0.3),
            Parameter("trajectory_control.reset_integral", True),
            Parameter("trajectory_control.roll_control.kp", 5.0),
            Parameter("trajectory_control.pitch_control.kp", 6.0),
            Parameter("trajectory_control.yaw_control.kp", 7.0),
        ])
        self.assertTrue(result.successful)
        self.assertEqual(result.reason, "success")
        self.assertEqual(self.gains.mass, 1.5)
        np.testing.assert_allclose(self.pid.kp, [1.0, 2.0, 3.0])
        np.testing.assert_allclose(self.pid.ki, [0.0, 0.2, 0.0])
        np.testing.assert_allclose(self.pid.kd, [0.0, 0.0, 0.7])
        self.assertEqual(self.pid.antiwindup, 4.0)
        self.assertEqual(self.pid.alpha, 0.3)
        self.assertTrue(self.pid.reset_integral)
        np.testing.assert_allclose(self.gains.angular_kp, np.diag([5.0, 6.0, 7.0]))

    def test_last_write_wins_and_other_fields_untouched(self):
        self.store.update([Parameter("trajectory_control.kp.x", 1.0), Parameter("trajectory_control.kd.y", 9.0)])
        self.store.update([Parameter("trajectory_control.kp.x", 4.0)])
        np.testing.assert_allclose(self.pid.kp, [4.0, 0.0, 0.0])
        np.testing.assert_allclose(self.pid.kd, [0.0, 9.0, 0.0])

    def test_unrelated_names_are_ignored(self):
        result = self.store.update([
            Parameter("position_control.kp.x", 3.0),
            Parameter("trajectory_control.unknown", 3.0),
            Parameter("masses", 3.0),
        ])
        self.assertTrue(result.successful)
        self.assertEqual(self.gains.mass, 0.0)
        np.testing.assert_allclose(self.pid.kp, np.zeros(3))
        self.assertEqual(len(self.store.pending), len(DEFAULT_PARAMETERS))

    def test_no_plausibility_validation(self):
        result = self.store.update([Parameter("mass", -2.0)])
        self.assertTrue(result.successful)
        self.assertEqual(self.gains.mass, -2.0)

    def test_completes_once_all_required_seen(self):
        params = full_parameter_set()
        self.store.update(params[:-1])
        self.assertFalse(self.store.complete)
        self.assertEqual(self.store.pending, [params[-1].name])
        self.store.update(params[-1:])
        self.assertTrue(self.store.complete)
        self.assertEqual(self.store.pending, [])

    def test_complete_stays_true(self):
        self.store.update(full_parameter_set())
        self.store.update([Parameter("mass", 2.0), Parameter("other", 1)])
        self.assertTrue(self.store.complete)

    def test_custom_required_list(self):
        store = ParameterStore(Gains(), PIDController3D(), required=["mass"])
        store.update([Parameter("mass", 1.0)])
        self.assertTrue(store.complete)

    def test_bad_value_mid_batch_is_skipped(self):
        result = self.store.update([
            Parameter("trajectory_control.kp.x", 1.0),
            Parameter("mass", "heavy"),
            Parameter("trajectory_control.kp.y", 2.0),
        ])
        self.assertTrue(result.successful)
        np.testing.assert_allclose(self.pid.kp, [1.0, 2.0, 0.0])
        self.assertEqual(self.gains.mass, 0.0)
        self.assertIn("mass", self.store.pending)
        self.assertNotIn("trajectory_control.kp.y", self.store.pending)

    def test_reset_integral_parsed_strictly(self):
        for value, expected in [(True, True), ("false", False), ("TRUE", True), (False, False)]:
            with self.subTest(value=value):
                self.store.update([Parameter("trajectory_control.reset_integral", value)])
                self.assertIs(self.pid.reset_integral, expected)

        self.store.update([Parameter("trajectory_control.reset_integral", True)])
        self.store.update([Parameter("trajectory_control.reset_integral", "maybe")])
        self.assertTrue(self.pid.reset_integral)

    def test_numeric_strings_accepted(self):
        self.store.update([Parameter("mass", "1.25")])
        self.assertEqual(self.gains.mass, 1.25)

    def test_lookup(self):
        self.assertIs(ParameterKey.lookup("trajectory_control.kd.z"), ParameterKey.KD_Z)
        self.assertIsNone(ParameterKey.lookup("trajectory_control.kd.w"))


if __name__ == '__main__':
    unittest.main()
