import unittest

import numpy as np
from common.math import Vector3D, Quaternion, skew, vee, wrap_angle
from scipy.spatial.transform import Rotation as SciRot

class TestMath(unittest.TestCase):
    def test_scalar_first_components_near_yaw_wrap(self):
        for angles in [
            (0.0, 0.0, np.pi - 1e-3),
            (0.0, 0.0, -np.pi + 1e-3),
            (0.3, -0.2, 3.1),
        ]:
            with self.subTest(angles=angles):
                q = Quaternion.from_euler(*angles).q
                x, y, z, w = SciRot.from_euler('xyz', angles).as_quat()
                expected = np.array([w, x, y, z])
                # q and -q are the same rotation
                if np.dot(q, expected) < 0.0:
                    expected = -expected
                np.testing.assert_allclose(q, expected, atol=1e-9)

    def test_body_velocity_near_half_turn_points_backwards(self):
        for yaw in (np.pi - 1e-3, -np.pi + 1e-3):
            with self.subTest(yaw=yaw):
                q = Quaternion.from_euler(0.0, 0.0, yaw)
                world = q.rotate(Vector3D(2.0, 0.0, 0.5))
                expected = SciRot.from_euler('z', yaw).apply([2.0, 0.0, 0.5])
                np.testing.assert_allclose(world.v, expected, atol=1e-9)
                self.assertLess(world.x, -1.99)
                self.assertAlmostEqual(q.yaw(), yaw, places=9)

    def test_to_euler_inverts_from_euler(self):
        for angles in [(0.1, -0.2, 0.3), (0.0, 0.0, -2.5), (-0.4, 0.6, 3.0)]:
            with self.subTest(angles=angles):
                q = Quaternion.from_euler(*angles)
                np.testing.assert_allclose(q.to_euler(), angles, atol=1e-9)

    def test_yaw_matches_scipy(self):
        q_scipy = SciRot.from_euler('xyz', (0.2, 0.1, 1.2)).as_quat()  # x, y, z, w
        q = Quaternion(q_scipy[3], *q_scipy[:3])
        self.assertAlmostEqual(q.yaw(), 1.2, places=9)

    def test_product_composes_rotations(self):
        a = Quaternion.from_axis_angle([0, 0, 1], 0.3)
        b = Quaternion.from_axis_angle([1, 0, 0], -0.7)
        expected = SciRot.from_rotvec([0, 0, 0.3]) * SciRot.from_rotvec([-0.7, 0, 0])
        np.testing.assert_allclose((a * b).as_rotation_matrix(), expected.as_matrix(), atol=1e-9)

    def test_skew_vee_roundtrip(self):
        w = np.array([0.3, -1.2, 2.0])
        np.testing.assert_allclose(vee(skew(w)), w)
        np.testing.assert_allclose(skew(w) @ np.array([1.0, 2.0, 3.0]), np.cross(w, [1.0, 2.0, 3.0]))

    def test_wrap_angle(self):
        self.assertAlmostEqual(wrap_angle(3 * np.pi / 2), -np.pi / 2)
        self.assertAlmostEqual(wrap_angle(-0.5), -0.5)

    def test_normalized_zero_vector_raises(self):
        with self.assertRaises(ValueError):
            Vector3D().normalized()

if __name__ == '__main__':
    unittest.main()
