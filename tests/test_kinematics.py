import pytest
import numpy as np
import math
import sys
import os

# Add the src directory to Python path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from robo_motion.geometry import Rotation2d, Pose2d
from robo_motion.kinematics import (
    ChassisSpeeds,
    DifferentialDriveWheelSpeeds,
    DifferentialDriveKinematics,
    DifferentialDriveOdometry,
)
from robo_motion.exceptions import InvalidParameterError


class TestDifferentialDriveKinematics:
    """Test chassis <-> wheel velocity mapping"""

    @pytest.mark.parametrize("track_width", [0.3, 0.6, 1.5])
    @pytest.mark.parametrize("left,right", [
        (1.0, 1.0), (-2.0, 3.0), (0.0, -1.5), (4.2, 0.7),
    ])
    def test_wheel_speed_round_trip(self, track_width, left, right):
        """Test toWheelSpeeds(toChassisSpeeds(l, r)) reproduces (l, r)"""
        kinematics = DifferentialDriveKinematics(track_width)
        wheels = DifferentialDriveWheelSpeeds(left, right)

        result = kinematics.to_wheel_speeds(kinematics.to_chassis_speeds(wheels))

        np.testing.assert_allclose([result.left, result.right], [left, right], atol=1e-12)

    def test_forward_kinematics(self):
        """Test equal wheel speeds drive straight and opposite speeds spin"""
        kinematics = DifferentialDriveKinematics(2.0)

        straight = kinematics.to_chassis_speeds(DifferentialDriveWheelSpeeds(1.0, 1.0))
        spin = kinematics.to_chassis_speeds(DifferentialDriveWheelSpeeds(-1.0, 1.0))

        assert straight == ChassisSpeeds(1.0, 0.0, 0.0)
        assert spin == ChassisSpeeds(0.0, 0.0, 1.0)

    def test_inverse_kinematics(self):
        """Test turning in place splits the wheels symmetrically"""
        kinematics = DifferentialDriveKinematics(0.5)
        wheels = kinematics.to_wheel_speeds(ChassisSpeeds(0.0, 0.0, 1.0))

        np.testing.assert_allclose([wheels.left, wheels.right], [-0.25, 0.25])

    def test_inverse_kinematics_ignores_sideways_velocity(self):
        """Test vy has no effect on a differential drive"""
        kinematics = DifferentialDriveKinematics(0.5)

        assert (kinematics.to_wheel_speeds(ChassisSpeeds(1.0, 5.0, 0.0))
                == kinematics.to_wheel_speeds(ChassisSpeeds(1.0, 0.0, 0.0)))

    @pytest.mark.parametrize("track_width", [0.0, -0.5, float('nan')])
    def test_invalid_track_width(self, track_width):
        """Test non-positive track widths are rejected"""
        with pytest.raises(InvalidParameterError):
            DifferentialDriveKinematics(track_width)

    def test_to_twist2d(self):
        """Test wheel distance deltas become an arc twist"""
        kinematics = DifferentialDriveKinematics(1.0)
        twist = kinematics.to_twist2d(1.0, 2.0)

        np.testing.assert_allclose([twist.dx, twist.dy, twist.dtheta], [1.5, 0.0, 1.0])


class TestSpeeds:
    """Test velocity records"""

    def test_desaturate_preserves_ratio(self):
        """Test desaturation scales both wheels by the same factor"""
        wheels = DifferentialDriveWheelSpeeds(2.0, -4.0).desaturate(2.0)

        np.testing.assert_allclose([wheels.left, wheels.right], [1.0, -2.0])

    def test_desaturate_below_limit_unchanged(self):
        """Test speeds under the limit are untouched"""
        wheels = DifferentialDriveWheelSpeeds(0.5, 1.0)
        assert wheels.desaturate(2.0) == wheels

    def test_field_relative_conversion(self):
        """Test field-frame velocity is rotated into the robot frame"""
        speeds = ChassisSpeeds.from_field_relative_speeds(1.0, 0.0, 0.5, Rotation2d(math.pi / 2))

        np.testing.assert_allclose([speeds.vx, speeds.vy, speeds.omega], [0.0, -1.0, 0.5],
                                   atol=1e-12)

    def test_arithmetic_and_dicts(self):
        """Test speed arithmetic and boundary records"""
        a = ChassisSpeeds(1.0, 0.0, 0.5)
        b = ChassisSpeeds(0.5, 0.0, -0.5)

        assert a + b == ChassisSpeeds(1.5, 0.0, 0.0)
        assert a - b == ChassisSpeeds(0.5, 0.0, 1.0)
        assert a * 2 == ChassisSpeeds(2.0, 0.0, 1.0)
        assert a.to_dict() == {"vx": 1.0, "vy": 0.0, "omega": 0.5}
        assert DifferentialDriveWheelSpeeds(1.0, 2.0).to_dict() == {"left": 1.0, "right": 2.0}


class TestDifferentialDriveOdometry:
    """Test encoder and gyro dead reckoning"""

    def test_straight_line(self):
        """Test equal encoder travel moves the pose forward"""
        odometry = DifferentialDriveOdometry(Rotation2d(0.0))
        pose = odometry.update(Rotation2d(0.0), 1.0, 1.0)

        assert pose == Pose2d.from_xy(1.0, 0.0, 0.0)

    def test_turn_in_place(self):
        """Test opposite encoder travel with a gyro turn rotates in place"""
        odometry = DifferentialDriveOdometry(Rotation2d(0.0))
        pose = odometry.update(Rotation2d(math.pi / 2), -0.25, 0.25)

        np.testing.assert_allclose([pose.x, pose.y], [0.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(pose.rotation.radians, math.pi / 2)

    def test_quarter_arc(self):
        """Test an arc of length pi/2 with a quarter turn ends at (1, 1)"""
        odometry = DifferentialDriveOdometry(Rotation2d(0.0))
        distance = math.pi / 2
        pose = odometry.update(Rotation2d(math.pi / 2), distance, distance)

        np.testing.assert_allclose([pose.x, pose.y], [1.0, 1.0], atol=1e-9)

    def test_gyro_offset(self):
        """Test the initial pose heading overrides the raw gyro reading"""
        initial = Pose2d.from_xy(1.0, 2.0, 0.0)
        odometry = DifferentialDriveOdometry(Rotation2d(math.pi / 2), initial_pose=initial)

        pose = odometry.update(Rotation2d(math.pi / 2), 1.0, 1.0)

        assert pose == Pose2d.from_xy(2.0, 2.0, 0.0)

    def test_reset_position(self):
        """Test resetting to a new pose with non-zero encoders"""
        odometry = DifferentialDriveOdometry(Rotation2d(0.0))
        odometry.update(Rotation2d(0.0), 3.0, 3.0)

        odometry.reset_position(Rotation2d(0.0), 3.0, 3.0, Pose2d.from_xy(0.0, 0.0, math.pi))
        pose = odometry.update(Rotation2d(0.0), 4.0, 4.0)

        np.testing.assert_allclose([pose.x, pose.y], [-1.0, 0.0], atol=1e-9)
        assert odometry.pose == pose
