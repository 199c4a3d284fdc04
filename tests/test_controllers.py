import pytest
import numpy as np
import math
import sys
import os

# Add the src directory to Python path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from robo_motion.controller import (
    PIDController,
    SimpleMotorFeedforward,
    ElevatorFeedforward,
    RamseteController,
)
from robo_motion.geometry import Pose2d, Rotation2d, Translation2d, Transform2d
from robo_motion.trajectory import TrajectoryState
from robo_motion.exceptions import InvalidParameterError


class TestPIDController:
    """Test discrete PID with fixed period"""

    def test_pure_proportional(self):
        """Test kp=1 with error 5 returns exactly 5.0"""
        pid = PIDController(1.0, 0.0, 0.0)
        assert pid.calculate(0.0, 5.0) == 5.0

    def test_reset_restarts_integration(self):
        """Test the integral after reset behaves like a first call"""
        pid = PIDController(0.0, 1.0, 0.0, period=0.02)

        first = pid.calculate(0.0, 1.0)
        second = pid.calculate(0.0, 1.0)
        pid.reset()
        after_reset = pid.calculate(0.0, 1.0)

        np.testing.assert_allclose(first, 0.02)
        np.testing.assert_allclose(second, 0.04)
        assert after_reset == first
        np.testing.assert_allclose(pid.accumulated_error, 0.02)

    def test_derivative_kick_on_setpoint_step(self):
        """Test the derivative acts on error, so a setpoint step kicks for one period"""
        pid = PIDController(0.0, 0.0, 1.0, period=0.02)

        assert pid.calculate(0.0, 0.0) == 0.0
        kick = pid.calculate(0.0, 1.0)
        settled = pid.calculate(0.0, 1.0)

        np.testing.assert_allclose(kick, 1.0 / 0.02)
        assert settled == 0.0

    def test_at_setpoint(self):
        """Test tolerance check requires a measurement and uses position error"""
        pid = PIDController(1.0, 0.0, 0.0)
        pid.set_tolerance(0.1)
        pid.set_setpoint(1.0)

        assert not pid.at_setpoint()

        pid.calculate(0.95)
        assert pid.at_setpoint()

        pid.calculate(0.5)
        assert not pid.at_setpoint()

    def test_velocity_tolerance(self):
        """Test a fast-moving error is not at the setpoint"""
        pid = PIDController(1.0, 0.0, 0.0, period=0.02)
        pid.set_tolerance(0.1, 1.0)

        pid.calculate(0.5, 1.0)
        pid.calculate(0.96, 1.0)

        np.testing.assert_allclose(pid.velocity_error, (0.04 - 0.5) / 0.02)
        assert not pid.at_setpoint()

    def test_continuous_input_takes_short_way(self):
        """Test wrapped error across the -pi/pi seam"""
        pid = PIDController(1.0, 0.0, 0.0)
        pid.enable_continuous_input(-math.pi, math.pi)

        output = pid.calculate(math.pi - 0.1, -math.pi + 0.1)

        np.testing.assert_allclose(output, 0.2, atol=1e-9)
        assert pid.is_continuous_input_enabled

    @pytest.mark.parametrize("minimum,maximum", [(0.0, 0.0), (math.pi, -math.pi)])
    def test_continuous_input_range_validated(self, minimum, maximum):
        """Test an empty or inverted continuous range is rejected up front"""
        pid = PIDController(1.0, 0.0, 0.0)

        with pytest.raises(InvalidParameterError):
            pid.enable_continuous_input(minimum, maximum)
        assert not pid.is_continuous_input_enabled
        assert pid.calculate(1.0, 2.0) == 1.0

    def test_integrator_range(self):
        """Test ki * integral is clamped to the integrator range"""
        pid = PIDController(0.0, 1.0, 0.0)
        pid.set_integrator_range(-0.5, 0.5)

        for _ in range(100):
            output = pid.calculate(0.0, 100.0)

        np.testing.assert_allclose(output, 0.5)

    def test_izone_clears_integral(self):
        """Test errors outside the integration zone do not accumulate"""
        pid = PIDController(0.0, 1.0, 0.0)
        pid.set_izone(1.0)

        assert pid.calculate(0.0, 5.0) == 0.0
        assert pid.calculate(0.0, 0.5) > 0.0

    @pytest.mark.parametrize("gains", [(-1.0, 0.0, 0.0), (0.0, -0.1, 0.0), (0.0, 0.0, -2.0)])
    def test_negative_gains_rejected(self, gains):
        """Test negative gains are invalid"""
        with pytest.raises(InvalidParameterError):
            PIDController(*gains)

    def test_invalid_period(self):
        """Test the period must be positive"""
        with pytest.raises(ValueError):
            PIDController(1.0, 0.0, 0.0, period=0.0)

    def test_set_pid_validates(self):
        """Test replacing gains keeps validation"""
        pid = PIDController(1.0, 0.0, 0.0)
        pid.set_pid(2.0, 0.0, 0.0)

        assert pid.calculate(0.0, 1.0) == 2.0
        with pytest.raises(InvalidParameterError):
            pid.set_pid(-1.0, 0.0, 0.0)


class TestFeedforward:
    """Test motor and elevator voltage models"""

    def test_elevator_velocity_only(self):
        """Test kS=0, kG=0, kV=2, kA=0 at velocity 3 returns 6.0"""
        feedforward = ElevatorFeedforward(0.0, 0.0, 2.0, 0.0)
        assert feedforward.calculate(3.0) == 6.0

    def test_elevator_all_terms(self):
        """Test static, gravity, velocity and acceleration terms add up"""
        feedforward = ElevatorFeedforward(1.0, 0.5, 2.0, 0.1)
        np.testing.assert_allclose(feedforward.calculate(1.0, 2.0), 1.0 + 0.5 + 2.0 + 0.2)

    def test_elevator_gravity_term_when_stationary(self):
        """Test holding still needs only kG"""
        feedforward = ElevatorFeedforward(1.0, 0.7, 2.0)
        assert feedforward.calculate(0.0) == 0.7

    def test_simple_motor_static_friction_sign(self):
        """Test kS opposes the direction of travel"""
        feedforward = SimpleMotorFeedforward(1.0, 2.0)

        assert feedforward.calculate(1.0) == 3.0
        assert feedforward.calculate(-1.0) == -3.0

    def test_discrete_form_matches_steady_state(self):
        """Test holding a velocity needs the same voltage in both forms"""
        feedforward = SimpleMotorFeedforward(0.5, 2.0, 0.3)

        np.testing.assert_allclose(feedforward.calculate_with_velocities(1.5, 1.5),
                                   feedforward.calculate(1.5))

    def test_discrete_form_accelerates(self):
        """Test the discrete form reaches the next velocity in one period"""
        kv, ka, period = 2.0, 0.3, 0.02
        feedforward = SimpleMotorFeedforward(0.0, kv, ka, period)

        u = feedforward.calculate_with_velocities(0.0, 1.0)

        a_d = math.exp(-kv / ka * period)
        b_d = (1.0 - a_d) / kv
        np.testing.assert_allclose(a_d * 0.0 + b_d * u, 1.0)

    def test_achievable_limits(self):
        """Test achievable velocity and acceleration bounds"""
        feedforward = SimpleMotorFeedforward(1.0, 2.0, 0.5)

        np.testing.assert_allclose(feedforward.max_achievable_velocity(12.0, 0.0), 5.5)
        np.testing.assert_allclose(feedforward.min_achievable_velocity(12.0, 0.0), -5.5)
        np.testing.assert_allclose(feedforward.max_achievable_acceleration(12.0, 1.0),
                                   (12.0 - 1.0 - 2.0) / 0.5)
        np.testing.assert_allclose(feedforward.min_achievable_acceleration(12.0, 1.0),
                                   (-12.0 - 1.0 - 2.0) / 0.5)

    def test_no_acceleration_gain_is_unbounded(self):
        """Test kA=0 places no bound on acceleration"""
        feedforward = SimpleMotorFeedforward(0.0, 2.0)
        assert feedforward.max_achievable_acceleration(12.0, 0.0) == math.inf

    def test_negative_gains_rejected(self):
        """Test kV and kA must be non-negative"""
        with pytest.raises(InvalidParameterError):
            SimpleMotorFeedforward(0.0, -1.0)
        with pytest.raises(InvalidParameterError):
            ElevatorFeedforward(0.0, 0.0, 1.0, -0.1)


class TestRamseteController:
    """Test nonlinear trajectory tracking"""

    def test_on_reference_passes_through(self):
        """Test zero error returns the reference velocities"""
        controller = RamseteController()
        pose = Pose2d.from_xy(1.0, 2.0, 0.5)

        speeds = controller.calculate(pose, pose, 1.5, 0.3)

        np.testing.assert_allclose([speeds.vx, speeds.vy, speeds.omega], [1.5, 0.0, 0.3])

    def test_longitudinal_error(self):
        """Test lagging behind the reference speeds up"""
        controller = RamseteController(2.0, 0.7)

        speeds = controller.calculate(Pose2d(), Pose2d.from_xy(0.1, 0.0, 0.0), 1.0, 0.0)

        k = 2.0 * 0.7 * math.sqrt(2.0)
        np.testing.assert_allclose(speeds.vx, 1.0 + k * 0.1)
        np.testing.assert_allclose(speeds.omega, 0.0, atol=1e-12)

    def test_lateral_error_uses_sinc_at_zero(self):
        """Test a reference to the left turns left with sinc(0) = 1"""
        controller = RamseteController(2.0, 0.7)

        speeds = controller.calculate(Pose2d(), Pose2d.from_xy(0.0, 0.1, 0.0), 1.0, 0.0)

        np.testing.assert_allclose(speeds.vx, 1.0)
        np.testing.assert_allclose(speeds.omega, 2.0 * 1.0 * 1.0 * 0.1)

    def test_error_is_expressed_in_robot_frame(self):
        """Test a robot facing +y sees a reference at +y as straight ahead"""
        controller = RamseteController()
        current = Pose2d.from_xy(0.0, 0.0, math.pi / 2)

        controller.calculate(current, Pose2d.from_xy(0.0, 0.2, math.pi / 2), 1.0, 0.0)

        np.testing.assert_allclose([controller.pose_error.x, controller.pose_error.y],
                                   [0.2, 0.0], atol=1e-12)

    def test_calculate_from_state(self):
        """Test the reference angular velocity is v * curvature"""
        controller = RamseteController()
        pose = Pose2d.from_xy(1.0, 1.0, 0.0)
        state = TrajectoryState(time=0.0, velocity=2.0, acceleration=0.0,
                                pose=pose, curvature=0.5)

        speeds = controller.calculate_from_state(pose, state)

        np.testing.assert_allclose([speeds.vx, speeds.omega], [2.0, 1.0])

    def test_disabled_passes_references(self):
        """Test disabling bypasses feedback"""
        controller = RamseteController()
        controller.set_enabled(False)

        speeds = controller.calculate(Pose2d(), Pose2d.from_xy(5.0, 5.0, 1.0), 1.0, 0.2)

        assert (speeds.vx, speeds.vy, speeds.omega) == (1.0, 0.0, 0.2)

    def test_at_reference(self):
        """Test per-axis tolerance on the last pose error"""
        controller = RamseteController()
        controller.set_tolerance(Transform2d(Translation2d(0.1, 0.1), Rotation2d(0.1)))

        controller.calculate(Pose2d(), Pose2d.from_xy(0.05, -0.05, 0.05), 0.0, 0.0)
        assert controller.at_reference()

        controller.calculate(Pose2d(), Pose2d.from_xy(0.5, 0.0, 0.0), 0.0, 0.0)
        assert not controller.at_reference()

    @pytest.mark.parametrize("b,zeta", [(0.0, 0.7), (-1.0, 0.7), (2.0, 0.0), (2.0, 1.0)])
    def test_invalid_gains(self, b, zeta):
        """Test b > 0 and 0 < zeta < 1 are required"""
        with pytest.raises(InvalidParameterError):
            RamseteController(b, zeta)
