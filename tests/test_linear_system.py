import pytest
import numpy as np
import math
import dataclasses
import sys
import os

# Add the src directory to Python path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from robo_motion.system import (
    LinearSystem,
    DCMotor,
    LinearSystemId,
    desaturate_input_vector,
    make_white_noise_vector,
)
from robo_motion.system.linear_system import MAX_CACHED_DISCRETIZATIONS
from robo_motion.exceptions import DimensionMismatchError, InvalidParameterError


class TestLinearSystem:
    """Test state-space plant validation and discretization"""

    def test_dimensions(self):
        """Test state, input and output counts come from the matrices"""
        system = LinearSystem(np.eye(2), np.ones((2, 1)), [[1.0, 0.0]], [[0.0]])

        assert system.num_states == 2
        assert system.num_inputs == 1
        assert system.num_outputs == 1

    @pytest.mark.parametrize("A,B,C,D", [
        (np.eye(2), np.ones((3, 1)), np.ones((1, 2)), np.zeros((1, 1))),
        (np.ones((2, 3)), np.ones((2, 1)), np.ones((1, 3)), np.zeros((1, 1))),
        (np.eye(2), np.ones((2, 1)), np.ones((1, 3)), np.zeros((1, 1))),
        (np.eye(2), np.ones((2, 1)), np.ones((1, 2)), np.zeros((2, 1))),
    ])
    def test_dimension_mismatch(self, A, B, C, D):
        """Test inconsistent matrix shapes are rejected"""
        with pytest.raises(DimensionMismatchError):
            LinearSystem(A, B, C, D)

    def test_non_finite_rejected(self):
        """Test NaN entries are rejected"""
        with pytest.raises(InvalidParameterError):
            LinearSystem([[float('nan')]], [[1.0]], [[1.0]], [[0.0]])

    def test_integrator_discretization(self):
        """Test x' = u discretizes to A_d = 1, B_d = dt"""
        system = LinearSystem([[0.0]], [[1.0]], [[1.0]], [[0.0]])
        A_d, B_d = system.discretize(0.5)

        np.testing.assert_allclose(A_d, [[1.0]])
        np.testing.assert_allclose(B_d, [[0.5]])

    def test_first_order_discretization(self):
        """Test x' = -x + u matches the closed-form ZOH solution"""
        system = LinearSystem([[-1.0]], [[1.0]], [[1.0]], [[0.0]])
        A_d, B_d = system.discretize(0.1)

        np.testing.assert_allclose(A_d, [[math.exp(-0.1)]])
        np.testing.assert_allclose(B_d, [[1.0 - math.exp(-0.1)]])

    def test_double_integrator_discretization(self):
        """Test position/velocity double integrator"""
        system = LinearSystem([[0.0, 1.0], [0.0, 0.0]], [[0.0], [1.0]], [[1.0, 0.0]], [[0.0]])
        dt = 0.2
        A_d, B_d = system.discretize(dt)

        np.testing.assert_allclose(A_d, [[1.0, dt], [0.0, 1.0]], atol=1e-12)
        np.testing.assert_allclose(B_d, [[dt ** 2 / 2], [dt]], atol=1e-12)

    def test_discretization_cached(self):
        """Test repeated steps reuse the discretization"""
        system = LinearSystem([[-1.0]], [[1.0]], [[1.0]], [[0.0]])
        assert system.discretize(0.02) is system.discretize(0.02)

    def test_discretization_cache_bounded(self):
        """Test a jittery loop period does not grow the cache without limit"""
        system = LinearSystem([[0.0, 1.0], [0.0, -2.0]], [[0.0], [1.0]], [[1.0, 0.0]], [[0.0]])
        rng = np.random.default_rng(0)

        for dt in 0.02 + rng.uniform(-1e-4, 1e-4, size=500):
            system.calculate_x(np.zeros(2), np.ones(1), float(dt))

        assert len(system._discretizations) == MAX_CACHED_DISCRETIZATIONS

    def test_discretization_cache_keeps_recent_step(self):
        """Test the most recently used step survives eviction"""
        system = LinearSystem([[-1.0]], [[1.0]], [[1.0]], [[0.0]])
        first = system.discretize(0.02)

        for i in range(1, MAX_CACHED_DISCRETIZATIONS + 5):
            system.discretize(0.02 + i * 1e-3)
            assert system.discretize(0.02) is first

    def test_discrete_system_used_verbatim(self):
        """Test a discrete plant ignores dt"""
        system = LinearSystem([[0.9]], [[0.1]], [[1.0]], [[0.0]], discrete=True)
        A_d, B_d = system.discretize(5.0)

        np.testing.assert_array_equal(A_d, [[0.9]])
        np.testing.assert_array_equal(B_d, [[0.1]])

    def test_calculate_x_and_y(self):
        """Test state update and output equations"""
        system = LinearSystem([[0.0]], [[1.0]], [[2.0]], [[0.5]])
        x = system.calculate_x(np.array([1.0]), np.array([2.0]), 0.5)

        np.testing.assert_allclose(x, [2.0])
        np.testing.assert_allclose(system.calculate_y(x, np.array([2.0])), [5.0])


class TestInputHelpers:
    """Test input desaturation and noise helpers"""

    def test_desaturate_preserves_direction(self):
        """Test the whole vector is scaled by one factor"""
        u = desaturate_input_vector(np.array([6.0, -12.0]), 6.0)

        np.testing.assert_allclose(u, [3.0, -6.0])

    def test_desaturate_within_limit_unchanged(self):
        """Test inputs already within the limit are returned as-is"""
        np.testing.assert_array_equal(desaturate_input_vector([1.0, -2.0], 6.0), [1.0, -2.0])

    def test_desaturate_invalid_limit(self):
        """Test the limit must be positive"""
        with pytest.raises(InvalidParameterError):
            desaturate_input_vector([1.0], 0.0)

    def test_white_noise_reproducible(self):
        """Test a seeded generator reproduces the noise"""
        a = make_white_noise_vector([0.1, 2.0], np.random.default_rng(7))
        b = make_white_noise_vector([0.1, 2.0], np.random.default_rng(7))

        np.testing.assert_array_equal(a, b)
        assert a.shape == (2,)

    def test_zero_std_dev_is_zero(self):
        """Test zero standard deviation gives no noise"""
        np.testing.assert_array_equal(make_white_noise_vector([0.0, 0.0]), [0.0, 0.0])


class TestDCMotor:
    """Test motor model and presets"""

    def test_derived_constants(self):
        """Test resistance, kV and kT from datasheet values"""
        motor = DCMotor.cim()

        np.testing.assert_allclose(motor.resistance, 12.0 / 133.0)
        np.testing.assert_allclose(motor.kt, 2.42 / 133.0)
        np.testing.assert_allclose(motor.free_speed, 5310.0 * 2 * math.pi / 60.0)
        np.testing.assert_allclose(
            motor.kv, motor.free_speed / (12.0 - motor.resistance * 2.7))

    def test_stall_and_free_current(self):
        """Test current at stall and at free speed match the datasheet"""
        motor = DCMotor.neo()

        np.testing.assert_allclose(motor.current(0.0, 12.0), 105.0)
        np.testing.assert_allclose(motor.current(motor.free_speed, 12.0), 1.8)

    def test_voltage_torque_round_trip(self):
        """Test voltage(torque(current(w, V)), w) recovers V"""
        motor = DCMotor.falcon_500(2)
        speed = 200.0
        torque = motor.torque(motor.current(speed, 7.0))

        np.testing.assert_allclose(motor.voltage(torque, speed), 7.0)
        np.testing.assert_allclose(motor.speed(torque, 7.0), speed)

    def test_ganged_motors(self):
        """Test several motors scale torque and current but not speed"""
        single = DCMotor.cim(1)
        double = DCMotor.cim(2)

        np.testing.assert_allclose(double.stall_torque, 2 * single.stall_torque)
        np.testing.assert_allclose(double.stall_current, 2 * single.stall_current)
        np.testing.assert_allclose(double.free_current, 2 * single.free_current)
        assert double.free_speed == single.free_speed
        assert double.num_motors == 2

    def test_with_reduction(self):
        """Test a reduction trades speed for torque"""
        motor = DCMotor.bag().with_reduction(10.0)

        np.testing.assert_allclose(motor.stall_torque, 4.3)
        np.testing.assert_allclose(motor.free_speed, 13180.0 * 2 * math.pi / 60.0 / 10.0)

    @pytest.mark.parametrize("factory", [
        DCMotor.cim, DCMotor.mini_cim, DCMotor.bag, DCMotor.vex_775_pro,
        DCMotor.neo, DCMotor.neo_550, DCMotor.falcon_500,
    ])
    def test_presets(self, factory):
        """Test every preset builds a valid motor"""
        motor = factory(3)

        assert motor.nominal_voltage == 12.0
        assert motor.num_motors == 3
        assert motor.kv > 0 and motor.kt > 0

    @pytest.mark.parametrize("num_motors", [0, -1, 1.5])
    def test_invalid_motor_count(self, num_motors):
        """Test the motor count must be an integer >= 1"""
        with pytest.raises(InvalidParameterError):
            DCMotor.cim(num_motors)

    def test_immutable(self):
        """Test motors are immutable values"""
        motor = DCMotor.cim()
        with pytest.raises(dataclasses.FrozenInstanceError):
            motor.stall_torque = 0.0

    def test_invalid_parameters(self):
        """Test inconsistent datasheet values are rejected"""
        with pytest.raises(InvalidParameterError):
            DCMotor(12.0, 1.0, 10.0, 20.0, 100.0)
        with pytest.raises(InvalidParameterError):
            DCMotor(0.0, 1.0, 10.0, 1.0, 100.0)


class TestLinearSystemId:
    """Test plant factories"""

    def test_elevator_system(self):
        """Test elevator plant structure and coefficients"""
        motor = DCMotor.vex_775_pro(4)
        mass, radius, gearing = 8.0, 0.02, 14.67
        system = LinearSystemId.elevator_system(motor, mass, radius, gearing)

        R = motor.resistance
        np.testing.assert_allclose(system.A, [
            [0.0, 1.0],
            [0.0, -gearing ** 2 * motor.kt / (R * radius ** 2 * mass * motor.kv)],
        ])
        np.testing.assert_allclose(system.B, [[0.0], [gearing * motor.kt / (R * radius * mass)]])
        np.testing.assert_array_equal(system.C, [[1.0, 0.0]])
        np.testing.assert_array_equal(system.D, [[0.0]])

    @pytest.mark.parametrize("mass,radius,gearing", [
        (0.0, 0.02, 10.0), (5.0, 0.0, 10.0), (5.0, 0.02, -1.0),
    ])
    def test_elevator_invalid(self, mass, radius, gearing):
        """Test mass, radius and gearing must be positive"""
        with pytest.raises(InvalidParameterError):
            LinearSystemId.elevator_system(DCMotor.neo(), mass, radius, gearing)

    def test_flywheel_reaches_free_speed(self):
        """Test an unloaded flywheel settles at the motor free speed"""
        motor = DCMotor.neo()
        system = LinearSystemId.flywheel_system(motor, 0.01, 1.0)

        # Steady state: 0 = A x + B u
        steady = -system.B[0, 0] * 12.0 / system.A[0, 0]
        np.testing.assert_allclose(steady, 12.0 * motor.kv)
