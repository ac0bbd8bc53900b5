"""Tests for the pendulum chain physics engine."""

import numpy as np
import pytest

from npendulum.physics import (
    _build_matrix_a,
    _build_vector_b,
    accelerations,
    derivatives,
    endpoint_coordinates,
    leapfrog_step,
    reference_step,
    total_energy,
    wrap_angle,
)


class TestCouplingMatrix:
    """Coupling matrix construction."""

    def test_single_segment_shape(self):
        A = _build_matrix_a(np.array([0.3]))
        assert A.shape == (1, 1)
        assert A[0, 0] == pytest.approx(1.0)

    def test_weights_on_diagonal(self):
        A = _build_matrix_a(np.array([0.1, -0.4, 2.0, 1.0]))
        np.testing.assert_allclose(np.diag(A), [4.0, 3.0, 2.0, 1.0])

    def test_off_diagonal_entry(self):
        theta = np.array([0.3, -0.2, 1.1])
        A = _build_matrix_a(theta)
        assert A[0, 2] == pytest.approx(1.0 * np.cos(0.3 - 1.1))
        assert A[1, 0] == pytest.approx(2.0 * np.cos(-0.2 - 0.3))

    def test_matrix_symmetric(self):
        A = _build_matrix_a(np.array([0.3, -0.2, 2.5]))
        np.testing.assert_allclose(A, A.T, atol=1e-12)

    def test_matrix_positive_definite(self):
        rng = np.random.default_rng(1)
        A = _build_matrix_a(rng.uniform(-np.pi, np.pi, size=5))
        eigenvalues = np.linalg.eigvalsh(A)
        assert np.all(eigenvalues > 0)


class TestForcingVector:

    def test_single_segment_gravity_only(self):
        b = _build_vector_b(np.array([0.7]), np.array([3.0]), gravity=-10.0)
        assert b[0] == pytest.approx(10.0 * np.sin(0.7))

    def test_hanging_at_rest_is_balanced(self):
        theta = np.full(3, np.pi)
        b = _build_vector_b(theta, np.zeros(3), gravity=-10.0)
        np.testing.assert_allclose(b, 0.0, atol=1e-12)

    def test_centripetal_term(self):
        theta = np.array([0.5, 0.0])
        omega = np.array([0.0, 2.0])
        b = _build_vector_b(theta, omega, gravity=0.0)
        # Only segment 1 moves; it pulls on segment 0 with weight N - max(0, 1) = 1
        np.testing.assert_allclose(b, [-np.sin(0.5) * 4.0, 0.0], atol=1e-12)


class TestAccelerations:

    def test_single_segment_closed_form(self):
        for theta in (0.1, 1.0, -2.5):
            acc = accelerations([theta], [0.0], gravity=-10.0)
            assert acc[0] == pytest.approx(10.0 * np.sin(theta))

    def test_double_pendulum_closed_form(self):
        """Agrees with the textbook double pendulum (unit masses and lengths)."""
        g = -10.0
        t1, t2, w1, w2 = 0.8, -0.3, 1.2, -0.7
        acc = accelerations([t1, t2], [w1, w2], gravity=g)

        d = t1 - t2
        den = 3.0 - np.cos(2.0 * d)
        a1 = (-3.0 * g * np.sin(t1) - g * np.sin(t1 - 2.0 * t2)
              - 2.0 * np.sin(d) * (w2 ** 2 + w1 ** 2 * np.cos(d))) / den
        a2 = (2.0 * np.sin(d) * (2.0 * w1 ** 2 + 2.0 * g * np.cos(t1)
                                 + w2 ** 2 * np.cos(d))) / den
        np.testing.assert_allclose(acc, [a1, a2], rtol=1e-10)

    def test_derivatives_layout(self):
        state = np.array([0.4, -0.1, 0.5, 0.2])
        ds = derivatives(state)
        assert ds.shape == (4,)
        np.testing.assert_allclose(ds[:2], state[2:])


class TestWrapAngle:

    def test_pi_stays_pi(self):
        assert wrap_angle(np.pi) == pytest.approx(np.pi)

    def test_minus_pi_maps_to_pi(self):
        assert wrap_angle(-np.pi) == pytest.approx(np.pi)

    def test_full_turns_removed(self):
        assert wrap_angle(2 * np.pi + 0.1) == pytest.approx(0.1)
        assert wrap_angle(-4 * np.pi - 0.1) == pytest.approx(-0.1)

    def test_array_range(self):
        angles = np.linspace(-50.0, 50.0, 10001)
        wrapped = wrap_angle(angles)
        assert wrapped.shape == angles.shape
        assert np.all(wrapped > -np.pi)
        assert np.all(wrapped <= np.pi)
        np.testing.assert_allclose(np.sin(wrapped), np.sin(angles), atol=1e-9)

    def test_tiny_negative(self):
        w = wrap_angle(-1e-20)
        assert -np.pi < w <= np.pi
        assert w == pytest.approx(0.0, abs=1e-12)


class TestEndpoints:

    def test_shape_and_origin(self):
        coords = endpoint_coordinates(np.array([0.2, 0.4, -1.0]))
        assert coords.shape == (4, 2)
        np.testing.assert_array_equal(coords[0], [0.0, 0.0])

    def test_unit_rod_lengths(self):
        rng = np.random.default_rng(2)
        coords = endpoint_coordinates(rng.uniform(-np.pi, np.pi, size=7))
        lengths = np.linalg.norm(np.diff(coords, axis=0), axis=1)
        np.testing.assert_allclose(lengths, 1.0, atol=1e-12)

    def test_hanging_straight(self):
        coords = endpoint_coordinates(np.full(3, np.pi))
        np.testing.assert_allclose(coords[-1], [0.0, -3.0], atol=1e-12)

    def test_horizontal(self):
        coords = endpoint_coordinates(np.full(2, np.pi / 2))
        np.testing.assert_allclose(coords, [[0, 0], [1, 0], [2, 0]], atol=1e-12)


class TestLeapfrogStep:
    """Full integration step."""

    def test_returns_fresh_arrays(self):
        theta = np.array([0.5, 0.1])
        omega = np.array([0.0, 1.0])
        new_theta, new_omega, degenerate = leapfrog_step(theta, omega, 1e-3)
        np.testing.assert_array_equal(theta, [0.5, 0.1])
        np.testing.assert_array_equal(omega, [0.0, 1.0])
        assert new_theta.shape == (2,)
        assert new_omega.shape == (2,)
        assert degenerate is False

    def test_single_step_from_horizontal(self):
        """N=1, dt=1e-4, θ=π/2, g=-10: the angle moves by ½·10·dt²."""
        theta, omega, _ = leapfrog_step(np.array([np.pi / 2]), np.zeros(1), 1e-4, gravity=-10.0)
        assert theta[0] - np.pi / 2 == pytest.approx(5e-8, rel=1e-6)
        assert omega[0] > 0.0

    def test_tracks_rk45_reference(self):
        theta0 = np.array([np.pi / 2, np.pi / 2, np.pi / 2])
        omega0 = np.zeros(3)
        dt = 1e-3

        theta, omega = theta0, omega0
        for _ in range(100):
            theta, omega, _ = leapfrog_step(theta, omega, dt)

        ref_theta, ref_omega = reference_step(theta0, omega0, 100 * dt)
        np.testing.assert_allclose(wrap_angle(theta - ref_theta), 0.0, atol=1e-4)
        np.testing.assert_allclose(omega, ref_omega, atol=1e-3)

    def test_forced_degeneracy_zeroes_accelerations(self):
        theta = np.array([1.0, 0.5])
        omega = np.array([0.2, -0.3])
        new_theta, new_omega, degenerate = leapfrog_step(theta, omega, 1e-2, tol=1e6)
        assert degenerate is True
        np.testing.assert_allclose(new_omega, omega)
        np.testing.assert_allclose(new_theta, theta + omega * 1e-2)


class TestEnergy:

    def test_hanging_at_rest(self):
        # V = -g Σ (N - i) cos θ = -(-10) * (3 + 2 + 1) * (-1)
        assert total_energy(np.full(3, np.pi), np.zeros(3), gravity=-10.0) == pytest.approx(-60.0)

    def test_kinetic_single_segment(self):
        e = total_energy([np.pi / 2], [2.0], gravity=-10.0)
        assert e == pytest.approx(2.0, abs=1e-12)

    def test_leapfrog_beats_forward_euler(self):
        """Forward Euler gains energy steadily; the leapfrog step does not."""
        dt, steps = 1e-3, 10_000
        theta0, omega0 = np.array([np.pi / 2]), np.zeros(1)
        e0 = total_energy(theta0, omega0)

        theta, omega = theta0, omega0
        for _ in range(steps):
            theta, omega, _ = leapfrog_step(theta, omega, dt)
        leapfrog_drift = abs(total_energy(theta, omega) - e0)

        theta, omega = theta0.copy(), omega0.copy()
        for _ in range(steps):
            acc = accelerations(theta, omega)
            theta, omega = theta + omega * dt, omega + acc * dt
        euler_drift = abs(total_energy(theta, omega) - e0)

        assert leapfrog_drift < 1e-3
        assert euler_drift > 10 * leapfrog_drift
