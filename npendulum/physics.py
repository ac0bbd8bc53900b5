# npendulum/physics.py

"""N-segment pendulum chain – dynamics, time stepping and geometry.

Generalised coordinates:
    θ = [θ₀, θ₁, …, θₙ₋₁]
where θᵢ is the angle of segment i measured from the vertical at its parent
joint.  Every rod has unit length and every joint carries a unit point mass,
so segment i supports the N − i masses from itself outward.

The engine builds the coupling matrix **A(θ)** and the forcing vector
**b(θ, θ̇)** so that the equations of motion are  A θ̈ = b:

    A[i, j] = (N − max(i, j)) cos(θᵢ − θⱼ)
    b[i]    = −Σⱼ (N − max(i, j)) sin(θᵢ − θⱼ) θ̇ⱼ²  −  g (N − i) sin θᵢ

Both are rebuilt from scratch for every evaluation.  Zero friction everywhere.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.integrate import solve_ivp

from .config import GRAVITY, PIVOT_TOLERANCE
from .linalg import Solution, solve_with_diagnostics

TWO_PI = 2.0 * np.pi


def _weights(n: int) -> NDArray[np.floating]:
    """(N − max(i, j)) for every pair – how many masses i and j jointly carry."""
    idx = np.arange(n)
    return (n - np.maximum.outer(idx, idx)).astype(float)


def _build_matrix_a(theta: NDArray[np.floating]) -> NDArray[np.floating]:
    """Return the N×N coupling matrix A(θ).

    Parameters
    ----------
    theta : array of shape (N,) – segment angles
    """
    delta = theta[:, None] - theta[None, :]
    return _weights(theta.shape[0]) * np.cos(delta)


def _build_vector_b(
    theta: NDArray[np.floating],
    omega: NDArray[np.floating],
    gravity: float = GRAVITY,
) -> NDArray[np.floating]:
    """Return the forcing vector b(θ, θ̇).

    The first term is the centripetal contribution of every segment's
    angular velocity, the second the gravitational torque on segment i
    scaled by the number of masses it carries.

    Parameters
    ----------
    theta : array of shape (N,) – segment angles
    omega : array of shape (N,) – segment angular velocities
    gravity : float
    """
    n = theta.shape[0]
    delta = theta[:, None] - theta[None, :]
    centripetal = (_weights(n) * np.sin(delta)) @ (omega ** 2)
    supported = n - np.arange(n)
    return -centripetal - gravity * supported * np.sin(theta)


def _solve_accelerations(
    theta: NDArray[np.floating],
    omega: NDArray[np.floating],
    gravity: float,
    tol: float,
) -> Solution:
    A = _build_matrix_a(theta)
    b = _build_vector_b(theta, omega, gravity)
    return solve_with_diagnostics(A, b, tol)


def accelerations(
    theta: ArrayLike,
    omega: ArrayLike,
    gravity: float = GRAVITY,
    tol: float = PIVOT_TOLERANCE,
) -> NDArray[np.floating]:
    """Angular accelerations θ̈ for the given state (solves  A θ̈ = b)."""
    theta = np.asarray(theta, dtype=float)
    omega = np.asarray(omega, dtype=float)
    return _solve_accelerations(theta, omega, gravity, tol).x


def wrap_angle(angle):
    """Normalise an angle (or array of angles) into (−π, π]."""
    wrapped = np.pi - np.mod(np.pi - np.asarray(angle, dtype=float), TWO_PI)
    # np.mod can round up to exactly 2π for tiny negative arguments
    wrapped = np.where(wrapped <= -np.pi, wrapped + TWO_PI, wrapped)
    if wrapped.ndim == 0:
        return float(wrapped)
    return wrapped


def leapfrog_step(
    theta: NDArray[np.floating],
    omega: NDArray[np.floating],
    dt: float,
    gravity: float = GRAVITY,
    tol: float = PIVOT_TOLERANCE,
) -> tuple[NDArray[np.floating], NDArray[np.floating], bool]:
    """Advance the chain by *dt* seconds with one kick-drift-kick step.

    Parameters
    ----------
    theta : array of shape (N,) – current angles
    omega : array of shape (N,) – current angular velocities
    dt : time step
    gravity : float
    tol : singular-pivot threshold handed to the solver

    Returns
    -------
    (new_theta, new_omega, degenerate) – fresh arrays, angles wrapped into
    (−π, π]; *degenerate* is True when either solve zeroed an unknown.
    """
    first = _solve_accelerations(theta, omega, gravity, tol)
    omega_half = omega + first.x * dt / 2.0

    new_theta = wrap_angle(theta + omega_half * dt)

    # Forces at the new angles, still using the half-step velocities
    second = _solve_accelerations(new_theta, omega_half, gravity, tol)
    new_omega = omega_half + second.x * dt / 2.0

    degenerate = bool(first.degenerate or second.degenerate)
    return new_theta, new_omega, degenerate


def endpoint_coordinates(theta: ArrayLike) -> NDArray[np.floating]:
    """Return the (N+1, 2) joint positions, anchor (0, 0) first.

    Each segment adds (sin θᵢ, cos θᵢ) to the previous joint.
    """
    theta = np.asarray(theta, dtype=float)
    coords = np.zeros((theta.shape[0] + 1, 2))
    coords[1:, 0] = np.cumsum(np.sin(theta))
    coords[1:, 1] = np.cumsum(np.cos(theta))
    return coords


def total_energy(
    theta: ArrayLike,
    omega: ArrayLike,
    gravity: float = GRAVITY,
) -> float:
    """Kinetic plus potential energy of the chain (unit masses and lengths).

    T = ½ θ̇ᵀ A(θ) θ̇,   V = −g Σᵢ (N − i) cos θᵢ
    """
    theta = np.asarray(theta, dtype=float)
    omega = np.asarray(omega, dtype=float)
    n = theta.shape[0]
    kinetic = 0.5 * omega @ _build_matrix_a(theta) @ omega
    potential = -gravity * np.sum((n - np.arange(n)) * np.cos(theta))
    return float(kinetic + potential)


def derivatives(
    state: NDArray[np.floating],
    gravity: float = GRAVITY,
    tol: float = PIVOT_TOLERANCE,
) -> NDArray[np.floating]:
    """Compute state derivatives  ṡ = [θ̇, θ̈]  for  s = [θ, θ̇]  (length 2N)."""
    n = state.shape[0] // 2
    theta = state[:n]
    omega = state[n:]
    acc = _solve_accelerations(theta, omega, gravity, tol).x
    return np.concatenate([omega, acc])


def reference_step(
    theta: ArrayLike,
    omega: ArrayLike,
    dt: float,
    gravity: float = GRAVITY,
) -> tuple[NDArray[np.floating], NDArray[np.floating]]:
    """Advance by *dt* seconds with adaptive RK45 (verification only).

    Returns
    -------
    (new_theta, new_omega) – angles wrapped into (−π, π]
    """
    theta = np.asarray(theta, dtype=float)
    omega = np.asarray(omega, dtype=float)
    n = theta.shape[0]
    sol = solve_ivp(
        fun=lambda _t, s: derivatives(s, gravity),
        t_span=(0.0, dt),
        y0=np.concatenate([theta, omega]),
        method="RK45",
        rtol=1e-8,
        atol=1e-8,
    )
    new_state = sol.y[:, -1].copy()
    return wrap_angle(new_state[:n]), new_state[n:]
