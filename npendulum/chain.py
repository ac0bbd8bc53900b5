# npendulum/chain.py

"""Stateful pendulum chain advanced one leapfrog step per update() call."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from .config import GRAVITY, PIVOT_TOLERANCE, ChainConfig
from .physics import endpoint_coordinates, leapfrog_step, total_energy


class PendulumChain:
    """
    A chain of N unit rods hanging from a fixed anchor.

    All segments start at the same angle with zero angular velocity.  The
    segment count and time step never change after construction; the state
    arrays are allocated once and only ever overwritten by update().
    """

    def __init__(
        self,
        num_segments: int,
        time_step: float,
        initial_angle: float,
        gravity: float = GRAVITY,
        pivot_tolerance: float = PIVOT_TOLERANCE,
    ):
        # Validation happens in ChainConfig; a bad value raises before any state exists
        self.cfg = ChainConfig(
            num_segments=num_segments,
            time_step=time_step,
            initial_angle=initial_angle,
            gravity=gravity,
            pivot_tolerance=pivot_tolerance,
        )

        n = self.cfg.num_segments
        self._angles = np.full(n, float(initial_angle))
        self._angular_velocities = np.zeros(n)
        self._steps = 0
        self._last_step_degenerate = False

    @classmethod
    def from_config(cls, cfg: ChainConfig) -> PendulumChain:
        return cls(
            cfg.num_segments,
            cfg.time_step,
            cfg.initial_angle,
            gravity=cfg.gravity,
            pivot_tolerance=cfg.pivot_tolerance,
        )

    # -- read-only properties -------------------------------------------------

    @property
    def num_segments(self) -> int:
        return self.cfg.num_segments

    @property
    def time_step(self) -> float:
        return self.cfg.time_step

    @property
    def gravity(self) -> float:
        return self.cfg.gravity

    @property
    def steps(self) -> int:
        """Number of update() calls so far."""
        return self._steps

    @property
    def elapsed(self) -> float:
        """Simulated time in seconds."""
        return self._steps * self.cfg.time_step

    @property
    def angles(self) -> NDArray[np.floating]:
        return self._angles.copy()

    @property
    def angular_velocities(self) -> NDArray[np.floating]:
        return self._angular_velocities.copy()

    @property
    def last_step_degenerate(self) -> bool:
        """True if the last update() zeroed an ill-defined acceleration."""
        return self._last_step_degenerate

    # -- simulation -----------------------------------------------------------

    def update(self) -> None:
        """Advance the chain by one time step."""
        theta, omega, degenerate = leapfrog_step(
            self._angles,
            self._angular_velocities,
            self.cfg.time_step,
            self.cfg.gravity,
            self.cfg.pivot_tolerance,
        )
        self._angles[:] = theta
        self._angular_velocities[:] = omega
        self._last_step_degenerate = degenerate
        self._steps += 1

    def endpoint_coordinates(self) -> NDArray[np.floating]:
        """Joint positions from the anchor outward, shape (N+1, 2)."""
        return endpoint_coordinates(self._angles)

    def energy(self) -> float:
        """Total mechanical energy of the current state."""
        return total_energy(self._angles, self._angular_velocities, self.cfg.gravity)

    def __repr__(self) -> str:
        return (
            f"PendulumChain(num_segments={self.num_segments}, "
            f"time_step={self.time_step}, steps={self._steps})"
        )
