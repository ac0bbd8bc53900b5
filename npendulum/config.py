# npendulum/config.py

"""Configuration for the pendulum chain and its frame feed."""

import math
import numbers
from dataclasses import dataclass

# Sign convention used by the force equations. With a negative value the
# chain hangs at θ = π and the projected y axis points up.
GRAVITY: float = -10.0

# Pivots / diagonal entries smaller than this are treated as singular.
PIVOT_TOLERANCE: float = 1e-10


class InvalidConfiguration(ValueError):
    """Raised when a chain or frame feed is built from unusable parameters."""


@dataclass(frozen=True)
class ChainConfig:
    """Physical parameters for an N-segment pendulum chain."""

    num_segments: int = 20           # Number of rod/pivot pairs. Segment 0 hangs from the anchor.
    time_step: float = 1e-4          # s  (one update() call advances this much)
    initial_angle: float = math.pi / 2  # rad, shared by every segment at start
    gravity: float = GRAVITY
    pivot_tolerance: float = PIVOT_TOLERANCE

    def __post_init__(self):
        if isinstance(self.num_segments, bool) or not isinstance(self.num_segments, numbers.Integral):
            raise InvalidConfiguration(
                f"num_segments must be an integer, got {self.num_segments!r}"
            )
        if self.num_segments < 1:
            raise InvalidConfiguration(
                f"num_segments must be at least 1, got {self.num_segments}"
            )
        if not math.isfinite(self.time_step) or self.time_step <= 0:
            raise InvalidConfiguration(
                f"time_step must be a positive finite number, got {self.time_step}"
            )
        if not math.isfinite(self.initial_angle):
            raise InvalidConfiguration(
                f"initial_angle must be finite, got {self.initial_angle}"
            )
        if not math.isfinite(self.gravity):
            raise InvalidConfiguration(f"gravity must be finite, got {self.gravity}")
        if not math.isfinite(self.pivot_tolerance) or self.pivot_tolerance < 0:
            raise InvalidConfiguration(
                f"pivot_tolerance must be a non-negative finite number, got {self.pivot_tolerance}"
            )


@dataclass(frozen=True)
class FrameConfig:
    """How the chain is sampled once per displayed frame."""

    substeps: int = 100          # update() calls per frame
    trail_length: int = 200      # tip positions remembered (oldest dropped first)
    view_length: float = 20.0    # visual length scale; tip / view_length gives the Julia parameter

    def __post_init__(self):
        for name in ("substeps", "trail_length"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")
        if self.substeps < 1:
            raise InvalidConfiguration(f"substeps must be at least 1, got {self.substeps}")
        if self.trail_length < 1:
            raise InvalidConfiguration(
                f"trail_length must be at least 1, got {self.trail_length}"
            )
        if not math.isfinite(self.view_length) or self.view_length <= 0:
            raise InvalidConfiguration(
                f"view_length must be a positive finite number, got {self.view_length}"
            )
