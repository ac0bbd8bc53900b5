# npendulum/frames.py

"""Headless per-frame feed for whatever draws the chain.

Each frame the chain is advanced ``substeps`` times, the joint positions are
read once, and the free end is appended to a bounded trail.  The tip,
scaled by the visual length, doubles as the complex parameter c of a
Julia-set effect.  Nothing here draws or waits; pacing belongs to the caller.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Iterator

import numpy as np
from numpy.typing import NDArray

from .chain import PendulumChain
from .config import FrameConfig


@dataclass(frozen=True, eq=False)
class Frame:
    """Snapshot handed to the renderer after one frame's worth of steps."""

    index: int
    endpoints: NDArray[np.floating]   # (N+1, 2), anchor first
    julia_c: complex

    @property
    def tip(self) -> tuple[float, float]:
        x, y = self.endpoints[-1]
        return float(x), float(y)


def julia_parameter(tip: tuple[float, float], view_length: float) -> complex:
    """Map the chain's free end onto the complex plane."""
    x, y = tip
    return complex(x / view_length, y / view_length)


class FrameDriver:
    """Advances a chain frame by frame and remembers the tip's recent path."""

    def __init__(self, chain: PendulumChain, frame_config: FrameConfig | None = None):
        self.chain = chain
        self.cfg = frame_config or FrameConfig()
        self._trail: deque[tuple[float, float]] = deque(maxlen=self.cfg.trail_length)
        self._frame_count = 0

    @property
    def frame_count(self) -> int:
        return self._frame_count

    def next_frame(self) -> Frame:
        for _ in range(self.cfg.substeps):
            self.chain.update()

        endpoints = self.chain.endpoint_coordinates()
        tip = (float(endpoints[-1, 0]), float(endpoints[-1, 1]))
        self._trail.append(tip)

        frame = Frame(
            index=self._frame_count,
            endpoints=endpoints,
            julia_c=julia_parameter(tip, self.cfg.view_length),
        )
        self._frame_count += 1
        return frame

    def frames(self, count: int) -> Iterator[Frame]:
        """Yield *count* consecutive frames."""
        for _ in range(count):
            yield self.next_frame()

    def trail(self) -> NDArray[np.floating]:
        """Recent tip positions, oldest first, shape (k, 2) with k ≤ trail_length."""
        if not self._trail:
            return np.empty((0, 2))
        return np.array(self._trail, dtype=float)
