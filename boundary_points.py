"""
Boundary Points - Generating a Noisy Ground-Truth Boundary

WHAT THIS MODULE DOES:
Produces the "ground truth" the linear unit is trained on: a wiggly line of
points running left to right across a width x height pixel domain.

HOW IT WORKS:
A cursor starts at the middle of the left edge, heading straight right.
On every step:
1. With a 20% chance the heading turns by a small random angle (kept within
   -45..45 degrees so the line never doubles back or goes vertical)
2. A random step length between 1 and 4 is drawn
3. The cursor moves up/down by sin(heading) * step * 8 (clamped to the domain)
4. The cursor moves right by cos(heading) * step + 5
5. The new cursor position is emitted as a Point

Because each point is a small move away from the previous one, neighbouring
points are correlated: the result looks like a noisy boundary rather than a
cloud of random dots.

EXAMPLE (heading stays at 0 degrees, steps 3, 1, 4):
    start   (0, 150)
    point 1 (8, 150)    x += round(cos(0) * 3) + 5
    point 2 (14, 150)   x += round(cos(0) * 1) + 5
    point 3 (23, 150)   x += round(cos(0) * 4) + 5

RANDOMNESS:
All randomness comes from a UniformRandomSource passed in by the caller.
SeededRandomSource gives repeatable boundaries (tests, demos);
SecureRandomSource draws from the operating system's secure generator.
"""

import math
import secrets
from typing import Iterator, NamedTuple, Optional, Protocol

import numpy as np

from visualizer_config import (
    FORWARD_STEP,
    MAX_ANGLE_DELTA,
    MAX_HEADING_ANGLE,
    MAX_STEP,
    MIN_STEP,
    PERTURB_PERCENT,
    VERTICAL_GAIN,
)


class Point(NamedTuple):
    """Integer pixel coordinate (origin top-left)."""

    x: int
    y: int


# ============================================================================
# RANDOM SOURCES
# ============================================================================

class UniformRandomSource(Protocol):
    """Anything that can draw a uniform integer from [low, high)."""

    def next_int(self, low: int, high: int) -> int:
        ...


class SeededRandomSource:
    """
    Repeatable random source backed by numpy's default generator.

    Two sources built with the same seed return the same sequence of
    integers, so they generate the same boundary.

    EXAMPLE:
        rng = SeededRandomSource(seed=7)
        rng.next_int(1, 5)  # always the same value in 1..4 for seed 7
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._generator = np.random.default_rng(seed)

    def next_int(self, low: int, high: int) -> int:
        if low >= high:
            raise ValueError(f"Empty range: low ({low}) must be below high ({high})")
        return int(self._generator.integers(low, high))


class SecureRandomSource:
    """Random source drawing from the operating system (``secrets``)."""

    def next_int(self, low: int, high: int) -> int:
        if low >= high:
            raise ValueError(f"Empty range: low ({low}) must be below high ({high})")
        return low + secrets.randbelow(high - low)


# ============================================================================
# RANDOM WALK
# ============================================================================

def clamp(value, lower, upper):
    """Limit value to the closed range [lower, upper]."""
    return max(lower, min(value, upper))


class _WalkCursor:
    """Position and heading of the walk. Only lives while points are generated."""

    def __init__(self, height: int):
        self.x = 0
        self.y = height // 2
        self.angle = 0.0

    def turn(self, delta: int) -> None:
        self.angle = clamp(self.angle + delta, -MAX_HEADING_ANGLE, MAX_HEADING_ANGLE)

    def advance(self, step: int, height: int) -> Point:
        radians = math.radians(self.angle)
        self.y = clamp(self.y + round(math.sin(radians) * step * VERTICAL_GAIN), 0, height)
        self.x += round(math.cos(radians) * step) + FORWARD_STEP
        return Point(self.x, self.y)


def walk_boundary(width: int, height: int, rng: UniformRandomSource) -> Iterator[tuple]:
    """
    Run the random walk, yielding (point, heading_angle) after every move.

    This is the generator behind generate_boundary_points(). It also exposes
    the heading so the walk can be inspected, e.g. to confirm the heading
    never leaves -45..45 degrees.

    Args:
        width: Domain width in pixels. The walk stops once x >= width.
        height: Domain height in pixels. y is kept within [0, height].
        rng: Source of uniform integers.

    Yields:
        tuple: (Point, float) - the new cursor position and the heading in
               degrees used to reach it.
    """
    if width <= 0 or height <= 0:
        return

    cursor = _WalkCursor(height)
    while cursor.x < width:
        # 20% of the time the heading drifts a little
        if rng.next_int(0, 100) < PERTURB_PERCENT:
            cursor.turn(rng.next_int(-MAX_ANGLE_DELTA, MAX_ANGLE_DELTA))

        step = rng.next_int(MIN_STEP, MAX_STEP)
        point = cursor.advance(step, height)
        yield point, cursor.angle


def generate_boundary_points(width: int, height: int, rng: UniformRandomSource) -> Iterator[Point]:
    """
    Generate the ground-truth boundary as a lazy sequence of points.

    WHAT IT DOES:
    Walks a cursor from the middle of the left edge to the right edge and
    yields a Point after every move (see the module docstring for the walk).

    GUARANTEES:
    - every point has 0 <= y <= height
    - x never decreases from one point to the next (it grows by at least 5)
    - the sequence is finite; the last point has x >= width (it may lie past
      the right edge)
    - the only side effect is consuming values from rng

    EDGE CASE:
    width <= 0 or height <= 0 produces an empty sequence. Validate settings
    with visualizer_config.load_settings() first so that case is reported as
    a ConfigurationError instead.

    EXAMPLE:
        rng = SeededRandomSource(seed=1)
        points = tuple(generate_boundary_points(500, 300, rng))
        points[0]   # Point(x=6..9, y=...) near the middle of the left edge
        points[-1]  # x >= 500

    Args:
        width (int): Domain width in pixels.
        height (int): Domain height in pixels.
        rng (UniformRandomSource): Where random integers come from.

    Returns:
        Iterator[Point]: The boundary points, left to right. Single use.
    """
    return (point for point, _ in walk_boundary(width, height, rng))
