"""
Training Set - Turning Pixel Points into Normalized Samples

Each boundary point (x, y) in pixels becomes a TrainingSample
(x / width, y / height), so both the model input and the target live in
[0, 1] no matter how big the domain is.

EXAMPLE (width=500, height=300):
    Point(0, 0)     -> TrainingSample(x=0.0, y=0.0)
    Point(250, 150) -> TrainingSample(x=0.5, y=0.5)
    Point(500, 300) -> TrainingSample(x=1.0, y=1.0)
"""

from typing import Iterable, NamedTuple, Tuple

from boundary_points import Point


class TrainingSample(NamedTuple):
    """One normalized training pair: x is the model input, y the target."""

    x: float
    y: float


def build_training_set(points: Iterable[Point], width: int, height: int) -> Tuple[TrainingSample, ...]:
    """
    Normalize points into training samples, one per point, same order.

    Args:
        points: Boundary points in pixel space.
        width: Domain width used to scale x.
        height: Domain height used to scale y.

    Returns:
        tuple: TrainingSample for every point.

    Raises:
        ZeroDivisionError: If width or height is 0. Settings should have been
                           rejected before this point; reaching it is a bug
                           in the caller.
    """
    if width == 0 or height == 0:
        raise ZeroDivisionError(
            f"Cannot normalize points against a {width}x{height} domain"
        )
    return tuple(TrainingSample(point.x / width, point.y / height) for point in points)
