"""
Prediction Sampler - Drawing the Model's Current Line

Evaluates the model at evenly spaced x positions across the domain and
converts the result back to pixels, so the learned line can be drawn on top
of the boundary it is trying to match.
"""

import math
from typing import Tuple

from boundary_points import Point
from regression_trainer import ModelState
from visualizer_config import ConfigurationError, DEFAULT_STRIDE


class ModelDivergedError(ArithmeticError):
    """Raised when the model's line is infinite or NaN and has no pixel position."""


def sample_predictions(state: ModelState, width: int, height: int,
                       stride: int = DEFAULT_STRIDE) -> Tuple[Point, ...]:
    """
    Sample the learned line every `stride` pixels from x = 0 to width - 1.

    HOW IT WORKS:
    For each x in 0, stride, 2·stride, ... below width:
        output = weight × x / width + bias      (x normalized like training)
        point  = (x, round(output × height))    (back to pixels)

    The y values are NOT clamped. Early in training, or whenever the line is
    steep, points fall above or below the domain; those values are kept so
    the renderer can decide how to clip them. Only a line that has run off
    to inf or nan is rejected, since it has no integer pixel at all.

    EXAMPLE (width=100, height=100, stride=50, weight=0.5, bias=0.1):
        x = 0  -> output 0.10 -> Point(0, 10)
        x = 50 -> output 0.35 -> Point(50, 35)

    Args:
        state (ModelState): Model to evaluate. Not modified.
        width (int): Domain width in pixels.
        height (int): Domain height in pixels.
        stride (int): Pixels between samples. Default 6.

    Returns:
        tuple: Predicted Points, left to right. The count depends only on
               width and stride, never on the training data.

    Raises:
        ConfigurationError: If stride is not positive.
        ZeroDivisionError: If width is 0.
        ModelDivergedError: If any sampled y is infinite or NaN.
    """
    if stride <= 0:
        raise ConfigurationError(f"stride must be positive, got {stride}")
    if width == 0:
        raise ZeroDivisionError("Cannot sample predictions across a zero-width domain")

    points = []
    for x in range(0, width, stride):
        output = state.weight * x / width + state.bias
        y = output * height
        if not math.isfinite(y):
            raise ModelDivergedError(
                f"Model diverged at epoch {state.epoch} "
                f"(weight={state.weight}, bias={state.bias}); start a new session"
            )
        points.append(Point(x, round(y)))
    return tuple(points)
