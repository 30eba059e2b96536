"""
Visualizer Configuration - Defaults, Validation and Configuration Errors

WHAT THIS MODULE DOES:
Holds every tunable number of the boundary visualizer in one place and
validates user-supplied overrides before any points are generated or any
training happens.

HOW IT WORKS:
1. Module-level constants document the defaults (domain size, learning rate,
   prediction stride) and the shape of the random walk
2. VisualizerSettings is a pydantic model that checks every value is positive
3. load_settings() builds the model and turns validation failures into a
   ConfigurationError, so callers only have one error type to handle

WHY FAIL FAST?
A zero width would make the generator produce nothing and the normalization
divide by zero. Catching it here means the problem is reported at startup
instead of surfacing as an empty plot or a NaN weight fifty epochs later.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class ConfigurationError(ValueError):
    """Raised when a dimension, stride, learning rate or run length is not positive."""


# ============================================================================
# DOMAIN DEFAULTS
# ============================================================================
# The domain is a pixel grid: x runs left to right from 0 to DEFAULT_WIDTH,
# y runs top to bottom from 0 to DEFAULT_HEIGHT.

DEFAULT_WIDTH = 500
DEFAULT_HEIGHT = 300

# DEFAULT_LEARNING_RATE: How far each sample moves the weight and bias
#
# EXAMPLE:
#   output = 0.0, target = 1.0, x = 1.0
#   bias   += 1.0 * 1.0 * 0.01      -> 0.01
#   weight += 1.0 * 1.0 * 1.0 * 0.01 -> 0.01
DEFAULT_LEARNING_RATE = 0.01

# DEFAULT_STRIDE: Horizontal distance (pixels) between predicted points.
# Independent of how many boundary points were generated.
DEFAULT_STRIDE = 6

# MAX_EPOCHS_PER_STEP: Most epochs one HTTP /step call may train, so a single
# request cannot hold the session lock for minutes.
MAX_EPOCHS_PER_STEP = 10000

# ============================================================================
# RANDOM WALK SHAPE
# ============================================================================
# The boundary is drawn by a cursor that walks left to right. Every step it
# may turn a little, then moves forward and up/down according to its heading.
#
# PERTURB_PERCENT: chance (out of 100) that the heading turns on a given step
# MAX_ANGLE_DELTA: the turn is drawn from [-MAX_ANGLE_DELTA, MAX_ANGLE_DELTA)
# MAX_HEADING_ANGLE: the heading is clamped to [-45, 45] degrees
# MIN_STEP / MAX_STEP: step length is drawn from [MIN_STEP, MAX_STEP)
# VERTICAL_GAIN: vertical movement is exaggerated 8x so the boundary wanders
# FORWARD_STEP: added to every horizontal move so x always advances

PERTURB_PERCENT = 20
MAX_ANGLE_DELTA = 15
MAX_HEADING_ANGLE = 45
MIN_STEP = 1
MAX_STEP = 5
VERTICAL_GAIN = 8
FORWARD_STEP = 5


class VisualizerSettings(BaseModel):
    """Validated settings for one visualizer session."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    width: int = Field(default=DEFAULT_WIDTH, gt=0)
    height: int = Field(default=DEFAULT_HEIGHT, gt=0)
    learning_rate: float = Field(default=DEFAULT_LEARNING_RATE, gt=0)
    stride: int = Field(default=DEFAULT_STRIDE, gt=0)
    seed: Optional[int] = Field(default=None, ge=0)  # None = cryptographically strong random source


def load_settings(**overrides) -> VisualizerSettings:
    """
    Build VisualizerSettings from keyword overrides.

    Overrides set to None fall back to the defaults, so optional CLI flags
    and API request fields can be passed through as they are.

    EXAMPLE:
        settings = load_settings(width=800, seed=42)
        settings.height  # 300 (default)

        load_settings(width=0)  # raises ConfigurationError

    Args:
        **overrides: Any of width, height, learning_rate, stride, seed.

    Returns:
        VisualizerSettings: The validated, immutable settings.

    Raises:
        ConfigurationError: If any value is not positive, is unknown, or
                            has the wrong type.
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    try:
        return VisualizerSettings(**values)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        )
        raise ConfigurationError(f"Invalid visualizer settings: {problems}") from e
