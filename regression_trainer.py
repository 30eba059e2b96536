"""
Regression Trainer - Fitting y = a·x + c One Epoch at a Time

WHAT THIS MODULE DOES:
Holds the two numbers the model learns (the weight "a" and the bias "c") and
applies one full pass of gradient descent over the training samples every
time step() is called. The caller decides how many epochs to run, so the
line can be drawn after every epoch to watch it converge.

THE MODEL:
    output = weight × x + bias

There is no activation function, no hidden layer and only one input. It is
the smallest possible "neuron".

THE UPDATE RULE (applied to every sample, in order):
    output  = weight × x + bias
    error   = output - target
    scale   = 1 - output²
    bias   -= error × scale × learning_rate
    weight -= error × scale × x × learning_rate

WHAT IS scale?
1 - output² is the derivative of tanh, the usual saturating activation.
Here it multiplies the gradient even though output never goes through tanh.
The rule is kept exactly as it is: the boundary animation is defined by this
behaviour, so it is reproduced rather than turned into textbook linear
regression. In practice it damps updates when output is near ±1 and flips
their direction when |output| > 1.

SEQUENTIAL, NOT BATCH:
Each sample updates weight and bias before the next sample is looked at, so
sample order changes the result. This is stochastic gradient descent with a
fixed order, not an average over the batch.

EXAMPLE - One epoch with a single sample (x=1.0, target=1.0):
    weight = 0, bias = 0, learning_rate = 0.01
    output = 0 × 1.0 + 0         = 0.0
    error  = 0.0 - 1.0           = -1.0
    scale  = 1 - 0.0²            = 1.0
    bias   = 0 - (-1.0 × 1.0 × 0.01)       = 0.01
    weight = 0 - (-1.0 × 1.0 × 1.0 × 0.01) = 0.01
    epoch  = 1
"""

import logging
from typing import Optional, Sequence

from training_set import TrainingSample
from visualizer_config import ConfigurationError, DEFAULT_LEARNING_RATE

logger = logging.getLogger(__name__)


class ModelState:
    """
    The learned parameters plus how many epochs produced them.

    Attributes:
        weight (float): "a" in y = a·x + c.
        bias (float): "c" in y = a·x + c.
        epoch (int): Completed training passes. Only ever grows, by 1 per step.
    """

    def __init__(self, weight: float = 0.0, bias: float = 0.0, epoch: int = 0):
        self.weight = weight
        self.bias = bias
        self.epoch = epoch

    def copy(self) -> "ModelState":
        return ModelState(self.weight, self.bias, self.epoch)

    def __eq__(self, other):
        if not isinstance(other, ModelState):
            return NotImplemented
        return (self.weight, self.bias, self.epoch) == (other.weight, other.bias, other.epoch)

    def __repr__(self):
        return f"ModelState(weight={self.weight!r}, bias={self.bias!r}, epoch={self.epoch})"


class RegressionTrainer:
    """
    Applies the update rule to a ModelState, one epoch per step() call.

    The trainer itself only remembers the learning rate. The state it trains
    is passed in, so the same trainer can drive several independent models,
    and a state can be copied before a step to compare results.

    EXAMPLE:
        trainer = RegressionTrainer(learning_rate=0.01)
        state = trainer.initialize()
        for _ in range(100):
            trainer.step(state, samples)
        state.epoch  # 100

    Attributes:
        learning_rate (float): Default step size for step(). Must be > 0.
    """

    def __init__(self, learning_rate: float = DEFAULT_LEARNING_RATE):
        if not learning_rate > 0:
            raise ConfigurationError(f"learning_rate must be positive, got {learning_rate}")
        self.learning_rate = learning_rate

    @staticmethod
    def initialize() -> ModelState:
        """Fresh model: weight 0, bias 0, no epochs yet."""
        return ModelState(weight=0.0, bias=0.0, epoch=0)

    @staticmethod
    def predict(state: ModelState, x: float) -> float:
        """
        Evaluate the line at a normalized x.

        Args:
            state: Model to evaluate.
            x: Input in [0, 1] (values outside the range are evaluated too).

        Returns:
            float: weight × x + bias, unbounded.
        """
        return state.weight * x + state.bias

    def train_sample(self, state: ModelState, sample: TrainingSample, learning_rate: float) -> float:
        """
        Update weight and bias from one sample.

        HOW IT WORKS:
        1. Predict with the current parameters
        2. error = prediction - target
        3. scale = 1 - prediction²
        4. Move bias, then weight, against the error. Both moves use the
           prediction from step 1, so the order of the two updates does not
           change the result.

        Args:
            state: Model to update in place.
            sample: (x, target) pair.
            learning_rate: Step size for this update.

        Returns:
            float: Squared error of the prediction made before the update.
        """
        output = self.predict(state, sample.x)
        error = output - sample.y
        scale = 1 - output * output

        state.bias -= error * scale * learning_rate
        state.weight -= error * scale * sample.x * learning_rate

        return error * error

    def step(self, state: ModelState, samples: Sequence[TrainingSample],
             learning_rate: Optional[float] = None) -> ModelState:
        """
        Run one epoch: every sample once, in order, then epoch += 1.

        WHAT IT DOES:
        This is the "learning" part, called once per tick by whoever drives
        the animation. After it returns, state reflects exactly one more full
        pass over the samples.

        EDGE CASES:
        - No samples: weight and bias are untouched, epoch still increments
        - Same state + same samples + same learning rate: bit-identical result
          (nothing random happens here)
        - Diverging model (learning rate too large, or a huge starting bias):
          squares are plain float products, so weight and bias run to inf or
          nan instead of raising, and the epoch still increments

        Args:
            state (ModelState): Model to train. Modified in place.
            samples (Sequence[TrainingSample]): Training data, in the order it
                                                should be applied.
            learning_rate (float, optional): Overrides the trainer's rate for
                                             this epoch. Must be > 0.

        Returns:
            ModelState: The same state object, for chaining.

        Raises:
            ConfigurationError: If an override learning rate is not positive.
        """
        if learning_rate is None:
            learning_rate = self.learning_rate
        elif not learning_rate > 0:
            raise ConfigurationError(f"learning_rate must be positive, got {learning_rate}")

        epoch_loss = 0.0
        for sample in samples:
            epoch_loss += self.train_sample(state, sample, learning_rate)

        state.epoch += 1

        if samples:
            logger.debug(
                f"Epoch {state.epoch}: weight={state.weight:.6f} bias={state.bias:.6f} "
                f"loss={epoch_loss / len(samples):.6f}"
            )
        return state


def mean_squared_error(state: ModelState, samples: Sequence[TrainingSample]) -> float:
    """
    Average squared distance between the line and the targets.

    Used to track progress (a falling value means the line is getting closer
    to the boundary). It plays no part in the update rule.

    Args:
        state: Model to evaluate.
        samples: Samples to measure against.

    Returns:
        float: Mean of (prediction - target)², or 0.0 when there are no samples.
    """
    if not samples:
        return 0.0
    total = 0.0
    for sample in samples:
        error = RegressionTrainer.predict(state, sample.x) - sample.y
        total += error * error
    return total / len(samples)
