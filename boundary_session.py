"""
Boundary Session - Driving the Learning Loop One Tick at a Time

WHAT THIS MODULE DOES:
Wires the four pieces together into the loop the visualizer runs:

    generate boundary (once) -> build training set (once)
        -> tick: train one epoch -> sample predicted line -> notify hooks
        -> tick: ...

HOW IT IS DRIVEN:
The session never schedules itself. Something outside (the CLI runner, the
HTTP API, a GUI timer) calls tick() whenever it wants the next epoch. Pausing
just means tick() stops training until resume() is called, the same thing a
[P] pause key does in a GUI.

WHAT COMES OUT:
- boundary_points: the ground truth, a tuple that never changes
- tick() / snapshot(): a SessionSnapshot with a copy of the model numbers and
  the predicted line. Snapshots are immutable, so a renderer can hold on to
  one while the session keeps training.
"""

import logging
from typing import Callable, List, NamedTuple, Optional, Tuple

from boundary_points import (
    Point,
    SecureRandomSource,
    SeededRandomSource,
    UniformRandomSource,
    generate_boundary_points,
)
from prediction_sampler import sample_predictions
from regression_trainer import RegressionTrainer, mean_squared_error
from training_set import build_training_set
from visualizer_config import ConfigurationError, VisualizerSettings, load_settings

logger = logging.getLogger(__name__)


class SessionSnapshot(NamedTuple):
    """Read-only view of the model after a tick."""

    epoch: int
    weight: float
    bias: float
    loss: float
    predicted_points: Tuple[Point, ...]


StepHook = Callable[[SessionSnapshot], None]


class BoundarySession:
    """
    One boundary, one model, trained a single epoch per tick().

    EXAMPLE:
        session = BoundarySession(load_settings(seed=42))
        len(session.boundary_points)  # roughly 65 points for a 500px wide domain
        snapshot = session.tick()
        snapshot.epoch                # 1
        snapshot.predicted_points     # 84 points (500 / 6, rounded up)

    Attributes:
        settings (VisualizerSettings): Validated domain size, learning rate,
                                       stride and seed.
        boundary_points (tuple): Ground-truth points, generated once.
        samples (tuple): Normalized training samples, one per boundary point.
        trainer (RegressionTrainer): Applies the update rule.
        state (ModelState): The model being trained. Only tick() changes it.
    """

    def __init__(self, settings: Optional[VisualizerSettings] = None,
                 rng: Optional[UniformRandomSource] = None):
        if settings is None:
            settings = load_settings()
        if rng is None:
            rng = SeededRandomSource(settings.seed) if settings.seed is not None else SecureRandomSource()

        self.settings = settings
        self.boundary_points = tuple(generate_boundary_points(settings.width, settings.height, rng))
        self.samples = build_training_set(self.boundary_points, settings.width, settings.height)
        self.trainer = RegressionTrainer(settings.learning_rate)
        self.state = self.trainer.initialize()
        self._paused = False
        self._hooks: List[StepHook] = []
        self._predicted = sample_predictions(self.state, settings.width, settings.height, settings.stride)

        logger.info(
            f"Session created: {settings.width}x{settings.height}, "
            f"{len(self.boundary_points)} boundary points, "
            f"learning_rate={settings.learning_rate}, stride={settings.stride}"
        )

    # ------------------------------------------------------------------
    # Pause / resume
    # ------------------------------------------------------------------

    @property
    def paused(self) -> bool:
        return self._paused

    def pause(self) -> None:
        self._paused = True
        logger.info(f"Paused at epoch {self.state.epoch}")

    def resume(self) -> None:
        self._paused = False
        logger.info(f"Resumed at epoch {self.state.epoch}")

    def toggle_pause(self) -> bool:
        """Flip between paused and running. Returns the new paused flag."""
        if self._paused:
            self.resume()
        else:
            self.pause()
        return self._paused

    # ------------------------------------------------------------------
    # Training loop
    # ------------------------------------------------------------------

    def add_step_hook(self, hook: StepHook) -> None:
        """
        Register a callback run after every completed epoch.

        Hooks receive the fresh SessionSnapshot. They are the place to save
        an image of each frame; the session itself never touches files.
        """
        self._hooks.append(hook)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            epoch=self.state.epoch,
            weight=self.state.weight,
            bias=self.state.bias,
            loss=mean_squared_error(self.state, self.samples),
            predicted_points=self._predicted,
        )

    def tick(self) -> SessionSnapshot:
        """
        Advance the animation by one epoch.

        HOW IT WORKS:
        1. If paused, return the current snapshot and do nothing else
        2. Train one epoch over every sample, on a copy of the model
        3. Sample the new predicted line from the copy
        4. Only then commit the copy, so a failed tick leaves the session
           exactly as it was
        5. Build a snapshot and hand it to every registered hook

        Returns:
            SessionSnapshot: State after this tick.

        Raises:
            ModelDivergedError: If the epoch drove the line to inf or nan. The
                                session keeps its last good state.
        """
        if self._paused:
            return self.snapshot()

        settings = self.settings
        trained = self.trainer.step(self.state.copy(), self.samples)
        predicted = sample_predictions(trained, settings.width, settings.height, settings.stride)

        self.state.weight = trained.weight
        self.state.bias = trained.bias
        self.state.epoch = trained.epoch
        self._predicted = predicted

        snapshot = self.snapshot()
        logger.debug(f"Tick -> epoch {snapshot.epoch}, loss {snapshot.loss:.6f}")
        for hook in self._hooks:
            hook(snapshot)
        return snapshot

    def run(self, epochs: int) -> List[SessionSnapshot]:
        """Tick `epochs` times and return every snapshot."""
        if epochs < 0:
            raise ConfigurationError(f"epochs must not be negative, got {epochs}")
        return [self.tick() for _ in range(epochs)]
