"""Tests for the epoch-by-epoch update rule."""
import math
import unittest

from regression_trainer import ModelState, RegressionTrainer, mean_squared_error
from training_set import TrainingSample
from visualizer_config import ConfigurationError


def linear_samples(slope=0.5, intercept=0.1, count=100):
    """count evenly spaced samples of y = slope * x + intercept over [0, 1]."""
    return [TrainingSample(i / (count - 1), slope * (i / (count - 1)) + intercept)
            for i in range(count)]


class TestRegressionTrainer(unittest.TestCase):
    def setUp(self):
        self.trainer = RegressionTrainer(learning_rate=0.01)

    def test_initialize(self):
        self.assertEqual(RegressionTrainer.initialize(), ModelState(0.0, 0.0, 0))

    def test_zero_sample_leaves_parameters_untouched(self):
        # output = 0, error = 0, scale = 1: nothing moves
        state = self.trainer.initialize()
        self.trainer.step(state, [TrainingSample(0.0, 0.0)])
        self.assertEqual(state.weight, 0.0)
        self.assertEqual(state.bias, 0.0)
        self.assertEqual(state.epoch, 1)

    def test_single_sample_update(self):
        # output = 0, error = -1, scale = 1
        state = self.trainer.initialize()
        returned = self.trainer.step(state, [TrainingSample(1.0, 1.0)])
        self.assertIs(returned, state)
        self.assertEqual(state.bias, 0.01)
        self.assertEqual(state.weight, 0.01)
        self.assertEqual(state.epoch, 1)

    def test_scale_is_one_minus_output_squared(self):
        # output = 2 -> scale = -3, so the update pushes bias further from the target
        state = ModelState(weight=0.0, bias=2.0)
        self.trainer.step(state, [TrainingSample(0.0, 0.0)])
        self.assertEqual(state.bias, 2.0 - 2.0 * -3.0 * 0.01)
        self.assertGreater(state.bias, 2.0)
        self.assertEqual(state.weight, 0.0)

    def test_both_updates_use_the_same_output(self):
        state = ModelState(weight=0.2, bias=0.3)
        self.trainer.step(state, [TrainingSample(0.5, 0.9)])

        output = 0.2 * 0.5 + 0.3
        error = output - 0.9
        scale = 1 - output ** 2
        self.assertEqual(state.bias, 0.3 - error * scale * 0.01)
        self.assertEqual(state.weight, 0.2 - error * scale * 0.5 * 0.01)

    def test_samples_are_applied_in_order(self):
        a = TrainingSample(1.0, 1.0)
        b = TrainingSample(0.0, 0.0)

        forward = self.trainer.step(self.trainer.initialize(), [a, b])
        backward = self.trainer.step(self.trainer.initialize(), [b, a])

        self.assertEqual(backward.bias, 0.01)
        self.assertLess(forward.bias, 0.01)
        self.assertNotEqual(forward, backward)

    def test_step_is_deterministic(self):
        samples = linear_samples(0.3, 0.4, count=37)
        first = self.trainer.initialize()
        second = self.trainer.initialize()
        for _ in range(25):
            self.trainer.step(first, samples)
            self.trainer.step(second, samples)
        self.assertEqual(first, second)
        self.assertEqual(first.weight, second.weight)
        self.assertEqual(first.bias, second.bias)

    def test_epoch_increments_by_one_for_any_sample_count(self):
        state = self.trainer.initialize()
        for expected_epoch, samples in enumerate([[], linear_samples(count=2), linear_samples()], start=1):
            self.trainer.step(state, samples)
            self.assertEqual(state.epoch, expected_epoch)

    def test_empty_samples_only_increment_epoch(self):
        state = ModelState(weight=0.7, bias=-0.2, epoch=41)
        self.trainer.step(state, [])
        self.assertEqual(state, ModelState(0.7, -0.2, 42))

    def test_learning_rate_override(self):
        state = self.trainer.initialize()
        self.trainer.step(state, [TrainingSample(1.0, 1.0)], learning_rate=0.5)
        self.assertEqual(state.bias, 0.5)
        self.assertEqual(state.weight, 0.5)

    def test_non_positive_learning_rate_is_rejected(self):
        for bad in (0, -0.01):
            with self.assertRaises(ConfigurationError):
                RegressionTrainer(learning_rate=bad)
            with self.assertRaises(ConfigurationError):
                self.trainer.step(self.trainer.initialize(), [], learning_rate=bad)

    def test_huge_output_overflows_to_inf_without_raising(self):
        # output * output overflows to inf, which float multiplication allows
        state = ModelState(0.0, 1e200)
        self.trainer.step(state, [TrainingSample(0.5, 0.5)] * 2)
        self.assertEqual(state.epoch, 1)
        self.assertFalse(math.isfinite(state.bias))
        self.assertFalse(math.isfinite(state.weight))

    def test_converges_toward_linear_target(self):
        samples = linear_samples(0.5, 0.1, count=100)
        state = self.trainer.initialize()

        losses = []
        for _ in range(500):
            self.trainer.step(state, samples)
            losses.append(mean_squared_error(state, samples))

        window_means = [sum(losses[i:i + 50]) / 50 for i in range(0, 500, 50)]
        for earlier, later in zip(window_means, window_means[1:]):
            self.assertLess(later, earlier)

        self.assertAlmostEqual(state.weight, 0.5, places=3)
        self.assertAlmostEqual(state.bias, 0.1, places=3)
        self.assertEqual(state.epoch, 500)


class TestModelState(unittest.TestCase):
    def test_copy_is_independent(self):
        state = ModelState(0.1, 0.2, 3)
        copy = state.copy()
        copy.weight = 9.0
        self.assertEqual(state.weight, 0.1)
        self.assertEqual(copy.epoch, 3)


class TestMeanSquaredError(unittest.TestCase):
    def test_empty_samples(self):
        self.assertEqual(mean_squared_error(ModelState(), []), 0.0)

    def test_average_of_squared_errors(self):
        samples = [TrainingSample(0.0, 1.0), TrainingSample(1.0, 0.0)]
        # predictions 0.5 and 1.5 -> errors -0.5 and 1.5 -> (0.25 + 2.25) / 2
        self.assertEqual(mean_squared_error(ModelState(1.0, 0.5), samples), 1.25)

    def test_overflowing_error_gives_inf(self):
        loss = mean_squared_error(ModelState(0.0, 1e200), [TrainingSample(0.5, 0.5)])
        self.assertEqual(loss, math.inf)

    def test_does_not_modify_state(self):
        state = ModelState(0.3, 0.1, 7)
        mean_squared_error(state, linear_samples())
        self.assertEqual(state, ModelState(0.3, 0.1, 7))


if __name__ == "__main__":
    unittest.main()
