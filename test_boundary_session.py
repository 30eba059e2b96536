"""Tests for the tick-driven session that ties the learning loop together."""
import math
import unittest

from boundary_points import SeededRandomSource, generate_boundary_points
from boundary_session import BoundarySession
from prediction_sampler import ModelDivergedError
from regression_trainer import ModelState
from visualizer_config import ConfigurationError, load_settings


class TestBoundarySession(unittest.TestCase):
    def setUp(self):
        self.settings = load_settings(width=500, height=300, seed=42)
        self.session = BoundarySession(self.settings)

    def test_boundary_generated_once_from_seed(self):
        expected = tuple(generate_boundary_points(500, 300, SeededRandomSource(42)))
        self.assertEqual(self.session.boundary_points, expected)
        self.assertEqual(len(self.session.samples), len(expected))
        self.assertEqual(BoundarySession(self.settings).boundary_points, expected)

    def test_starts_untrained(self):
        snapshot = self.session.snapshot()
        self.assertEqual((snapshot.epoch, snapshot.weight, snapshot.bias), (0, 0.0, 0.0))
        self.assertEqual(len(snapshot.predicted_points), 84)

    def test_tick_trains_one_epoch(self):
        boundary = self.session.boundary_points
        first = self.session.tick()
        second = self.session.tick()
        self.assertEqual(first.epoch, 1)
        self.assertEqual(second.epoch, 2)
        self.assertEqual(self.session.state, ModelState(second.weight, second.bias, 2))
        self.assertIs(self.session.boundary_points, boundary)
        self.assertNotEqual(first.predicted_points, second.predicted_points)

    def test_snapshots_do_not_change_after_later_ticks(self):
        first = self.session.tick()
        weight, points = first.weight, first.predicted_points
        self.session.run(5)
        self.assertEqual(first.weight, weight)
        self.assertEqual(first.predicted_points, points)

    def test_paused_session_does_not_train(self):
        self.session.tick()
        self.session.pause()
        self.assertTrue(self.session.paused)
        snapshot = self.session.tick()
        self.assertEqual(snapshot.epoch, 1)

        self.assertFalse(self.session.toggle_pause())
        self.assertEqual(self.session.tick().epoch, 2)
        self.assertTrue(self.session.toggle_pause())

    def test_hooks_called_after_each_trained_epoch(self):
        seen = []
        self.session.add_step_hook(seen.append)
        self.session.run(3)
        self.session.pause()
        self.session.tick()
        self.assertEqual([snapshot.epoch for snapshot in seen], [1, 2, 3])

    def test_training_reduces_loss(self):
        initial = self.session.snapshot().loss
        snapshots = self.session.run(200)
        self.assertEqual(len(snapshots), 200)
        self.assertLess(snapshots[-1].loss, initial)
        self.assertLess(snapshots[-1].loss, snapshots[0].loss)

    def test_negative_epochs_rejected(self):
        with self.assertRaises(ConfigurationError):
            self.session.run(-1)
        self.assertEqual(self.session.run(0), [])

    def test_injected_random_source_wins_over_seed(self):
        session = BoundarySession(self.settings, rng=SeededRandomSource(7))
        expected = tuple(generate_boundary_points(500, 300, SeededRandomSource(7)))
        self.assertEqual(session.boundary_points, expected)

    def test_unseeded_session_uses_secure_source(self):
        session = BoundarySession(load_settings(width=120, height=80))
        self.assertTrue(session.boundary_points)
        self.assertGreaterEqual(session.boundary_points[-1].x, 120)

    def test_prediction_count_independent_of_sample_count(self):
        small = BoundarySession(load_settings(width=500, height=300, seed=1))
        large = BoundarySession(load_settings(width=500, height=3000, seed=2))
        self.assertEqual(len(small.tick().predicted_points), len(large.tick().predicted_points))


    def test_diverging_tick_keeps_last_good_state(self):
        session = BoundarySession(load_settings(width=500, height=300, learning_rate=50.0, seed=42))
        seen = []
        session.add_step_hook(seen.append)
        before = session.snapshot()
        with self.assertRaises(ModelDivergedError):
            session.run(50)
        self.assertEqual(session.snapshot(), before)
        self.assertEqual(session.state, ModelState(0.0, 0.0, 0))
        self.assertEqual(seen, [])

    def test_snapshot_of_overflowed_state_does_not_raise(self):
        self.session.state.bias = 1e200
        self.assertEqual(self.session.snapshot().loss, math.inf)

if __name__ == "__main__":
    unittest.main()
