"""
Boundary Visualizer CLI
Run this script to train the linear unit against a random boundary and save
the frames and the loss curve.

Run examples:
  # 500 epochs on a fresh (secure random) boundary
  python run_visualizer.py

  # Repeatable boundary, save a frame every 25 epochs into frames/
  python run_visualizer.py --seed 42 --save-every 25 --output-dir frames
"""
import argparse
import logging
import os
import sys

from boundary_plot import save_loss_curve, save_progress_image
from boundary_session import BoundarySession
from prediction_sampler import ModelDivergedError
from visualizer_config import ConfigurationError, load_settings

logger = logging.getLogger(__name__)


def build_parser():
    """Command-line options. Anything left unset falls back to the settings defaults."""
    ap = argparse.ArgumentParser(description="Watch y = a*x + c converge toward a noisy boundary.")
    ap.add_argument("--width", type=int, help="domain width in pixels (default 500)")
    ap.add_argument("--height", type=int, help="domain height in pixels (default 300)")
    ap.add_argument("--learning-rate", type=float, help="gradient step size (default 0.01)")
    ap.add_argument("--stride", type=int, help="pixels between predicted points (default 6)")
    ap.add_argument("--seed", type=int, help="seed for a repeatable boundary")
    ap.add_argument("--epochs", type=int, default=500, help="number of ticks to run")
    ap.add_argument("--save-every", type=int, default=0,
                    help="save a frame every N epochs (0 = final frame only)")
    ap.add_argument("--log-every", type=int, default=50, help="log progress every N epochs")
    ap.add_argument("--output-dir", default=".", help="where frames and plots are written")
    ap.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return ap


def check_run_options(args) -> None:
    if args.epochs < 0:
        raise ConfigurationError(f"--epochs must not be negative, got {args.epochs}")
    if args.save_every < 0:
        raise ConfigurationError(f"--save-every must not be negative, got {args.save_every}")
    if args.log_every <= 0:
        raise ConfigurationError(f"--log-every must be positive, got {args.log_every}")


def main(argv=None) -> int:
    """
    Run the visualizer from the command line.

    HOW IT WORKS:
    1. Parse and validate options (bad values exit with status 2)
    2. Create a session: boundary generated, training set built
    3. Optionally register a hook that saves a frame every N epochs
    4. Tick `--epochs` times, logging the loss every `--log-every` epochs
    5. Save the final frame and training_progress.png

    Returns:
        int: 0 on success, 1 if training diverged (the frames and loss curve
             up to the last good epoch are still saved), 2 on a
             configuration error.
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    try:
        check_run_options(args)
        settings = load_settings(
            width=args.width,
            height=args.height,
            learning_rate=args.learning_rate,
            stride=args.stride,
            seed=args.seed,
        )
    except ConfigurationError as e:
        logger.error(str(e))
        return 2

    session = BoundarySession(settings)

    if args.save_every:
        def save_frame(snapshot):
            if snapshot.epoch % args.save_every == 0:
                save_progress_image(session.boundary_points, snapshot,
                                    settings.width, settings.height, args.output_dir)
        session.add_step_hook(save_frame)

    losses = []
    diverged = False
    snapshot = session.snapshot()
    for _ in range(args.epochs):
        try:
            snapshot = session.tick()
        except ModelDivergedError as e:
            logger.error(f"Stopping early: {e}")
            diverged = True
            break
        losses.append(snapshot.loss)
        if snapshot.epoch % args.log_every == 0:
            logger.info(
                f"Epoch {snapshot.epoch}: Loss = {snapshot.loss:.6f} "
                f"(weight={snapshot.weight:.4f}, bias={snapshot.bias:.4f})"
            )

    final_frame = save_progress_image(session.boundary_points, snapshot,
                                      settings.width, settings.height, args.output_dir)
    logger.info(f"Final frame saved to '{final_frame}'")
    save_loss_curve(losses, os.path.join(args.output_dir, "training_progress.png"))

    logger.info(
        f"Done after {snapshot.epoch} epochs: y = {snapshot.weight:.4f}·x + {snapshot.bias:.4f}"
    )
    return 1 if diverged else 0


if __name__ == "__main__":
    sys.exit(main())
