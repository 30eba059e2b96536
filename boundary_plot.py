"""
Boundary Plot - Rendering Crosses and Training Progress with Matplotlib

WHAT THIS MODULE DOES:
Turns the numbers produced by a BoundarySession into pictures:
- the ground-truth boundary as lime crosses
- the model's current line as red crosses
- the loss curve over all epochs

HOW THE FRAME LOOKS:
The axes use pixel coordinates with the origin in the top-left corner
(y grows downwards), on a black background, exactly the size of the domain.
Predicted points outside the domain are clipped by matplotlib when drawn;
they are never moved or dropped before that.

Files are written with the non-interactive Agg backend, so this works on a
server or in CI without a display.
"""

import logging
import os
from typing import Iterable, Sequence

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.collections import LineCollection  # noqa: E402

from boundary_points import Point  # noqa: E402
from boundary_session import SessionSnapshot  # noqa: E402

logger = logging.getLogger(__name__)

BOUNDARY_COLOR = "lime"
PREDICTION_COLOR = "red"
BACKGROUND_COLOR = "black"
CROSS_HALF_SIZE = 2  # each arm of the "x" reaches 2 px from the centre


def cross_segments(points: Iterable[Point], half_size: int = CROSS_HALF_SIZE) -> list:
    """
    Two diagonal line segments per point, forming an "x".

    EXAMPLE:
        cross_segments([Point(10, 20)])
        # [((8, 18), (12, 22)), ((8, 22), (12, 18))]
    """
    segments = []
    for x, y in points:
        segments.append(((x - half_size, y - half_size), (x + half_size, y + half_size)))
        segments.append(((x - half_size, y + half_size), (x + half_size, y - half_size)))
    return segments


def draw_crosses(ax, points: Iterable[Point], color: str) -> LineCollection:
    """Add one "x" per point to the axes as a single LineCollection."""
    collection = LineCollection(cross_segments(points), colors=color, linewidths=1)
    ax.add_collection(collection)
    return collection


def render_frame(boundary: Sequence[Point], snapshot: SessionSnapshot, width: int, height: int):
    """
    Draw one animation frame: boundary, predicted line and epoch counter.

    Args:
        boundary: Ground-truth points (lime).
        snapshot: Session state whose predicted points are drawn (red).
        width: Domain width in pixels.
        height: Domain height in pixels.

    Returns:
        matplotlib.figure.Figure: The frame. Close it with plt.close() when
                                  done.
    """
    fig, ax = plt.subplots(figsize=(width / 100, height / 100), dpi=100)
    fig.patch.set_facecolor(BACKGROUND_COLOR)
    ax.set_facecolor(BACKGROUND_COLOR)

    draw_crosses(ax, boundary, BOUNDARY_COLOR)
    draw_crosses(ax, snapshot.predicted_points, PREDICTION_COLOR)

    # Pixel space: origin top-left, y grows downwards
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)
    ax.set_xticks([])
    ax.set_yticks([])
    ax.set_title(f"Epoch {snapshot.epoch}", color="white", fontsize=10)
    return fig


def progress_image_name(epoch: int) -> str:
    return f"linear-regression-epoch-{epoch}.png"


def save_progress_image(boundary: Sequence[Point], snapshot: SessionSnapshot,
                        width: int, height: int, output_dir: str) -> str:
    """
    Save the frame for this snapshot as a PNG.

    The file is named linear-regression-epoch-{epoch}.png, so saving every
    epoch produces a sequence of frames that can be stitched into an
    animation.

    Args:
        boundary: Ground-truth points.
        snapshot: State to draw.
        width: Domain width in pixels.
        height: Domain height in pixels.
        output_dir: Directory to write into. Created if missing.

    Returns:
        str: Path of the written file.
    """
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, progress_image_name(snapshot.epoch))
    fig = render_frame(boundary, snapshot, width, height)
    try:
        fig.savefig(path, facecolor=fig.get_facecolor())
    finally:
        plt.close(fig)
    logger.debug(f"Saved frame for epoch {snapshot.epoch} to {path}")
    return path


def save_loss_curve(losses: Sequence[float], path: str) -> str:
    """
    Plot mean squared error per epoch and save it.

    WHAT TO EXPECT:
    - Loss starts high (the line begins flat along the top edge, y = 0)
    - Loss drops quickly for the first few dozen epochs
    - Loss levels off once the line is as close to the boundary as a straight
      line can get (the boundary wiggles, so it never reaches zero)

    Args:
        losses: One value per epoch, in order.
        path: Output PNG path.

    Returns:
        str: The path written.
    """
    fig = plt.figure(figsize=(10, 5))
    try:
        plt.plot(range(1, len(losses) + 1), losses)
        plt.xlabel('Epoch', fontsize=12)
        plt.ylabel('Mean Squared Error', fontsize=12)
        plt.title('Training Progress: Loss Over Time', fontsize=14, fontweight='bold')
        plt.grid(True, alpha=0.3)

        if losses:
            plt.text(0.7, 0.9, f'Final Loss: {losses[-1]:.4f}',
                     transform=plt.gca().transAxes,
                     bbox=dict(boxstyle='round', facecolor='wheat', alpha=0.5),
                     fontsize=10)

        plt.tight_layout()
        plt.savefig(path, dpi=150, bbox_inches='tight')
    finally:
        plt.close(fig)
    logger.info(f"Saved training progress plot to '{path}'")
    return path
