"""Vector shapes rasterized to coverage masks for compositing."""

import logging
from typing import Sequence, Tuple

import aggdraw  # type: ignore[import-not-found]
import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


def draw_polygon(size: Tuple[int, int], points: Sequence[Point]) -> np.ndarray:
    """
    Draw a filled polygon.

    Returns an anti-aliased coverage mask of shape ``(height, width, 1)`` in
    [0, 1].
    """
    if len(points) < 3:
        logger.warning("not enough points: %d" % len(points))
        return _empty(size)
    return _draw(size, lambda draw: draw.polygon(_flatten(points), None, _brush()))


def draw_line(
    size: Tuple[int, int], start: Point, end: Point, width: float = 1.0
) -> np.ndarray:
    """Draw a straight stroke of `width` pixels."""
    pen = aggdraw.Pen(255, width)
    return _draw(size, lambda draw: draw.line(_flatten([start, end]), pen))


def draw_ellipse(
    size: Tuple[int, int], bbox: Tuple[float, float, float, float]
) -> np.ndarray:
    """Draw a filled ellipse inscribed in ``(left, top, right, bottom)``."""
    return _draw(size, lambda draw: draw.ellipse(tuple(bbox), None, _brush()))


def draw_rectangle(
    size: Tuple[int, int], bbox: Tuple[float, float, float, float]
) -> np.ndarray:
    """
    Draw an axis-aligned rectangle with pixel-exact edges.

    Coordinates are rounded to the pixel grid, so interior and edge pixels
    are fully covered.
    """
    width, height = size
    left, top, right, bottom = (int(round(v)) for v in bbox)
    mask = _empty(size)
    left, right = max(0, left), min(width, right)
    top, bottom = max(0, top), min(height, bottom)
    if left < right and top < bottom:
        mask[top:bottom, left:right] = 1.0
    return mask


def _brush():
    return aggdraw.Brush(255)


def _flatten(points: Sequence[Point]) -> Tuple[float, ...]:
    return tuple(float(v) for point in points for v in point)


def _empty(size: Tuple[int, int]) -> np.ndarray:
    width, height = size
    return np.zeros((height, width, 1), dtype=np.float32)


def _draw(size, paint) -> np.ndarray:
    """Rasterize with aggdraw onto a blank 8-bit mask."""
    mask = Image.new("L", size, 0)
    draw = aggdraw.Draw(mask)
    paint(draw)
    draw.flush()
    del draw
    return np.expand_dims(np.array(mask).astype(np.float32) / 255.0, 2)
