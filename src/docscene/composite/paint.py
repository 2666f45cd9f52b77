"""Gradient definitions and gradient fills for compositing."""

import logging
from typing import Optional, Sequence, Tuple

import numpy as np
from attrs import define, field
from scipy import interpolate  # type: ignore[import-untyped]

from docscene.composite.utils import Color, ColorLike, parse_color
from docscene.constants import GradientKind

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


@define(frozen=True)
class GradientStop(object):
    """
    Gradient color stop.

    .. py:attribute:: offset

        Location in [0, 1].

    .. py:attribute:: color

        ``(r, g, b, a)`` tuple of 8-bit ints.
    """

    offset: float = field(converter=float)
    color: Color = field(converter=parse_color)

    @offset.validator
    def _check_offset(self, attribute, value):
        if not 0.0 <= value <= 1.0:
            raise ValueError("Stop offset must be in [0, 1]: %g" % value)


def _to_stops(values) -> tuple:
    return tuple(
        v if isinstance(v, GradientStop) else GradientStop(*v) for v in values
    )


@define(frozen=True)
class Gradient(object):
    """
    Ordered sequence of :py:class:`GradientStop`.

    Offsets must be strictly increasing. Colors, alpha included, are linearly
    interpolated between the two bracketing stops and held constant beyond
    the first and last stop.

    Example::

        gradient = Gradient([(0.0, "#FF000080"), (1.0, (0, 0, 255, 128))])
        colors = gradient.sample(np.linspace(0, 1, 5))
    """

    stops: Tuple[GradientStop, ...] = field(converter=_to_stops)

    @stops.validator
    def _check_stops(self, attribute, value):
        if len(value) == 0:
            raise ValueError("Gradient needs at least one stop")
        offsets = [stop.offset for stop in value]
        if any(b <= a for a, b in zip(offsets, offsets[1:])):
            raise ValueError("Stop offsets must be strictly increasing: %s" % offsets)

    def _interpolator(self):
        X = [stop.offset for stop in self.stops]
        Y = np.array([stop.color for stop in self.stops], dtype=np.float64)
        if len(X) == 1:
            X = [0.0, 1.0]
            Y = np.concatenate((Y, Y), axis=0)
        return interpolate.interp1d(
            X, Y, axis=0, bounds_error=False, fill_value=(Y[0], Y[-1])
        )

    def sample(self, index) -> np.ndarray:
        """
        Sample colors at `index` (scalar or array of offsets).

        Returns float64 values in [0, 255] with a trailing axis of 4 channels.
        """
        index = np.asarray(index, dtype=np.float64)
        colors = self._interpolator()(np.clip(index, 0.0, 1.0))
        # Snap the end points to the stop values exactly.
        colors[index <= self.stops[0].offset] = self.stops[0].color
        colors[index >= self.stops[-1].offset] = self.stops[-1].color
        return colors


def linear_index(width: int, height: int, start: Point, end: Point) -> np.ndarray:
    """
    Generates index map for linear gradients.

    Each pixel center is projected onto the ``start -> end`` vector and
    normalized so that `start` maps to 0 and `end` to 1, clamped at the ends.
    """
    X, Y = _pixel_grid(width, height)
    dx, dy = end[0] - start[0], end[1] - start[1]
    length2 = dx * dx + dy * dy
    if length2 == 0:
        logger.debug("Degenerate linear gradient at %s" % (start,))
        return np.zeros((height, width), dtype=np.float64)
    Z = ((X - start[0]) * dx + (Y - start[1]) * dy) / length2
    return np.clip(Z, 0.0, 1.0)


def radial_index(
    width: int,
    height: int,
    center: Point,
    radius: float,
    inner_radius: float = 0.0,
) -> np.ndarray:
    """
    Generates index map for radial gradients.

    The Euclidean distance from `center` is normalized by `radius`. With a
    non-zero `inner_radius` the ramp starts at the inner circle instead::

        Z = (distance - inner_radius) / (radius - inner_radius)
    """
    if radius <= inner_radius:
        raise ValueError("Outer radius must exceed inner radius")
    X, Y = _pixel_grid(width, height)
    distance = np.sqrt(np.power(X - center[0], 2) + np.power(Y - center[1], 2))
    Z = (distance - inner_radius) / (radius - inner_radius)
    return np.clip(Z, 0.0, 1.0)


def _pixel_grid(width: int, height: int):
    # Sample at pixel centers.
    return np.meshgrid(
        np.arange(width, dtype=np.float64) + 0.5,
        np.arange(height, dtype=np.float64) + 0.5,
    )


def draw_gradient_fill(
    size: Tuple[int, int],
    gradient: Gradient,
    kind: GradientKind = GradientKind.LINEAR,
    start: Optional[Point] = None,
    end: Optional[Point] = None,
    center: Optional[Point] = None,
    radius: Optional[float] = None,
    inner_radius: float = 0.0,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Create a gradient fill image.

    Returns ``(color, alpha)`` float32 arrays in [0, 1] with shapes
    ``(height, width, 3)`` and ``(height, width, 1)``.
    """
    width, height = size
    if kind == GradientKind.LINEAR:
        if start is None or end is None:
            raise ValueError("Linear gradients need start and end points")
        Z = linear_index(width, height, start, end)
    elif kind == GradientKind.RADIAL:
        if center is None or radius is None:
            raise ValueError("Radial gradients need center and radius")
        Z = radial_index(width, height, center, radius, inner_radius)
    else:
        raise ValueError("Unknown gradient kind: %r" % (kind,))

    colors = (gradient.sample(Z) / 255.0).astype(np.float32)
    return colors[:, :, :3], colors[:, :, 3:4]


def rainbow(alpha: float = 0.5) -> Gradient:
    """Red, yellow, green, cyan, blue, magenta at equal spacing."""
    hues: Sequence[ColorLike] = (
        (255, 0, 0),
        (255, 255, 0),
        (0, 255, 0),
        (0, 255, 255),
        (0, 0, 255),
        (255, 0, 255),
    )
    return Gradient(
        [
            GradientStop(i / 5.0, parse_color(hue, alpha=alpha))
            for i, hue in enumerate(hues)
        ]
    )
