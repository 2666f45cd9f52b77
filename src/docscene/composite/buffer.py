"""Pixel buffer that every effect operates on."""

import logging
from typing import Tuple

import numpy as np

from docscene.composite.utils import Color, ColorLike, parse_color
from docscene.constants import WHITE
from docscene.errors import OutOfRange

logger = logging.getLogger(__name__)


class PixelBuffer(object):
    """Fixed-size RGBA image backed by a ``(height, width, 4)`` uint8 array.

    The buffer is mutated in place by effects and handed from one compositor
    to the next without copying. It cannot be resized.

    Example::

        buffer = PixelBuffer.allocate(600, 380)
        buffer.set(0, 0, (255, 0, 0, 255))
        pixels = buffer.read_all()  # live view, shape (380, 600, 4)
    """

    def __init__(self, pixels: np.ndarray):
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError("Expected (height, width, 4) array, got %s" % (pixels.shape,))
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise ValueError("Empty buffer: %s" % (pixels.shape,))
        self._pixels = np.ascontiguousarray(pixels, dtype=np.uint8)

    @classmethod
    def allocate(cls, width: int, height: int, color: ColorLike = WHITE) -> "PixelBuffer":
        """Create a buffer filled with `color` (opaque white by default)."""
        if width <= 0 or height <= 0:
            raise ValueError("Invalid buffer size: %dx%d" % (width, height))
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[:, :] = parse_color(color)
        logger.debug("Allocated %dx%d buffer" % (width, height))
        return cls(pixels)

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height) tuple."""
        return self.width, self.height

    def _check(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise OutOfRange(x, y, self.width, self.height)

    def get(self, x: int, y: int) -> Color:
        self._check(x, y)
        r, g, b, a = (int(v) for v in self._pixels[y, x])
        return (r, g, b, a)

    def set(self, x: int, y: int, color: ColorLike) -> None:
        self._check(x, y)
        self._pixels[y, x] = parse_color(color)

    def fill(self, color: ColorLike) -> None:
        self._pixels[:, :] = parse_color(color)

    def read_all(self) -> np.ndarray:
        """Return the live uint8 array; writes go straight to the buffer."""
        return self._pixels

    def write_all(self, pixels: np.ndarray) -> None:
        """Replace the whole content.

        Float input is rounded and clamped to [0, 255]; the shape must match.
        """
        if pixels.shape != self._pixels.shape:
            raise ValueError(
                "Shape mismatch: %s vs %s" % (pixels.shape, self._pixels.shape)
            )
        if pixels.dtype != np.uint8:
            pixels = np.clip(np.rint(pixels), 0, 255).astype(np.uint8)
        self._pixels[...] = pixels

    def as_float(self) -> np.ndarray:
        """Copy of the content as float32 in [0, 1]."""
        return self._pixels.astype(np.float32) / 255.0

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self._pixels.copy())

    def __repr__(self) -> str:
        return "%s(width=%d, height=%d)" % (
            self.__class__.__name__,
            self.width,
            self.height,
        )
