"""Utility functions for composite operations."""

from typing import Optional, Sequence, Tuple, Union, overload

import numpy as np
from numpy.typing import NDArray

ColorLike = Union[str, Sequence[int], Sequence[float]]
Color = Tuple[int, int, int, int]


def parse_color(value: ColorLike, alpha: Optional[float] = None) -> Color:
    """Return an ``(r, g, b, a)`` tuple of 8-bit ints.

    Accepts ``#RRGGBB``, ``#RRGGBBAA`` and 3- or 4-sequences. When `alpha` is
    given (0.0-1.0) it overrides the alpha component.
    """
    if isinstance(value, str):
        text = value.lstrip("#")
        if len(text) not in (6, 8):
            raise ValueError("Invalid color: %r" % value)
        components = [int(text[i : i + 2], 16) for i in range(0, len(text), 2)]
    else:
        components = [int(round(float(c))) for c in value]
    if len(components) == 3:
        components.append(255)
    if len(components) != 4:
        raise ValueError("Invalid color: %r" % (value,))
    if alpha is not None:
        components[3] = int(round(255 * float(alpha)))
    r, g, b, a = (max(0, min(255, c)) for c in components)
    return (r, g, b, a)


def intersect(
    a: Tuple[int, int, int, int], b: Tuple[int, int, int, int]
) -> Tuple[int, int, int, int]:
    """Calculate intersection of two bounding boxes."""
    inter = (max(a[0], b[0]), max(a[1], b[1]), min(a[2], b[2]), min(a[3], b[3]))
    if inter[0] >= inter[2] or inter[1] >= inter[3]:
        return (0, 0, 0, 0)
    return inter


@overload
def union(backdrop: float, source: float) -> float: ...


@overload
def union(
    backdrop: NDArray[np.floating], source: NDArray[np.floating]
) -> NDArray[np.floating]: ...


def union(backdrop, source):
    """Generalized union of shape."""
    return backdrop + source - (backdrop * source)


def clip(x: NDArray[np.floating]) -> NDArray[np.floating]:
    """Clip between [0, 1]."""
    return np.clip(x, 0.0, 1.0)


def to_float(pixels: NDArray[np.uint8]) -> NDArray[np.float32]:
    """8-bit samples to [0, 1] floats."""
    return pixels.astype(np.float32) / 255.0


def to_uint8(values: NDArray[np.floating]) -> NDArray[np.uint8]:
    """[0, 1] floats to 8-bit samples, rounding to nearest."""
    return np.rint(clip(values) * 255.0).astype(np.uint8)
