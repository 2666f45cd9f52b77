"""
Blend mode implementations.

Separable blend functions take the backdrop ``Cb`` and the source ``Cs`` as
float arrays in [0, 1] and return the blended color before alpha weighting.
:py:func:`blend` applies the source alpha on top.
"""
import logging
from typing import Sequence

import numpy as np

from docscene.composite import utils
from docscene.constants import BlendMode

logger = logging.getLogger(__name__)


# Separable blend functions
def normal(Cb, Cs):
    return Cs


def multiply(Cb, Cs):
    return Cb * Cs


def screen(Cb, Cs):
    return Cb + Cs - (Cb * Cs)


def overlay(Cb, Cs):
    return _hard_light(Cs, Cb)


def _hard_light(Cb, Cs):
    Cb, Cs = np.broadcast_arrays(
        np.asarray(Cb, dtype=np.float32), np.asarray(Cs, dtype=np.float32)
    )
    index = Cs > 0.5
    B = np.array(multiply(Cb, 2 * Cs), dtype=np.float32)
    B[index] = screen(Cb, 2 * Cs - 1)[index]
    return B


def soft_light(Cb, Cs):
    Cb, Cs = np.broadcast_arrays(
        np.asarray(Cb, dtype=np.float32), np.asarray(Cs, dtype=np.float32)
    )
    index = Cb < 0.25
    index_not = ~index
    D = np.zeros_like(Cb, dtype=np.float32)
    D[index] = ((16 * Cb[index] - 12) * Cb[index] + 4) * Cb[index]
    D[index_not] = np.sqrt(Cb[index_not])

    index = Cs < 0.5
    index_not = ~index
    B = np.zeros_like(Cb, dtype=np.float32)
    B[index] = Cb[index] - (1 - 2 * Cs[index]) * Cb[index] * (1 - Cb[index])
    B[index_not] = Cb[index_not] + \
        (2 * Cs[index_not] - 1) * (D[index_not] - Cb[index_not])
    return B


"""Blend function table."""
BLEND_FUNC = {
    BlendMode.NORMAL: normal,
    BlendMode.OVERLAY: overlay,
    BlendMode.SCREEN: screen,
    BlendMode.SOFT_LIGHT: soft_light,
}


def get_blend_func(mode):
    """Look up a blend function by :py:class:`BlendMode` or its value."""
    try:
        return BLEND_FUNC[BlendMode(mode)]
    except (KeyError, ValueError):
        raise ValueError("Unsupported blend mode: %r" % (mode,))


def blend(backdrop: np.ndarray, source: np.ndarray, mode=BlendMode.NORMAL) -> np.ndarray:
    """
    Blend RGBA `source` over RGBA `backdrop`.

    Both arrays hold floats in [0, 1] with the alpha in the last component and
    broadcast against each other. The result color is the blended color
    weighted by the source alpha::

        out = B(d, s) * sa + d * (1 - sa)

    and the result alpha is the union of both alphas. Values are not clamped;
    callers clamp when writing back to 8-bit storage.
    """
    blend_fn = get_blend_func(mode)
    backdrop = np.asarray(backdrop, dtype=np.float32)
    source = np.asarray(source, dtype=np.float32)
    Cb, ab = backdrop[..., :3], backdrop[..., 3:4]
    Cs, As = source[..., :3], source[..., 3:4]

    color = blend_fn(Cb, Cs) * As + Cb * (1.0 - As)
    alpha = utils.union(ab, As)
    color, alpha = np.broadcast_arrays(color, alpha)
    return np.concatenate((color, alpha[..., :1]), axis=-1)


def blend_pixels(
    backdrop: Sequence[int], source: Sequence[int], mode=BlendMode.NORMAL
) -> tuple:
    """8-bit convenience wrapper around :py:func:`blend` for single samples."""
    d = np.array(backdrop, dtype=np.float32) / 255.0
    s = np.array(source, dtype=np.float32) / 255.0
    result = utils.to_uint8(blend(d, s, mode))
    return tuple(int(v) for v in result)
