"""Additive luminance noise."""

import logging
from typing import Optional

import numpy as np

from docscene.composite.buffer import PixelBuffer
from docscene.constants import TINT_BIAS, NoiseFlavor

logger = logging.getLogger(__name__)


def apply_noise(
    buffer: PixelBuffer,
    amount: float,
    flavor: NoiseFlavor = NoiseFlavor.NEUTRAL,
    rng: Optional[np.random.Generator] = None,
) -> None:
    """
    Add per-pixel noise to the color channels of `buffer` in place.

    One sample ``n ~ U[-0.5, 0.5] * amount * 255`` is drawn per pixel. The
    neutral flavor adds ``n`` to red, green and blue; the tinted flavor adds
    ``n + 5``, ``n`` and ``n - 5``. Alpha is left untouched and channels are
    clamped to [0, 255].

    :param amount: Fraction of the full channel range, e.g. 0.04 for subtle
        grain. Zero leaves the buffer unchanged regardless of `flavor`.
    :param rng: Random generator; a fresh unseeded one is used when omitted.
    """
    if amount < 0:
        raise ValueError("Noise amount must be non-negative: %g" % amount)
    if amount == 0:
        return
    flavor = NoiseFlavor(flavor)
    rng = rng if rng is not None else np.random.default_rng()

    pixels = buffer.read_all()
    height, width = pixels.shape[:2]
    n = (rng.random((height, width, 1), dtype=np.float32) - 0.5) * (amount * 255.0)
    if flavor == NoiseFlavor.TINTED:
        n = n + np.array(TINT_BIAS, dtype=np.float32)
    color = pixels[:, :, :3].astype(np.float32) + n
    pixels[:, :, :3] = np.clip(np.rint(color), 0, 255).astype(np.uint8)
    logger.debug("Applied %s noise (amount=%g)" % (flavor.value, amount))
