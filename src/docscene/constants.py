"""
Various constants for docscene
"""
from enum import Enum


class BlendMode(Enum):
    """
    Blend modes.
    """
    NORMAL = 'normal'
    OVERLAY = 'overlay'
    SCREEN = 'screen'
    SOFT_LIGHT = 'soft-light'


class GradientKind(Enum):
    """
    Gradient kinds.
    """
    LINEAR = 'linear'
    RADIAL = 'radial'


class NoiseFlavor(Enum):
    """
    Noise flavors.

    NEUTRAL adds the same sample to every color channel, TINTED shifts red up
    and blue down by a fixed bias to mimic a warm print cast.
    """
    NEUTRAL = 'neutral'
    TINTED = 'tinted'


class TextAlign(Enum):
    """
    Horizontal text alignment relative to the anchor point.
    """
    LEFT = 'left'
    CENTER = 'center'
    RIGHT = 'right'


#: Per-channel bias of the tinted noise flavor, in 8-bit units.
TINT_BIAS = (5.0, 0.0, -5.0)

#: Opaque white.
WHITE = (255, 255, 255, 255)

#: Opaque black.
BLACK = (0, 0, 0, 255)
