"""
docscene: synthetic document photographs.

This package renders a synthetic card image from vector and text layers,
degrades it with print artifacts, and places it in a larger scene that looks
as if the card had been photographed lying on a table.

Basic usage::

    import numpy as np
    from docscene import render

    jpeg = render(rng=np.random.default_rng(7))
    with open("card.jpg", "wb") as f:
        f.write(jpeg)

Architecture:

- :py:mod:`docscene.composite`: Pixel buffer, blend modes, gradients, noise,
  drawing surface and effects
- :py:mod:`docscene.document`: Card layout
- :py:mod:`docscene.scene`: Scene placement, shadow, glare, vignette, grain
- :py:mod:`docscene.content`: Document content providers
- :py:mod:`docscene.pipeline`: End-to-end rendering and request dispatch
"""

from docscene.composite.buffer import PixelBuffer
from docscene.content import DocumentSpec, SampleContentProvider
from docscene.params import RenderConfig
from docscene.pipeline import handle_request, render
from docscene.version import __version__

__all__ = [
    "DocumentSpec",
    "PixelBuffer",
    "RenderConfig",
    "SampleContentProvider",
    "handle_request",
    "render",
    "__version__",
]
