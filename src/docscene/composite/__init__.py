"""
Compositing engine.

This subpackage provides the pixel-level machinery the document and scene
compositors are built on. Pixels live in a
:py:class:`~docscene.composite.buffer.PixelBuffer`; everything else mutates
one in place.

Key modules:

- :py:mod:`docscene.composite.buffer`: RGBA pixel buffer
- :py:mod:`docscene.composite.blend`: Normal, overlay, screen and soft-light
- :py:mod:`docscene.composite.paint`: Linear and radial gradients
- :py:mod:`docscene.composite.noise`: Neutral and tinted additive noise
- :py:mod:`docscene.composite.vector`: Polygon, line and ellipse coverage masks
- :py:mod:`docscene.composite.surface`: Canvas-like drawing surface
- :py:mod:`docscene.composite.effects`: Hologram, scratches, shadow, glare,
  vignette

Blending happens in 8-bit sRGB values normalized to [0, 1]; there is no
linear-light conversion. Results are rounded and clamped only when written
back to the buffer.
"""
