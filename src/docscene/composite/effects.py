"""
Print and capture effects.

This module implements the effects layered over a rendered card and over the
final scene:

- **Hologram seal**: radial rainbow disc, overlay-blended, with a label
- **Scratches**: short low-alpha white strokes, soft-light-blended
- **Drop shadow**: blurred, offset, semi-transparent rectangle
- **Glare**: diagonal white band, screen-blended
- **Vignette**: radial darkening toward the edges

All effects draw through a :py:class:`~docscene.composite.surface.Surface`,
mutate its buffer in place and return nothing. Blend mode changes are scoped
with ``surface.saved()`` so the caller's state is restored afterwards.
Positions are in buffer space except for the drop shadow, whose rectangle is
given in the surface's current user space.

Example usage::

    surface = Surface(card)
    effects.draw_hologram(surface, (530, 290), HologramParams(), label_font)
    effects.draw_scratches(surface, ScratchParams(), rng)
"""

import logging
import math
from typing import Tuple

import numpy as np
from skimage import filters  # type: ignore[import-untyped]

from docscene.composite import paint, vector
from docscene.composite.paint import Gradient, GradientStop
from docscene.composite.surface import Surface
from docscene.composite.utils import parse_color
from docscene.constants import BlendMode, GradientKind, TextAlign
from docscene.params import (
    GlareParams,
    HologramParams,
    ScratchParams,
    ShadowParams,
    VignetteParams,
)

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


def draw_hologram(
    surface: Surface, center: Point, params: HologramParams, font
) -> None:
    """Overlay a rainbow seal centered at `center` and label it."""
    cx, cy = center
    r = params.radius
    color, alpha = paint.draw_gradient_fill(
        surface.size,
        paint.rainbow(params.alpha),
        GradientKind.RADIAL,
        center=center,
        radius=r,
    )
    disc = vector.draw_ellipse(surface.size, (cx - r, cy - r, cx + r, cy + r))
    with surface.saved():
        surface.reset_transform()
        surface.blend_mode = BlendMode.OVERLAY
        surface.fill_layer(color, alpha * disc)

        if params.label:
            surface.blend_mode = BlendMode.NORMAL
            baseline = cy + params.label_size / 3.0
            surface.fill_text(
                params.label, (cx, baseline), font, params.label_color, TextAlign.CENTER
            )
    logger.debug("Drew hologram at (%g, %g) r=%g" % (cx, cy, r))


def draw_scratches(
    surface: Surface, params: ScratchParams, rng: np.random.Generator
) -> None:
    """Draw `params.count` short random strokes with soft-light blending."""
    width, height = surface.size
    with surface.saved():
        surface.reset_transform()
        surface.blend_mode = BlendMode.SOFT_LIGHT
        for _ in range(params.count):
            x = rng.uniform(0, width)
            y = rng.uniform(0, height)
            dx, dy = rng.uniform(-params.max_offset, params.max_offset, size=2)
            alpha = rng.uniform(params.min_alpha, max(params.min_alpha, params.max_alpha))
            surface.stroke_line(
                (x, y),
                (x + dx, y + dy),
                parse_color((255, 255, 255), alpha=alpha),
                params.width,
            )
    logger.debug("Drew %d scratches" % params.count)


def draw_drop_shadow(
    surface: Surface,
    rect: Tuple[float, float, float, float],
    params: ShadowParams,
) -> None:
    """
    Draw a blurred shadow of user-space `rect` ``(x, y, w, h)``.

    The rectangle is inset by `params.inset`, mapped through the current
    transform, then shifted by `params.offset` in buffer space, so the light
    direction does not rotate with the object.
    """
    x, y, w, h = rect
    inset = params.inset
    points = surface.rect_points(x + inset, y + inset, w - 2 * inset, h - 2 * inset)
    ox, oy = params.offset
    mask = vector.draw_polygon(surface.size, [(px + ox, py + oy) for px, py in points])
    if params.blur > 0:
        # Canvas-style blur radius is twice the Gaussian sigma.
        mask = filters.gaussian(mask[:, :, 0], sigma=params.blur / 2.0)[:, :, None]
    r, g, b, a = params.color
    with surface.saved():
        surface.blend_mode = BlendMode.NORMAL
        surface.composite(
            np.array((r, g, b), dtype=np.float32) / 255.0,
            mask.astype(np.float32) * (a / 255.0),
        )
    logger.debug("Drew drop shadow offset (%g, %g)" % (ox, oy))


def glare_gradient(params: GlareParams) -> Gradient:
    """Transparent, faint, bright, faint, transparent white stops."""
    offsets = (
        0.0,
        params.position - params.width,
        params.position,
        params.position + params.width,
        1.0,
    )
    alphas = (0.0, params.faint_alpha, params.peak_alpha, params.faint_alpha, 0.0)
    stops = []
    for offset, alpha in zip(offsets, alphas):
        offset = min(1.0, max(0.0, offset))
        if stops and offset <= stops[-1].offset:
            continue
        stops.append(GradientStop(offset, parse_color((255, 255, 255), alpha=alpha)))
    return Gradient(stops)


def draw_glare(
    surface: Surface,
    bbox: Tuple[float, float, float, float],
    params: GlareParams,
) -> None:
    """Screen a diagonal glare band over buffer-space `bbox`."""
    left, top, right, bottom = bbox
    color, alpha = paint.draw_gradient_fill(
        surface.size,
        glare_gradient(params),
        GradientKind.LINEAR,
        start=(left, top),
        end=(right, bottom),
    )
    area = vector.draw_rectangle(surface.size, bbox)
    with surface.saved():
        surface.reset_transform()
        surface.blend_mode = BlendMode.SCREEN
        surface.fill_layer(color, alpha * area)
    logger.debug("Drew glare over %s" % (bbox,))


def draw_vignette(surface: Surface, params: VignetteParams) -> None:
    """Darken toward the edges, normal-blended over the whole surface."""
    width, height = surface.size
    half_diagonal = math.hypot(width, height) / 2.0
    gradient = Gradient(
        [
            GradientStop(0.0, (0, 0, 0, 0)),
            GradientStop(1.0, parse_color((0, 0, 0), alpha=params.strength)),
        ]
    )
    color, alpha = paint.draw_gradient_fill(
        surface.size,
        gradient,
        GradientKind.RADIAL,
        center=(width / 2.0, height / 2.0),
        radius=params.outer_radius * half_diagonal,
        inner_radius=params.inner_radius * half_diagonal,
    )
    with surface.saved():
        surface.reset_transform()
        surface.blend_mode = BlendMode.NORMAL
        surface.fill_layer(color, alpha)
    logger.debug("Drew vignette strength=%g" % params.strength)
