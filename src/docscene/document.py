"""
Document compositing.

:py:class:`DocumentCompositor` draws one card from a
:py:class:`~docscene.content.DocumentSpec`. The steps run in a fixed order,
each building on the buffer left by the previous one:

1. flat background
2. rotated, faded watermark title
3. angled header band
4. logo and framed portrait
5. header text and label/value rows
6. footer band with disclaimer
7. hologram seal
8. surface scratches
9. tinted print cast
"""
import logging
import math
from typing import Optional

import numpy as np

from docscene import fonts
from docscene.assets import AssetLoader
from docscene.composite import effects
from docscene.composite.buffer import PixelBuffer
from docscene.composite.noise import apply_noise
from docscene.composite.surface import Surface
from docscene.constants import BLACK, WHITE, TextAlign
from docscene.content import DocumentSpec
from docscene.params import RenderConfig

logger = logging.getLogger(__name__)

BANNER_RIGHT_HEIGHT = 100
BANNER_LEFT_HEIGHT = 120
FOOTER_HEIGHT = 30
LOGO_SIZE = 80
PORTRAIT_FRAME = (25, 135, 130, 160)
PORTRAIT_PHOTO = (30, 140, 120, 150)
FRAME_COLOR = "#E0E0E0"
LABEL_COLOR = "#555555"
SUBTITLE_COLOR = "#EEEEEE"
LABEL_X = 180
VALUE_X = 280
FIRST_ROW_Y = 160
ROW_HEIGHT = 35
WATERMARK_ANGLE = -math.pi / 6
WATERMARK_ALPHA = 0.05


class DocumentCompositor(object):
    """
    Renders one card.

    Example::

        compositor = DocumentCompositor(spec, RenderConfig(), rng, AssetLoader())
        card = compositor.compose()

    :param assets: Loader used for the logo and portrait; ``None`` skips both
        and draws the placeholder portrait.
    """

    def __init__(
        self,
        spec: DocumentSpec,
        config: Optional[RenderConfig] = None,
        rng: Optional[np.random.Generator] = None,
        assets: Optional[AssetLoader] = None,
    ):
        self._spec = spec
        self._config = config or RenderConfig()
        self._rng = rng if rng is not None else np.random.default_rng()
        self._assets = assets
        self._fonts = fonts.get_registry(self._config.font_dir)
        self.buffer = PixelBuffer.allocate(spec.width, spec.height, spec.background)
        self.surface = Surface(self.buffer)

    @property
    def spec(self) -> DocumentSpec:
        return self._spec

    def compose(self) -> PixelBuffer:
        """Run every step in order and return the finished card."""
        logger.info("Rendering document for %s" % self._spec.display_name)
        self.fill_background()
        self.draw_watermark()
        self.draw_header_band()
        self.draw_images()
        self.draw_text()
        self.draw_footer()
        self.apply_hologram()
        self.apply_scratches()
        self.apply_print_cast()
        return self.buffer

    def fill_background(self) -> None:
        self.buffer.fill(self._spec.background)

    def draw_watermark(self) -> None:
        spec = self._spec
        with self.surface.saved():
            self.surface.translate(spec.width / 2.0, spec.height / 2.0)
            self.surface.rotate(WATERMARK_ANGLE)
            self.surface.fill_text(
                spec.title.upper(),
                (0, 0),
                self._fonts.font(fonts.SANS_BOLD, 50),
                (0, 0, 0, int(round(255 * WATERMARK_ALPHA))),
                TextAlign.CENTER,
            )

    def draw_header_band(self) -> None:
        w = self._spec.width
        self.surface.fill_polygon(
            [(0, 0), (w, 0), (w, BANNER_RIGHT_HEIGHT), (0, BANNER_LEFT_HEIGHT)],
            self._spec.primary_color,
        )

    def draw_images(self) -> None:
        spec = self._spec
        logo = self._assets.load_logo(spec.logo_url) if self._assets else None
        if logo is not None:
            self.surface.draw_image(
                logo, spec.width - LOGO_SIZE - 30, 20, LOGO_SIZE, LOGO_SIZE
            )

        self.surface.fill_rect(*PORTRAIT_FRAME, FRAME_COLOR)
        portrait = self._assets.load_portrait(spec.portrait_url) if self._assets else None
        if portrait is not None:
            self.surface.draw_image(portrait, *PORTRAIT_PHOTO)
        else:
            self._draw_placeholder_portrait()

    def _draw_placeholder_portrait(self) -> None:
        """Gray head-and-shoulders silhouette in the photo area."""
        x, y, w, h = PORTRAIT_PHOTO
        self.surface.fill_rect(x, y, w, h, "#C8CCD2")
        silhouette = "#8A9099"
        cx = x + w / 2.0
        head = w * 0.36
        top = y + h * 0.16
        self.surface.fill_ellipse(
            (cx - head / 2, top, cx + head / 2, top + head * 1.15), silhouette
        )
        # Upper half of an ellipse resting on the bottom edge of the photo.
        rx, ry = w * 0.38, h * 0.36
        shoulders = [
            (cx + rx * math.cos(t), y + h + ry * math.sin(t))
            for t in np.linspace(math.pi, 2 * math.pi, 33)
        ]
        self.surface.fill_polygon(shoulders, silhouette)

    def draw_text(self) -> None:
        spec = self._spec
        regular = self._fonts.font(fonts.SANS, 16)
        self.surface.fill_text(
            spec.title, (20, 50), self._fonts.font(fonts.SANS_BOLD, 26), WHITE
        )
        self.surface.fill_text(
            spec.subtitle, (20, 80), self._fonts.font(fonts.SANS, 18), SUBTITLE_COLOR
        )

        rows = (
            ("Name:", spec.display_name.upper(), self._fonts.font(fonts.SANS_BOLD, 22), BLACK),
            ("ID No:", spec.code, self._fonts.font(fonts.MONO_BOLD, 22), spec.accent_color),
            ("Session:", spec.session, self._fonts.font(fonts.SANS, 18), BLACK),
            ("Program:", spec.program, self._fonts.font(fonts.SANS, 18), BLACK),
        )
        for index, (label, value, font, color) in enumerate(rows):
            y = FIRST_ROW_Y + index * ROW_HEIGHT
            self.surface.fill_text(label, (LABEL_X, y), regular, LABEL_COLOR)
            self.surface.fill_text(value, (VALUE_X, y), font, color)

    def draw_footer(self) -> None:
        spec = self._spec
        top = spec.height - FOOTER_HEIGHT
        self.surface.fill_rect(0, top, spec.width, FOOTER_HEIGHT, spec.primary_color)
        self.surface.fill_text(
            spec.disclaimer,
            (spec.width / 2.0, spec.height - 10),
            self._fonts.font(fonts.SANS, 12),
            WHITE,
            TextAlign.CENTER,
        )

    def hologram_center(self):
        params = self._config.hologram
        if params.center is not None:
            return params.center
        return (
            self._spec.width - params.radius - 30,
            self._spec.height - FOOTER_HEIGHT - params.radius - 15,
        )

    def apply_hologram(self) -> None:
        params = self._config.hologram
        effects.draw_hologram(
            self.surface,
            self.hologram_center(),
            params,
            self._fonts.font(fonts.SANS_BOLD, params.label_size),
        )

    def apply_scratches(self) -> None:
        effects.draw_scratches(self.surface, self._config.scratches, self._rng)

    def apply_print_cast(self) -> None:
        params = self._config.print_noise
        apply_noise(self.buffer, params.amount, params.flavor, self._rng)


def render_document(
    spec: DocumentSpec,
    config: Optional[RenderConfig] = None,
    rng: Optional[np.random.Generator] = None,
    assets: Optional[AssetLoader] = None,
) -> PixelBuffer:
    """Shortcut for ``DocumentCompositor(...).compose()``."""
    return DocumentCompositor(spec, config, rng, assets).compose()
