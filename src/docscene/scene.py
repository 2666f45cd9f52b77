"""
Scene compositing.

:py:class:`SceneCompositor` places a finished card on a larger, darker
surface as if it had been photographed. The order of the steps matters: the
shadow goes under the card, glare and vignette go over it, and sensor noise
is the very last mutation before encoding.
"""
import logging
import math
from typing import Optional, Tuple

import numpy as np

from docscene.composite import effects
from docscene.composite.buffer import PixelBuffer
from docscene.composite.noise import apply_noise
from docscene.composite.surface import Surface
from docscene.params import RenderConfig
from docscene.transform import AffineTransform

logger = logging.getLogger(__name__)


class SceneCompositor(object):
    """
    Composes the scene around one card.

    Example::

        scene = SceneCompositor(RenderConfig(), rng).compose(card)

    After :py:meth:`compose` (or :py:meth:`place`), :py:attr:`last_transform`
    holds the card-to-scene transform and :py:attr:`angle` the rotation.
    """

    def __init__(
        self,
        config: Optional[RenderConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self._config = config or RenderConfig()
        self._rng = rng if rng is not None else np.random.default_rng()
        self.buffer: Optional[PixelBuffer] = None
        self.surface: Optional[Surface] = None
        self.angle = 0.0
        self.last_transform = AffineTransform.identity()

    def compose(self, card: PixelBuffer) -> PixelBuffer:
        """Run every step in order and return the scene buffer."""
        self.prepare_background(card)
        self.place(card)
        self.draw_shadow(card)
        self.blit(card)
        self.draw_glare(card)
        self.draw_vignette()
        self.apply_sensor_noise()
        assert self.buffer is not None
        return self.buffer

    def scene_size(self, card: PixelBuffer) -> Tuple[int, int]:
        scale = self._config.scene.scale
        return int(math.ceil(card.width * scale)), int(math.ceil(card.height * scale))

    def prepare_background(self, card: PixelBuffer) -> None:
        width, height = self.scene_size(card)
        self.buffer = PixelBuffer.allocate(width, height, self._config.scene.background)
        self.surface = Surface(self.buffer)
        noise = self._config.table_noise
        apply_noise(self.buffer, noise.amount, noise.flavor, self._rng)
        logger.debug("Prepared %dx%d scene" % (width, height))

    def place(self, card: PixelBuffer) -> None:
        """Center the drawing origin and rotate it by a small random angle."""
        limit = self._config.scene.max_rotation
        self.angle = float(self._rng.uniform(-limit, limit)) if limit > 0 else 0.0
        surface = self._require_surface()
        surface.reset_transform()
        surface.translate(surface.width / 2.0, surface.height / 2.0)
        surface.rotate(self.angle)
        self.last_transform = surface.transform @ AffineTransform.translation(
            -card.width / 2.0, -card.height / 2.0
        )
        logger.debug("Placed card at angle %.4f" % self.angle)

    def card_rect(self, card: PixelBuffer) -> Tuple[float, float, float, float]:
        """Card rectangle in the placed (rotated, centered) user space."""
        return (-card.width / 2.0, -card.height / 2.0, card.width, card.height)

    def draw_shadow(self, card: PixelBuffer) -> None:
        effects.draw_drop_shadow(
            self._require_surface(), self.card_rect(card), self._config.shadow
        )

    def blit(self, card: PixelBuffer) -> None:
        x, y, _, _ = self.card_rect(card)
        self._require_surface().draw_image(card, x, y)

    def footprint(self, card: PixelBuffer) -> Tuple[float, float, float, float]:
        """Axis-aligned scene-space bounds of the placed card."""
        corners = self.last_transform.apply(
            [(0, 0), (card.width, 0), (card.width, card.height), (0, card.height)]
        )
        xs = [x for x, _ in corners]
        ys = [y for _, y in corners]
        return (min(xs), min(ys), max(xs), max(ys))

    def draw_glare(self, card: PixelBuffer) -> None:
        surface = self._require_surface()
        surface.reset_transform()
        effects.draw_glare(surface, self.footprint(card), self._config.glare)

    def draw_vignette(self) -> None:
        effects.draw_vignette(self._require_surface(), self._config.vignette)

    def apply_sensor_noise(self) -> None:
        noise = self._config.sensor_noise
        apply_noise(self._require_buffer(), noise.amount, noise.flavor, self._rng)

    def _require_surface(self) -> Surface:
        if self.surface is None:
            raise RuntimeError("prepare_background() must run first")
        return self.surface

    def _require_buffer(self) -> PixelBuffer:
        if self.buffer is None:
            raise RuntimeError("prepare_background() must run first")
        return self.buffer


def render_scene(
    card: PixelBuffer,
    config: Optional[RenderConfig] = None,
    rng: Optional[np.random.Generator] = None,
) -> PixelBuffer:
    """Shortcut for ``SceneCompositor(...).compose(card)``."""
    return SceneCompositor(config, rng).compose(card)
