import logging

import numpy as np
import pytest
from PIL import ImageFont

from docscene.composite import effects
from docscene.composite.buffer import PixelBuffer
from docscene.composite.surface import Surface
from docscene.constants import BlendMode
from docscene.params import (
    GlareParams,
    HologramParams,
    ScratchParams,
    ShadowParams,
    VignetteParams,
)

logger = logging.getLogger(__name__)


@pytest.fixture
def surface():
    return Surface(PixelBuffer.allocate(120, 80, (128, 128, 128, 255)))


@pytest.fixture
def font():
    return ImageFont.load_default(size=10)


def test_hologram_stays_inside_disc(surface, font):
    effects.draw_hologram(surface, (60, 40), HologramParams(radius=20, label=""), font)
    pixels = surface.get_pixels()
    assert np.any(pixels[40, 45:75, :3] != 128)
    assert np.all(pixels[:, :39] == (128, 128, 128, 255))
    assert np.all(pixels[:, 82:] == (128, 128, 128, 255))
    assert np.all(pixels[:19] == (128, 128, 128, 255))


def test_hologram_label(surface, font):
    params = HologramParams(radius=30, alpha=0.0, label="SPECIMEN", label_color=(0, 0, 0, 255))
    effects.draw_hologram(surface, (60, 40), params, font)
    pixels = surface.get_pixels()
    assert pixels[30:45, 30:90, 0].min() < 100
    assert np.all(pixels[:, :, 0] <= 128)


def test_hologram_restores_state(surface, font):
    surface.blend_mode = BlendMode.SCREEN
    effects.draw_hologram(surface, (60, 40), HologramParams(radius=10, label=""), font)
    assert surface.blend_mode == BlendMode.SCREEN
    assert surface.transform.is_identity


def test_scratches(surface, rng):
    effects.draw_scratches(surface, ScratchParams(count=30, min_alpha=0.3, max_alpha=0.3), rng)
    pixels = surface.get_pixels()
    # Soft light with white lightens only.
    assert np.all(pixels[:, :, :3] >= 128)
    assert np.any(pixels[:, :, :3] > 128)
    assert surface.blend_mode == BlendMode.NORMAL


def test_no_scratches(surface, rng):
    effects.draw_scratches(surface, ScratchParams(count=0), rng)
    assert np.all(surface.get_pixels() == (128, 128, 128, 255))


def test_drop_shadow(surface):
    params = ShadowParams(color=(0, 0, 0, 255), blur=0, offset=(10, 10), inset=0)
    effects.draw_drop_shadow(surface, (20, 20, 40, 20), params)
    pixels = surface.get_pixels()
    assert tuple(pixels[35, 45]) == (0, 0, 0, 255)
    assert tuple(pixels[25, 25]) == (128, 128, 128, 255)


def test_drop_shadow_blur_softens_edges(surface):
    params = ShadowParams(color=(0, 0, 0, 255), blur=8, offset=(0, 0), inset=0)
    effects.draw_drop_shadow(surface, (30, 20, 60, 40), params)
    pixels = surface.get_pixels()
    assert pixels[40, 60, 0] < 20
    assert 0 < pixels[40, 30, 0] < 128
    assert pixels[40, 26, 0] > pixels[40, 30, 0]


def test_glare_gradient():
    gradient = effects.glare_gradient(GlareParams())
    assert [stop.offset for stop in gradient.stops] == pytest.approx([0.0, 0.3, 0.5, 0.7, 1.0])
    assert [stop.color[3] for stop in gradient.stops] == [0, 26, 76, 26, 0]


def test_glare_gradient_clamped_stops():
    gradient = effects.glare_gradient(GlareParams(position=0.1, width=0.2))
    offsets = [stop.offset for stop in gradient.stops]
    assert offsets == sorted(set(offsets))
    assert offsets[0] == 0.0 and offsets[-1] == 1.0


def test_glare_brightens_inside_bbox(surface):
    params = GlareParams(faint_alpha=0.5, peak_alpha=1.0)
    effects.draw_glare(surface, (20, 10, 100, 70), params)
    pixels = surface.get_pixels()
    assert pixels[40, 60, 0] > 128
    assert np.all(pixels[:, :20] == (128, 128, 128, 255))
    assert np.all(pixels[71:] == (128, 128, 128, 255))
    assert np.all(pixels[:, :, :3] >= 128)


def test_zero_glare_is_noop(surface):
    effects.draw_glare(surface, (0, 0, 120, 80), GlareParams(faint_alpha=0, peak_alpha=0))
    assert np.all(surface.get_pixels() == (128, 128, 128, 255))


def test_vignette(surface):
    effects.draw_vignette(surface, VignetteParams(strength=0.8))
    pixels = surface.get_pixels()
    assert tuple(pixels[40, 60]) == (128, 128, 128, 255)
    assert pixels[0, 0, 0] < pixels[20, 30, 0] <= 128
    assert pixels[0, 0, 0] < 60


def test_zero_vignette_is_noop(surface):
    effects.draw_vignette(surface, VignetteParams(strength=0.0))
    assert np.all(surface.get_pixels() == (128, 128, 128, 255))
