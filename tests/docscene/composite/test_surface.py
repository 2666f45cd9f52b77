import logging
import math

import numpy as np
import pytest
from PIL import Image, ImageFont

from docscene.composite.buffer import PixelBuffer
from docscene.composite.surface import Surface
from docscene.constants import BlendMode, TextAlign

logger = logging.getLogger(__name__)


@pytest.fixture
def surface():
    return Surface(PixelBuffer.allocate(40, 30))


@pytest.fixture
def font():
    return ImageFont.load_default(size=12)


def test_save_restore(surface):
    surface.blend_mode = "screen"
    surface.global_alpha = 0.4
    with surface.saved():
        surface.blend_mode = BlendMode.SOFT_LIGHT
        surface.global_alpha = 1.0
        surface.translate(5, 5)
        assert surface.transform.offset == (5.0, 5.0)
    assert surface.blend_mode == BlendMode.SCREEN
    assert surface.global_alpha == 0.4
    assert surface.transform.is_identity


def test_restore_without_save(surface):
    surface.restore()
    assert surface.transform.is_identity


def test_invalid_state(surface):
    with pytest.raises(ValueError):
        surface.global_alpha = 1.5
    with pytest.raises(ValueError):
        surface.blend_mode = "multiply"


def test_fill_rect_with_translation(surface):
    surface.translate(10, 5)
    surface.fill_rect(0, 0, 4, 3, (255, 0, 0, 255))
    pixels = surface.get_pixels()
    assert np.all(pixels[5:8, 10:14] == (255, 0, 0, 255))
    assert tuple(pixels[4, 10]) == (255, 255, 255, 255)
    assert tuple(pixels[5, 14]) == (255, 255, 255, 255)


def test_fill_rect_rotated(surface):
    surface.translate(20, 15)
    surface.rotate(math.pi / 4)
    surface.fill_rect(-5, -5, 10, 10, (0, 0, 0, 255))
    pixels = surface.get_pixels()
    assert tuple(pixels[15, 20]) == (0, 0, 0, 255)
    # The rotated square reaches further along the axes than its half size.
    assert pixels[15, 26, 0] < 255
    assert tuple(pixels[9, 14]) == (255, 255, 255, 255)


def test_global_alpha_scales_coverage(surface):
    surface.global_alpha = 0.5
    surface.fill_rect(0, 0, 40, 30, (0, 0, 0, 255))
    assert np.all(surface.get_pixels()[:, :, :3] == 128)


def test_fill_ellipse(surface):
    surface.fill_ellipse((10, 5, 30, 25), (0, 0, 255, 255))
    pixels = surface.get_pixels()
    assert tuple(pixels[15, 20]) == (0, 0, 255, 255)
    assert tuple(pixels[0, 0]) == (255, 255, 255, 255)


def test_fill_text(surface, font):
    surface.fill_text("IX", (20, 20), font, (0, 0, 0, 255), TextAlign.CENTER)
    pixels = surface.get_pixels()
    assert pixels[:, :, 0].min() < 128
    # Nothing below the baseline for capital letters.
    assert np.all(pixels[23:, :, :3] == 255)


def test_fill_text_empty(surface, font):
    surface.fill_text("", (5, 5), font, (0, 0, 0, 255))
    assert np.all(surface.get_pixels() == 255)


def test_draw_image(surface):
    image = Image.new("RGB", (4, 4), (0, 255, 0))
    surface.draw_image(image, 2, 3, 8, 6)
    pixels = surface.get_pixels()
    assert tuple(pixels[5, 5]) == (0, 255, 0, 255)
    assert tuple(pixels[2, 2]) == (255, 255, 255, 255)
    assert tuple(pixels[9, 10]) == (255, 255, 255, 255)


def test_draw_pixel_buffer_offscreen(surface):
    source = PixelBuffer.allocate(10, 10, (0, 0, 0, 255))
    surface.draw_image(source, 35, 25)
    pixels = surface.get_pixels()
    assert np.all(pixels[25:, 35:, :3] == 0)
    assert np.all(pixels[:25, :, :3] == 255)


def test_fill_layer_size_mismatch(surface):
    with pytest.raises(ValueError):
        surface.fill_layer(np.zeros((5, 5, 3)), np.ones((5, 5, 1)))


def test_fill_layer_ignores_transform(surface):
    surface.translate(100, 100)
    color = np.zeros((30, 40, 3), dtype=np.float32)
    alpha = np.zeros((30, 40, 1), dtype=np.float32)
    alpha[0, 0] = 1.0
    surface.fill_layer(color, alpha)
    assert tuple(surface.get_pixels()[0, 0]) == (0, 0, 0, 255)


def test_put_pixels(surface):
    pixels = np.zeros((30, 40, 4), dtype=np.uint8)
    surface.put_pixels(pixels)
    assert surface.buffer.get(3, 3) == (0, 0, 0, 0)
