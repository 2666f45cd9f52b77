import logging

import numpy as np
import pytest
from attrs import evolve

from docscene.assets import AssetLoader
from docscene.document import (
    FOOTER_HEIGHT,
    PORTRAIT_FRAME,
    PORTRAIT_PHOTO,
    DocumentCompositor,
    render_document,
)
from docscene.errors import AssetFetchFailure

logger = logging.getLogger(__name__)


def test_fill_background(spec, quiet_config, rng):
    spec = evolve(spec, background="#F0F0E0")
    compositor = DocumentCompositor(spec, quiet_config, rng)
    compositor.buffer.fill((0, 0, 0, 0))
    compositor.fill_background()
    assert compositor.buffer.get(0, 0) == (240, 240, 224, 255)
    assert compositor.buffer.get(599, 379) == (240, 240, 224, 255)


def test_header_band(spec, quiet_config, rng):
    compositor = DocumentCompositor(spec, quiet_config, rng)
    compositor.fill_background()
    compositor.draw_header_band()
    buffer = compositor.buffer
    assert buffer.get(5, 5) == spec.primary_color
    assert buffer.get(300, 50) == spec.primary_color
    # The band is taller on the left than on the right.
    assert buffer.get(10, 112) == spec.primary_color
    assert buffer.get(590, 112) == (255, 255, 255, 255)


def test_footer(spec, quiet_config, rng):
    compositor = DocumentCompositor(spec, quiet_config, rng)
    compositor.fill_background()
    compositor.draw_footer()
    pixels = compositor.buffer.read_all()
    top = spec.height - FOOTER_HEIGHT
    assert np.all(pixels[top:, :10] == spec.primary_color)
    assert np.all(pixels[top:, -10:] == spec.primary_color)
    assert np.all(pixels[top - 1, :] == (255, 255, 255, 255))
    # Disclaimer text is drawn in white over the band.
    assert pixels[top:, 200:400, 1].max() > 200


def test_placeholder_portrait(spec, quiet_config, rng):
    compositor = DocumentCompositor(spec, quiet_config, rng)
    compositor.fill_background()
    compositor.draw_images()
    x, y, w, h = PORTRAIT_FRAME
    buffer = compositor.buffer
    assert buffer.get(x + 1, y + 1) == (224, 224, 224, 255)
    px, py, pw, ph = PORTRAIT_PHOTO
    assert buffer.get(px + 2, py + 2) == (200, 204, 210, 255)
    assert buffer.get(px + pw // 2, py + ph - 2) == (138, 144, 153, 255)


def test_fetched_images(spec, quiet_config, rng, fetch_ok):
    compositor = DocumentCompositor(spec, quiet_config, rng, AssetLoader(fetch_ok))
    compositor.fill_background()
    compositor.draw_images()
    assert fetch_ok.requested == [spec.logo_url, spec.portrait_url]
    px, py, pw, ph = PORTRAIT_PHOTO
    assert compositor.buffer.get(px + pw // 2, py + ph // 2) == (0, 128, 255, 255)
    assert compositor.buffer.get(spec.width - 70, 60) == (0, 128, 255, 255)


def test_missing_logo_is_skipped(spec, quiet_config, rng, fetch_logo_fail):
    compositor = DocumentCompositor(
        spec, quiet_config, rng, AssetLoader(fetch_logo_fail)
    )
    compositor.fill_background()
    compositor.draw_images()
    assert compositor.buffer.get(spec.width - 70, 60) == (255, 255, 255, 255)


def test_strict_portrait_failure(spec, quiet_config, rng, fetch_fail):
    compositor = DocumentCompositor(
        spec, quiet_config, rng, AssetLoader(fetch_fail, strict_portrait=True)
    )
    with pytest.raises(AssetFetchFailure):
        compositor.compose()


def test_hologram_center(spec, quiet_config, rng):
    compositor = DocumentCompositor(spec, quiet_config, rng)
    assert compositor.hologram_center() == (530, 295)
    config = quiet_config.replace(hologram={"center": (100, 100)})
    assert DocumentCompositor(spec, config, rng).hologram_center() == (100.0, 100.0)


def test_compose(spec, rng):
    card = render_document(spec, rng=rng)
    assert card.size == (600, 380)
    pixels = card.read_all()
    assert np.all(pixels[:, :, 3] == 255)
    # Print cast warms the white background on average.
    region = pixels[300:340, 200:240].astype(np.int32)
    assert region[:, :, 0].mean() > region[:, :, 2].mean()


def test_compose_is_reproducible(spec):
    first = render_document(spec, rng=np.random.default_rng(5))
    second = render_document(spec, rng=np.random.default_rng(5))
    np.testing.assert_array_equal(first.read_all(), second.read_all())