import logging

import numpy as np
import pytest

from docscene.composite.buffer import PixelBuffer
from docscene.params import RenderConfig
from docscene.scene import SceneCompositor, render_scene

logger = logging.getLogger(__name__)

CARD_COLOR = (200, 30, 40, 255)
TABLE_COLOR = (43, 43, 43, 255)


@pytest.fixture
def card():
    return PixelBuffer.allocate(600, 380, CARD_COLOR)


def test_scene_size(card, quiet_config, rng):
    scene = render_scene(card, quiet_config, rng)
    assert scene.size == (780, 494)


def test_unrotated_card_is_centered(card, quiet_config, rng):
    compositor = SceneCompositor(quiet_config, rng)
    pixels = compositor.compose(card).read_all()
    assert compositor.angle == 0.0
    assert compositor.footprint(card) == pytest.approx((90, 57, 690, 437))
    assert np.all(pixels[57:437, 90:690] == CARD_COLOR)
    assert tuple(pixels[0, 0]) == TABLE_COLOR
    assert tuple(pixels[40, 300]) == TABLE_COLOR


def test_shadow_falls_below_right(card, quiet_config, rng):
    pixels = render_scene(card, quiet_config, rng).read_all()
    # Offset shadow darkens the table below and right of the card only.
    assert pixels[445, 400, 0] < TABLE_COLOR[0]
    assert pixels[300, 695, 0] < TABLE_COLOR[0]
    assert tuple(pixels[20, 400]) == TABLE_COLOR
    assert tuple(pixels[300, 20]) == TABLE_COLOR


def test_rotated_card_covers_interior(card, quiet_config):
    config = quiet_config.replace(scene={"max_rotation": 0.05})
    for seed in range(3):
        compositor = SceneCompositor(config, np.random.default_rng(seed))
        pixels = compositor.compose(card).read_all().astype(np.int32)
        assert 0 < abs(compositor.angle) <= 0.05
        # Sample the central 90% of the card through the placement transform.
        xs = np.linspace(30, 570, 19)
        ys = np.linspace(19, 361, 19)
        points = [(x, y) for x in xs for y in ys]
        for sx, sy in compositor.last_transform.apply(points):
            pixel = pixels[int(sy), int(sx)]
            assert np.abs(pixel - CARD_COLOR).max() <= 2, (sx, sy)


def test_glare_and_vignette(card, rng):
    config = RenderConfig(
        table_noise={"amount": 0.0},
        sensor_noise={"amount": 0.0},
        scene={"max_rotation": 0.0},
        glare={"faint_alpha": 0.3, "peak_alpha": 0.6},
        vignette={"strength": 0.9},
    )
    pixels = render_scene(card, config, rng).read_all().astype(np.int32)
    # Glare peaks on the diagonal of the card footprint.
    assert pixels[247, 390, 1] > CARD_COLOR[1] + 50
    # Vignette darkens the scene corners.
    assert pixels[0, 0, 0] < TABLE_COLOR[0] - 10


def test_sensor_noise_is_last(card, quiet_config, rng):
    config = quiet_config.replace(sensor_noise={"amount": 0.2})
    pixels = render_scene(card, config, rng).read_all().astype(np.int32)
    interior = pixels[100:400, 150:600, :3]
    assert interior.std() > 5
    assert np.abs(interior - CARD_COLOR[:3]).max() <= 26


def test_steps_require_background(card):
    compositor = SceneCompositor()
    with pytest.raises(RuntimeError):
        compositor.blit(card)
    with pytest.raises(RuntimeError):
        compositor.apply_sensor_noise()
