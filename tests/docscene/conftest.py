"""Pytest configuration for docscene tests."""

import logging

import numpy as np
import pytest
from PIL import Image

from docscene.content import DocumentSpec
from docscene.errors import AssetFetchFailure
from docscene.params import RenderConfig

logging.basicConfig(level=logging.DEBUG)


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def spec():
    return DocumentSpec(
        title="Lakeshore Polytechnic Institute",
        subtitle="12 Harbour Road, Lakeshore",
        display_name="Clara Hollis",
        code="LPI-24-01234",
        primary_color="#800000",
        secondary_color="#FFD700",
        program="Applied Physics",
        logo_url="http://assets.invalid/logo.png",
        portrait_url="http://assets.invalid/portrait.png",
    )


@pytest.fixture
def quiet_config():
    """Config with every random artifact switched off."""
    return RenderConfig(
        print_noise={"amount": 0.0},
        scratches={"count": 0},
        table_noise={"amount": 0.0},
        sensor_noise={"amount": 0.0},
        glare={"faint_alpha": 0.0, "peak_alpha": 0.0},
        vignette={"strength": 0.0},
        scene={"max_rotation": 0.0},
    )


def make_image(size=(16, 16), color=(0, 128, 255)):
    return Image.new("RGB", size, color)


@pytest.fixture
def fetch_ok():
    requested = []

    def fetch(url, timeout):
        requested.append(url)
        return make_image()

    fetch.requested = requested
    return fetch


@pytest.fixture
def fetch_fail():
    def fetch(url, timeout):
        raise AssetFetchFailure(url, "connection refused")

    return fetch


@pytest.fixture
def fetch_logo_fail():
    def fetch(url, timeout):
        if "logo" in url:
            raise AssetFetchFailure(url, "404 Not Found")
        return make_image()

    return fetch
