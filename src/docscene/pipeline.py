"""
End-to-end rendering and request dispatch.

:py:func:`render` runs content provider, document compositor, scene
compositor and encoder in sequence. Any failure along the way is reported as
one :py:class:`~docscene.errors.PipelineFailure`; there is no partial output.
:py:func:`handle_request` wraps that into a transport-neutral
:py:class:`Response`.
"""
import json
import logging
from typing import Dict, Optional

import numpy as np
from attrs import define, field

from docscene import pil_io
from docscene.assets import AssetLoader, Fetcher
from docscene.composite.buffer import PixelBuffer
from docscene.content import ContentProvider, DocumentSpec, SampleContentProvider
from docscene.document import DocumentCompositor
from docscene.errors import PipelineFailure
from docscene.params import RenderConfig
from docscene.scene import SceneCompositor

logger = logging.getLogger(__name__)

JPEG_HEADERS = {
    "Content-Type": "image/jpeg",
    "Cache-Control": "no-store, max-age=0",
}


@define(frozen=True)
class Response(object):
    """HTTP-style response: status code, headers and body bytes."""

    status: int
    headers: Dict[str, str] = field(factory=dict)
    body: bytes = b""


def compose(
    spec: DocumentSpec,
    config: Optional[RenderConfig] = None,
    rng: Optional[np.random.Generator] = None,
    assets: Optional[AssetLoader] = None,
) -> PixelBuffer:
    """Render the card and, unless disabled, the scene around it."""
    config = config or RenderConfig()
    rng = rng if rng is not None else np.random.default_rng()
    card = DocumentCompositor(spec, config, rng, assets).compose()
    if not config.scene_enabled:
        return card
    return SceneCompositor(config, rng).compose(card)


def render(
    provider: Optional[ContentProvider] = None,
    config: Optional[RenderConfig] = None,
    rng: Optional[np.random.Generator] = None,
    fetch: Optional[Fetcher] = None,
) -> bytes:
    """
    Render one encoded JPEG.

    :param provider: Content source; defaults to the fictional sample tables.
    :param rng: Source of every random choice; pass a seeded generator for
        reproducible output.
    :param fetch: Image fetcher ``(url, timeout) -> Image`` used for the logo
        and portrait.
    :raises PipelineFailure: on any error, chained to the underlying exception.
    """
    config = config or RenderConfig()
    rng = rng if rng is not None else np.random.default_rng()
    provider = provider or SampleContentProvider(
        width=config.card_width, height=config.card_height
    )
    assets = AssetLoader(fetch, config.asset_timeout, config.strict_portrait)
    try:
        spec = provider.create_spec(rng)
        logger.info("Generating document for %s at %s" % (spec.display_name, spec.title))
        buffer = compose(spec, config, rng, assets)
        return pil_io.encode(buffer, "JPEG", config.jpeg_quality)
    except Exception as e:
        logger.error("Generator error: %s" % e, exc_info=True)
        raise PipelineFailure(str(e)) from e


def handle_request(
    provider: Optional[ContentProvider] = None,
    config: Optional[RenderConfig] = None,
    rng: Optional[np.random.Generator] = None,
    fetch: Optional[Fetcher] = None,
) -> Response:
    """
    Render and wrap the result as a response.

    Success is a 200 with the JPEG body and a no-store cache directive;
    failure is a 500 with a JSON body carrying the error message.
    """
    try:
        body = render(provider, config, rng, fetch)
    except PipelineFailure as e:
        payload = {"error": "Internal Server Error", "details": str(e)}
        return Response(
            500,
            {"Content-Type": "application/json"},
            json.dumps(payload).encode("utf-8"),
        )
    return Response(200, dict(JPEG_HEADERS), body)
