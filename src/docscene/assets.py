"""
Image asset fetching.

Logos and portraits are retrieved by URL (or local path) with a bounded
timeout. A missing logo is never fatal; a missing portrait is replaced by a
placeholder unless the loader is strict.
"""
import io
import logging
import os
from typing import Callable, Optional

import requests
from PIL import Image, UnidentifiedImageError

from docscene.errors import AssetFetchFailure

logger = logging.getLogger(__name__)

#: Signature of image fetchers: ``fetch(url, timeout) -> PIL.Image.Image``.
Fetcher = Callable[[str, float], Image.Image]


def fetch_image(
    url: str, timeout: float = 10.0, session: Optional[requests.Session] = None
) -> Image.Image:
    """
    Download and decode an image.

    ``http(s)://`` URLs go through `requests`; anything else is read as a local
    file path. Every network, HTTP status or decode error is raised as
    :py:class:`~docscene.errors.AssetFetchFailure`.
    """
    if url.startswith(("http://", "https://")):
        http = session or requests
        try:
            response = http.get(url, timeout=timeout)
            response.raise_for_status()
        except (requests.RequestException, ValueError) as e:
            raise AssetFetchFailure(url, e)
        data = response.content
    else:
        path = url[len("file://") :] if url.startswith("file://") else url
        try:
            with open(os.path.expanduser(path), "rb") as f:
                data = f.read()
        except OSError as e:
            raise AssetFetchFailure(url, e)

    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise AssetFetchFailure(url, e)
    logger.debug("Fetched %s (%dx%d)" % (url, image.width, image.height))
    return image


class AssetLoader(object):
    """
    Applies the logo and portrait failure policies on top of a fetcher.

    :param fetch: Callable ``(url, timeout) -> Image``; defaults to a
        :py:func:`fetch_image` bound to a shared :py:class:`requests.Session`.
    :param strict_portrait: Propagate portrait failures instead of returning
        ``None`` (which makes the compositor draw a placeholder).
    """

    def __init__(
        self,
        fetch: Optional[Fetcher] = None,
        timeout: float = 10.0,
        strict_portrait: bool = False,
    ):
        if fetch is None:
            session = requests.Session()

            def fetch(url: str, timeout: float) -> Image.Image:
                return fetch_image(url, timeout, session=session)

        self._fetch = fetch
        self._timeout = timeout
        self._strict_portrait = strict_portrait

    def load_logo(self, url: Optional[str]) -> Optional[Image.Image]:
        if not url:
            return None
        try:
            return self._fetch(url, self._timeout)
        except AssetFetchFailure as e:
            logger.warning("Logo load failed: %s" % e)
            return None

    def load_portrait(self, url: Optional[str]) -> Optional[Image.Image]:
        if not url:
            if self._strict_portrait:
                raise AssetFetchFailure("<none>", "no portrait URL given")
            logger.debug("No portrait URL, using placeholder")
            return None
        try:
            return self._fetch(url, self._timeout)
        except AssetFetchFailure as e:
            if self._strict_portrait:
                raise
            logger.warning("Portrait load failed, using placeholder: %s" % e)
            return None
