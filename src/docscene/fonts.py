"""
Font registration.

Font faces are resolved once per process. :py:func:`get_registry` returns the
shared :py:class:`FontRegistry`; concurrent first callers block on a lock
until registration has finished, and later calls return the same instance.
Faces whose font files cannot be loaded fall back to Pillow's built-in font.
"""
import functools
import logging
import os
import threading
from typing import Dict, List, Optional

from PIL import ImageFont

from docscene.errors import FontRegistrationFailure

logger = logging.getLogger(__name__)

SANS = "sans"
SANS_BOLD = "sans-bold"
MONO_BOLD = "mono-bold"

#: Candidate font files per face, tried in order.
FONT_CANDIDATES: Dict[str, List[str]] = {
    SANS: ["DejaVuSans.ttf", "LiberationSans-Regular.ttf", "Arial.ttf", "arial.ttf"],
    SANS_BOLD: [
        "DejaVuSans-Bold.ttf",
        "LiberationSans-Bold.ttf",
        "Arial Bold.ttf",
        "arialbd.ttf",
    ],
    MONO_BOLD: [
        "DejaVuSansMono-Bold.ttf",
        "LiberationMono-Bold.ttf",
        "Courier New Bold.ttf",
        "courbd.ttf",
    ],
}


class FontRegistry(object):
    """
    Map of face names to font files.

    A face registered with ``None`` uses Pillow's default font.
    """

    def __init__(self, font_dir: Optional[str] = None):
        self._font_dir = font_dir
        self._faces: Dict[str, Optional[str]] = {}
        for face, candidates in FONT_CANDIDATES.items():
            self._faces[face] = self._register(face, candidates)

    @property
    def font_dir(self) -> Optional[str]:
        return self._font_dir

    @property
    def faces(self) -> Dict[str, Optional[str]]:
        return dict(self._faces)

    def _register(self, face: str, candidates: List[str]) -> Optional[str]:
        for name in candidates:
            path = os.path.join(self._font_dir, name) if self._font_dir else name
            if self._font_dir and not os.path.isfile(path):
                continue
            try:
                ImageFont.truetype(path, 12)
            except OSError:
                continue
            logger.debug("Registered %s as %s" % (face, path))
            return path
        logger.warning("No font file found for %s, using the default font" % face)
        return None

    def font(self, face: str, size: int):
        """Return a Pillow font object for `face` at `size` pixels."""
        if face not in self._faces:
            raise KeyError("Unknown font face: %s" % face)
        return _load(self._faces[face], int(size))


@functools.lru_cache(maxsize=64)
def _load(path: Optional[str], size: int):
    if path is not None:
        try:
            return ImageFont.truetype(path, size)
        except OSError as e:
            logger.warning("Failed to load %s: %s" % (path, e))
    try:
        return ImageFont.load_default(size=size)
    except (OSError, TypeError) as e:
        raise FontRegistrationFailure("No usable font: %s" % e)


_lock = threading.Lock()
_registry: Optional[FontRegistry] = None


def get_registry(font_dir: Optional[str] = None) -> FontRegistry:
    """
    Return the process-wide registry, creating it on first use.

    `font_dir` only takes effect on the first call; a later call asking for a
    different directory logs a warning and gets the existing registry.
    """
    global _registry
    if _registry is None:
        with _lock:
            if _registry is None:
                _registry = FontRegistry(font_dir)
                return _registry
    if font_dir is not None and font_dir != _registry.font_dir:
        logger.warning(
            "Font registry already uses %s, ignoring %s" % (_registry.font_dir, font_dir)
        )
    return _registry
