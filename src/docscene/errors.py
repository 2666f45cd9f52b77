"""
Exceptions raised by docscene.
"""


class DocsceneError(Exception):
    """Base class of all docscene errors."""


class OutOfRange(DocsceneError, IndexError):
    """Pixel coordinate outside of the buffer."""

    def __init__(self, x, y, width, height):
        self.x = x
        self.y = y
        super(OutOfRange, self).__init__(
            '(%d, %d) is outside of %dx%d buffer' % (x, y, width, height)
        )


class AssetFetchFailure(DocsceneError, IOError):
    """Image could not be downloaded or decoded."""

    def __init__(self, url, reason):
        self.url = url
        self.reason = reason
        super(AssetFetchFailure, self).__init__(
            'Failed to fetch %s: %s' % (url, reason)
        )


class FontRegistrationFailure(DocsceneError, RuntimeError):
    """No usable font face, including the built-in fallback."""


class EncodeFailure(DocsceneError, IOError):
    """Buffer could not be serialized."""


class PipelineFailure(DocsceneError, RuntimeError):
    """Rendering failed; no output is produced."""
