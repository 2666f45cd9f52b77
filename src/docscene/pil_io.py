"""
PIL IO module.
"""
import io
import logging

import numpy as np
from PIL import Image, UnidentifiedImageError

from docscene.composite.buffer import PixelBuffer
from docscene.errors import EncodeFailure

logger = logging.getLogger(__name__)


def topil(buffer: PixelBuffer) -> Image.Image:
    """Convert PixelBuffer to an RGBA PIL Image (copies the pixels)."""
    return Image.fromarray(buffer.read_all().copy())


def frompil(image: Image.Image) -> PixelBuffer:
    """Convert a PIL Image of any mode to PixelBuffer."""
    return PixelBuffer(np.array(image.convert("RGBA"), dtype=np.uint8))


def encode(buffer: PixelBuffer, format: str = "JPEG", quality: int = 90) -> bytes:
    """
    Serialize `buffer`.

    JPEG has no alpha, so the buffer is flattened to RGB first. Encoding
    identical pixels with identical settings yields identical bytes.
    """
    image = topil(buffer)
    if format.upper() in ("JPEG", "JPG"):
        image = image.convert("RGB")
    output = io.BytesIO()
    try:
        image.save(output, format=format, quality=quality, optimize=False)
    except (OSError, ValueError, KeyError) as e:
        raise EncodeFailure("Failed to encode %s: %s" % (format, e))
    data = output.getvalue()
    logger.debug("Encoded %s, %d bytes" % (format, len(data)))
    return data


def decode(data: bytes) -> PixelBuffer:
    """Deserialize an encoded image into a PixelBuffer."""
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError("Failed to decode image: %s" % e)
    return frompil(image)
