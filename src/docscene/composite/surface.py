"""
Drawing surface over a :py:class:`~docscene.composite.buffer.PixelBuffer`.

The surface offers canvas-like primitives: shape fills, strokes, text and
image placement, a current affine transform, blend mode and global alpha
saved and restored as a stack. Every primitive is rasterized to a coverage
mask (shapes via aggdraw, text and images via Pillow) and composited into
the buffer with :py:func:`docscene.composite.blend.blend`.

Example::

    surface = Surface(PixelBuffer.allocate(600, 380))
    with surface.saved():
        surface.translate(300, 190)
        surface.rotate(-math.pi / 6)
        surface.fill_text("WATERMARK", (0, 0), font, (0, 0, 0, 13), TextAlign.CENTER)
    surface.blend_mode = BlendMode.SCREEN
    surface.fill_layer(color, alpha)
"""
import contextlib
import logging
import math
from typing import Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np
from attrs import define, evolve
from PIL import Image, ImageDraw

from docscene.composite import utils, vector
from docscene.composite.blend import blend
from docscene.composite.buffer import PixelBuffer
from docscene.constants import BlendMode, TextAlign
from docscene.transform import AffineTransform

logger = logging.getLogger(__name__)

Point = Tuple[float, float]

_TEXT_ANCHOR = {
    TextAlign.LEFT: "ls",
    TextAlign.CENTER: "ms",
    TextAlign.RIGHT: "rs",
}


@define
class _State(object):
    transform: AffineTransform = AffineTransform()
    blend_mode: BlendMode = BlendMode.NORMAL
    global_alpha: float = 1.0


class Surface(object):
    """Canvas-like drawing context bound to one pixel buffer."""

    def __init__(self, buffer: PixelBuffer):
        self._buffer = buffer
        self._state = _State()
        self._stack: List[_State] = []

    @property
    def buffer(self) -> PixelBuffer:
        return self._buffer

    @property
    def width(self) -> int:
        return self._buffer.width

    @property
    def height(self) -> int:
        return self._buffer.height

    @property
    def size(self) -> Tuple[int, int]:
        return self._buffer.size

    # State

    def save(self) -> None:
        self._stack.append(evolve(self._state))

    def restore(self) -> None:
        if not self._stack:
            logger.warning("restore() without matching save()")
            return
        self._state = self._stack.pop()

    @contextlib.contextmanager
    def saved(self) -> Iterator["Surface"]:
        """Context manager pairing :py:meth:`save` and :py:meth:`restore`."""
        self.save()
        try:
            yield self
        finally:
            self.restore()

    @property
    def transform(self) -> AffineTransform:
        return self._state.transform

    def set_transform(self, transform: AffineTransform) -> None:
        self._state.transform = transform

    def reset_transform(self) -> None:
        self._state.transform = AffineTransform.identity()

    def translate(self, tx: float, ty: float) -> None:
        self._state.transform = self.transform @ AffineTransform.translation(tx, ty)

    def rotate(self, theta: float) -> None:
        self._state.transform = self.transform @ AffineTransform.rotation(theta)

    @property
    def blend_mode(self) -> BlendMode:
        return self._state.blend_mode

    @blend_mode.setter
    def blend_mode(self, mode: Union[BlendMode, str]) -> None:
        self._state.blend_mode = BlendMode(mode)

    @property
    def global_alpha(self) -> float:
        return self._state.global_alpha

    @global_alpha.setter
    def global_alpha(self, value: float) -> None:
        if not 0.0 <= value <= 1.0:
            raise ValueError("Global alpha must be in [0, 1]: %g" % value)
        self._state.global_alpha = float(value)

    # Raw access

    def get_pixels(self) -> np.ndarray:
        return self._buffer.read_all()

    def put_pixels(self, pixels: np.ndarray) -> None:
        self._buffer.write_all(pixels)

    # Shapes

    def rect_points(self, x: float, y: float, w: float, h: float) -> List[Point]:
        """Corners of a user-space rectangle mapped to buffer space."""
        return self.transform.apply([(x, y), (x + w, y), (x + w, y + h), (x, y + h)])

    def polygon_mask(self, points: Sequence[Point]) -> np.ndarray:
        """Coverage mask of a user-space polygon under the current transform."""
        return vector.draw_polygon(self.size, self.transform.apply(points))

    def fill_rect(self, x: float, y: float, w: float, h: float, color) -> None:
        if self.transform.is_translation:
            tx, ty = self.transform.offset
            mask = vector.draw_rectangle(self.size, (x + tx, y + ty, x + tx + w, y + ty + h))
        else:
            mask = vector.draw_polygon(self.size, self.rect_points(x, y, w, h))
        self._paint(mask, color)

    def fill_polygon(self, points: Sequence[Point], color) -> None:
        self._paint(self.polygon_mask(points), color)

    def fill_ellipse(self, bbox: Tuple[float, float, float, float], color) -> None:
        if self.transform.is_translation:
            tx, ty = self.transform.offset
            left, top, right, bottom = bbox
            mask = vector.draw_ellipse(
                self.size, (left + tx, top + ty, right + tx, bottom + ty)
            )
        else:
            mask = self.polygon_mask(_ellipse_points(bbox))
        self._paint(mask, color)

    def stroke_line(self, start: Point, end: Point, color, width: float = 1.0) -> None:
        start, end = self.transform.apply([start, end])
        self._paint(vector.draw_line(self.size, start, end, width), color)

    # Text and images

    def fill_text(
        self,
        text: str,
        xy: Point,
        font,
        color,
        align: TextAlign = TextAlign.LEFT,
    ) -> None:
        """
        Draw `text` with its alphabetic baseline at `xy`.

        `align` chooses whether `xy` marks the left end, the middle or the
        right end of the text.
        """
        if not text:
            return
        anchor = _TEXT_ANCHOR[TextAlign(align)]
        bbox = font.getbbox(text, anchor=anchor)
        left, top = int(math.floor(bbox[0])), int(math.floor(bbox[1]))
        right, bottom = int(math.ceil(bbox[2])), int(math.ceil(bbox[3]))
        pad = 2
        layer = Image.new("L", (right - left + 2 * pad, bottom - top + 2 * pad), 0)
        ImageDraw.Draw(layer).text(
            (pad - left, pad - top), text, fill=255, font=font, anchor=anchor
        )
        origin = (xy[0] + left - pad, xy[1] + top - pad)
        mask = self._place(layer, origin)
        self._paint(mask, color)

    def draw_image(
        self,
        image: Union[Image.Image, PixelBuffer],
        x: float,
        y: float,
        w: Optional[float] = None,
        h: Optional[float] = None,
    ) -> None:
        """Draw `image` scaled to ``w`` x ``h`` with its top-left at ``(x, y)``."""
        if isinstance(image, PixelBuffer):
            image = Image.fromarray(image.read_all())
        image = image.convert("RGBA")
        size = (
            int(round(w)) if w is not None else image.width,
            int(round(h)) if h is not None else image.height,
        )
        if size[0] <= 0 or size[1] <= 0:
            return
        if size != image.size:
            image = image.resize(size, Image.Resampling.BICUBIC)
        rgba = self._place(image, (x, y))
        self.composite(rgba[:, :, :3], rgba[:, :, 3:4])

    def fill_layer(self, color: np.ndarray, alpha: np.ndarray) -> None:
        """Composite a full-size buffer-space layer, ignoring the transform."""
        if color.shape[:2] != (self.height, self.width):
            raise ValueError("Layer size mismatch: %s" % (color.shape,))
        self.composite(color, alpha)

    # Compositing

    def composite(self, color, alpha: np.ndarray) -> None:
        """
        Blend a source into the buffer with the current mode and global alpha.

        :param color: float RGB in [0, 1], either ``(3,)`` or full-size
            ``(height, width, 3)``.
        :param alpha: float ``(height, width, 1)`` source alpha in [0, 1].
        """
        alpha = alpha * self.global_alpha
        rows = np.flatnonzero(np.any(alpha[:, :, 0] > 0, axis=1))
        if rows.size == 0:
            return
        cols = np.flatnonzero(np.any(alpha[:, :, 0] > 0, axis=0))
        top, bottom = rows[0], rows[-1] + 1
        left, right = cols[0], cols[-1] + 1

        color = np.asarray(color, dtype=np.float32)
        if color.ndim == 3:
            color = color[top:bottom, left:right]
        alpha = alpha[top:bottom, left:right]
        color = np.broadcast_to(color, alpha.shape[:2] + (3,))

        pixels = self._buffer.read_all()
        backdrop = utils.to_float(pixels[top:bottom, left:right])
        result = blend(backdrop, np.concatenate((color, alpha), axis=2), self.blend_mode)
        pixels[top:bottom, left:right] = utils.to_uint8(result)

    def _paint(self, mask: np.ndarray, color) -> None:
        r, g, b, a = utils.parse_color(color)
        rgb = np.array((r, g, b), dtype=np.float32) / 255.0
        self.composite(rgb, mask * (a / 255.0))

    def _place(self, layer: Image.Image, origin: Point) -> np.ndarray:
        """
        Map a local layer whose top-left sits at user-space `origin` into
        buffer space. Returns float channels in [0, 1] at buffer size.
        """
        transform = self.transform @ AffineTransform.translation(*origin)
        channels = len(layer.getbands())
        if transform.is_translation:
            tx, ty = (int(round(v)) for v in transform.offset)
            result = np.zeros((self.height, self.width, channels), dtype=np.float32)
            dst = utils.intersect(
                (0, 0, self.width, self.height),
                (tx, ty, tx + layer.width, ty + layer.height),
            )
            if dst == (0, 0, 0, 0):
                return result
            src = np.array(layer, dtype=np.float32).reshape(
                layer.height, layer.width, channels
            ) / 255.0
            result[dst[1] : dst[3], dst[0] : dst[2]] = src[
                dst[1] - ty : dst[3] - ty, dst[0] - tx : dst[2] - tx
            ]
            return result

        premultiplied = layer.mode == "RGBA"
        if premultiplied:
            layer = layer.convert("RGBa")
        warped = layer.transform(
            self.size,
            Image.Transform.AFFINE,
            transform.pil_coefficients(),
            resample=Image.Resampling.BICUBIC,
        )
        if premultiplied:
            warped = warped.convert("RGBA")
        return np.array(warped, dtype=np.float32).reshape(
            self.height, self.width, channels
        ) / 255.0


def _ellipse_points(bbox, segments: int = 64) -> List[Point]:
    left, top, right, bottom = bbox
    cx, cy = (left + right) / 2.0, (top + bottom) / 2.0
    rx, ry = (right - left) / 2.0, (bottom - top) / 2.0
    return [
        (cx + rx * math.cos(t), cy + ry * math.sin(t))
        for t in (2 * math.pi * i / segments for i in range(segments))
    ]
