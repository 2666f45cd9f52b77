"""
2D affine transforms.
"""
import math
from typing import Iterable, List, Tuple

import numpy as np
from attrs import define, field

Point = Tuple[float, float]


def _to_coefficients(values) -> Tuple[float, ...]:
    values = tuple(float(v) for v in values)
    if len(values) != 6:
        raise ValueError("Expected 6 coefficients, got %d" % len(values))
    return values


@define(frozen=True)
class AffineTransform(object):
    """
    Affine transform ``(a, b, c, d, e, f)`` mapping::

        x' = a * x + c * y + e
        y' = b * x + d * y + f

    Transforms compose like matrices: ``outer @ inner`` applies `inner`
    first. Rotation angles are in radians; positive angles turn clockwise in
    image coordinates (y pointing down).
    """

    coefficients: Tuple[float, ...] = field(
        default=(1.0, 0.0, 0.0, 1.0, 0.0, 0.0), converter=_to_coefficients
    )

    @classmethod
    def identity(cls) -> "AffineTransform":
        return cls()

    @classmethod
    def translation(cls, tx: float, ty: float) -> "AffineTransform":
        return cls((1.0, 0.0, 0.0, 1.0, tx, ty))

    @classmethod
    def rotation(cls, theta: float) -> "AffineTransform":
        cos, sin = math.cos(theta), math.sin(theta)
        return cls((cos, sin, -sin, cos, 0.0, 0.0))

    @classmethod
    def about(cls, pivot: Point, theta: float) -> "AffineTransform":
        """Rotation by `theta` around `pivot`: translate, rotate, translate back."""
        return (
            cls.translation(pivot[0], pivot[1])
            @ cls.rotation(theta)
            @ cls.translation(-pivot[0], -pivot[1])
        )

    def matrix(self) -> np.ndarray:
        a, b, c, d, e, f = self.coefficients
        return np.array([[a, c, e], [b, d, f], [0.0, 0.0, 1.0]], dtype=np.float64)

    @classmethod
    def from_matrix(cls, matrix: np.ndarray) -> "AffineTransform":
        return cls(
            (
                matrix[0, 0],
                matrix[1, 0],
                matrix[0, 1],
                matrix[1, 1],
                matrix[0, 2],
                matrix[1, 2],
            )
        )

    def multiply(self, other: "AffineTransform") -> "AffineTransform":
        """Return ``self @ other``; `other` is applied first."""
        return AffineTransform.from_matrix(self.matrix() @ other.matrix())

    def __matmul__(self, other: "AffineTransform") -> "AffineTransform":
        return self.multiply(other)

    def inverse(self) -> "AffineTransform":
        return AffineTransform.from_matrix(np.linalg.inv(self.matrix()))

    def apply(self, points: Iterable[Point]) -> List[Point]:
        a, b, c, d, e, f = self.coefficients
        return [(a * x + c * y + e, b * x + d * y + f) for x, y in points]

    @property
    def is_identity(self) -> bool:
        return self.coefficients == (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)

    @property
    def is_translation(self) -> bool:
        a, b, c, d, _, _ = self.coefficients
        return (a, b, c, d) == (1.0, 0.0, 0.0, 1.0)

    @property
    def offset(self) -> Point:
        return self.coefficients[4], self.coefficients[5]

    def pil_coefficients(self) -> Tuple[float, ...]:
        """
        Coefficients for ``Image.transform(size, Image.AFFINE, data)``.

        PIL maps output pixels back to input pixels, so this is the inverse
        transform in PIL's ``(a, b, c, d, e, f)`` row order.
        """
        a, b, c, d, e, f = self.inverse().coefficients
        return (a, c, e, b, d, f)
