"""
Effect parameters and render configuration.

All parameter objects are frozen value objects; effects read them and never
keep state between invocations. Override individual values with
:py:func:`attrs.evolve`::

    config = RenderConfig()
    config = evolve(config, jpeg_quality=85,
                    sensor_noise=evolve(config.sensor_noise, amount=0.0))
"""
import logging
from typing import Any, Mapping, Optional, Tuple

from attrs import define, evolve, field, fields

from docscene.composite.utils import Color, parse_color
from docscene.constants import NoiseFlavor
from docscene.validators import range_

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


def _optional_point(value) -> Optional[Point]:
    if value is None:
        return None
    x, y = value
    return (float(x), float(y))


@define(frozen=True)
class NoiseParams(object):
    """Additive noise; `amount` is a fraction of the full channel range."""

    amount: float = field(default=0.04, validator=range_(0.0, 1.0))
    flavor: NoiseFlavor = field(default=NoiseFlavor.NEUTRAL, converter=NoiseFlavor)


@define(frozen=True)
class HologramParams(object):
    """
    Hologram seal.

    `center` defaults to the bottom-right corner of the card, above the
    footer band.
    """

    radius: float = field(default=40.0, validator=range_(1.0, 10000.0))
    center: Optional[Point] = field(default=None, converter=_optional_point)
    alpha: float = field(default=0.5, validator=range_(0.0, 1.0))
    label: str = "SPECIMEN"
    label_size: int = 10
    label_color: Color = field(default=(255, 255, 255, 204), converter=parse_color)


@define(frozen=True)
class ScratchParams(object):
    """Short soft-light strokes simulating sleeve wear."""

    count: int = field(default=15, validator=range_(0, 10000))
    max_offset: float = 20.0
    width: float = 1.0
    min_alpha: float = field(default=0.1, validator=range_(0.0, 1.0))
    max_alpha: float = field(default=0.3, validator=range_(0.0, 1.0))


@define(frozen=True)
class ShadowParams(object):
    """Drop shadow below the card."""

    color: Color = field(default=(0, 0, 0, 128), converter=parse_color)
    blur: float = field(default=15.0, validator=range_(0.0, 1000.0))
    offset: Point = (10.0, 10.0)
    inset: float = 5.0


@define(frozen=True)
class GlareParams(object):
    """
    Diagonal glare band across the card footprint.

    `position` is where the bright band peaks along the diagonal, `width` the
    distance from the peak to the fully transparent ends.
    """

    position: float = field(default=0.5, validator=range_(0.0, 1.0))
    width: float = field(default=0.2, validator=range_(0.01, 0.5))
    faint_alpha: float = field(default=0.1, validator=range_(0.0, 1.0))
    peak_alpha: float = field(default=0.3, validator=range_(0.0, 1.0))


@define(frozen=True)
class VignetteParams(object):
    """
    Radial darkening.

    Radii are fractions of half the scene diagonal.
    """

    inner_radius: float = field(default=0.5, validator=range_(0.0, 1.0))
    outer_radius: float = field(default=1.0, validator=range_(0.01, 2.0))
    strength: float = field(default=0.5, validator=range_(0.0, 1.0))

    @outer_radius.validator
    def _check_outer(self, attribute, value):
        if value <= self.inner_radius:
            raise ValueError("outer_radius must exceed inner_radius")


@define(frozen=True)
class SceneParams(object):
    """Scene placement."""

    scale: float = field(default=1.3, validator=range_(1.0, 10.0))
    background: Color = field(default="#2B2B2B", converter=parse_color)
    max_rotation: float = field(default=0.05, validator=range_(0.0, 3.2))


def _nested(cls):
    def convert(value):
        if isinstance(value, Mapping):
            return cls(**value)
        return value

    return convert


@define(frozen=True)
class RenderConfig(object):
    """
    Top-level configuration of a render.

    .. py:attribute:: strict_portrait

        When False (default), a portrait that cannot be fetched is replaced by
        a placeholder silhouette; when True the failure aborts the render.
    """

    card_width: int = field(default=600, validator=range_(64, 8192))
    card_height: int = field(default=380, validator=range_(64, 8192))
    jpeg_quality: int = field(default=90, validator=range_(1, 95))
    asset_timeout: float = field(default=10.0, validator=range_(0.1, 600.0))
    strict_portrait: bool = False
    font_dir: Optional[str] = None
    scene_enabled: bool = True

    print_noise: NoiseParams = field(
        factory=lambda: NoiseParams(0.04, NoiseFlavor.TINTED),
        converter=_nested(NoiseParams),
    )
    hologram: HologramParams = field(factory=HologramParams, converter=_nested(HologramParams))
    scratches: ScratchParams = field(factory=ScratchParams, converter=_nested(ScratchParams))
    scene: SceneParams = field(factory=SceneParams, converter=_nested(SceneParams))
    table_noise: NoiseParams = field(
        factory=lambda: NoiseParams(0.06), converter=_nested(NoiseParams)
    )
    shadow: ShadowParams = field(factory=ShadowParams, converter=_nested(ShadowParams))
    glare: GlareParams = field(factory=GlareParams, converter=_nested(GlareParams))
    vignette: VignetteParams = field(factory=VignetteParams, converter=_nested(VignetteParams))
    sensor_noise: NoiseParams = field(
        factory=lambda: NoiseParams(0.04), converter=_nested(NoiseParams)
    )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RenderConfig":
        """Build a config from a (possibly nested) mapping; unknown keys fail."""
        known = {a.name for a in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError("Unknown config keys: %s" % ", ".join(sorted(unknown)))
        return cls(**data)

    def replace(self, **changes: Any) -> "RenderConfig":
        return evolve(self, **changes)
