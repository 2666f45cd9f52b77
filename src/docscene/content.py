"""
Document content.

The compositors only consume :py:class:`DocumentSpec`; where its values come
from is up to a :py:class:`ContentProvider`. :py:class:`SampleContentProvider`
assembles specs from a small table of fictional institutions and generated
identities, drawing every random choice from an injected generator so that
output is reproducible under a fixed seed.
"""
import logging
from typing import Optional, Sequence, Tuple

import numpy as np
from attrs import define, field

from docscene.composite.utils import Color, parse_color

logger = logging.getLogger(__name__)

#: Character replaced by a random digit in identifying-code templates.
PLACEHOLDER = "#"

DEFAULT_DISCLAIMER = "This card is non-transferable. Return to address above if found."


@define(frozen=True)
class Institution(object):
    """Issuing institution record."""

    name: str
    localized_name: str
    primary_color: Color = field(converter=parse_color)
    secondary_color: Color = field(converter=parse_color)
    address: str
    code_template: str
    programs: Tuple[str, ...] = field(converter=tuple)
    logo_url: Optional[str] = None


@define(frozen=True)
class Identity(object):
    """Generated holder identity."""

    name: str
    gender: str
    birth_date: str


@define(frozen=True)
class DocumentSpec(object):
    """
    Everything the document compositor needs to draw one card.

    Colors are ``(r, g, b, a)`` tuples; strings such as ``"#800000"`` are
    converted on construction.
    """

    title: str
    subtitle: str
    display_name: str
    code: str
    primary_color: Color = field(converter=parse_color)
    secondary_color: Color = field(default="#FFFFFF", converter=parse_color)
    accent_color: Color = field(default="#D00000", converter=parse_color)
    background: Color = field(default="#FFFFFF", converter=parse_color)
    localized_title: str = ""
    session: str = "2024-2025"
    program: str = ""
    logo_url: Optional[str] = None
    portrait_url: Optional[str] = None
    disclaimer: str = DEFAULT_DISCLAIMER
    width: int = 600
    height: int = 380


def generate_id_number(
    template: str, rng: np.random.Generator, placeholder: str = PLACEHOLDER
) -> str:
    """
    Replace every `placeholder` in `template` with an independent uniform
    random digit. The result has the same length as the template.
    """
    if len(placeholder) != 1:
        raise ValueError("Placeholder must be a single character: %r" % placeholder)
    return "".join(
        str(int(rng.integers(0, 10))) if c == placeholder else c for c in template
    )


class ContentProvider(object):
    """Interface of document content sources."""

    def create_spec(self, rng: np.random.Generator) -> DocumentSpec:
        raise NotImplementedError


#: Fictional institutions; none of these exist.
SAMPLE_INSTITUTIONS: Tuple[Institution, ...] = (
    Institution(
        name="Lakeshore Polytechnic Institute",
        localized_name="Lakeshore Polytechnic",
        primary_color="#800000",
        secondary_color="#FFD700",
        address="12 Harbour Road, Lakeshore",
        code_template="LPI-24-#####",
        programs=("Mechanical Engineering", "Applied Physics", "Architecture"),
    ),
    Institution(
        name="Northfield Academy of Arts",
        localized_name="Northfield Academy",
        primary_color="#003366",
        secondary_color="#FFFFFF",
        address="400 Gallery Lane, Northfield",
        code_template="241####042",
        programs=("Fine Arts", "Music", "Film Studies"),
    ),
    Institution(
        name="Greenvale College",
        localized_name="Greenvale",
        primary_color="#00563F",
        secondary_color="#F1C40F",
        address="7 Orchard Street, Greenvale",
        code_template="324####",
        programs=("Biology", "Chemistry", "Environmental Science"),
    ),
    Institution(
        name="Meridian State University",
        localized_name="Meridian State",
        primary_color="#253494",
        secondary_color="#999999",
        address="1 University Plaza, Meridian",
        code_template="24101###",
        programs=("Computer Science", "Economics", "Mathematics"),
    ),
)

SAMPLE_GIVEN_NAMES = {
    "male": ("Adrian", "Bruno", "Caleb", "Dmitri", "Elias", "Felix", "Hugo", "Ivan"),
    "female": ("Alma", "Beatrix", "Clara", "Dora", "Elena", "Freya", "Greta", "Ines"),
}

SAMPLE_SURNAMES = (
    "Abbott", "Brennan", "Castell", "Dunmore", "Ellery", "Fairbank",
    "Garrow", "Hollis", "Ingram", "Jessop", "Kestrel", "Lowther",
)


class SampleContentProvider(ContentProvider):
    """Builds specs from fictional sample tables."""

    def __init__(
        self,
        institutions: Sequence[Institution] = SAMPLE_INSTITUTIONS,
        portrait_url: Optional[str] = None,
        logo_url: Optional[str] = None,
        width: int = 600,
        height: int = 380,
    ):
        if not institutions:
            raise ValueError("At least one institution is required")
        self._institutions = tuple(institutions)
        self._portrait_url = portrait_url
        self._logo_url = logo_url
        self._width = width
        self._height = height

    def create_identity(self, rng: np.random.Generator) -> Identity:
        gender = "male" if rng.random() > 0.3 else "female"
        first = _choice(rng, SAMPLE_GIVEN_NAMES[gender])
        last = _choice(rng, SAMPLE_SURNAMES)
        birth_date = "199%d-%02d-%02d" % (
            rng.integers(0, 10),
            rng.integers(1, 13),
            rng.integers(1, 29),
        )
        return Identity("%s %s" % (first, last), gender, birth_date)

    def create_spec(self, rng: np.random.Generator) -> DocumentSpec:
        institution = _choice(rng, self._institutions)
        identity = self.create_identity(rng)
        code = generate_id_number(institution.code_template, rng)
        program = _choice(rng, institution.programs) if institution.programs else ""
        logger.debug("Selected %s for %s" % (institution.name, identity.name))
        return DocumentSpec(
            title=institution.name,
            subtitle=institution.address,
            display_name=identity.name,
            code=code,
            primary_color=institution.primary_color,
            secondary_color=institution.secondary_color,
            localized_title=institution.localized_name,
            program=program,
            logo_url=self._logo_url or institution.logo_url,
            portrait_url=self._portrait_url,
            width=self._width,
            height=self._height,
        )


def _choice(rng: np.random.Generator, items: Sequence):
    return items[int(rng.integers(0, len(items)))]
