"""Line classification for listing sheets.

Every trimmed line is tested against an ordered table of rules and takes
the kind of the first rule that matches:

    CityMarker -> Noise -> AreaHeading -> PropertyData -> Unclassified

City markers and area headings update the LineContext passed in, so lines
must be classified in document order with one context per document.
"""

import re
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence

import structlog

from .models import LineContext, LineKind
from .text import normalize_area

logger = structlog.get_logger()


DEFAULT_CITY_TOKENS: tuple[str, ...] = ("delhi",)

CITY_MARKER_MAX_LENGTH = 30
AREA_MIN_LENGTH = 5
AREA_MAX_LENGTH = 50

MONTHS = (
    "JANUARY", "FEBRUARY", "MARCH", "APRIL", "MAY", "JUNE", "JULY",
    "AUGUST", "SEPTEMBER", "OCTOBER", "NOVEMBER", "DECEMBER",
)

# Header/footer vocabulary: report titles, month names, page numbers
NOISE_PATTERN = re.compile(
    r"\b(?:RESIDENTIAL|SALE|PAGE|" + "|".join(MONTHS) + r")\b|^\d+$",
    re.IGNORECASE,
)

AREA_SHAPE = re.compile(r"^[A-Za-z\s\-.]+$")

# Words that can never be part of a locality name
RESERVED_AREA_WORDS = re.compile(
    r"\d|₹|@|U/C|U/R|\b(?:"
    r"BR|BHK|GAJ|GJ|YD|YARD|SQFT|SQ\.FT|SFT|FT|"
    r"BMT|GF|FF|SF|TF|TERR|STILT|BASEMENT|GROUND|FIRST|SECOND|THIRD|"
    r"READY|BOOKING|RS|CR|CRORE|"
    r"PLOT|FLAT|SALE"
    r")S?\b",
    re.IGNORECASE,
)

DIGIT = re.compile(r"\d")
UNIT_TOKEN = re.compile(r"YD|YARD|GAJ|GJ|SQFT|SQ\.FT|SFT|FT", re.IGNORECASE)
BEDROOM_TOKEN = re.compile(r"BR|BHK", re.IGNORECASE)
FLOOR_CODE_STRICT = re.compile(r"\b(?:GF|FF|SF|TF|BMT)\b", re.IGNORECASE)
FLOOR_CODE_LOOSE = re.compile(r"GF|FF|SF|TF|BMT", re.IGNORECASE)


LinePredicate = Callable[[str, LineContext], bool]
ContextUpdate = Callable[[str, LineContext], None]


@dataclass(frozen=True)
class ClassificationRule:
    """One entry of the ordered classification table."""

    kind: LineKind
    matches: LinePredicate
    apply: Optional[ContextUpdate] = None


def city_marker_pattern(city_tokens: Iterable[str]) -> re.Pattern[str]:
    """Build the case-insensitive pattern that recognises city lines."""
    tokens = [re.escape(token.strip()) for token in city_tokens if token.strip()]
    if not tokens:
        raise ValueError("At least one city token is required")
    return re.compile("|".join(tokens), re.IGNORECASE)


def is_noise(line: str) -> bool:
    """Check whether a line is header/footer text."""
    return bool(NOISE_PATTERN.search(line))


def is_area_heading(line: str) -> bool:
    """Check whether a line names a locality."""
    return (
        AREA_MIN_LENGTH <= len(line) <= AREA_MAX_LENGTH
        and bool(AREA_SHAPE.match(line))
        and not RESERVED_AREA_WORDS.search(line)
    )


def has_property_tokens(line: str, *, strict_floor_matching: bool = True) -> bool:
    """Check whether a line carries property data.

    A property line has a digit and at least one unit, bedroom or floor
    code token. With strict_floor_matching the floor codes must stand as
    whole words.
    """
    if not DIGIT.search(line):
        return False
    floor_codes = FLOOR_CODE_STRICT if strict_floor_matching else FLOOR_CODE_LOOSE
    return bool(
        UNIT_TOKEN.search(line)
        or BEDROOM_TOKEN.search(line)
        or floor_codes.search(line)
    )


def _set_city(line: str, context: LineContext) -> None:
    context.city = line.strip().lower()
    logger.debug("city_detected", city=context.city)


def _set_area(line: str, context: LineContext) -> None:
    context.area = normalize_area(line)
    logger.debug("area_detected", area=context.area)


class LineClassifier:
    """Classify sheet lines with an ordered predicate/handler table."""

    def __init__(
        self,
        city_tokens: Sequence[str] = DEFAULT_CITY_TOKENS,
        *,
        strict_floor_matching: bool = True,
    ):
        """
        Initialize the classifier.

        Args:
            city_tokens: Words that mark a short line as a city heading.
            strict_floor_matching: Require word boundaries around floor
                codes when deciding whether a line holds property data.
        """
        self._city_pattern = city_marker_pattern(city_tokens)
        self._strict_floor_matching = strict_floor_matching
        self.rules: list[ClassificationRule] = [
            ClassificationRule(LineKind.CITY_MARKER, self._is_city_marker, _set_city),
            ClassificationRule(LineKind.NOISE, lambda line, _: is_noise(line)),
            ClassificationRule(
                LineKind.AREA_HEADING, lambda line, _: is_area_heading(line), _set_area
            ),
            ClassificationRule(LineKind.PROPERTY_DATA, self._is_property_data),
        ]

    def classify(self, line: str, context: LineContext) -> LineKind:
        """Classify one line, updating context for city and area lines."""
        for rule in self.rules:
            if rule.matches(line, context):
                if rule.apply is not None:
                    rule.apply(line, context)
                return rule.kind
        return LineKind.UNCLASSIFIED

    def _is_city_marker(self, line: str, context: LineContext) -> bool:
        return len(line) < CITY_MARKER_MAX_LENGTH and bool(self._city_pattern.search(line))

    def _is_property_data(self, line: str, context: LineContext) -> bool:
        return context.has_area and has_property_tokens(
            line, strict_floor_matching=self._strict_floor_matching
        )


__all__ = [
    "ClassificationRule",
    "LineClassifier",
    "city_marker_pattern",
    "has_property_tokens",
    "is_area_heading",
    "is_noise",
]
