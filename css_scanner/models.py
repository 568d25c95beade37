"""Data models for css-scanner."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum, auto

from .constants import FOLD_LEVEL_BASE


class Style(IntEnum):
    """Lexical categories assigned to every character of a stylesheet.

    The numeric values are what a host editor stores per character.
    """

    DEFAULT = 0
    OPERATOR = auto()
    OPERATOR_IN_CALC = auto()
    HTML_COMMENT_DELIMITER = auto()
    NUMBER = auto()
    DIMENSION = auto()
    BLOCK_COMMENT = auto()
    BLOCK_COMMENT_DOC = auto()
    LINE_COMMENT = auto()
    LINE_COMMENT_DOC = auto()
    STRING_SINGLE_QUOTED = auto()
    STRING_DOUBLE_QUOTED = auto()
    URL = auto()
    ESCAPE_CHAR = auto()
    UNICODE_RANGE = auto()
    VARIABLE = auto()
    AT_RULE = auto()
    IDENTIFIER = auto()
    PSEUDO_CLASS = auto()
    UNKNOWN_PSEUDO_CLASS = auto()
    PSEUDO_ELEMENT = auto()
    UNKNOWN_PSEUDO_ELEMENT = auto()
    FUNCTION = auto()
    IMPORTANT = auto()
    PROPERTY = auto()
    UNKNOWN_PROPERTY = auto()
    VALUE = auto()
    ATTRIBUTE = auto()
    CLASS = auto()
    ID = auto()
    PLACEHOLDER = auto()
    TAG = auto()


# Styles skipped when looking for the previous significant character.
SPACE_EQUIVALENT_STYLES = frozenset(
    {
        Style.DEFAULT,
        Style.BLOCK_COMMENT,
        Style.BLOCK_COMMENT_DOC,
        Style.LINE_COMMENT,
        Style.LINE_COMMENT_DOC,
        Style.HTML_COMMENT_DELIMITER,
    }
)

# Styles whose runs end on the first non-identifier character.
IDENTIFIER_RUN_STYLES = frozenset(
    {
        Style.DIMENSION,
        Style.VARIABLE,
        Style.AT_RULE,
        Style.IDENTIFIER,
        Style.PSEUDO_CLASS,
        Style.PSEUDO_ELEMENT,
    }
)

PROPERTY_STYLES = frozenset({Style.PROPERTY, Style.UNKNOWN_PROPERTY})


def is_space_equivalent(style: Style) -> bool:
    """Return True when `style` does not count as significant text."""
    return style in SPACE_EQUIVALENT_STYLES


class Dialect(Enum):
    """CSS preprocessor dialects understood by the scanner.

    Attributes:
        STANDARD: Plain CSS.
        SCSS: Sass/SCSS; ``$variables``, ``#{...}`` interpolation, ``%placeholder``.
        LESS: Less; ``@variables`` and ``@{...}`` interpolation.
        HSS: HSS; plain CSS rules plus ``$variables``.
    """

    STANDARD = 0
    SCSS = 1
    LESS = 2
    HSS = 3

    @classmethod
    def from_name(cls, name: str) -> Dialect:
        """Look up a dialect by its case-insensitive name.

        Raises:
            ValueError: If `name` is not a known dialect.
        """
        try:
            return cls[name.strip().upper()]
        except KeyError as error:
            choices = ", ".join(member.name.lower() for member in cls)
            raise ValueError(f"Unknown dialect {name!r} (expected one of: {choices})") from error


@dataclass
class EscapeSequence:
    """Sub-state of an escape sequence or unicode-range token.

    Attributes:
        outer_style: Style restored once the escape sequence ends.
        digits_left: Remaining characters the token may still consume.
    """

    outer_style: Style = Style.DEFAULT
    digits_left: int = 0


@dataclass
class ScanState:
    """Mutable context threaded through every step of a scan.

    Only the first five fields survive a line boundary (see `linestate`);
    the others are rebuilt from already styled text on restart.

    Attributes:
        property_value: Inside the value part of a declaration.
        attribute_selector: Inside ``[...]``.
        calc_level: Nesting depth inside math-function arguments.
        paren_count: Nesting depth inside any ``(...)``.
        selector_level: Nesting depth inside selector-list pseudo-classes.
        ch_before: Previous significant character when the current run started.
        ch_prev_non_white: Last significant character seen.
        style_prev_non_white: Style of the last significant character.
        variable_interpolation: Style to restore when an interpolation closes.
        calc_func: A math-function name was just seen and its ``(`` is pending.
        escape: Escape or unicode-range sub-state.
        fold_current: Fold level carried into the current line.
        fold_next: Running fold level for the next line.
    """

    property_value: bool = False
    attribute_selector: bool = False
    calc_level: int = 0
    paren_count: int = 0
    selector_level: int = 0
    ch_before: str = ""
    ch_prev_non_white: str = ""
    style_prev_non_white: Style = Style.DEFAULT
    variable_interpolation: Style | None = None
    calc_func: bool = False
    escape: EscapeSequence = field(default_factory=EscapeSequence)
    fold_current: int = FOLD_LEVEL_BASE
    fold_next: int = FOLD_LEVEL_BASE

    def reset_block(self) -> None:
        """Forget declaration context when a rule body opens or closes."""
        self.property_value = False
        self.attribute_selector = False
        self.paren_count = 0
        self.calc_level = 0
        self.selector_level = 0


@dataclass
class ScanResult:
    """Summary of a completed scan.

    Attributes:
        start: First position scanned.
        end: Position after the last character scanned.
        first_line: Line containing `start`.
        last_line: Line containing the last scanned character.
        end_style: Style still current when the range ended.
    """

    start: int
    end: int
    first_line: int
    last_line: int
    end_style: Style


@dataclass(frozen=True)
class Token:
    """A maximal run of characters sharing one style."""

    start: int
    end: int
    style: Style
    text: str
