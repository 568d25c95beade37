"""Keyword tables backing identifier classification."""

from __future__ import annotations

import tomllib
from bisect import bisect_left
from collections.abc import Iterable
from dataclasses import dataclass, fields
from functools import lru_cache
from pathlib import Path

from .exceptions import KeywordFileError


class KeywordList:
    """Sorted, case-folded keyword list with plain and prefixed lookups.

    A stored keyword may end in a delimiter, e.g. ``"nth-child("``; prefixed
    lookups accept the name in front of that delimiter.

    Examples:
        words = KeywordList(["hover", "nth-child("])
        words.in_list("hover")  # True
        words.in_list("nth-child")  # False
        words.in_list_prefixed("nth-child", "(")  # True
    """

    def __init__(self, words: Iterable[str] = ()):
        self._words = sorted({word.strip().lower() for word in words if word.strip()})

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self):
        return iter(self._words)

    def __repr__(self) -> str:
        return f"KeywordList({len(self._words)} words)"

    def in_list(self, name: str | None) -> bool:
        if not name:
            return False
        index = bisect_left(self._words, name)
        return index < len(self._words) and self._words[index] == name

    def in_list_prefixed(self, name: str | None, marker: str) -> bool:
        """Match `name` exactly or against a keyword stored as ``name + marker``."""
        if not name:
            return False
        size = len(name)
        index = bisect_left(self._words, name)
        while index < len(self._words):
            word = self._words[index]
            if not word.startswith(name):
                break
            if len(word) == size or word[size] == marker:
                return True
            index += 1
        return False


# Built-in lists. Hosts usually supply their own through `load_keywords`.
PROPERTIES = """
accent-color align-content align-items align-self all animation animation-delay
animation-direction animation-duration animation-fill-mode animation-iteration-count
animation-name animation-play-state animation-timing-function appearance aspect-ratio
backdrop-filter backface-visibility background background-attachment background-blend-mode
background-clip background-color background-image background-origin background-position
background-repeat background-size block-size border border-block border-bottom
border-bottom-color border-bottom-left-radius border-bottom-right-radius border-bottom-style
border-bottom-width border-collapse border-color border-image border-inline border-left
border-left-color border-left-style border-left-width border-radius border-right
border-right-color border-right-style border-right-width border-spacing border-style
border-top border-top-color border-top-left-radius border-top-right-radius border-top-style
border-top-width border-width bottom box-shadow box-sizing break-after break-before
break-inside caption-side caret-color clear clip clip-path color color-scheme column-count
column-gap column-rule column-span column-width columns contain container container-name
container-type content counter-increment counter-reset cursor direction display
empty-cells filter flex flex-basis flex-direction flex-flow flex-grow flex-shrink flex-wrap
float font font-display font-family font-feature-settings font-kerning font-size
font-stretch font-style font-variant font-weight gap grid grid-area grid-auto-columns
grid-auto-flow grid-auto-rows grid-column grid-column-end grid-column-start grid-row
grid-row-end grid-row-start grid-template grid-template-areas grid-template-columns
grid-template-rows height hyphens image-rendering inline-size inset isolation
justify-content justify-items justify-self left letter-spacing line-break line-height
list-style list-style-image list-style-position list-style-type margin margin-block
margin-bottom margin-inline margin-left margin-right margin-top mask max-height max-width
min-height min-width mix-blend-mode object-fit object-position opacity order orphans
outline outline-color outline-offset outline-style outline-width overflow overflow-wrap
overflow-x overflow-y padding padding-block padding-bottom padding-inline padding-left
padding-right padding-top page-break-after page-break-before perspective place-content
place-items pointer-events position quotes resize right rotate row-gap scale
scroll-behavior scroll-margin scroll-padding scroll-snap-align scroll-snap-type
src tab-size table-layout text-align text-decoration text-decoration-color
text-decoration-line text-indent text-overflow text-shadow text-transform top touch-action
transform transform-origin transition transition-delay transition-duration
transition-property transition-timing-function translate unicode-bidi unicode-range
user-select vertical-align visibility white-space widows width will-change word-break
word-spacing word-wrap writing-mode z-index zoom
"""

AT_RULES = """
charset color-profile container counter-style document font-face font-feature-values
font-palette-values import keyframes layer media namespace page property scope
starting-style supports viewport -moz-document -webkit-keyframes
at-root content debug each else error extend for forward function if include mixin
return use warn while plugin
"""

PSEUDO_CLASSES = """
active any-link autofill blank checked current( default defined dir( disabled empty
enabled first first-child first-of-type focus focus-visible focus-within fullscreen
future has( host( host-context( hover in-range indeterminate invalid is( lang( last-child
last-of-type left link local-link modal not( nth-child( nth-last-child( nth-last-of-type(
nth-of-type( only-child only-of-type optional out-of-range past paused picture-in-picture
placeholder-shown playing read-only read-write required right root scope state( target
target-within user-invalid user-valid valid visited where(
"""

PSEUDO_ELEMENTS = """
after backdrop before cue cue( cue-region file-selector-button first-letter first-line
grammar-error highlight( marker part( placeholder selection slotted( spelling-error
target-text view-transition view-transition-group( view-transition-image-pair(
view-transition-new( view-transition-old(
"""

MATH_FUNCTIONS = """
abs( acos( asin( atan( atan2( calc( clamp( cos( exp( hypot( log( max( min( mod( pow(
rem( round( sign( sin( sqrt( tan( -moz-calc( -webkit-calc(
"""


@dataclass
class KeywordSet:
    """The five keyword lists consulted during classification."""

    property: KeywordList
    at_rule: KeywordList
    pseudo_class: KeywordList
    pseudo_element: KeywordList
    math_function: KeywordList


def default_keywords() -> KeywordSet:
    """Keyword lists covering current CSS plus Scss/Less at-rules."""
    return KeywordSet(
        property=KeywordList(PROPERTIES.split()),
        at_rule=KeywordList(AT_RULES.split()),
        pseudo_class=KeywordList(PSEUDO_CLASSES.split()),
        pseudo_element=KeywordList(PSEUDO_ELEMENTS.split()),
        math_function=KeywordList(MATH_FUNCTIONS.split()),
    )


def load_keywords(path: Path) -> KeywordSet:
    """Load keyword lists from a TOML file.

    Each list is either an array of strings or one whitespace-separated
    string, keyed by the `KeywordSet` field name. Lists missing from the file
    keep the built-in defaults.

    Args:
        path: TOML file to read.

    Returns:
        KeywordSet: Keyword lists with file entries applied.

    Raises:
        KeywordFileError: If the file cannot be read, is not valid TOML, or
            holds unknown keys or values of the wrong type.

    Examples:
        load_keywords(Path("keywords.toml"))
    """
    try:
        with open(path, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError) as error:
        raise KeywordFileError(f"Cannot load keywords from {path}: {error}") from error

    keywords = default_keywords()
    known = {field.name for field in fields(KeywordSet)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise KeywordFileError(f"Unknown keyword lists in {path}: {', '.join(unknown)}")

    for name, value in data.items():
        if isinstance(value, str):
            words = value.split()
        elif isinstance(value, list) and all(isinstance(word, str) for word in value):
            words = value
        else:
            raise KeywordFileError(f"`{name}` in {path} must be a string or a list of strings")
        setattr(keywords, name, KeywordList(words))

    return keywords


@lru_cache(maxsize=16)
def _load_keywords_version(path: str, mtime_ns: int, size: int) -> KeywordSet:
    return load_keywords(Path(path))


def load_keywords_cached(path: Path) -> KeywordSet:
    """Like `load_keywords`, but reuse the parsed lists until the file changes.

    The file is re-read when its modification time or size changes. The
    returned `KeywordSet` is shared between callers and must not be modified.

    Raises:
        KeywordFileError: If the file cannot be read or parsed.
    """
    try:
        info = path.stat()
    except OSError as error:
        raise KeywordFileError(f"Cannot load keywords from {path}: {error}") from error
    return _load_keywords_version(str(path.resolve()), info.st_mtime_ns, info.st_size)
