"""Incremental CSS scanner.

The scanner walks a range of a `Document` one character at a time, assigns
every character a `Style`, and stores a fold level and a packed line state
for each line it finishes. Scanning from the start of any line, with the
style of the character before it, gives the same result as scanning the
whole document.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path

from .charclass import (
    is_css_identifier_char,
    is_css_identifier_next,
    is_css_identifier_start,
    is_css_identifier_start_ex,
    is_digit,
    is_eol,
    is_graphic,
    is_hex_digit,
    is_identifier_char,
    is_number_start,
    is_unicode_range_char,
)
from .classifier import classify_run, opens_url
from .config import ScannerConfig, normalize_config, validate_config
from .constants import (
    ESCAPE_HEX_DIGITS,
    FOLD_LEVEL_BASE,
    FOLD_LEVEL_NUMBER_MASK,
    MAX_CALC_LEVEL,
    MAX_PAREN_COUNT,
    TOKEN_BUFFER_SIZE,
    UNICODE_RANGE_DIGITS,
)
from .cursor import ScanCursor, look_back_non_white
from .document import Document
from .exceptions import InvalidRangeError
from .keywords import KeywordSet, default_keywords, load_keywords_cached
from .linestate import carried_fold_level, decode_line_state, encode_line_state, pack_fold_level
from .models import (
    IDENTIFIER_RUN_STYLES,
    PROPERTY_STYLES,
    Dialect,
    ScanResult,
    ScanState,
    Style,
    Token,
    is_space_equivalent,
)

logger = logging.getLogger(__name__)


class Step(Enum):
    """Outcome of one transition.

    Attributes:
        NEXT: Finish the current character and move on.
        REDISPATCH: Examine the current character again under the new style.
    """

    NEXT = auto()
    REDISPATCH = auto()


@dataclass(frozen=True)
class ScanOptions:
    dialect: Dialect
    fold: bool
    keywords: KeywordSet


_OPERATOR_STYLES = frozenset({Style.OPERATOR, Style.OPERATOR_IN_CALC, Style.HTML_COMMENT_DELIMITER})
_BLOCK_COMMENT_STYLES = frozenset({Style.BLOCK_COMMENT, Style.BLOCK_COMMENT_DOC})
_LINE_COMMENT_STYLES = frozenset({Style.LINE_COMMENT, Style.LINE_COMMENT_DOC})
_QUOTED_STYLES = frozenset({Style.STRING_SINGLE_QUOTED, Style.STRING_DOUBLE_QUOTED, Style.URL})
_CLASSIFIED_RUN_STYLES = frozenset({Style.IDENTIFIER, Style.PSEUDO_CLASS, Style.PSEUDO_ELEMENT})
_CLOSING_QUOTES = {Style.STRING_SINGLE_QUOTED: "'", Style.STRING_DOUBLE_QUOTED: '"'}
_CALC_OPERATORS = ("+", "-", "*", "/")


def _opens_interpolation(ch: str, dialect: Dialect) -> bool:
    return (ch == "#" and dialect is Dialect.SCSS) or (ch == "@" and dialect is Dialect.LESS)


def _continues_number(sc: ScanCursor) -> bool:
    ch = sc.ch
    if sc.document.text[sc.style_start] == "#":
        # hex colour
        return is_identifier_char(ch)
    if is_digit(ch):
        return True
    if ch == ".":
        return sc.ch_prev != "." and is_digit(sc.ch_next)
    if ch in ("e", "E"):
        return is_digit(sc.ch_next) or (
            sc.ch_next in ("+", "-") and is_digit(sc.relative(2))
        )
    if ch in ("+", "-"):
        return sc.ch_prev in ("e", "E") and is_digit(sc.ch_next)
    return False


def _end_line(sc: ScanCursor, st: ScanState, opts: ScanOptions) -> None:
    # An open interpolation ends with its line.
    st.variable_interpolation = None
    if opts.fold:
        st.fold_next = min(max(st.fold_next, FOLD_LEVEL_BASE), FOLD_LEVEL_NUMBER_MASK)
        sc.document.set_fold_level(sc.line, pack_fold_level(st.fold_current, st.fold_next))
    sc.document.set_line_state(sc.line, encode_line_state(st))
    st.fold_current = st.fold_next


def _finish_char(sc: ScanCursor, st: ScanState, opts: ScanOptions) -> None:
    if not sc.more():
        return
    if not is_space_equivalent(sc.state):
        st.ch_prev_non_white = sc.ch
        st.style_prev_non_white = sc.state
    if sc.at_line_end:
        _end_line(sc, st, opts)


def _skip(sc: ScanCursor, st: ScanState, opts: ScanOptions, count: int = 1) -> None:
    """Consume characters inside a transition."""
    for _ in range(count):
        _finish_char(sc, st, opts)
        sc.forward()


def _consume_into(sc: ScanCursor, st: ScanState, opts: ScanOptions, style: Style) -> Step:
    """Consume the current character and start `style` on the next one."""
    _skip(sc, st, opts)
    sc.set_state(style)
    return Step.REDISPATCH


def _close_identifier_run(sc: ScanCursor, st: ScanState, opts: ScanOptions) -> Step:
    style = sc.state
    if style in _CLASSIFIED_RUN_STYLES or (
        style is Style.AT_RULE and opts.dialect is Dialect.LESS
    ):
        name = sc.current_lowered(TOKEN_BUFFER_SIZE)
        ch_next = ""
        if style is Style.IDENTIFIER:
            ch_next = sc.next_non_white(skip_current=sc.ch == "(")
            if sc.ch == "(" and opens_url(name, ch_next, opts.dialect):
                st.fold_next += 1
                st.paren_count = min(st.paren_count + 1, MAX_PAREN_COUNT)
                sc.set_state(Style.OPERATOR)
                return _consume_into(sc, st, opts, Style.URL)
        sc.change_state(
            classify_run(style, name, st, sc.ch, ch_next, opts.dialect, opts.keywords)
        )

    st.style_prev_non_white = sc.state
    sc.set_state(Style.DEFAULT)
    return Step.NEXT


def _step_quoted(sc: ScanCursor, st: ScanState, opts: ScanOptions) -> Step:
    if sc.ch == "\\":
        if not is_eol(sc.ch_next):
            st.escape.outer_style = sc.state
            st.escape.digits_left = ESCAPE_HEX_DIGITS if is_hex_digit(sc.ch_next) else 1
            sc.set_state(Style.ESCAPE_CHAR)
            _skip(sc, st, opts)
    elif sc.ch == ")" and sc.state is Style.URL:
        sc.set_state(Style.DEFAULT)
    elif sc.ch == _CLOSING_QUOTES.get(sc.state):
        _skip(sc, st, opts)
        sc.set_state(Style.DEFAULT)
    elif sc.ch_next == "{" and _opens_interpolation(sc.ch, opts.dialect):
        st.variable_interpolation = sc.state
        st.fold_next += 1
        sc.set_state(Style.OPERATOR)
        _skip(sc, st, opts)
    return Step.NEXT


def _step_token(sc: ScanCursor, st: ScanState, opts: ScanOptions) -> Step:
    """Apply the transition rule of the current style to the current character."""
    state = sc.state

    if state in _OPERATOR_STYLES:
        sc.set_state(Style.DEFAULT)

    elif state is Style.NUMBER:
        if not _continues_number(sc):
            if is_css_identifier_start(sc.ch, sc.ch_next):
                sc.change_state(Style.DIMENSION)
            else:
                if sc.ch == "%":
                    _skip(sc, st, opts)
                sc.set_state(Style.DEFAULT)

    elif state in _BLOCK_COMMENT_STYLES:
        if sc.match("*/"):
            st.fold_next -= 1
            _skip(sc, st, opts, 2)
            sc.set_state(Style.DEFAULT)

    elif state in _LINE_COMMENT_STYLES:
        if sc.at_line_start:
            sc.set_state(Style.DEFAULT)

    elif state in IDENTIFIER_RUN_STYLES:
        if not is_css_identifier_char(sc.ch):
            return _close_identifier_run(sc, st, opts)

    elif state in _QUOTED_STYLES:
        return _step_quoted(sc, st, opts)

    elif state is Style.ESCAPE_CHAR:
        st.escape.digits_left -= 1
        if st.escape.digits_left <= 0 or not is_hex_digit(sc.ch):
            sc.set_state(st.escape.outer_style)
            return Step.REDISPATCH

    elif state is Style.UNICODE_RANGE:
        if sc.ch == "-" and is_unicode_range_char(sc.ch_next):
            st.escape.digits_left = UNICODE_RANGE_DIGITS
        else:
            st.escape.digits_left -= 1
            if st.escape.digits_left <= 0 or not is_unicode_range_char(sc.ch):
                sc.set_state(Style.DEFAULT)

    return Step.NEXT


def _track_operator(sc: ScanCursor, st: ScanState, opts: ScanOptions) -> Step:
    """Update nesting context for structural punctuation."""
    ch = sc.ch
    if ch == "{":
        st.fold_next += 1
        if _opens_interpolation(sc.ch_prev, opts.dialect):
            st.variable_interpolation = Style.DEFAULT
        else:
            st.reset_block()
    elif ch == "}":
        st.fold_next -= 1
        if st.variable_interpolation is not None:
            resume = st.variable_interpolation
            st.variable_interpolation = None
            return _consume_into(sc, st, opts, resume)
        st.reset_block()
    elif ch == "[":
        st.fold_next += 1
        st.attribute_selector = True
    elif ch == "]":
        st.fold_next -= 1
        st.attribute_selector = False
    elif ch == "(":
        st.fold_next += 1
        st.paren_count = min(st.paren_count + 1, MAX_PAREN_COUNT)
        if st.calc_level != 0 or st.calc_func:
            st.calc_func = False
            st.calc_level = min(st.calc_level + 1, MAX_CALC_LEVEL)
    elif ch == ")":
        st.fold_next -= 1
        st.paren_count = max(st.paren_count - 1, 0)
        st.calc_level = max(st.calc_level - 1, 0)
        st.selector_level = max(st.selector_level - 1, 0)
    elif ch == ":":
        if st.paren_count == 0 and st.style_prev_non_white not in PROPERTY_STYLES:
            st.property_value = True
    elif ch == ";":
        if st.paren_count == 0 and not st.attribute_selector:
            st.property_value = False
    elif ch in _CALC_OPERATORS:
        if st.calc_level != 0 and (
            st.ch_prev_non_white == ")"
            or st.style_prev_non_white in (Style.NUMBER, Style.DIMENSION)
        ):
            sc.change_state(Style.OPERATOR_IN_CALC)
    return Step.NEXT


def _start_token(sc: ScanCursor, st: ScanState, opts: ScanOptions) -> Step:
    """Detect the token that starts at the current character."""
    ch, ch_next = sc.ch, sc.ch_next

    if ch == "/" and ch_next in ("*", "/"):
        block = ch_next == "*"
        if block:
            st.fold_next += 1
        sc.set_state(Style.BLOCK_COMMENT if block else Style.LINE_COMMENT)
        _skip(sc, st, opts)
        if sc.ch_next == "!" or sc.ch == sc.ch_next:
            sc.change_state(Style.BLOCK_COMMENT_DOC if block else Style.LINE_COMMENT_DOC)
    elif ch == "'":
        sc.set_state(Style.STRING_SINGLE_QUOTED)
    elif ch == '"':
        sc.set_state(Style.STRING_DOUBLE_QUOTED)
    elif sc.match("<!--") or sc.match("-->"):
        sc.set_state(Style.HTML_COMMENT_DELIMITER)
        _skip(sc, st, opts, 3 if ch == "<" else 2)
    elif is_number_start(ch, ch_next) or (
        ch == "#"
        and (st.property_value or st.paren_count > st.selector_level)
        and is_hex_digit(ch_next)
    ):
        sc.set_state(Style.NUMBER)
    elif (
        ch_next == "+"
        and ch in ("u", "U")
        and st.property_value
        and st.ch_prev_non_white in (":", ",")
        and is_unicode_range_char(sc.relative(2))
    ):
        st.escape.digits_left = UNICODE_RANGE_DIGITS
        sc.set_state(Style.UNICODE_RANGE)
        _skip(sc, st, opts)
    elif is_css_identifier_start_ex(ch, ch_next, opts.dialect):
        st.ch_before = st.ch_prev_non_white
        if ch == "@":
            sc.set_state(Style.AT_RULE)
        elif ch == "$":
            sc.set_state(Style.VARIABLE)
        else:
            sc.set_state(Style.IDENTIFIER)
    elif sc.match("::") and is_css_identifier_next(sc.relative(2)):
        sc.set_state(Style.PSEUDO_ELEMENT)
        _skip(sc, st, opts, 2)
    elif (
        ch == ":"
        and st.style_prev_non_white not in PROPERTY_STYLES
        and is_css_identifier_next(ch_next)
    ):
        sc.set_state(Style.PSEUDO_CLASS)
        _skip(sc, st, opts)
    elif is_graphic(ch):
        sc.set_state(Style.OPERATOR)
        return _track_operator(sc, st, opts)
    return Step.NEXT


def _resolve_options(config: ScannerConfig | None, keywords: KeywordSet | None) -> ScanOptions:
    config = config or ScannerConfig()
    validate_config(config)
    config = normalize_config(config)
    if keywords is None:
        if config.keywords_file:
            keywords = load_keywords_cached(Path(config.keywords_file))
        else:
            keywords = default_keywords()
    return ScanOptions(dialect=config.dialect, fold=config.fold, keywords=keywords)


def _restore_state(document: Document, start: int, init_style: Style) -> ScanState:
    st = ScanState()
    line = document.line_from_position(start)
    if line > 0:
        st.fold_current = carried_fold_level(document.fold_level(line - 1))
        decode_line_state(document.line_state(line - 1), st)
    if start > 0 and is_space_equivalent(init_style):
        st.ch_prev_non_white, st.style_prev_non_white = look_back_non_white(document, start)
    st.fold_next = st.fold_current
    return st


def scan(
    document: Document,
    start: int,
    length: int,
    init_style: Style = Style.DEFAULT,
    config: ScannerConfig | None = None,
    keywords: KeywordSet | None = None,
) -> ScanResult:
    """Style ``document[start:start + length]`` and fill in per-line data.

    Args:
        document: Document to scan; styles, fold levels and line states are
            written back into it.
        start: First position to scan, normally the start of a line.
        length: Number of characters to scan.
        init_style: Style of the character before `start` (Default at the
            document start).
        config: Dialect and folding settings; defaults to `ScannerConfig()`.
        keywords: Keyword lists; defaults to `config.keywords_file` when set,
            otherwise `default_keywords()`.

    Returns:
        ScanResult: Range scanned and the style current at its end.

    Raises:
        InvalidRangeError: If the range does not fit inside the document.
        ConfigError: If the configuration fails validation.
        KeywordFileError: If `config.keywords_file` cannot be loaded.

    Examples:
        doc = Document(".foo { color: red; }")
        scan(doc, 0, len(doc))
    """
    if start < 0 or length < 0 or start + length > len(document):
        raise InvalidRangeError(start, length, len(document))

    opts = _resolve_options(config, keywords)
    st = _restore_state(document, start, init_style)
    logger.debug(
        "Scanning [%d, %d) from %s with %s", start, start + length, init_style.name, st
    )

    sc = ScanCursor(document, start, length, init_style)
    first_line = sc.line
    while sc.more():
        if _step_token(sc, st, opts) is Step.REDISPATCH:
            continue
        if not sc.more():
            break
        if sc.state is Style.DEFAULT and _start_token(sc, st, opts) is Step.REDISPATCH:
            continue
        _finish_char(sc, st, opts)
        sc.forward()
    sc.complete()

    last_position = max(start, start + length - 1)
    return ScanResult(
        start=start,
        end=start + length,
        first_line=first_line,
        last_line=document.line_from_position(last_position),
        end_style=sc.state,
    )


def rescan(
    document: Document,
    position: int,
    config: ScannerConfig | None = None,
    keywords: KeywordSet | None = None,
) -> ScanResult:
    """Restyle from the line containing `position` to the end of the document.

    This is the path an editor takes after an edit at `position`: everything
    before the edited line keeps its styles and per-line data.

    Raises:
        InvalidRangeError: If `position` is outside the document.
    """
    if not 0 <= position <= len(document):
        raise InvalidRangeError(position, 0, len(document))
    start = document.line_start(document.line_from_position(position))
    init_style = document.style_at(start - 1) if start > 0 else Style.DEFAULT
    return scan(document, start, len(document) - start, init_style, config, keywords)


def iter_tokens(document: Document, start: int = 0, end: int | None = None):
    """Yield maximal runs of equal style from already styled text."""
    end = len(document) if end is None else end
    run_start = start
    for position in range(start + 1, end + 1):
        if position == end or document.styles[position] != document.styles[run_start]:
            yield Token(
                run_start, position, document.styles[run_start], document.text[run_start:position]
            )
            run_start = position


def tokenize(
    text: str, config: ScannerConfig | None = None, keywords: KeywordSet | None = None
) -> list[Token]:
    """Scan `text` from scratch and return its style runs.

    Examples:
        [token.style for token in tokenize("a {}")]
        # [Style.TAG, Style.DEFAULT, Style.OPERATOR]
    """
    document = Document(text)
    scan(document, 0, len(document), Style.DEFAULT, config, keywords)
    return list(iter_tokens(document))
