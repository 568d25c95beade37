"""Character classes used by the CSS scanner.

Every predicate accepts a single character or the empty string, which the
cursor returns for positions outside the document.
"""

from __future__ import annotations

import string

from .models import Dialect

_ASCII_LETTERS = frozenset(string.ascii_letters)
_DIGITS = frozenset(string.digits)
_HEX_DIGITS = frozenset(string.hexdigits)
_WHITESPACE = frozenset(" \t\n\r\f\v")


def is_digit(ch: str) -> bool:
    return ch in _DIGITS


def is_hex_digit(ch: str) -> bool:
    return ch in _HEX_DIGITS


def is_eol(ch: str) -> bool:
    return ch == "\n" or ch == "\r"


def is_whitespace(ch: str) -> bool:
    return ch in _WHITESPACE


def is_graphic(ch: str) -> bool:
    """Printable, non-space ASCII."""
    return len(ch) == 1 and "!" <= ch <= "~"


def is_identifier_start(ch: str) -> bool:
    """Letters, underscore and any non-ASCII character."""
    return ch in _ASCII_LETTERS or ch == "_" or (len(ch) == 1 and ord(ch) >= 0x80)


def is_identifier_char(ch: str) -> bool:
    return is_identifier_start(ch) or ch in _DIGITS


def is_css_identifier_next(ch: str) -> bool:
    """Character allowed right after a ``-``, ``@``, ``$`` or ``:`` leader."""
    return is_identifier_start(ch) or ch == "-"


def is_css_identifier_char(ch: str) -> bool:
    return is_identifier_char(ch) or ch == "-"


def is_css_identifier_start(ch: str, ch_next: str) -> bool:
    return is_identifier_start(ch) or (ch == "-" and is_css_identifier_next(ch_next))


def is_css_identifier_start_ex(ch: str, ch_next: str, dialect: Dialect) -> bool:
    """Identifier start including ``@name`` and, outside plain CSS, ``$name``.

    Examples:
        is_css_identifier_start_ex("@", "m", Dialect.STANDARD)  # True
        is_css_identifier_start_ex("$", "x", Dialect.STANDARD)  # False
        is_css_identifier_start_ex("$", "x", Dialect.SCSS)  # True
    """
    if is_identifier_start(ch):
        return True
    leader = ch == "-" or ch == "@" or (ch == "$" and dialect is not Dialect.STANDARD)
    return leader and is_css_identifier_next(ch_next)


def is_number_start(ch: str, ch_next: str) -> bool:
    return ch in _DIGITS or (ch == "." and ch_next in _DIGITS)


def is_unicode_range_char(ch: str) -> bool:
    return ch in _HEX_DIGITS or ch == "?"
