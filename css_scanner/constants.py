"""Constants used across the css-scanner package."""

from __future__ import annotations

# Fold levels, laid out the way Scintilla-style editors store them.
FOLD_LEVEL_BASE = 0x400
FOLD_LEVEL_HEADER_FLAG = 0x2000
FOLD_LEVEL_NUMBER_MASK = 0x0FFF
FOLD_LEVEL_SHIFT = 16

# Line state layout: (shift, width) per field.
PROPERTY_VALUE_BITS = (0, 1)
ATTRIBUTE_SELECTOR_BITS = (1, 1)
CALC_LEVEL_BITS = (2, 6)
PAREN_COUNT_BITS = (8, 8)
SELECTOR_LEVEL_BITS = (16, 8)

MAX_CALC_LEVEL = (1 << CALC_LEVEL_BITS[1]) - 1
MAX_PAREN_COUNT = (1 << PAREN_COUNT_BITS[1]) - 1
MAX_SELECTOR_LEVEL = (1 << SELECTOR_LEVEL_BITS[1]) - 1

# Lowered token text used for keyword lookups; longer tokens never match.
TOKEN_BUFFER_SIZE = 128

# Pseudo-classes whose arguments are selector lists.
SELECTOR_LIST_PSEUDO_CLASSES = frozenset({"is", "has", "not", "where", "current"})

URL_FUNCTIONS = frozenset({"url", "url-prefix"})

# Maximum code points in an escape / unicode-range token.
ESCAPE_HEX_DIGITS = 6
UNICODE_RANGE_DIGITS = 7

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024

CSS_EXTENSIONS = (".css", ".scss", ".sass", ".less", ".hss")
