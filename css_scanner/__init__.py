"""
css-scanner: incremental tokenizer for CSS, Scss, Less and HSS stylesheets.

Every character gets a lexical style, every line gets a fold level and a
packed line state, and scanning can restart at any line with the same result
as a full scan.

CLI Usage:
    css-scanner site.scss

Library Usage:
    from css_scanner import Document, ScannerConfig, rescan, scan

    document = Document(".foo { color: red; }")
    scan(document, 0, len(document), config=ScannerConfig(dialect="scss"))
    document.replace(7, 12, "margin")
    rescan(document, 7, config=ScannerConfig(dialect="scss"))
"""

from .config import ConfigError, ScannerConfig
from .document import Document
from .exceptions import InvalidRangeError, KeywordFileError, LineStateError, ScanError
from .keywords import KeywordList, KeywordSet, default_keywords, load_keywords, load_keywords_cached
from .lexer import iter_tokens, rescan, scan, tokenize
from .linestate import decode_line_state, encode_line_state, pack_fold_level, unpack_fold_level
from .models import Dialect, ScanResult, ScanState, Style, Token

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "scan",
    "rescan",
    "tokenize",
    "iter_tokens",
    # Data models
    "Document",
    "Dialect",
    "ScanResult",
    "ScanState",
    "Style",
    "Token",
    # Keywords and configuration
    "KeywordList",
    "KeywordSet",
    "default_keywords",
    "load_keywords",
    "load_keywords_cached",
    "ScannerConfig",
    # Line data
    "encode_line_state",
    "decode_line_state",
    "pack_fold_level",
    "unpack_fold_level",
    # Exceptions
    "ConfigError",
    "InvalidRangeError",
    "KeywordFileError",
    "LineStateError",
    "ScanError",
    # Version
    "__version__",
]
