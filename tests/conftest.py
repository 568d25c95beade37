from dataclasses import fields

import pytest
from click.testing import CliRunner

from css_scanner.config import ScannerConfig
from css_scanner.document import Document
from css_scanner.keywords import KeywordList, KeywordSet
from css_scanner.lexer import scan


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture()
def scan_text():
    """Scans a stylesheet from scratch and returns the styled document."""

    def _scan(text: str, keywords=None, **config) -> Document:
        document = Document(text)
        scan(document, 0, len(document), config=ScannerConfig(**config), keywords=keywords)
        return document

    return _scan


@pytest.fixture()
def empty_keywords() -> KeywordSet:
    """Keyword lists with no entries, so every name classifies as unknown."""
    return KeywordSet(*(KeywordList() for _ in fields(KeywordSet)))
