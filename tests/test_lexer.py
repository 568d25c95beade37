from __future__ import annotations

import textwrap

import pytest

from css_scanner.config import ConfigError, ScannerConfig
from css_scanner.constants import FOLD_LEVEL_BASE
from css_scanner.document import Document
from css_scanner.exceptions import InvalidRangeError, KeywordFileError
from css_scanner.keywords import KeywordList, default_keywords
from css_scanner.lexer import iter_tokens, rescan, scan, tokenize
from css_scanner.linestate import unpack_fold_level
from css_scanner.models import Style


def _style_of(document: Document, needle: str, occurrence: int = 0) -> Style:
    position = -1
    for _ in range(occurrence + 1):
        position = document.text.index(needle, position + 1)
    styles = set(document.styles[position : position + len(needle)])
    assert len(styles) == 1, f"{needle!r} spans {sorted(s.name for s in styles)}"
    return styles.pop()


def test_rule_with_known_property(scan_text):
    doc = scan_text(".foo { color: red; }")

    assert _style_of(doc, ".") is Style.OPERATOR
    assert _style_of(doc, "foo") is Style.CLASS
    assert _style_of(doc, "{") is Style.OPERATOR
    assert _style_of(doc, "color") is Style.PROPERTY
    assert _style_of(doc, ":") is Style.OPERATOR
    assert _style_of(doc, "red") is Style.VALUE
    assert _style_of(doc, ";") is Style.OPERATOR
    assert _style_of(doc, "}") is Style.OPERATOR
    assert doc.style_at(4) is Style.DEFAULT


def test_property_outside_keyword_list_is_unknown(scan_text, empty_keywords):
    doc = scan_text(".foo { color: red; }", keywords=empty_keywords)
    assert _style_of(doc, "color") is Style.UNKNOWN_PROPERTY

    doc = scan_text(".foo { colr: red; }")
    assert _style_of(doc, "colr") is Style.UNKNOWN_PROPERTY


def test_declarations_without_spaces(scan_text):
    doc = scan_text("a{color:red;background:blue}")

    assert _style_of(doc, "color") is Style.PROPERTY
    assert _style_of(doc, "red") is Style.VALUE
    assert _style_of(doc, "background") is Style.PROPERTY
    assert _style_of(doc, "blue") is Style.VALUE


def test_media_query(scan_text):
    doc = scan_text("@media (min-width: 10px) { li {} }")

    assert _style_of(doc, "@media") is Style.AT_RULE
    assert _style_of(doc, "(") is Style.OPERATOR
    assert _style_of(doc, "min-width") is Style.PROPERTY
    assert _style_of(doc, "10px") is Style.DIMENSION
    assert _style_of(doc, "li") is Style.TAG


def test_calc_operators(scan_text):
    doc = scan_text("a { width: calc(1px + 2px); }")

    assert _style_of(doc, "calc") is Style.FUNCTION
    assert _style_of(doc, "(") is Style.OPERATOR
    assert _style_of(doc, "1px") is Style.DIMENSION
    assert _style_of(doc, "+") is Style.OPERATOR_IN_CALC


def test_calc_operator_after_percentage_and_parenthesis(scan_text):
    doc = scan_text("a { width: calc(100% - (2px) * 3); }")

    assert _style_of(doc, "100%") is Style.NUMBER
    assert _style_of(doc, "-") is Style.OPERATOR_IN_CALC
    assert _style_of(doc, "*") is Style.OPERATOR_IN_CALC


def test_arithmetic_outside_calc_is_plain_operator(scan_text):
    doc = scan_text("a { margin: 1px - 2px; }")
    assert _style_of(doc, "-") is Style.OPERATOR


def test_calc_state_survives_line_end(scan_text):
    doc = scan_text("a { width: calc(1px +\n 2px); }")

    # property_value, calc_level 1, paren_count 1
    assert doc.line_state(0) == 0x105
    assert doc.line_state(1) == 0


def test_unquoted_url(scan_text):
    doc = scan_text("a { background: url(foo.png); }")

    assert _style_of(doc, "url") is Style.IDENTIFIER
    assert _style_of(doc, "(") is Style.OPERATOR
    assert _style_of(doc, "foo.png") is Style.URL
    assert _style_of(doc, ")") is Style.OPERATOR
    assert _style_of(doc, ";") is Style.OPERATOR


def test_quoted_url_is_a_function(scan_text):
    doc = scan_text('a { background: url("foo.png"); }')

    assert _style_of(doc, "url") is Style.FUNCTION
    assert _style_of(doc, '"foo.png"') is Style.STRING_DOUBLE_QUOTED


def test_scss_variable_inside_url(scan_text):
    doc = scan_text("a { background: url($path); }", dialect="scss")

    assert _style_of(doc, "url") is Style.FUNCTION
    assert _style_of(doc, "$path") is Style.VARIABLE


def test_hex_escape_inside_string(scan_text):
    doc = scan_text('"a\\41 b"')

    assert doc.styles == [
        Style.STRING_DOUBLE_QUOTED,
        Style.STRING_DOUBLE_QUOTED,
        Style.ESCAPE_CHAR,
        Style.ESCAPE_CHAR,
        Style.ESCAPE_CHAR,
        Style.STRING_DOUBLE_QUOTED,
        Style.STRING_DOUBLE_QUOTED,
        Style.STRING_DOUBLE_QUOTED,
    ]


def test_hex_escape_stops_after_six_digits(scan_text):
    doc = scan_text('"\\1234567"')

    assert _style_of(doc, "\\123456") is Style.ESCAPE_CHAR
    assert _style_of(doc, '7"') is Style.STRING_DOUBLE_QUOTED


def test_single_character_escape(scan_text):
    doc = scan_text("'a\\gb'")

    assert _style_of(doc, "\\g") is Style.ESCAPE_CHAR
    assert _style_of(doc, "b'") is Style.STRING_SINGLE_QUOTED


def test_scss_interpolation(scan_text):
    doc = scan_text("a { b: #{$x}; }", dialect="scss")

    assert _style_of(doc, "#{") is Style.OPERATOR
    assert _style_of(doc, "$x") is Style.VARIABLE
    assert _style_of(doc, "}") is Style.OPERATOR
    assert _style_of(doc, ";") is Style.OPERATOR
    assert unpack_fold_level(doc.fold_level(0)) == (FOLD_LEVEL_BASE, FOLD_LEVEL_BASE, False)


def test_scss_interpolation_inside_string_resumes_string(scan_text):
    doc = scan_text('a { content: "x#{$y}z"; }', dialect="scss")

    assert _style_of(doc, '"x') is Style.STRING_DOUBLE_QUOTED
    assert _style_of(doc, "#{") is Style.OPERATOR
    assert _style_of(doc, "$y") is Style.VARIABLE
    assert _style_of(doc, 'z"') is Style.STRING_DOUBLE_QUOTED
    assert doc.line_state(0) == 0
    assert unpack_fold_level(doc.fold_level(0)) == (FOLD_LEVEL_BASE, FOLD_LEVEL_BASE, False)


def test_interpolation_ends_at_line_end(scan_text):
    doc = scan_text("a {\n  b: #{\n$x} c;\n}\n", dialect="scss")

    assert _style_of(doc, "$x") is Style.VARIABLE
    assert _style_of(doc, "c") is Style.TAG
    assert doc.line_state(2) == 0
    assert unpack_fold_level(doc.fold_level(3)) == (FOLD_LEVEL_BASE + 1, FOLD_LEVEL_BASE, False)


def test_hash_brace_in_plain_css_is_not_interpolation(scan_text):
    doc = scan_text('a { content: "x#{y}"; }')
    assert _style_of(doc, '"x#{y}"') is Style.STRING_DOUBLE_QUOTED


def test_less_variables(scan_text):
    doc = scan_text("@brand: red;\na { color: @brand; }\n@media print {}", dialect="less")

    assert _style_of(doc, "@brand") is Style.VARIABLE
    assert _style_of(doc, "red") is Style.VALUE
    assert _style_of(doc, "@brand", occurrence=1) is Style.VARIABLE
    assert _style_of(doc, "@media") is Style.AT_RULE


def test_at_rules_keep_their_style_outside_less(scan_text):
    doc = scan_text("@brand: red;")
    assert _style_of(doc, "@brand") is Style.AT_RULE


def test_less_interpolated_selector(scan_text):
    doc = scan_text(".@{name}-box { }", dialect="less")

    assert _style_of(doc, "@{") is Style.OPERATOR
    assert _style_of(doc, "name") is Style.VARIABLE
    assert _style_of(doc, "}") is Style.OPERATOR


@pytest.mark.parametrize("dialect", ["scss", "less", "hss"])
def test_dollar_variables_outside_plain_css(scan_text, dialect):
    doc = scan_text("$gap: 4px;", dialect=dialect)
    assert _style_of(doc, "$gap") is Style.VARIABLE


def test_dollar_is_an_operator_in_plain_css(scan_text):
    doc = scan_text("$gap: 4px;")
    assert _style_of(doc, "$") is Style.OPERATOR


def test_pseudo_classes(scan_text):
    doc = scan_text("a:hover, a:bogus, li:nth-child(2n) {}")

    assert _style_of(doc, "a") is Style.TAG
    assert _style_of(doc, ":hover") is Style.PSEUDO_CLASS
    assert _style_of(doc, ":bogus") is Style.UNKNOWN_PSEUDO_CLASS
    assert _style_of(doc, ":nth-child") is Style.PSEUDO_CLASS
    assert _style_of(doc, "2n") is Style.DIMENSION


def test_pseudo_elements(scan_text):
    doc = scan_text("p::before, p::bogus, ::slotted(span) {}")

    assert _style_of(doc, "::before") is Style.PSEUDO_ELEMENT
    assert _style_of(doc, "::bogus") is Style.UNKNOWN_PSEUDO_ELEMENT
    assert _style_of(doc, "::slotted") is Style.PSEUDO_ELEMENT


def test_selector_list_arguments_are_tags(scan_text):
    doc = scan_text(":not(p) {}")
    assert _style_of(doc, ":not") is Style.PSEUDO_CLASS
    assert _style_of(doc, "p") is Style.TAG

    doc = scan_text("foo(p) {}")
    assert _style_of(doc, "foo") is Style.FUNCTION
    assert _style_of(doc, "p") is Style.IDENTIFIER


@pytest.mark.parametrize("text", ["a { color: red !important; }", "a { color: red !IMPORTANT; }"])
def test_important(scan_text, text):
    doc = scan_text(text)

    assert _style_of(doc, "!") is Style.OPERATOR
    assert doc.style_at(text.index("!") + 1) is Style.IMPORTANT


def test_attribute_selectors(scan_text):
    doc = scan_text('a[href="x"], [type=text] {}')

    assert _style_of(doc, "[") is Style.OPERATOR
    assert _style_of(doc, "href") is Style.ATTRIBUTE
    assert _style_of(doc, '"x"') is Style.STRING_DOUBLE_QUOTED
    assert _style_of(doc, "type") is Style.ATTRIBUTE
    assert _style_of(doc, "text") is Style.VALUE


def test_ids_and_hex_colours(scan_text):
    doc = scan_text("#main { color: #ff0000; }")

    assert _style_of(doc, "#") is Style.OPERATOR
    assert _style_of(doc, "main") is Style.ID
    assert _style_of(doc, "#ff0000") is Style.NUMBER


def test_scss_placeholder(scan_text):
    doc = scan_text("%shared {}", dialect="scss")
    assert _style_of(doc, "shared") is Style.PLACEHOLDER

    doc = scan_text("%shared {}")
    assert _style_of(doc, "shared") is Style.TAG


def test_numbers_and_dimensions(scan_text):
    doc = scan_text("a { width: 50%; line-height: 1.5em; z-index: 1e3; top: .5px; }")

    assert _style_of(doc, "50%") is Style.NUMBER
    assert _style_of(doc, "1.5em") is Style.DIMENSION
    assert _style_of(doc, "1e3") is Style.NUMBER
    assert _style_of(doc, ".5px") is Style.DIMENSION


def test_comments(scan_text):
    text = textwrap.dedent(
        """\
        /* note */
        /** doc */
        /*! keep */
        // line
        /// doc line
        a {}
        """
    )
    doc = scan_text(text)

    assert _style_of(doc, "/* note */") is Style.BLOCK_COMMENT
    assert _style_of(doc, "/** doc */") is Style.BLOCK_COMMENT_DOC
    assert _style_of(doc, "/*! keep */") is Style.BLOCK_COMMENT_DOC
    assert _style_of(doc, "// line\n") is Style.LINE_COMMENT
    assert _style_of(doc, "/// doc line\n") is Style.LINE_COMMENT_DOC
    assert _style_of(doc, "a") is Style.TAG


def test_comments_are_transparent_to_classification(scan_text):
    doc = scan_text("a { color: /* c */ red; }")
    assert _style_of(doc, "red") is Style.VALUE


def test_html_comment_delimiters(scan_text):
    doc = scan_text("<!-- a {} -->")

    assert _style_of(doc, "<!--") is Style.HTML_COMMENT_DELIMITER
    assert _style_of(doc, "a") is Style.TAG
    assert _style_of(doc, "-->") is Style.HTML_COMMENT_DELIMITER


def test_unicode_ranges(scan_text):
    doc = scan_text("@font-face { unicode-range: U+0025-00FF, u+4??; }")

    assert _style_of(doc, "@font-face") is Style.AT_RULE
    assert _style_of(doc, "unicode-range") is Style.PROPERTY
    assert _style_of(doc, "U+0025-00FF") is Style.UNICODE_RANGE
    assert _style_of(doc, "u+4??") is Style.UNICODE_RANGE
    assert _style_of(doc, ";") is Style.OPERATOR


def test_unbalanced_closers_never_go_negative(scan_text):
    doc = scan_text(")))]]}}}")

    assert doc.line_state(0) == 0
    assert unpack_fold_level(doc.fold_level(0)) == (FOLD_LEVEL_BASE, FOLD_LEVEL_BASE, False)


@pytest.mark.parametrize(
    ("length", "expected"),
    [(127, Style.PROPERTY), (128, Style.UNKNOWN_PROPERTY)],
)
def test_long_tokens_do_not_match_keywords(scan_text, length, expected):
    name = "x" * length
    keywords = default_keywords()
    keywords.property = KeywordList([name])

    doc = scan_text(f"a {{ {name}: 1px; }}", keywords=keywords)

    assert _style_of(doc, name) is expected


def test_keywords_file_from_config(scan_text, tmp_path):
    keywords_file = tmp_path / "keywords.toml"
    keywords_file.write_text('property = ["colour"]\n', encoding="utf-8")

    doc = scan_text("a { colour: red; color: red; }", keywords_file=str(keywords_file))

    assert _style_of(doc, "colour") is Style.PROPERTY
    assert _style_of(doc, "color") is Style.UNKNOWN_PROPERTY


def test_broken_keywords_file_raises(tmp_path):
    keywords_file = tmp_path / "keywords.toml"
    keywords_file.write_text("colours = []\n", encoding="utf-8")
    doc = Document("a {}")

    with pytest.raises(KeywordFileError):
        scan(doc, 0, len(doc), config=ScannerConfig(keywords_file=str(keywords_file)))


def test_no_fold_leaves_fold_levels_unset(scan_text):
    doc = scan_text("a {\n  b: c\n}\n", fold=False)

    assert [doc.fold_level(line) for line in range(doc.line_count)] == [None] * 4
    assert doc.line_state(1) == 1


def test_scan_result_reports_lines_and_end_style():
    doc = Document('a {\n}\n"abc')

    result = scan(doc, 0, len(doc))

    assert result.start == 0
    assert result.end == len(doc)
    assert result.first_line == 0
    assert result.last_line == 2
    assert result.end_style is Style.STRING_DOUBLE_QUOTED


def test_empty_range_is_a_no_op():
    doc = Document("a {}")

    result = scan(doc, 2, 0)

    assert result.end_style is Style.DEFAULT
    assert doc.styles == [Style.DEFAULT] * 4


@pytest.mark.parametrize(("start", "length"), [(-1, 1), (0, 5), (3, 2)])
def test_invalid_ranges_raise(start, length):
    doc = Document("a {}")

    with pytest.raises(InvalidRangeError) as exc_info:
        scan(doc, start, length)

    assert exc_info.value.document_length == 4
    assert isinstance(exc_info.value, ValueError)


def test_rescan_rejects_positions_outside_document():
    with pytest.raises(InvalidRangeError):
        rescan(Document("a {}"), 5)


@pytest.mark.parametrize(
    "config",
    [ScannerConfig(dialect="sass"), ScannerConfig(fold="yes"), ScannerConfig(max_file_size=0)],
)
def test_invalid_config_raises(config):
    doc = Document("a {}")

    with pytest.raises(ConfigError):
        scan(doc, 0, len(doc), config=config)


def test_tokenize_merges_equal_style_runs():
    tokens = tokenize("a {}")

    assert [token.style for token in tokens] == [Style.TAG, Style.DEFAULT, Style.OPERATOR]
    assert [token.text for token in tokens] == ["a", " ", "{}"]
    assert tokens[-1].start == 2
    assert tokens[-1].end == 4


def test_iter_tokens_within_a_window(scan_text):
    doc = scan_text(".foo { color: red; }")

    tokens = list(iter_tokens(doc, 7, 12))

    assert len(tokens) == 1
    assert tokens[0].style is Style.PROPERTY
    assert tokens[0].text == "color"


def test_tokenize_empty_text():
    assert tokenize("") == []
