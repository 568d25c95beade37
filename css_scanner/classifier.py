"""Classification of identifier-like runs.

When a run of identifier characters ends, its final style depends on the
scan context around it: what came before the run, the next significant
character, the nesting counters and the keyword lists.
"""

from __future__ import annotations

from .constants import MAX_SELECTOR_LEVEL, SELECTOR_LIST_PSEUDO_CLASSES, URL_FUNCTIONS
from .keywords import KeywordSet
from .models import Dialect, ScanState, Style


def opens_url(name: str | None, ch_next: str, dialect: Dialect) -> bool:
    """Tell whether ``name(`` starts an unquoted URL.

    Args:
        name: Lowered function name.
        ch_next: First significant character after the ``(``.
        dialect: Active dialect; Scss variables keep ``url($x)`` a function.

    Examples:
        opens_url("url", "f", Dialect.STANDARD)  # True
        opens_url("url", '"', Dialect.STANDARD)  # False
    """
    if name not in URL_FUNCTIONS:
        return False
    if ch_next in ("'", '"', ")"):
        return False
    return not (ch_next == "$" and dialect is Dialect.SCSS)


def classify_identifier(
    name: str | None,
    st: ScanState,
    ch: str,
    ch_next: str,
    dialect: Dialect,
    keywords: KeywordSet,
) -> Style:
    """Decide the style of a plain identifier run.

    Args:
        name: Lowered run text, or None when it overflowed the token buffer.
        st: Scan state; `calc_func` and `property_value` may be updated.
        ch: Character that ended the run.
        ch_next: Next significant character (after ``(`` when `ch` is one).
        dialect: Active dialect.
        keywords: Keyword lists.

    Returns:
        Style: The final style, `Style.IDENTIFIER` when no rule applies.
    """
    before = st.ch_before

    if ch == "(":
        if keywords.math_function.in_list_prefixed(name, "("):
            st.calc_func = True
        return Style.FUNCTION

    if before == "!" and name == "important":
        return Style.IMPORTANT

    if st.variable_interpolation is not None:
        if dialect is Dialect.LESS and before == "{":
            return Style.VARIABLE
        return Style.IDENTIFIER

    if ch_next == ":" and st.paren_count != 0:
        # (descriptor: value)
        return Style.PROPERTY

    if before in (":", "=") or (st.paren_count == 0 and st.property_value):
        return Style.VALUE

    if st.property_value:
        return Style.IDENTIFIER

    if st.attribute_selector:
        return Style.ATTRIBUTE
    if before == ".":
        return Style.CLASS
    if before == "#":
        return Style.ID
    if before == "%" and dialect is Dialect.SCSS:
        return Style.PLACEHOLDER
    if ch_next == ":" and before in (";", "{"):
        st.property_value = True
        if keywords.property.in_list(name):
            return Style.PROPERTY
        return Style.UNKNOWN_PROPERTY
    if st.paren_count == st.selector_level and ch_next != "(":
        return Style.TAG
    return Style.IDENTIFIER


def classify_at_rule(name: str | None, st: ScanState, keywords: KeywordSet) -> Style:
    """``@name`` outside the at-rule list, or inside a value, is a Less variable."""
    if st.property_value or name is None or not keywords.at_rule.in_list(name[1:]):
        return Style.VARIABLE
    return Style.AT_RULE


def classify_pseudo_class(name: str | None, st: ScanState, ch: str, keywords: KeywordSet) -> Style:
    """Check a ``:name`` run against the pseudo-class list.

    Selector-list pseudo-classes such as ``:not(`` raise the selector depth so
    type selectors in their arguments still classify as tags.
    """
    bare = name[1:] if name is not None else None
    if not keywords.pseudo_class.in_list_prefixed(bare, "("):
        return Style.UNKNOWN_PSEUDO_CLASS
    if ch == "(" and bare in SELECTOR_LIST_PSEUDO_CLASSES:
        st.selector_level = min(st.selector_level + 1, MAX_SELECTOR_LEVEL)
    return Style.PSEUDO_CLASS


def classify_pseudo_element(name: str | None, keywords: KeywordSet) -> Style:
    bare = name[2:] if name is not None else None
    if not keywords.pseudo_element.in_list_prefixed(bare, "("):
        return Style.UNKNOWN_PSEUDO_ELEMENT
    return Style.PSEUDO_ELEMENT


def classify_run(
    style: Style,
    name: str | None,
    st: ScanState,
    ch: str,
    ch_next: str,
    dialect: Dialect,
    keywords: KeywordSet,
) -> Style:
    """Final style for a finished run currently styled `style`."""
    if style is Style.IDENTIFIER:
        return classify_identifier(name, st, ch, ch_next, dialect, keywords)
    if style is Style.AT_RULE:
        return classify_at_rule(name, st, keywords)
    if style is Style.PSEUDO_CLASS:
        return classify_pseudo_class(name, st, ch, keywords)
    if style is Style.PSEUDO_ELEMENT:
        return classify_pseudo_element(name, keywords)
    return style
