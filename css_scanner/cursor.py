"""Character cursor used by the scanner to walk and colour a document."""

from __future__ import annotations

from .charclass import is_whitespace
from .document import Document
from .models import SPACE_EQUIVALENT_STYLES, Style


class ScanCursor:
    """Walk one range of a `Document`, colouring it run by run.

    The cursor keeps the style of the run that started at `style_start`;
    `set_state` colours that run and starts a new one at the current position.

    Attributes:
        document: Document being scanned.
        pos: Current position.
        end: Position after the last character of the range.
        state: Style of the current run.
        style_start: Position where the current run started.
        line: Line containing `pos`.
        at_line_start: `pos` is the first character of its line.
        at_line_end: `pos` is the last character of its line.
    """

    def __init__(self, document: Document, start: int, length: int, init_style: Style):
        self.document = document
        self.pos = start
        self.end = start + length
        self.state = init_style
        self.style_start = start
        self.line = document.line_from_position(start)
        self._line_start_next = document.line_start(self.line + 1)
        self.at_line_start = document.line_start(self.line) == start
        self._load()

    def _load(self) -> None:
        doc = self.document
        self.ch_prev = doc.char_at(self.pos - 1)
        self.ch = doc.char_at(self.pos)
        self.ch_next = doc.char_at(self.pos + 1)
        self.at_line_end = self.pos >= self._line_start_next - 1

    def more(self) -> bool:
        return self.pos < self.end

    def forward(self) -> None:
        if self.pos >= self.end:
            return
        self.at_line_start = self.at_line_end
        if self.at_line_start:
            self.line += 1
            self._line_start_next = self.document.line_start(self.line + 1)
        self.pos += 1
        self._load()

    def relative(self, offset: int) -> str:
        return self.document.char_at(self.pos + offset)

    def match(self, text: str) -> bool:
        return self.document.text.startswith(text, self.pos)

    def set_state(self, style: Style) -> None:
        """Colour the current run and start a run of `style` here."""
        self.document.set_style_range(self.style_start, min(self.pos, self.end), self.state)
        self.style_start = self.pos
        self.state = style

    def change_state(self, style: Style) -> None:
        """Restyle the current run without ending it."""
        self.state = style

    def complete(self) -> None:
        self.document.set_style_range(self.style_start, self.end, self.state)
        self.style_start = self.end

    def current_lowered(self, capacity: int) -> str | None:
        """Lowercased text of the current run.

        Returns None when the run does not fit a buffer of `capacity`
        characters (one slot is reserved, as for a terminated C string).
        """
        length = self.pos - self.style_start
        if length >= capacity:
            return None
        return self.document.text[self.style_start : self.pos].lower()

    def next_non_white(self, skip_current: bool = False) -> str:
        """First non-whitespace character at or after the cursor.

        Looks past the end of the range up to the end of the document and
        returns an empty string when only whitespace remains.
        """
        text = self.document.text
        position = self.pos + 1 if skip_current else self.pos
        while position < len(text):
            if not is_whitespace(text[position]):
                return text[position]
            position += 1
        return ""


def look_back_non_white(document: Document, start: int) -> tuple[str, Style]:
    """Find the last significant character before `start` and its style.

    Characters styled with a space-equivalent style are skipped.

    Returns:
        tuple[str, Style]: The character and its style, or ``("", DEFAULT)``
            when nothing significant precedes `start`.
    """
    position = start - 1
    while position >= 0:
        style = document.style_at(position)
        if style not in SPACE_EQUIVALENT_STYLES:
            return document.text[position], style
        position -= 1
    return "", Style.DEFAULT
