"""In-memory document buffer holding text, styles and per-line data.

This plays the role of an editor buffer: the scanner reads characters and
line boundaries from it and writes styles, fold levels and line states back.
"""

from __future__ import annotations

from bisect import bisect_right

from .models import Style


def compute_line_starts(text: str) -> list[int]:
    """Return the start position of every line.

    ``\\n``, ``\\r\\n`` and a lone ``\\r`` all end a line; a trailing line
    break opens an empty last line.

    Examples:
        compute_line_starts("a\\nb")  # [0, 2]
        compute_line_starts("a\\r\\n")  # [0, 3]
    """
    starts = [0]
    length = len(text)
    i = 0
    while i < length:
        ch = text[i]
        if ch == "\n" or (ch == "\r" and (i + 1 >= length or text[i + 1] != "\n")):
            starts.append(i + 1)
        i += 1
    return starts


class Document:
    """Text plus the per-character and per-line storage a scan fills in.

    Attributes:
        text: Full document text.
        styles: One `Style` per character.
    """

    def __init__(self, text: str = ""):
        self.text = text
        self.styles: list[Style] = [Style.DEFAULT] * len(text)
        self._line_starts = compute_line_starts(text)
        self._fold_levels: list[int | None] = [None] * len(self._line_starts)
        self._line_states: list[int] = [0] * len(self._line_starts)

    def __len__(self) -> int:
        return len(self.text)

    def char_at(self, position: int) -> str:
        """Character at `position`, or an empty string outside the text."""
        if 0 <= position < len(self.text):
            return self.text[position]
        return ""

    def style_at(self, position: int) -> Style:
        return self.styles[position]

    def set_style_range(self, start: int, end: int, style: Style) -> None:
        for position in range(start, end):
            self.styles[position] = style

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def line_from_position(self, position: int) -> int:
        return bisect_right(self._line_starts, position) - 1

    def line_start(self, line: int) -> int:
        """Start of `line`; the document length past the last line."""
        if line < 0:
            return 0
        if line >= len(self._line_starts):
            return len(self.text)
        return self._line_starts[line]

    def fold_level(self, line: int) -> int | None:
        """Stored fold level of `line`, or None when never computed."""
        return self._fold_levels[line]

    def set_fold_level(self, line: int, level: int) -> None:
        self._fold_levels[line] = level

    def line_state(self, line: int) -> int:
        return self._line_states[line]

    def set_line_state(self, line: int, state: int) -> None:
        self._line_states[line] = state

    def replace(self, start: int, end: int, text: str) -> None:
        """Replace ``text[start:end]`` and keep per-line storage aligned.

        Lines before the edit keep their data; lines after it move with the
        text. Styles of inserted characters are Default until rescanned.
        """
        if not 0 <= start <= end <= len(self.text):
            raise ValueError(f"Invalid edit range [{start}, {end})")

        first_line = self.line_from_position(start)
        last_line = self.line_from_position(end)
        trailing = len(self._line_starts) - (last_line + 1)

        self.text = self.text[:start] + text + self.text[end:]
        self.styles[start:end] = [Style.DEFAULT] * len(text)
        self._line_starts = compute_line_starts(self.text)

        # Joining "\r" and "\n" merges the edited line into the one before it.
        kept = min(first_line, self.line_from_position(start)) + 1
        middle = self.line_count - kept - trailing
        self._fold_levels = (
            self._fold_levels[:kept] + [None] * middle + self._fold_levels[last_line + 1 :]
        )
        self._line_states = (
            self._line_states[:kept] + [0] * middle + self._line_states[last_line + 1 :]
        )
