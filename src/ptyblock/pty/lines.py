"""Fold raw pty output into logical display lines."""

from __future__ import annotations

import codecs

NEWLINE = "\n"
CARRIAGE_RETURN = "\r"


class LineBuffer:
    """Ordered logical lines built from a byte stream as it arrives.

    ``\\n`` ends the current line. ``\\r`` does not touch the current line,
    but the next ordinary character after it starts a new one: output that
    returns to column 0 and writes again becomes a fresh logical line rather
    than an in-place overwrite, since no column state is tracked. ``\\r\\n``
    is therefore a single line break.

    The last entry is always the line currently being appended to.
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._lines: list[list[str]] = []
        self._saw_return = False

    def feed(self, chunk: bytes) -> None:
        """Decode ``chunk`` and apply it one character at a time.

        Multi-byte characters split across chunks are reassembled; malformed
        bytes decode to U+FFFD instead of failing.
        """
        if chunk:
            self._apply(self._decoder.decode(chunk))

    def feed_text(self, text: str) -> None:
        self._apply(text)

    def _apply(self, text: str) -> None:
        lines = self._lines
        for char in text:
            if not lines:
                lines.append([])

            if char == NEWLINE:
                lines.append([])
            elif char != CARRIAGE_RETURN:
                if self._saw_return:
                    lines.append([])
                lines[-1].append(char)

            self._saw_return = char == CARRIAGE_RETURN

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def finalize(self) -> list[str]:
        """Return the accumulated lines.

        A single trailing empty line, left behind when the stream ended on a
        newline, is dropped.
        """
        self._apply(self._decoder.decode(b"", final=True))
        lines = ["".join(line) for line in self._lines]
        if lines and lines[-1] == "":
            lines.pop()
        return lines
