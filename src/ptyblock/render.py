"""Fixed-width framing of captured lines for display."""

from __future__ import annotations

from ptyblock.constants import RESET, YELLOW

MAX_WIDTH = 120
HORIZ_MARGIN = 1
VERT_MARGIN = 1
BORDER_PADDING = 1

TOP_LEFT = "┌"
TOP_RIGHT = "┐"
BOTTOM_LEFT = "└"
BOTTOM_RIGHT = "┘"
HORIZONTAL = "─"
VERTICAL = "│"
TITLE_LEFT = "┤"
TITLE_RIGHT = "├"


def wrap_line(line: str, width: int) -> list[str]:
    """Split ``line`` into chunks of at most ``width`` characters."""
    if width < 1:
        raise ValueError(f"width must be positive, got {width}")
    if not line:
        return [""]
    return [line[i : i + width] for i in range(0, len(line), width)]


def number_lines(lines: list[str], width: int, indent: str = "    ") -> list[str]:
    """Prefix each line with its 1-based number, wrapping to ``width``.

    Continuation rows of a wrapped line get a blank gutter instead of a number.
    """
    gutter = len(str(len(lines)))
    text_width = max(1, width - gutter - len(indent) - 2)
    numbered: list[str] = []
    for number, line in enumerate(lines, 1):
        first, *rest = wrap_line(line, text_width)
        numbered.append(f"{indent}{str(number).rjust(gutter)}: {first}")
        numbered.extend(f"{indent}{' ' * gutter}  {chunk}" for chunk in rest)
    return numbered


def inner_width(width: int) -> int:
    """Columns available for text inside a frame ``width`` columns wide."""
    return max(1, width - 2 * HORIZ_MARGIN - 2 - 2 * BORDER_PADDING)


def frame(
    lines: list[str],
    width: int,
    height: int | None = None,
    title: str | None = None,
    color: bool = False,
) -> str:
    """Draw ``lines`` inside a titled box ``width`` columns wide.

    With ``height`` only the last ``height`` rows are shown, and short output
    is padded with blank rows so the box always has that many.
    """
    inner = inner_width(width)
    rows: list[str] = []
    for line in lines:
        rows.extend(wrap_line(line, inner))

    if height is not None:
        rows = rows[-height:] if height > 0 else []
        rows.extend([""] * (height - len(rows)))

    if title is None:
        title = f"PTY SCREEN {inner}x{len(rows)}"
    span = inner + 2 * BORDER_PADDING
    title = title[: max(0, span - 4)]
    dashes = max(0, span - len(title) - 4)
    left = dashes // 2
    shown_title = f"{YELLOW}{title}{RESET}" if color else title

    margin = " " * HORIZ_MARGIN
    padding = " " * BORDER_PADDING
    top = (
        f"{margin}{TOP_LEFT}{HORIZONTAL * left}{TITLE_LEFT} {shown_title} {TITLE_RIGHT}"
        f"{HORIZONTAL * (dashes - left)}{TOP_RIGHT}"
    )
    body = [f"{margin}{VERTICAL}{padding}{row.ljust(inner)}{padding}{VERTICAL}" for row in rows]
    bottom = f"{margin}{BOTTOM_LEFT}{HORIZONTAL * span}{BOTTOM_RIGHT}"

    blank = [""] * VERT_MARGIN
    return "\n".join([*blank, top, *body, bottom, *blank])
