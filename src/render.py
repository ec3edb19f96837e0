"""Text rendering of a projected Layout.

frame_lines() turns a Layout into plain lines with ANSI styling; draw()
writes them over the previous frame. Column widths grow with content and
shrink (widest first) when the terminal is narrow, never below
MIN_COL_WIDTH.
"""
import re
import shutil
from typing import List, Optional, Sequence, TextIO

from models import STATUSES
from theme import (color, ACTIVE_TAB_STYLE, BANNER_STYLE, BOLD, EMPTY_COLOR, HEADER_COLOR,
                   HOTKEY_STYLE, SELECTED_STYLE, STATUS_COLOR)
from view import NO_SELECTION, ColumnView, DetailView, Layout

MIN_COL_WIDTH = 12
SEP = " | "
TAB_SEP = " | "
ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")
ERASE_LINE = "\033[K"
ERASE_BELOW = "\033[J"
HOME = "\033[H"


def visible_len(s: str) -> int:
    return len(ANSI_RE.sub('', s))


def pad(s: str, width: int) -> str:
    gap = width - visible_len(s)
    return s + ' ' * gap if gap > 0 else s


def clip(text: str, width: int) -> str:
    """Cut plain text to `width` characters, marking the cut with '~'."""
    if len(text) <= width:
        return text
    if width <= 1:
        return text[:width]
    return text[:width - 1] + '~'


# -------------------- tab bar --------------------
def tab_bar(layout: Layout) -> str:
    cells: List[str] = []
    for idx, (before, hotkey, after) in enumerate(layout.tabs.labels):
        base = ACTIVE_TAB_STYLE if idx == layout.tabs.active else ''
        cells.append(color(before, base) + color(hotkey, base, HOTKEY_STYLE) + color(after, base))
    return color("Menu: ", BOLD) + TAB_SEP.join(cells)


# -------------------- columns --------------------
def column_widths(columns: Sequence[ColumnView], term_width: int) -> List[int]:
    sep_total = len(SEP) * (len(columns) - 1)
    widths = [max(MIN_COL_WIDTH, len(c.title), *(len(i) + 2 for i in c.items)) for c in columns]
    total = sum(widths) + sep_total
    if total > term_width:
        target = max(term_width - sep_total, len(columns) * MIN_COL_WIDTH)
        while sum(widths) > target:
            widest = max(range(len(widths)), key=lambda i: widths[i])
            if widths[widest] <= MIN_COL_WIDTH:
                break
            widths[widest] -= 1
    else:
        extra = term_width - total
        i = 0
        while extra > 0:
            widths[i % len(widths)] += 1
            extra -= 1
            i += 1
    return widths


def wrap_item(text: str, width: int) -> List[str]:
    """Word-wrap one item title to `width` (minus the 2-char marker)."""
    limit = max(1, width - 2)
    lines: List[str] = []
    current = ''
    for word in (text or '<untitled>').split():
        while len(word) > limit:
            if current:
                lines.append(current)
                current = ''
            lines.append(word[:limit])
            word = word[limit:]
        candidate = word if not current else current + ' ' + word
        if len(candidate) <= limit:
            current = candidate
        else:
            lines.append(current)
            current = word
    if current or not lines:
        lines.append(current)
    return lines


def column_lines(column: ColumnView, status: str, width: int) -> List[str]:
    if not column.items:
        return [color('(empty)', EMPTY_COLOR)]
    out: List[str] = []
    for idx, item in enumerate(column.items):
        selected = idx == column.highlighted
        for n, raw in enumerate(wrap_item(item, width)):
            marker = ('> ' if selected else '  ') if n == 0 else '  '
            text = pad(raw, width - 2)
            out.append(marker + color(text, SELECTED_STYLE if selected else STATUS_COLOR[status]))
    return out


def board_lines(columns: Sequence[ColumnView], term_width: int) -> List[str]:
    widths = column_widths(columns, term_width)
    headers: List[str] = []
    for col, w in zip(columns, widths):
        title = col.title + (' *' if col.focused else '')
        headers.append(pad(color(title, HEADER_COLOR, BOLD), w))
    lines = [SEP.join(headers), SEP.join(color('-' * w, HEADER_COLOR) for w in widths)]
    wrapped = [column_lines(c, s, w) for c, s, w in zip(columns, STATUSES, widths)]
    rows = max(len(w) for w in wrapped)
    for r in range(rows):
        cells = [pad(col[r], w) if r < len(col) else ' ' * w for col, w in zip(wrapped, widths)]
        lines.append(SEP.join(cells))
    return lines


# -------------------- detail table --------------------
def detail_lines(detail: DetailView, term_width: int) -> List[str]:
    lines = [color("Detail", HEADER_COLOR, BOLD)]
    if detail.row is None:
        lines.append(color(NO_SELECTION, EMPTY_COLOR))
        return lines
    n = len(detail.headers)
    id_width = max(len(detail.headers[0]), len(detail.row[0]))
    rest = max(MIN_COL_WIDTH, (term_width - id_width - len(SEP) * (n - 1)) // max(1, n - 1))
    widths = [id_width] + [rest] * (n - 1)
    lines.append(SEP.join(pad(color(h, BOLD), w) for h, w in zip(detail.headers, widths)))
    lines.append(SEP.join(pad(clip(v, w), w) for v, w in zip(detail.row, widths)))
    return lines


def frame_lines(layout: Layout, term_width: Optional[int] = None) -> List[str]:
    if term_width is None:
        term_width = shutil.get_terminal_size((120, 30)).columns
    rule = color('=' * term_width, HEADER_COLOR)
    lines: List[str] = [tab_bar(layout), rule]
    if layout.banner:
        lines.append(color(clip(f"! {layout.banner}", term_width), BANNER_STYLE))
    lines.append(color(layout.title, HEADER_COLOR, BOLD))
    if layout.columns:
        lines.extend(board_lines(layout.columns, term_width))
        if layout.detail is not None:
            lines.append('')
            lines.extend(detail_lines(layout.detail, term_width))
    else:
        lines.extend(line.center(term_width).rstrip() for line in layout.lines)
    lines.append(rule)
    lines.append(layout.footer.center(term_width).rstrip())
    return lines


def draw(layout: Layout, out: TextIO) -> None:
    """Overwrite the previous frame in place (erase to end of each line)."""
    frame = frame_lines(layout)
    out.write(HOME + ''.join(line + ERASE_LINE + '\r\n' for line in frame) + ERASE_BELOW)
    out.flush()
