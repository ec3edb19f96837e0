"""Colors and text styles for the dashboard frame.

Decisions:
- Styling is on when stdout is a terminal or FORCE_COLOR is set, and off
  whenever NO_COLOR is present.
- Palette entries are `#rrggbb` values taken from WORKSUITE_* variables, then
  the project .env file, then PALETTE_DEFAULTS. They become 24-bit escapes
  when COLORTERM advertises truecolor and the nearest xterm-256 cube entry
  otherwise.
"""
from __future__ import annotations
import os
import string
import sys
from typing import Mapping, Optional, TextIO

from settings import read_env_file, truthy

PALETTE_DEFAULTS = {
    'WORKSUITE_PRIMARY': '#8BE9FD',   # light cyan
    'WORKSUITE_HIGHLIGHT': '#F1FA8C', # yellow
    'WORKSUITE_TODO': '#48B3AF',
    'WORKSUITE_DOING': '#F6FF99',
    'WORKSUITE_DONE': '#A7E399',
}


def colors_enabled(environ: Mapping[str, str] = os.environ, stream: TextIO = sys.stdout) -> bool:
    if 'NO_COLOR' in environ:
        return False
    return truthy(environ.get('FORCE_COLOR'), default=False) or stream.isatty()


def foreground(value: Optional[str], truecolor: bool) -> Optional[str]:
    """Escape sequence for a `#rrggbb` color; None if `value` is not one."""
    h = (value or '').strip().lstrip('#')
    if len(h) != 6 or any(c not in string.hexdigits for c in h):
        return None
    r, g, b = (int(h[i:i + 2], 16) for i in (0, 2, 4))
    if truecolor:
        return f"\033[38;2;{r};{g};{b}m"
    r, g, b = (round(c / 255 * 5) for c in (r, g, b))
    return f"\033[38;5;{16 + 36 * r + 6 * g + b}m"


def palette(environ: Mapping[str, str], overrides: Mapping[str, str], truecolor: bool) -> dict[str, str]:
    """Foreground escape per palette key: env var > .env override > default."""
    return {
        key: foreground(environ.get(key), truecolor)
        or foreground(overrides.get(key), truecolor)
        or foreground(default, truecolor)
        for key, default in PALETTE_DEFAULTS.items()
    }


_ENABLE = colors_enabled()
_TRUECOLOR = any(tok in os.environ.get('COLORTERM', '').lower() for tok in ('truecolor', '24bit'))
_FG = palette(os.environ, read_env_file(), _TRUECOLOR) if _ENABLE else dict.fromkeys(PALETTE_DEFAULTS, '')


def _code(part: str) -> str:
    return f"\033[{part}m" if _ENABLE else ''


RESET = _code('0')
BOLD = _code('1')

HEADER_COLOR = _FG['WORKSUITE_PRIMARY']
HOTKEY_STYLE = _FG['WORKSUITE_HIGHLIGHT'] + _code('4')
ACTIVE_TAB_STYLE = _FG['WORKSUITE_HIGHLIGHT'] + BOLD
SELECTED_STYLE = _code('7') + BOLD
BANNER_STYLE = _code('1;31')
EMPTY_COLOR = _code('2') + HEADER_COLOR

STATUS_COLOR = {
    'Todo': _FG['WORKSUITE_TODO'],
    'Doing': _FG['WORKSUITE_DOING'],
    'Done': _FG['WORKSUITE_DONE'],
}


def color(text: str, *styles: str) -> str:
    """Wrap `text` in the given styles; plain text when styling is off."""
    if not _ENABLE or not text:
        return text
    return ''.join(styles) + text + RESET
