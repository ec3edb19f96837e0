"""Terminal control: raw key input and screen buffer switching.

Keys are read from stdin in cbreak mode (no echo, no line buffering) with
select() providing the poll timeout. Escape sequences for the arrow keys
are decoded to the names 'up', 'down', 'left' and 'right'.
"""
from __future__ import annotations
import os
import select
import sys
import termios
import tty
from typing import Any, List, Optional, TextIO

from events import InputSurfaceError

ARROWS = {'A': 'up', 'B': 'down', 'C': 'right', 'D': 'left'}
ESCAPE = '\x1b'

# ESC[3J (scrollback), ESC[H (home), ESC[2J (screen), ESC[H (home)
CLEAR = "\033[3J\033[H\033[2J\033[H"
ALT_SCREEN_ON = "\033[?1049h"
ALT_SCREEN_OFF = "\033[?1049l"
CURSOR_HIDE = "\033[?25l"
CURSOR_SHOW = "\033[?25h"


def decode_key(data: str) -> Optional[str]:
    """Map raw bytes read from the terminal to a key name."""
    if not data:
        return None
    if data.startswith(ESCAPE):
        if len(data) >= 3 and data[1] in '[O':
            return ARROWS.get(data[2], 'escape')
        return 'escape'
    return data[0]


class TerminalKeySource:
    """Polls a terminal file descriptor for single key presses."""

    def __init__(self, stream: TextIO = sys.stdin):
        self.stream = stream
        try:
            self.fd = stream.fileno()
        except (AttributeError, ValueError, OSError) as exc:
            raise InputSurfaceError(f"input is not a terminal: {exc}") from exc
        self._saved: Optional[List[Any]] = None
        # a key read while looking for an escape sequence, returned next
        self._pending = ''

    def _ready(self, timeout: float) -> bool:
        try:
            readable, _, _ = select.select([self.fd], [], [], timeout)
        except (OSError, ValueError) as exc:
            raise InputSurfaceError(f"polling stdin failed: {exc}") from exc
        return bool(readable)

    def _read(self, size: int) -> str:
        try:
            chunk = os.read(self.fd, size)
        except OSError as exc:
            raise InputSurfaceError(f"reading stdin failed: {exc}") from exc
        if not chunk:
            raise InputSurfaceError("stdin closed")
        return chunk.decode('utf-8', errors='replace')

    def read_key(self, timeout: float) -> Optional[str]:
        if self._pending:
            data, self._pending = self._pending, ''
            return decode_key(data)
        if not self._ready(timeout):
            return None
        data = self._read(1)
        if data == ESCAPE and self._ready(0.01):
            # only ESC [ or ESC O starts a sequence; anything else is its own key
            follow = self._read(1)
            if follow in ('[', 'O'):
                data += follow
                if self._ready(0.01):
                    data += self._read(1)
            else:
                self._pending = follow
        return decode_key(data)

    # -------------------- terminal mode --------------------
    def enter_raw_mode(self) -> None:
        try:
            self._saved = termios.tcgetattr(self.fd)
            tty.setcbreak(self.fd)
        except termios.error as exc:
            self._saved = None
            raise InputSurfaceError(f"cannot switch terminal to raw mode: {exc}") from exc

    def restore_mode(self) -> None:
        if self._saved is None:
            return
        try:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved)
        finally:
            self._saved = None


def write(out: TextIO, text: str) -> None:
    out.write(text)
    out.flush()


def enter_screen(out: TextIO, alt_screen: bool) -> None:
    write(out, (ALT_SCREEN_ON if alt_screen else '') + CURSOR_HIDE + CLEAR)


def leave_screen(out: TextIO, alt_screen: bool) -> None:
    write(out, CURSOR_SHOW + (ALT_SCREEN_OFF if alt_screen else ''))
