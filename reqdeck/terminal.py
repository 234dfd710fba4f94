from __future__ import annotations

import curses
import os
import select
import sys
from typing import Any

from .theme import Theme


class TerminalSession:
    """Scoped curses session: alternate screen, raw keys, hidden cursor.

    Whatever happens inside the ``with`` block, leaving it restores the normal
    screen and the cursor.
    """

    def __init__(self) -> None:
        self.stdscr: curses.window | None = None
        self.input_win: curses.window | None = None
        self.theme = Theme(has_color=False)

    def __enter__(self) -> "TerminalSession":
        os.environ.setdefault("ESCDELAY", "25")
        self.stdscr = curses.initscr()
        try:
            curses.noecho()
            curses.raw()
            self.stdscr.keypad(True)
            try:
                curses.curs_set(0)
            except curses.error:
                pass
            self.theme = Theme.init()
            # Keys are read on a 1x1 window so the poller thread never
            # triggers a refresh of the main screen.
            self.input_win = curses.newwin(1, 1, 0, 0)
            self.input_win.keypad(True)
            self.input_win.nodelay(True)
        except BaseException:
            self._restore()
            raise
        return self

    def __exit__(self, *exc: Any) -> None:
        self._restore()

    def _restore(self) -> None:
        if self.stdscr is None:
            return
        try:
            self.stdscr.keypad(False)
            curses.noraw()
            curses.echo()
            try:
                curses.curs_set(1)
            except curses.error:
                pass
        finally:
            curses.endwin()
            self.stdscr = None
            self.input_win = None

    def read_key(self, timeout: float) -> str | int | None:
        """Wait up to ``timeout`` seconds for a key; None when nothing arrived."""
        win = self.input_win
        if win is None:
            raise RuntimeError("terminal session is closed")
        # curses may already hold buffered input that select cannot see.
        try:
            return win.get_wch()
        except curses.error:
            pass
        ready, _, _ = select.select([sys.stdin], [], [], timeout)
        if not ready:
            return None
        try:
            return win.get_wch()
        except curses.error:
            return None

    def show_cursor(self, cell: tuple[int, int] | None) -> None:
        if self.stdscr is None:
            return
        try:
            if cell is None:
                curses.curs_set(0)
                return
            curses.curs_set(1)
            self.stdscr.move(*cell)
            self.stdscr.refresh()
        except curses.error:
            pass
