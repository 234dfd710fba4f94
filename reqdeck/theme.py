from __future__ import annotations

import curses
from dataclasses import dataclass


@dataclass(frozen=True)
class ThemeAttrs:
    panel: int
    heading: int
    muted: int
    selected: int
    focus: int
    editing: int
    error: int
    success: int


class Theme:
    def __init__(self, has_color: bool) -> None:
        self.has_color = has_color
        self.attrs = ThemeAttrs(
            panel=0,
            heading=curses.A_BOLD,
            muted=curses.A_DIM,
            selected=curses.A_REVERSE | curses.A_BOLD,
            focus=curses.A_REVERSE,
            editing=curses.A_BOLD | curses.A_UNDERLINE,
            error=curses.A_BOLD,
            success=curses.A_BOLD,
        )

    @classmethod
    def init(cls) -> "Theme":
        has_color = curses.has_colors()
        theme = cls(has_color=has_color)
        if not has_color:
            return theme

        curses.start_color()
        curses.use_default_colors()

        curses.init_pair(1, curses.COLOR_WHITE, -1)   # panel text
        curses.init_pair(2, curses.COLOR_YELLOW, -1)  # headings
        curses.init_pair(3, curses.COLOR_RED, -1)     # errors
        curses.init_pair(4, curses.COLOR_GREEN, -1)   # 2xx status
        curses.init_pair(5, curses.COLOR_BLACK, curses.COLOR_YELLOW)  # selection / focus
        curses.init_pair(6, curses.COLOR_BLACK, curses.COLOR_CYAN)    # edit mode

        theme.attrs = ThemeAttrs(
            panel=curses.color_pair(1),
            heading=curses.color_pair(2) | curses.A_BOLD,
            muted=curses.A_DIM,
            selected=curses.color_pair(5) | curses.A_BOLD,
            focus=curses.color_pair(5),
            editing=curses.color_pair(6) | curses.A_BOLD,
            error=curses.color_pair(3) | curses.A_BOLD,
            success=curses.color_pair(4) | curses.A_BOLD,
        )
        return theme

    def status_attr(self, status: str) -> int:
        if status.startswith("2"):
            return self.attrs.success
        if status and status[0] in "45E":
            return self.attrs.error
        return self.attrs.panel
