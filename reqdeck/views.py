from __future__ import annotations

import curses


def safe_addstr(stdscr: curses.window, y: int, x: int, text: str, attr: int = 0) -> None:
    h, w = stdscr.getmaxyx()
    if y < 0 or y >= h or x >= w:
        return
    if x < 0:
        text = text[-x:]
        x = 0
    if not text:
        return
    max_len = max(0, w - x - 1)
    if max_len <= 0:
        return
    try:
        stdscr.addnstr(y, x, text, max_len, attr)
    except curses.error:
        pass


def safe_addch(stdscr: curses.window, y: int, x: int, ch: int, attr: int = 0) -> None:
    h, w = stdscr.getmaxyx()
    if 0 <= y < h and 0 <= x < w:
        try:
            stdscr.addch(y, x, ch, attr)
        except curses.error:
            pass


def draw_box(stdscr: curses.window, y: int, x: int, h: int, w: int, title: str = "", attr: int = 0) -> None:
    if h < 2 or w < 2:
        return
    safe_addch(stdscr, y, x, curses.ACS_ULCORNER, attr)
    safe_addch(stdscr, y, x + w - 1, curses.ACS_URCORNER, attr)
    safe_addch(stdscr, y + h - 1, x, curses.ACS_LLCORNER, attr)
    safe_addch(stdscr, y + h - 1, x + w - 1, curses.ACS_LRCORNER, attr)
    for xx in range(x + 1, x + w - 1):
        safe_addch(stdscr, y, xx, curses.ACS_HLINE, attr)
        safe_addch(stdscr, y + h - 1, xx, curses.ACS_HLINE, attr)
    for yy in range(y + 1, y + h - 1):
        safe_addch(stdscr, yy, x, curses.ACS_VLINE, attr)
        safe_addch(stdscr, yy, x + w - 1, curses.ACS_VLINE, attr)
    if title:
        safe_addstr(stdscr, y, x + 2, f" {title} ", attr)


def split_rows(total: int, percents: tuple[int, ...]) -> list[tuple[int, int]]:
    """Split ``total`` rows by percentage into (offset, height) pairs; the last one takes the remainder."""
    out: list[tuple[int, int]] = []
    offset = 0
    for idx, pct in enumerate(percents):
        if idx == len(percents) - 1:
            height = total - offset
        else:
            height = max(3, total * pct // 100)
        out.append((offset, max(0, height)))
        offset += height
    return out


def window_lines(text: str, row: int, col: int, height: int, width: int) -> list[str]:
    """Slice ``text`` into at most ``height`` lines starting at (row, col), each cut to ``width``."""
    lines = text.splitlines() or [""]
    return [line.expandtabs(4)[col : col + width] for line in lines[row : row + height]]
