from __future__ import annotations

import curses

from .app import App
from .models import FIELD_DEFS
from .textinput import TextInput
from .theme import Theme
from .views import draw_box, safe_addstr, split_rows, window_lines

MIN_W = 60
# Footer (4) plus six boxes of at least 3 rows each.
MIN_H = 22
# Name, Method, Url, Body, Status, Response
PANEL_ROWS = (10, 10, 10, 20, 10, 40)

HINTS = {
    "list": "j/k select | J/K move | l detail | Enter run | n new | x delete | i edit | q quit",
    "detail": "j/k field | Up/Down/Left/Right scroll response | h list | i edit | Enter run | q quit",
    "edit": "Enter save | Esc cancel | Ctrl+U clear to start | Ctrl+K clear to end",
}


def draw_app(stdscr: curses.window, theme: Theme, app: App) -> tuple[int, int] | None:
    """Paint one frame. Returns the screen cell for the edit cursor, if any."""
    stdscr.erase()
    h, w = stdscr.getmaxyx()
    if h < MIN_H or w < MIN_W:
        safe_addstr(stdscr, 0, 0, f"Terminal too small. Resize to at least {MIN_W}x{MIN_H}.", theme.attrs.error)
        stdscr.refresh()
        return None

    body_h = h - 4
    left_w = max(18, w * 20 // 100)
    _draw_list(stdscr, theme, app, 0, 0, body_h, left_w)
    cursor = _draw_detail(stdscr, theme, app, 0, left_w, body_h, w - left_w)
    _draw_footer(stdscr, theme, app, h - 4, w)
    stdscr.refresh()
    return cursor


def _draw_list(stdscr: curses.window, theme: Theme, app: App, y: int, x: int, h: int, w: int) -> None:
    state = app.state
    attr = theme.attrs.heading if state.focus == "list" else theme.attrs.panel
    draw_box(stdscr, y, x, h, w, "Requests", attr)
    rows = max(0, h - 2)
    if not state.records:
        safe_addstr(stdscr, y + 1, x + 2, "(none, press n)", theme.attrs.muted)
        return
    top = max(0, state.selected - rows + 1)
    for offset, record in enumerate(state.records[top : top + rows]):
        idx = top + offset
        label = record.name or "(unnamed)"
        if record.in_flight:
            label = f"* {label}"
        line_attr = theme.attrs.selected if idx == state.selected else theme.attrs.panel
        safe_addstr(stdscr, y + 1 + offset, x + 1, label[: w - 2].ljust(w - 2), line_attr)


def _draw_detail(
    stdscr: curses.window, theme: Theme, app: App, y: int, x: int, h: int, w: int
) -> tuple[int, int] | None:
    state = app.state
    record = state.current
    slots = split_rows(h, PANEL_ROWS)
    cursor: tuple[int, int] | None = None

    for idx, field in enumerate(FIELD_DEFS):
        off, bh = slots[idx]
        focused = state.focus == "detail" and idx == state.field_index
        editing = focused and state.mode == "edit"
        box_attr = theme.attrs.editing if editing else theme.attrs.focus if focused else theme.attrs.panel
        draw_box(stdscr, y + off, x, bh, w, field.label, box_attr)
        cell = _draw_input(stdscr, app.inputs[idx], y + off + 1, x + 1, bh - 2, w - 2, editing)
        if editing:
            cursor = cell

    off, bh = slots[4]
    status = record.last_status if record else ""
    if record is not None and record.in_flight:
        status = f"{status} (running...)".strip()
    draw_box(stdscr, y + off, x, bh, w, "Status Code", theme.attrs.panel)
    safe_addstr(stdscr, y + off + 1, x + 2, status, theme.status_attr(status))

    off, bh = slots[5]
    row, col = state.scroll
    title = "Response" if (row, col) == (0, 0) else f"Response [{row},{col}]"
    draw_box(stdscr, y + off, x, bh, w, title, theme.attrs.panel)
    response = record.last_response if record else ""
    for line_no, line in enumerate(window_lines(response, row, col, max(0, bh - 2), max(0, w - 3))):
        safe_addstr(stdscr, y + off + 1 + line_no, x + 2, line, theme.attrs.panel)
    return cursor


def _draw_input(
    stdscr: curses.window, buf: TextInput, y: int, x: int, h: int, w: int, editing: bool
) -> tuple[int, int] | None:
    if h <= 0 or w <= 1:
        return None
    width = w - 1
    if buf.multiline:
        lines = buf.wrapped(width)
        cur_row, cur_col = buf.cursor_cell(width)
        top = max(0, cur_row - h + 1) if editing else 0
        for offset, line in enumerate(lines[top : top + h]):
            safe_addstr(stdscr, y + offset, x + 1, line)
        return (y + cur_row - top, x + 1 + cur_col)
    scroll = buf.visual_scroll(width) if editing else 0
    safe_addstr(stdscr, y, x + 1, buf.value[scroll : scroll + width])
    return (y, x + 1 + buf.cursor - scroll)


def _draw_footer(stdscr: curses.window, theme: Theme, app: App, y: int, w: int) -> None:
    state = app.state
    draw_box(stdscr, y, 0, 4, w, state.mode.upper(), theme.attrs.panel)
    safe_addstr(stdscr, y + 1, 2, HINTS[state.phase], theme.attrs.muted)
    safe_addstr(stdscr, y + 2, 2, state.status_line, theme.attrs.heading)
