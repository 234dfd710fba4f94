from __future__ import annotations

import curses
from dataclasses import dataclass, field

KEY_ENTER = {10, 13, curses.KEY_ENTER}
KEY_BACK = {curses.KEY_BACKSPACE, 127, 8}
KEY_ESCAPE = {27, curses.KEY_EXIT}

ENTER_KEYS: tuple[object, ...] = ("\n", "\r", *KEY_ENTER)
ESCAPE_KEYS: tuple[object, ...] = ("\x1b", *KEY_ESCAPE)


@dataclass(frozen=True)
class KeyPress:
    """One key as returned by ``get_wch``: a str for characters, an int for special keys."""

    key: str | int
    modifiers: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_raw(cls, raw: str | int) -> "KeyPress":
        mods: set[str] = set()
        if isinstance(raw, str) and len(raw) == 1 and ord(raw) < 32 and raw not in "\n\r\t\x1b\b":
            mods.add("ctrl")
        return cls(key=raw, modifiers=frozenset(mods))


def is_backspace(key: object) -> bool:
    return isinstance(key, int) and key in KEY_BACK or key in ("\x7f", "\b")
