from __future__ import annotations

import curses

from .keys import KeyPress, is_backspace

MAX_INPUT = 65536


class TextInput:
    """Editable text buffer with its own cursor, fed one key at a time."""

    def __init__(self, value: str = "", multiline: bool = False) -> None:
        self.multiline = multiline
        self.value = value
        self.cursor = len(value)

    def set(self, value: str) -> None:
        self.value = value
        self.cursor = len(value)

    def reset(self) -> None:
        self.set("")

    def handle(self, press: KeyPress) -> bool:
        """Apply an editing key. Returns False for keys the buffer ignores."""
        key = press.key
        buf = self.value
        # Ctrl chords arrive as control characters; name them by their letter.
        chord = chr(ord(key) + 96) if "ctrl" in press.modifiers and isinstance(key, str) and len(key) == 1 else ""
        if key == curses.KEY_LEFT or chord == "b":
            self.cursor = max(0, self.cursor - 1)
        elif key == curses.KEY_RIGHT or chord == "f":
            self.cursor = min(len(buf), self.cursor + 1)
        elif key == curses.KEY_HOME or chord == "a":
            self.cursor = 0
        elif key == curses.KEY_END or chord == "e":
            self.cursor = len(buf)
        elif chord == "u":
            self.value = buf[self.cursor :]
            self.cursor = 0
        elif chord == "k":
            self.value = buf[: self.cursor]
        elif chord == "w":
            start = self.cursor
            while start > 0 and buf[start - 1] == " ":
                start -= 1
            while start > 0 and buf[start - 1] != " ":
                start -= 1
            self.value = buf[:start] + buf[self.cursor :]
            self.cursor = start
        elif key == curses.KEY_DC or chord == "d":
            if self.cursor < len(buf):
                self.value = buf[: self.cursor] + buf[self.cursor + 1 :]
        elif is_backspace(key):
            if self.cursor > 0:
                self.value = buf[: self.cursor - 1] + buf[self.cursor :]
                self.cursor -= 1
        elif isinstance(key, str) and key.isprintable() and len(buf) < MAX_INPUT:
            self.value = buf[: self.cursor] + key + buf[self.cursor :]
            self.cursor += len(key)
        else:
            return False
        return True

    def visual_scroll(self, width: int) -> int:
        """Horizontal offset that keeps the cursor inside ``width`` columns."""
        if width <= 0:
            return 0
        return max(0, self.cursor - width + 1)

    def wrapped(self, width: int) -> list[str]:
        width = max(1, width)
        if not self.value:
            return [""]
        return [self.value[i : i + width] for i in range(0, len(self.value), width)]

    def cursor_cell(self, width: int) -> tuple[int, int]:
        """Row and column of the cursor when the value is wrapped at ``width``."""
        width = max(1, width)
        return divmod(self.cursor, width)
