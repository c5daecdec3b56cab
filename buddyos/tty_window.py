"""A terminal device that shows its text in a window."""

from __future__ import annotations

from typing import Any

from buddyos.graphic import Graphic
from buddyos.gui import Gui, Window, WindowMessage, window_size_for_client
from buddyos.shapes import Rect
from buddyos.tty import Tty, TtyDevice

TTYW_WIDTH = 80
TTYW_HEIGHT = 25
CHAR_WIDTH = 8
CHAR_HEIGHT = 16
CURSOR_THICKNESS = 4
TEXT_COLOR = 0x000000
CURSOR_COLOR = 0x1F1F1F


def _lines_union(a: tuple[int, int], b: tuple[int, int]) -> tuple[int, int]:
    if b[0] == b[1]:
        return a
    if a[0] == a[1]:
        return b
    return min(a[0], b[0]), max(a[1], b[1])


class TtyWindow(TtyDevice):
    """An 80x25 text screen in a window, registered as a device of a terminal."""

    def __init__(self, gui: Gui, tty: Tty) -> None:
        self.gui = gui
        self.window: Window = gui.new_window()
        size = window_size_for_client(TTYW_WIDTH * CHAR_WIDTH, TTYW_HEIGHT * CHAR_HEIGHT)
        r = self.window.rect
        self.window.rect = Rect(r.x, r.y, size.width, size.height)
        self.window.title = "TTY"
        self.window.data = self
        self.window.proc = self.paint

        self._buffer = [" "] * (TTYW_WIDTH * TTYW_HEIGHT)
        self.cursor_x = 0
        self.cursor_y = 0
        tty.register_device(self)

    def lines(self) -> list[str]:
        """The screen contents, one string per row."""
        return [
            "".join(self._buffer[row * TTYW_WIDTH:(row + 1) * TTYW_WIDTH])
            for row in range(TTYW_HEIGHT)
        ]

    def _scroll(self) -> None:
        del self._buffer[:TTYW_WIDTH]
        self._buffer.extend(" " * TTYW_WIDTH)
        if self.cursor_y > 0:
            self.cursor_y -= 1
        else:
            self.cursor_x = 0
        self.gui.invalidate(self.window, None)

    def _newline(self) -> tuple[int, int]:
        self.cursor_x = 0
        self.cursor_y += 1
        if self.cursor_y >= TTYW_HEIGHT:
            self._scroll()
            return 0, TTYW_HEIGHT
        return self.cursor_y - 1, self.cursor_y + 1

    def _write_one(self, ch: str) -> tuple[int, int]:
        if ch == "\n":
            return self._newline()
        self._buffer[self.cursor_y * TTYW_WIDTH + self.cursor_x] = ch
        self.cursor_x += 1
        if self.cursor_x >= TTYW_WIDTH:
            return self._newline()
        return self.cursor_y, self.cursor_y + 1

    def write(self, text: str) -> None:
        """Put ``text`` on the screen and invalidate the rows it touched."""
        lines = (0, 0)
        for ch in text:
            if ch == "\0":
                break
            lines = _lines_union(lines, self._write_one(ch))
        begin, end = lines
        self.gui.invalidate(self.window, Rect(
            0, begin * CHAR_HEIGHT, TTYW_WIDTH * CHAR_WIDTH, (end - begin) * CHAR_HEIGHT,
        ))

    def flush(self) -> None:
        """Repaint the whole window now."""
        self.gui.redraw(self.window, None)

    def paint(self, window: Window, message: WindowMessage, graphic: Any) -> None:
        """Window procedure: draw the characters in the clipped area and the cursor."""
        if message is not WindowMessage.PAINT:
            return
        g: Graphic = graphic
        clip = g.clipping
        top = max(clip.y // CHAR_HEIGHT, 0)
        left = max(clip.x // CHAR_WIDTH, 0)
        bottom = min((clip.y + clip.height + CHAR_HEIGHT - 1) // CHAR_HEIGHT, TTYW_HEIGHT)
        right = min((clip.x + clip.width + CHAR_WIDTH - 1) // CHAR_WIDTH, TTYW_WIDTH)
        for y in range(top, bottom):
            for x in range(left, right):
                g.draw_char(x * CHAR_WIDTH, y * CHAR_HEIGHT,
                            self._buffer[y * TTYW_WIDTH + x], TEXT_COLOR)

        g.fill_rect(self.cursor_x * CHAR_WIDTH,
                    (self.cursor_y + 1) * CHAR_HEIGHT - CURSOR_THICKNESS,
                    CHAR_WIDTH, CURSOR_THICKNESS, CURSOR_COLOR)