"""A minimal window system drawing onto a framebuffer."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from buddyos.graphic import Framebuffer, Graphic
from buddyos.shapes import Point, Rect, Size


class WindowMessage(Enum):
    """Messages sent to a window's procedure."""

    PAINT = 0


BORDER1 = 1
BORDER2 = 2
TITLE_HEIGHT = 20
CLIENT_X0 = BORDER1 + BORDER2
CLIENT_Y0 = BORDER1 + BORDER2 + TITLE_HEIGHT

MOUSE_WIDTH = 13
MOUSE_HEIGHT = 19

DESKTOP_COLOR = 0x001F00

_MOUSE_SHAPE = (
    "*............",
    "**...........",
    "*-*..........",
    "*o-*.........",
    "*oo-*........",
    "*ooo-*.......",
    "*oooo-*......",
    "*ooooo-*.....",
    "*oooooo-*....",
    "*ooooooo-*...",
    "*oooooooo-*..",
    "*ooooooooo-*.",
    "*oooooo******",
    "*ooo*-o*.....",
    "*oo*.*oo*....",
    "*-*..*-o*....",
    "**....*oo*...",
    "*.....*--*...",
    ".......**....",
)

_MOUSE_COLORS = {
    "*": 0x000000,
    "@": 0x404040,
    "/": 0x808080,
    "-": 0xC0C0C0,
    "o": 0xFFFFFF,
}

WindowProc = Callable[["Window", WindowMessage, Any], None]


@dataclass(eq=False)
class Window:
    """A framed window; ``invalidated`` is the part needing a repaint, in window coordinates."""

    title: str = "New Window"
    rect: Rect = field(default_factory=lambda: Rect(120, 120, 640, 480))
    bg_color: int = 0xFFFFFF
    invalidated: Rect = field(default_factory=Rect)
    proc: WindowProc | None = None
    data: Any = None

    def invalidate_all(self) -> None:
        self.invalidated = Rect(0, 0, self.rect.width, self.rect.height)


def window_size_for_client(width: int, height: int) -> Size:
    """Outer window size needed for a client area of ``width`` by ``height``."""
    return Size(width + 2 * CLIENT_X0, height + 2 * CLIENT_X0 + TITLE_HEIGHT)


class Gui:
    """The desktop: a stack of windows and a mouse pointer over a framebuffer."""

    def __init__(self, framebuffer: Framebuffer) -> None:
        self._lock = threading.RLock()
        self.framebuffer = framebuffer
        self._windows: list[Window] = []
        self.total_size = Size(framebuffer.width, framebuffer.height)
        self.mouse = Point(framebuffer.width // 2, framebuffer.height // 2)
        self.global_invalidated = Rect(0, 0, framebuffer.width, framebuffer.height)
        self.bg_color = DESKTOP_COLOR

    @property
    def windows(self) -> tuple[Window, ...]:
        """Windows in drawing order."""
        with self._lock:
            return tuple(self._windows)

    def new_window(self) -> Window:
        """Create a window with default placement and put it on top."""
        with self._lock:
            window = Window()
            window.invalidate_all()
            self._windows.append(window)
            return window

    def _draw_window(self, w: Window, g: Graphic) -> None:
        g.set_offset(w.rect)
        g.set_clipping(w.invalidated)
        g.bg_color = w.bg_color

        g.draw_rect(0, 0, w.rect.width, w.rect.height, BORDER1, 0x2F2F2F)
        g.draw_rect(BORDER1, BORDER1, w.rect.width - 2 * BORDER1,
                    w.rect.height - 2 * BORDER1, BORDER2, 0x3F3F3F)

        border = CLIENT_X0
        inborder_width = w.rect.width - 2 * border
        inborder_height = w.rect.height - 2 * border
        title = min(TITLE_HEIGHT, inborder_height)

        g.fill_rect(border, border, inborder_width, title, 0x5F5F5F)

        title_rect = Rect(border + TITLE_HEIGHT, border + 2, inborder_width - TITLE_HEIGHT, 16)
        g.draw_string(title_rect, w.title, 0x000000, False)

        client = Rect(border, border + TITLE_HEIGHT, inborder_width, inborder_height - TITLE_HEIGHT)
        g.fill_rect(client.x, client.y, client.width, client.height, g.bg_color)

        if w.proc is not None:
            client_inv = w.invalidated.intersect(client)
            g.set_offset(Rect(client.x + w.rect.x, client.y + w.rect.y, client.width, client.height))
            g.set_clipping(Rect(client_inv.x - client.x, client_inv.y - client.y,
                                client_inv.width, client_inv.height))
            w.proc(w, WindowMessage.PAINT, g)

        w.invalidated = Rect()

    def _draw_mouse(self, g: Graphic) -> None:
        x, y = self.mouse.x, self.mouse.y
        for yi, row in enumerate(_MOUSE_SHAPE):
            for xi, cell in enumerate(row):
                color = _MOUSE_COLORS.get(cell)
                if color is not None:
                    g.draw_pixel(x + xi, y + yi, color)

    def _global_invalidate(self, rect: Rect) -> None:
        for w in self._windows:
            inter = w.rect.intersect(rect)
            local = Rect(inter.x - w.rect.x, inter.y - w.rect.y, inter.width, inter.height)
            w.invalidated = w.invalidated.union(local)
        self.global_invalidated = self.global_invalidated.union(rect)

    def mouse_move(self, dx: int, dy: int) -> None:
        """Move the pointer, keeping it on screen, and invalidate what it covered."""
        with self._lock:
            old = Rect(self.mouse.x, self.mouse.y, MOUSE_WIDTH, MOUSE_HEIGHT)

            x = self.mouse.x + dx
            if x < 0:
                x = 0
            elif x >= self.total_size.width:
                x = self.total_size.width
            y = self.mouse.y + dy
            if y < 0:
                y = 0
            elif y >= self.total_size.height:
                y = self.total_size.height
            self.mouse = Point(x, y)

            new = Rect(x, y, MOUSE_WIDTH, MOUSE_HEIGHT)
            self._global_invalidate(old.union(new))

    def draw_all(self) -> None:
        """Repaint the invalidated desktop, every window and the pointer."""
        with self._lock:
            g = Graphic(self.framebuffer)
            g.set_clipping(self.global_invalidated)
            g.fill_rect(0, 0, self.total_size.width, self.total_size.height, self.bg_color)

            for w in self._windows:
                self._draw_window(w, g)

            g.set_offset(Rect(0, 0, self.total_size.width, self.total_size.height))
            self._draw_mouse(g)

            self.global_invalidated = Rect()

    @staticmethod
    def _invalidate_client(window: Window, rect: Rect | None) -> None:
        if rect is None:
            window.invalidate_all()
        else:
            client = Rect(rect.x + CLIENT_X0, rect.y + CLIENT_Y0, rect.width, rect.height)
            window.invalidated = window.invalidated.union(client)

    def invalidate(self, window: Window, rect: Rect | None = None) -> None:
        """Mark ``rect`` of the client area (or the whole window) for repainting."""
        with self._lock:
            self._invalidate_client(window, rect)

    def redraw(self, window: Window, rect: Rect | None = None) -> None:
        """Invalidate like ``invalidate`` and repaint the window at once."""
        with self._lock:
            self._invalidate_client(window, rect)
            self._draw_window(window, Graphic(self.framebuffer))