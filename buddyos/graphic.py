"""Drawing primitives on a linear 32-bit framebuffer."""

from __future__ import annotations

from buddyos.font import GLYPH_HEIGHT, GLYPH_WIDTH, glyph
from buddyos.shapes import Rect


class Framebuffer:
    """A block of 32-bit pixels, ``pitch`` pixels per scan line."""

    def __init__(self, width: int, height: int, pitch: int | None = None) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("framebuffer dimensions must be positive")
        if pitch is None:
            pitch = width
        if pitch < width:
            raise ValueError("pitch must be at least the width")
        self.width = width
        self.height = height
        self.pitch = pitch
        self.pixels = [0] * (pitch * height)

    def pixel(self, x: int, y: int) -> int:
        """Return the colour at ``(x, y)``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) is outside the framebuffer")
        return self.pixels[x + y * self.pitch]


class Graphic:
    """A drawing context: an offset window into a framebuffer plus a clipping rectangle.

    Coordinates passed to the drawing methods are relative to ``offset``;
    ``clipping`` is expressed in the same relative coordinates.
    """

    def __init__(self, framebuffer: Framebuffer) -> None:
        self.framebuffer = framebuffer
        self.pitch = framebuffer.pitch
        self.width = framebuffer.width
        self.height = framebuffer.height
        self.offset = Rect(0, 0, self.width, self.height)
        self.clipping = Rect(0, 0, self.width, self.height)
        self.bg_color = 0

    def set_offset(self, rect: Rect) -> None:
        """Move the origin to ``rect`` (kept on screen) and reset clipping to it."""
        self.offset = rect.intersect(Rect(0, 0, self.width, self.height))
        self.set_clipping(None)

    def set_clipping(self, rect: Rect | None) -> None:
        """Restrict drawing to ``rect`` within the offset area, or lift the restriction."""
        base = Rect(0, 0, self.offset.width, self.offset.height)
        self.clipping = base if rect is None else rect.intersect(base)

    def _index(self, x: int, y: int) -> int:
        return (x + self.offset.x) + (y + self.offset.y) * self.pitch

    def draw_pixel(self, x: int, y: int, color: int) -> None:
        """Set one pixel if it lies inside the clipping rectangle."""
        if self.clipping.contains(x, y):
            self.framebuffer.pixels[self._index(x, y)] = color

    def fill_rect(self, x: int, y: int, width: int, height: int, color: int) -> None:
        """Fill the clipped part of a rectangle with ``color``."""
        r = self.clipping.intersect(Rect(x, y, width, height))
        if r.width <= 0:
            return
        pixels = self.framebuffer.pixels
        row = [color] * r.width
        for yi in range(r.height):
            start = self._index(r.x, r.y + yi)
            pixels[start:start + r.width] = row

    def draw_rect(self, x: int, y: int, width: int, height: int, thickness: int, color: int) -> None:
        """Draw the outline of a rectangle, ``thickness`` pixels wide, inside its bounds."""
        self.fill_rect(x, y, width, thickness, color)
        self.fill_rect(x, y + height - thickness, width, thickness, color)
        self.fill_rect(x, y + thickness, thickness, height - 2 * thickness, color)
        self.fill_rect(x + width - thickness, y + thickness, thickness, height - 2 * thickness, color)

    def draw_char(self, x: int, y: int, ch: int | str, color: int) -> None:
        """Draw the set pixels of a font glyph with its top-left corner at ``(x, y)``."""
        for yi, bits in enumerate(glyph(ch)):
            for xi in range(GLYPH_WIDTH):
                if bits & (0x80 >> xi):
                    self.draw_pixel(x + xi, y + yi, color)

    def draw_string(self, rect: Rect, text: str, color: int, wrap: bool) -> None:
        """Draw ``text`` inside ``rect``; ``\\n`` starts a new line.

        Without ``wrap`` drawing stops at the right edge; with it, text
        continues on the next line.
        """
        old_clip = self.clipping
        clip = old_clip.intersect(rect)
        self.clipping = clip
        try:
            x, y = rect.x, rect.y
            right = clip.x + clip.width
            for ch in text:
                if ch == "\0":
                    break
                if ch == "\n":
                    x = rect.x
                    y += GLYPH_HEIGHT
                    continue
                if not wrap and x >= right:
                    break
                if wrap and x + GLYPH_WIDTH > right:
                    x = rect.x
                    y += GLYPH_HEIGHT
                self.draw_char(x, y, ch, color)
                x += GLYPH_WIDTH
        finally:
            self.clipping = old_clip

    def bitblt(self, x: int, y: int, cx: int, cy: int, x0: int, y0: int) -> None:
        """Copy a ``cx`` by ``cy`` block from ``(x0, y0)`` to ``(x, y)``.

        Columns whose source falls off the left or right of the offset area
        are filled with ``bg_color``.
        """
        rd = self.clipping.intersect(Rect(x, y, cx, cy))
        dx = rd.x - x
        dy = rd.y - y

        leftpad = 0 if x0 > 0 else -x0
        rightpad = 0 if x0 + cx < self.offset.width else x0 + cx - self.offset.width

        pixels = self.framebuffer.pixels
        for yi in range(dy, rd.height - rd.y):
            for xi in range(dx, rd.width - rd.x):
                dest = self._index(rd.x + xi, rd.y + yi)
                if xi < leftpad or cx - xi <= rightpad:
                    pixels[dest] = self.bg_color
                else:
                    pixels[dest] = pixels[self._index(x0 + xi, y0 + yi)]