import pytest

from buddyos.font import glyph
from buddyos.graphic import Framebuffer, Graphic
from buddyos.shapes import Rect

RED = 0xFF0000


def lit(fb):
    return {(x, y) for y in range(fb.height) for x in range(fb.width) if fb.pixel(x, y)}


def make(width=32, height=32):
    fb = Framebuffer(width, height)
    return fb, Graphic(fb)


def test_framebuffer_starts_black():
    fb = Framebuffer(4, 3)
    assert lit(fb) == set()
    assert len(fb.pixels) == 12


def test_framebuffer_pitch_and_bounds():
    fb = Framebuffer(4, 3, 6)
    assert len(fb.pixels) == 18
    with pytest.raises(IndexError):
        fb.pixel(4, 0)
    with pytest.raises(ValueError):
        Framebuffer(4, 3, 2)


def test_draw_pixel_inside_and_outside_clip():
    fb, g = make()
    g.draw_pixel(3, 4, RED)
    g.draw_pixel(-1, 0, RED)
    g.draw_pixel(32, 0, RED)
    assert lit(fb) == {(3, 4)}
    assert fb.pixel(3, 4) == RED


def test_fill_rect_clipped_to_screen():
    fb, g = make(10, 10)
    g.fill_rect(-2, -2, 5, 5, RED)
    assert fb.pixel(0, 0) == RED
    assert fb.pixel(2, 2) == RED
    assert fb.pixel(3, 3) == 0
    assert all(x < 3 and y < 3 for x, y in lit(fb))


def test_set_offset_translates_and_clips():
    fb, g = make(10, 10)
    g.set_offset(Rect(2, 3, 4, 4))
    assert g.clipping == Rect(0, 0, 4, 4)
    g.draw_pixel(0, 0, RED)
    g.draw_pixel(4, 0, RED)
    assert lit(fb) == {(2, 3)}


def test_set_offset_is_kept_on_screen():
    _, g = make(10, 10)
    g.set_offset(Rect(8, 8, 10, 10))
    assert g.offset == Rect(8, 8, 2, 2)
    assert g.clipping == Rect(0, 0, 2, 2)


def test_set_clipping_and_reset():
    fb, g = make(10, 10)
    g.set_clipping(Rect(5, 5, 2, 2))
    g.fill_rect(0, 0, 10, 10, RED)
    assert lit(fb) == {(5, 5), (6, 5), (5, 6), (6, 6)}
    g.set_clipping(None)
    assert g.clipping == Rect(0, 0, 10, 10)


def test_draw_rect_outline_only():
    fb, g = make(10, 10)
    g.draw_rect(1, 1, 6, 6, 1, RED)
    assert fb.pixel(1, 1) == RED
    assert fb.pixel(6, 6) == RED
    assert fb.pixel(1, 4) == RED
    assert fb.pixel(6, 3) == RED
    assert fb.pixel(3, 3) == 0
    assert fb.pixel(7, 7) == 0


def test_draw_char_matches_glyph_bits():
    fb, g = make(16, 16)
    g.draw_char(0, 0, "A", RED)
    rows = glyph("A")
    for y in range(16):
        for x in range(8):
            expected = RED if rows[y] & (0x80 >> x) else 0
            assert fb.pixel(x, y) == expected


def test_draw_string_without_wrap_stops_at_edge():
    fb, g = make()
    g.draw_string(Rect(0, 0, 8, 16), "AB", RED, False)
    ref_fb, ref = make()
    ref.draw_char(0, 0, "A", RED)
    assert fb.pixels == ref_fb.pixels


def test_draw_string_wraps_to_next_line():
    fb, g = make()
    g.draw_string(Rect(0, 0, 8, 32), "AB", RED, True)
    ref_fb, ref = make()
    ref.draw_char(0, 0, "A", RED)
    ref.draw_char(0, 16, "B", RED)
    assert fb.pixels == ref_fb.pixels


def test_draw_string_newline_and_restores_clipping():
    fb, g = make(64, 64)
    g.draw_string(Rect(0, 0, 64, 64), "A\nB", RED, False)
    ref_fb, ref = make(64, 64)
    ref.draw_char(0, 0, "A", RED)
    ref.draw_char(0, 16, "B", RED)
    assert fb.pixels == ref_fb.pixels
    assert g.clipping == Rect(0, 0, 64, 64)


def test_bitblt_copies_block():
    fb, g = make(16, 16)
    g.draw_pixel(5, 1, RED)
    g.bitblt(0, 0, 4, 4, 4, 0)
    assert fb.pixel(1, 1) == RED


def test_bitblt_pads_left_with_background():
    fb, g = make(16, 16)
    g.bg_color = 0x123456
    g.bitblt(0, 0, 4, 1, -2, 0)
    assert fb.pixel(0, 0) == 0x123456
    assert fb.pixel(1, 0) == 0x123456