"""Built-in 8x16 bitmap font covering the 256 single-byte character codes."""

from __future__ import annotations

GLYPH_WIDTH = 8
"""Width of a glyph in pixels; each row is one byte, most significant bit leftmost."""

GLYPH_HEIGHT = 16
"""Height of a glyph in pixels, i.e. the number of bytes per glyph."""

_BLANK = "00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00"

# One entry per character code, top row first.
_GLYPHS = (
    # 0x00 - 0x0f
    _BLANK, _BLANK, _BLANK, _BLANK, _BLANK, _BLANK, _BLANK, _BLANK,
    _BLANK, _BLANK, _BLANK, _BLANK, _BLANK, _BLANK, _BLANK, _BLANK,
    # 0x10 - 0x1f
    "00 10 10 10 10 10 10 FE 10 10 10 10 10 10 10 00",
    "00 00 02 06 0E 1E 3E 7E 3E 1E 0E 06 02 00 00 00",
    "00 10 38 54 10 10 10 10 10 10 10 54 38 10 00 00",
    "00 00 24 24 24 24 24 24 24 24 00 00 24 24 00 00",
    "00 00 34 54 54 54 54 54 34 14 14 14 14 14 00 00",
    "00 10 10 10 10 10 10 FE 00 00 00 00 00 00 00 00",
    "00 00 00 00 00 00 00 FE 10 10 10 10 10 10 10 00",
    "00 10 10 10 10 10 10 F0 10 10 10 10 10 10 10 00",
    "00 00 10 38 54 10 10 10 10 10 10 10 10 10 00 00",
    "00 10 10 10 10 10 10 1E 10 10 10 10 10 10 10 00",
    "00 00 00 00 00 00 08 04 7E 04 08 00 00 00 00 00",
    "00 00 00 00 00 00 10 20 7E 20 10 00 00 00 00 00",
    _BLANK, _BLANK, _BLANK, _BLANK,
    # 0x20 - 0x2f
    _BLANK,
    "00 00 00 18 18 18 18 18 18 18 10 00 18 18 00 00",
    "00 00 24 24 24 00 00 00 00 00 00 00 00 00 00 00",
    "00 00 00 14 14 14 7F 14 24 24 FE 28 28 28 00 00",
    "00 00 00 3E 68 48 48 30 18 0C 0A 0A 0E 7C 00 00",
    "00 00 70 48 88 4B 76 08 10 6E D2 11 12 0E 00 00",
    "00 00 00 38 64 44 2C 38 72 4A 8E C6 46 3B 00 00",
    "00 00 18 18 18 00 00 00 00 00 00 00 00 00 00 00",
    "04 08 10 10 10 20 20 20 20 20 20 10 10 10 08 04",
    "20 10 10 08 08 04 04 04 04 04 04 08 08 10 10 20",
    "00 00 00 00 18 18 D2 3C 18 24 24 00 00 00 00 00",
    "00 00 00 00 00 18 18 18 FF 18 18 18 00 00 00 00",
    "00 00 00 00 00 00 00 00 00 00 00 00 08 18 10 20",
    "00 00 00 00 00 00 00 00 7E 00 00 00 00 00 00 00",
    "00 00 00 00 00 00 00 00 00 00 00 00 18 18 00 00",
    "00 00 02 04 04 0C 08 08 10 10 30 20 20 40 00 00",
    # 0x30 - 0x3f
    "00 00 00 3C 24 42 42 5A 5A 5A 42 42 26 3C 00 00",
    "00 00 00 18 38 68 08 08 08 08 08 08 08 08 00 00",
    "00 00 00 3C 46 02 02 06 04 08 10 30 60 7E 00 00",
    "00 00 00 3C 46 02 02 06 18 06 02 02 46 3C 00 00",
    "00 00 00 0C 1C 14 24 24 44 44 FF 04 04 04 00 00",
    "00 00 00 7E 60 40 40 7C 06 02 02 02 06 78 00 00",
    "00 00 00 1E 30 60 40 5C 66 42 42 42 26 3C 00 00",
    "00 00 00 7E 02 06 04 04 08 08 18 10 10 20 00 00",
    "00 00 00 3C 42 42 42 24 3C 42 42 C2 42 3C 00 00",
    "00 00 00 3C 66 42 42 42 66 3A 02 06 04 78 00 00",
    "00 00 00 00 00 18 18 00 00 00 00 18 18 00 00 00",
    "00 00 00 00 00 18 18 00 00 00 00 18 18 10 20 00",
    "00 02 04 08 18 30 60 40 40 60 30 18 08 04 02 00",
    "00 00 00 00 00 00 FF 00 00 00 FF 00 00 00 00 00",
    "00 40 20 10 18 0C 06 02 02 06 0C 18 10 20 40 00",
    "00 00 7C 06 02 02 04 0C 08 10 10 00 10 10 00 00",
    # 0x40 - 0x4f
    "00 00 00 3C 62 5E A5 A5 A5 AA AA 76 62 3C 00 00",
    "00 00 00 18 18 18 24 24 24 24 7E 42 42 C3 00 00",
    "00 00 00 7C 46 42 42 44 78 46 42 42 46 7C 00 00",
    "00 00 00 1E 30 60 40 40 40 40 40 60 30 1E 00 00",
    "00 00 00 78 44 42 42 42 42 42 42 42 44 78 00 00",
    "00 00 00 7E 40 40 40 40 7E 40 40 40 40 7E 00 00",
    "00 00 00 7E 40 40 40 40 7E 40 40 40 40 40 00 00",
    "00 00 00 1E 20 60 40 40 4E 42 42 42 22 1E 00 00",
    "00 00 00 42 42 42 42 42 7E 42 42 42 42 42 00 00",
    "00 00 00 3C 18 18 18 18 18 18 18 18 18 3C 00 00",
    "00 00 00 7C 04 04 04 04 04 04 04 44 44 38 00 00",
    "00 00 00 62 64 64 68 70 78 68 6C 64 62 62 00 00",
    "00 00 00 20 20 20 20 20 20 20 20 20 20 3E 00 00",
    "00 00 00 66 66 66 66 66 5A 5A 5A 5A 5A 42 00 00",
    "00 00 00 62 62 62 52 52 52 4A 4A 46 46 46 00 00",
    "00 00 00 3C 66 42 42 42 42 42 42 42 66 3C 00 00",
    # 0x50 - 0x5f
    "00 00 00 7C 42 43 43 42 7C 40 40 40 40 40 00 00",
    "00 00 00 3C 66 42 42 42 42 42 42 42 66 3C 06 03",
    "00 00 00 7C 46 42 42 46 78 4C 44 46 42 43 00 00",
    "00 00 00 3C 60 40 40 30 18 04 02 02 06 7C 00 00",
    "00 00 00 FF 18 18 18 18 18 18 18 18 18 18 00 00",
    "00 00 00 42 42 42 42 42 42 42 42 42 66 3C 00 00",
    "00 00 00 42 42 42 66 24 24 24 2C 18 18 18 00 00",
    "00 00 00 81 9B 5A 5A 5A 5A 5A 6A 66 66 64 00 00",
    "00 00 00 42 66 24 1C 18 18 18 24 24 42 42 00 00",
    "00 00 00 42 42 24 24 18 18 18 18 18 18 18 00 00",
    "00 00 00 7E 06 04 0C 08 10 10 20 20 40 7E 00 00",
    "18 10 10 10 10 10 10 10 10 10 10 10 10 10 10 18",
    "00 00 40 20 20 30 10 10 08 08 0C 04 04 02 00 00",
    "18 08 08 08 08 08 08 08 08 08 08 08 08 08 08 18",
    "00 00 18 18 24 24 42 42 00 00 00 00 00 00 00 00",
    "00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 FF",
    # 0x60 - 0x6f
    "30 18 08 0C 00 00 00 00 00 00 00 00 00 00 00 00",
    "00 00 00 00 00 00 3C 06 02 3E 62 42 46 3A 00 00",
    "00 00 40 40 40 40 5C 66 42 42 42 42 66 5C 00 00",
    "00 00 00 00 00 00 1E 20 40 40 40 40 20 1E 00 00",
    "00 00 02 02 02 02 3A 66 42 42 42 42 66 3A 00 00",
    "00 00 00 00 00 00 3C 62 42 7E 40 40 60 3E 00 00",
    "00 00 0E 10 10 10 7E 10 10 10 10 10 10 10 00 00",
    "00 00 00 00 00 00 3A 66 42 42 42 66 3A 02 04 78",
    "00 00 40 40 40 40 5C 66 42 42 42 42 42 42 00 00",
    "00 00 18 18 00 00 78 08 08 08 08 08 08 7E 00 00",
    "00 00 08 08 00 00 38 08 08 08 08 08 48 48 48 78",
    "00 00 60 60 60 60 62 64 68 70 68 64 64 62 00 00",
    "00 00 38 18 18 18 18 18 18 18 18 18 18 7E 00 00",
    "00 00 00 00 00 00 76 5A 5A 4A 4A 4A 4A 4A 00 00",
    "00 00 00 00 00 00 5C 66 42 42 42 42 42 42 00 00",
    "00 00 00 00 00 00 3C 66 42 42 42 42 66 3C 00 00",
    # 0x70 - 0x7f
    "00 00 00 00 00 00 5C 66 42 42 42 42 66 5C 40 40",
    "00 00 00 00 00 00 3A 66 42 42 42 42 66 3A 02 02",
    "00 00 00 00 00 00 6F 30 30 20 20 20 20 78 00 00",
    "00 00 00 00 00 00 3C 60 60 30 0C 02 06 7C 00 00",
    "00 00 00 10 10 10 7E 10 10 10 10 10 10 0E 00 00",
    "00 00 00 00 00 00 42 42 42 42 42 42 66 3A 00 00",
    "00 00 00 00 00 00 42 42 64 24 24 38 18 18 00 00",
    "00 00 00 00 00 00 C2 5A 5A 5A 5A 6A 6C 24 00 00",
    "00 00 00 00 00 00 42 24 18 18 18 24 24 42 00 00",
    "00 00 00 00 00 00 42 42 24 24 38 18 18 10 10 60",
    "00 00 00 00 00 00 7E 06 04 08 10 20 60 7E 00 00",
    "0C 18 10 10 10 10 10 30 30 10 10 10 10 10 18 0C",
    "00 18 18 18 18 18 18 18 00 18 18 18 18 18 18 00",
    "30 18 08 08 08 08 08 0C 0C 08 08 08 08 08 18 30",
    "00 00 00 00 00 00 00 71 8E 00 00 00 00 00 00 00",
    "00 00 00 E0 A0 A0 A0 A0 A0 A0 A0 A0 E0 00 00 00",
    # 0x80 - 0x8f
    "00 00 00 01 02 06 04 0F 04 0F 04 06 03 01 00 00",
    _BLANK, _BLANK, _BLANK, _BLANK,
    "00 00 00 00 00 00 00 31 31 00 00 00 00 00 00 00",
    "00 00 00 00 01 01 07 01 01 01 01 01 00 00 00 00",
    "00 00 00 00 01 03 01 07 01 01 01 01 00 00 00 00",
    "00 00 00 40 A0 00 00 00 00 00 00 00 00 00 00 00",
    "00 00 30 28 49 49 4A 3A 05 0A 0A 12 12 21 00 00",
    _BLANK,
    "00 00 00 00 00 03 04 18 10 0C 02 01 00 00 00 00",
    "00 00 07 18 30 20 20 20 20 20 20 10 18 07 00 00",
    _BLANK, _BLANK, _BLANK,
    # 0x90 - 0x9f
    _BLANK,
    "00 00 01 01 01 00 00 00 00 00 00 00 00 00 00 00",
    "00 01 01 00 01 00 00 00 00 00 00 00 00 00 00 00",
    "00 01 02 03 03 00 00 00 00 00 00 00 00 00 00 00",
    "00 03 03 01 02 00 00 00 00 00 00 00 00 00 00 00",
    "00 00 00 00 00 00 01 03 03 01 00 00 00 00 00 00",
    "00 00 00 00 00 00 00 00 03 00 00 00 00 00 00 00",
    "00 00 00 00 00 00 00 00 7F 00 00 00 00 00 00 00",
    "00 00 0F 00 00 00 00 00 00 00 00 00 00 00 00 00",
    "00 00 3F 09 09 09 00 00 00 00 00 00 00 00 00 00",
    _BLANK,
    "00 20 18 04 03 00 00 00 00 00 00 01 06 08 30 00",
    "00 00 00 00 00 0E 31 21 20 20 20 21 31 0E 00 00",
    _BLANK, _BLANK, _BLANK,
    # 0xa0 - 0xaf
    _BLANK,
    "00 00 01 00 00 01 01 01 01 01 01 01 01 01 00 00",
    _BLANK, _BLANK,
    "00 00 00 23 1C 10 10 10 10 10 10 08 17 20 00 00",
    _BLANK, _BLANK,
    "00 00 03 02 02 01 03 02 02 01 00 00 00 02 01 00",
    "00 00 06 06 00 00 00 00 00 00 00 00 00 00 00 00",
    "00 00 03 0C 13 16 24 24 2C 24 26 13 0C 07 00 00",
    "00 00 03 00 03 04 03 03 00 00 00 00 00 00 00 00",
    "00 00 00 00 01 02 0C 13 12 0D 02 01 00 00 00 00",
    _BLANK, _BLANK,
    "00 01 06 08 13 22 22 23 22 22 12 12 08 07 00 00",
    _BLANK,
    # 0xb0 - 0xbf
    "00 01 02 02 01 00 00 00 00 00 00 00 00 00 00 00",
    "00 00 00 00 00 00 07 00 00 00 00 00 07 00 00 00",
    "00 01 00 00 01 00 00 00 00 00 00 00 00 00 00 00",
    "00 01 00 00 01 00 00 00 00 00 00 00 00 00 00 00",
    "00 00 00 01 00 00 00 00 00 00 00 00 00 00 00 00",
    _BLANK,
    "00 00 07 07 0F 07 07 03 00 00 00 00 00 00 00 00",
    "00 00 00 00 00 00 00 01 01 00 00 00 00 00 00 00",
    "00 00 00 00 00 00 00 00 00 00 00 00 00 01 01 03",
    _BLANK,
    "00 00 03 04 04 02 01 03 00 00 00 00 00 00 00 00",
    "00 00 00 32 09 04 03 00 00 00 01 06 09 32 00 00",
    "00 00 04 04 04 04 04 00 01 02 04 08 10 00 00 00",
    "00 00 04 04 04 04 04 00 01 02 04 08 10 00 00 00",
    "00 00 0E 12 06 12 12 0C 01 02 04 04 08 00 00 00",
    "00 00 00 00 00 00 00 01 03 02 04 04 06 03 00 00",
    # 0xc0 - 0xcf
    _BLANK, _BLANK, _BLANK, _BLANK, _BLANK, _BLANK,
    "00 00 01 01 02 02 04 04 0C 0F 08 10 10 20 00 00",
    _BLANK, _BLANK, _BLANK, _BLANK, _BLANK, _BLANK, _BLANK, _BLANK, _BLANK,
    # 0xd0 - 0xdf
    "00 00 07 04 04 04 04 1F 04 04 04 04 04 07 00 00",
    _BLANK, _BLANK, _BLANK, _BLANK, _BLANK, _BLANK,
    "00 00 00 00 08 04 02 01 01 03 04 08 00 00 00 00",
    "00 00 03 0C 08 10 10 10 11 11 12 0A 04 0B 08 00",
    _BLANK, _BLANK, _BLANK, _BLANK, _BLANK,
    "00 00 04 04 07 04 04 04 04 04 04 07 04 04 00 00",
    "00 00 0F 08 08 08 08 0F 08 08 08 08 0E 0B 00 00",
    # 0xe0 - 0xef
    _BLANK, _BLANK, _BLANK, _BLANK, _BLANK, _BLANK,
    "00 00 00 00 00 0E 11 21 01 1F 21 21 23 1C 00 00",
    _BLANK, _BLANK, _BLANK, _BLANK, _BLANK, _BLANK, _BLANK, _BLANK, _BLANK,
    # 0xf0 - 0xff
    "00 00 01 00 01 03 04 04 08 08 08 04 04 03 00 00",
    _BLANK, _BLANK, _BLANK, _BLANK, _BLANK, _BLANK,
    "00 00 00 00 00 00 00 00 0F 00 00 00 00 00 00 00",
    "00 00 00 00 00 03 04 04 08 09 09 05 06 03 04 00",
    _BLANK, _BLANK, _BLANK, _BLANK, _BLANK,
    "00 00 04 04 04 07 04 04 04 04 04 04 04 07 04 00",
    _BLANK,
)

FONT = bytes.fromhex(" ".join(_GLYPHS))
"""The whole font: 256 glyphs of ``GLYPH_HEIGHT`` bytes each, in code order."""


def _code_of(code: int | str) -> int:
    if isinstance(code, str):
        if len(code) != 1:
            raise ValueError(f"expected a single character, got {code!r}")
        code = ord(code)
    if isinstance(code, bool) or not isinstance(code, int):
        raise TypeError(f"expected a character code, got {code!r}")
    if not 0 <= code <= 0xFF:
        raise ValueError(f"character code {code} is outside the font")
    return code


def glyph(code: int | str) -> bytes:
    """Return the ``GLYPH_HEIGHT`` row bytes of the glyph for ``code``.

    ``code`` is a character code from 0 to 255 or a one-character string
    whose code point lies in that range.
    """
    index = _code_of(code) * GLYPH_HEIGHT
    return FONT[index:index + GLYPH_HEIGHT]