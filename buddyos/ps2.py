"""PS/2 keyboard scan-code decoding and PS/2 mouse packet assembly."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from buddyos.keycode import Keycode

_SC_EXT1 = 0xE0
_SC_EXT2 = 0xE1
_SC_PRTSCR_DOWN1 = 0x2A
_SC_PRTSCR_DOWN2 = 0x37
_SC_PRTSCR_UP1 = 0xB7
_SC_PRTSCR_UP2 = 0xAA
_SC_PAUSE_DOWN = 0x1D45
_SC_PAUSE_UP = 0x9DC5

_NORMAL_SCANCODES: dict[int, Keycode] = {
    0x01: Keycode.ESCAPE,
    0x02: Keycode.DIGIT1,
    0x03: Keycode.DIGIT2,
    0x04: Keycode.DIGIT3,
    0x05: Keycode.DIGIT4,
    0x06: Keycode.DIGIT5,
    0x07: Keycode.DIGIT6,
    0x08: Keycode.DIGIT7,
    0x09: Keycode.DIGIT8,
    0x0A: Keycode.DIGIT9,
    0x0B: Keycode.DIGIT0,
    0x0C: Keycode.MINUS,
    0x0D: Keycode.PLUS,
    0x0E: Keycode.BACKSPACE,
    0x0F: Keycode.TAB,
    0x10: Keycode.Q,
    0x11: Keycode.W,
    0x12: Keycode.E,
    0x13: Keycode.R,
    0x14: Keycode.T,
    0x15: Keycode.Y,
    0x16: Keycode.U,
    0x17: Keycode.I,
    0x18: Keycode.O,
    0x19: Keycode.P,
    0x1A: Keycode.OEM_LBRACE,
    0x1B: Keycode.OEM_RBRACE,
    0x1C: Keycode.ENTER,
    0x1D: Keycode.LCTRL,
    0x1E: Keycode.A,
    0x1F: Keycode.S,
    0x20: Keycode.D,
    0x21: Keycode.F,
    0x22: Keycode.G,
    0x23: Keycode.H,
    0x24: Keycode.J,
    0x25: Keycode.K,
    0x26: Keycode.L,
    0x27: Keycode.OEM_COLON,
    0x28: Keycode.OEM_QUOTE,
    0x29: Keycode.OEM_TILDE,
    0x2A: Keycode.LSHIFT,
    0x2B: Keycode.OEM_PIPE,
    0x2C: Keycode.Z,
    0x2D: Keycode.X,
    0x2E: Keycode.C,
    0x2F: Keycode.V,
    0x30: Keycode.B,
    0x31: Keycode.N,
    0x32: Keycode.M,
    0x33: Keycode.COMMA,
    0x34: Keycode.PERIOD,
    0x35: Keycode.OEM_SLASH,
    0x36: Keycode.RSHIFT,
    0x37: Keycode.NUMPAD_MUL,
    0x38: Keycode.LALT,
    0x39: Keycode.SPACE,
    0x3A: Keycode.CAPSLOCK,
    0x3B: Keycode.F1,
    0x3C: Keycode.F2,
    0x3D: Keycode.F3,
    0x3E: Keycode.F4,
    0x3F: Keycode.F5,
    0x40: Keycode.F6,
    0x41: Keycode.F7,
    0x42: Keycode.F8,
    0x43: Keycode.F9,
    0x44: Keycode.F10,
    0x45: Keycode.NUMLOCK,
    0x46: Keycode.SCROLLLOCK,
    0x47: Keycode.NUMPAD7,
    0x48: Keycode.NUMPAD8,
    0x49: Keycode.NUMPAD9,
    0x4A: Keycode.NUMPAD_SUB,
    0x4B: Keycode.NUMPAD4,
    0x4C: Keycode.NUMPAD5,
    0x4D: Keycode.NUMPAD6,
    0x4E: Keycode.NUMPAD_ADD,
    0x4F: Keycode.NUMPAD1,
    0x50: Keycode.NUMPAD2,
    0x51: Keycode.NUMPAD3,
    0x52: Keycode.NUMPAD0,
    0x53: Keycode.NUMPAD_PERIOD,
    0x57: Keycode.F11,
    0x58: Keycode.F12,
}

_EXTENDED_SCANCODES: dict[int, Keycode] = {
    0x10: Keycode.MM_PREVTRACK,
    0x19: Keycode.MM_NEXTTRACK,
    0x1C: Keycode.NUMPAD_ENTER,
    0x1D: Keycode.LCTRL,
    0x20: Keycode.MM_MUTE,
    0x21: Keycode.MM_CALCULATOR,
    0x22: Keycode.MM_PLAYPAUSE,
    0x24: Keycode.MM_STOP,
    0x2E: Keycode.MM_VOLUMEDOWN,
    0x30: Keycode.MM_VOLUMEUP,
    0x32: Keycode.MM_WWWHOME,
    0x35: Keycode.NUMPAD_DIV,
    0x38: Keycode.RALT,
    0x47: Keycode.HOME,
    0x48: Keycode.UP,
    0x49: Keycode.PAGEUP,
    0x4B: Keycode.LEFT,
    0x4D: Keycode.RIGHT,
    0x4F: Keycode.END,
    0x50: Keycode.DOWN,
    0x51: Keycode.PAGEDOWN,
    0x52: Keycode.INSERT,
    0x53: Keycode.DELETE,
    0x5B: Keycode.LWIN,
    0x5C: Keycode.RWIN,
    0x5D: Keycode.APPS,
    0x5E: Keycode.ACPI_POWER,
    0x5F: Keycode.ACPI_SLEEP,
    0x63: Keycode.ACPI_WAKE,
    0x65: Keycode.MM_WWWSEARCH,
    0x66: Keycode.MM_WWWFAVORITES,
    0x67: Keycode.MM_WWWREFRESH,
    0x68: Keycode.MM_WWWSTOP,
    0x69: Keycode.MM_WWWFORWARD,
    0x6A: Keycode.MM_WWWBACK,
    0x6B: Keycode.MM_MYCOMPUTER,
    0x6C: Keycode.MM_EMAIL,
    0x6D: Keycode.MM_MEDIASELECT,
}

# Keys whose character depends on shift: (plain, shifted).
_SHIFT_CHARS: dict[Keycode, tuple[str, str]] = {
    Keycode.OEM_TILDE: ("`", "~"),
    Keycode.DIGIT1: ("1", "!"),
    Keycode.DIGIT2: ("2", "@"),
    Keycode.DIGIT3: ("3", "#"),
    Keycode.DIGIT4: ("4", "$"),
    Keycode.DIGIT5: ("5", "%"),
    Keycode.DIGIT6: ("6", "^"),
    Keycode.DIGIT7: ("7", "&"),
    Keycode.DIGIT8: ("8", "*"),
    Keycode.DIGIT9: ("9", "("),
    Keycode.DIGIT0: ("0", ")"),
    Keycode.MINUS: ("-", "_"),
    Keycode.PLUS: ("=", "+"),
    Keycode.OEM_LBRACE: ("[", "{"),
    Keycode.OEM_RBRACE: ("]", "}"),
    Keycode.OEM_PIPE: ("\\", "|"),
    Keycode.OEM_COLON: (";", ":"),
    Keycode.OEM_QUOTE: ("'", '"'),
    Keycode.COMMA: (",", "<"),
    Keycode.PERIOD: (".", ">"),
    Keycode.OEM_SLASH: ("/", "?"),
}

# Letter keys: lower-case character; case follows caps lock xor shift.
_LETTERS: dict[Keycode, str] = {
    Keycode[letter]: letter.lower() for letter in "QWERTYUIOPASDFGHJKLZXCVBNM"
}

_PLAIN_CHARS: dict[Keycode, str] = {
    Keycode.SPACE: " ",
    Keycode.TAB: "\t",
    Keycode.ENTER: "\n",
    Keycode.NUMPAD_MUL: "*",
    Keycode.NUMPAD_DIV: "/",
    Keycode.NUMPAD_ADD: "+",
    Keycode.NUMPAD_SUB: "-",
    Keycode.NUMPAD_ENTER: "\n",
}

# Numeric keypad: (character with num lock, navigation key without it).
_NUMPAD: dict[Keycode, tuple[str, Keycode]] = {
    Keycode.NUMPAD0: ("0", Keycode.INSERT),
    Keycode.NUMPAD1: ("1", Keycode.END),
    Keycode.NUMPAD2: ("2", Keycode.DOWN),
    Keycode.NUMPAD3: ("3", Keycode.PAGEDOWN),
    Keycode.NUMPAD4: ("4", Keycode.LEFT),
    Keycode.NUMPAD6: ("6", Keycode.RIGHT),
    Keycode.NUMPAD7: ("7", Keycode.HOME),
    Keycode.NUMPAD8: ("8", Keycode.UP),
    Keycode.NUMPAD9: ("9", Keycode.PAGEUP),
    Keycode.NUMPAD_PERIOD: (".", Keycode.PERIOD),
}


class _State(Enum):
    START = auto()
    EXT1 = auto()
    EXT1_1 = auto()
    EXT1_2 = auto()
    EXT2_1 = auto()
    EXT2_2 = auto()


@dataclass(frozen=True)
class KeyEvent:
    """A key going down or up."""

    keycode: Keycode
    keydown: bool


@dataclass(frozen=True)
class KeyChar:
    """The result of a key event: a character, or a raw key when ``raw`` is set."""

    raw: bool
    ch: str
    keycode: Keycode


@dataclass(frozen=True)
class MouseEvent:
    """Relative mouse motion and the state of the three buttons."""

    dx: int
    dy: int
    left: bool
    right: bool
    middle: bool


def _check_byte(byte: int) -> int:
    if not 0 <= byte <= 0xFF:
        raise ValueError(f"{byte!r} is not a byte")
    return byte


def _decode(table: dict[int, Keycode], code: int, keydown: bool) -> KeyEvent | None:
    keycode = table.get(code)
    return None if keycode is None else KeyEvent(keycode, keydown)


class Ps2Keyboard:
    """Decodes scan-code set 1 bytes and tracks modifier and lock state."""

    def __init__(self) -> None:
        self._state = _State.START
        self._data = 0
        self.lshift = False
        self.rshift = False
        self.lctrl = False
        self.rctrl = False
        self.lalt = False
        self.ralt = False
        self.caps = False
        self.scroll = False
        self.num = False

    def put_byte(self, byte: int) -> KeyEvent | None:
        """Feed one byte; return the key event it completes, if any."""
        _check_byte(byte)

        if self._state is _State.EXT1_1:
            if byte == _SC_EXT1:
                self._state = _State.EXT1_2
                return None
            # Broken print-screen sequence: start over with this byte.
            self._state = _State.START

        state = self._state
        if state is _State.START:
            if byte == _SC_EXT1:
                self._state = _State.EXT1
                return None
            if byte == _SC_EXT2:
                self._state = _State.EXT2_1
                return None
            return _decode(_NORMAL_SCANCODES, byte & 0x7F, not byte & 0x80)

        if state is _State.EXT1:
            if byte in (_SC_PRTSCR_DOWN1, _SC_PRTSCR_UP1):
                self._state = _State.EXT1_1
                self._data = byte
                return None
            self._state = _State.START
            return _decode(_EXTENDED_SCANCODES, byte & 0x7F, not byte & 0x80)

        if state is _State.EXT1_2:
            self._state = _State.START
            if self._data == _SC_PRTSCR_UP1 and byte == _SC_PRTSCR_UP2:
                return KeyEvent(Keycode.PRINTSCREEN, False)
            if self._data == _SC_PRTSCR_DOWN1 and byte == _SC_PRTSCR_DOWN2:
                return KeyEvent(Keycode.PRINTSCREEN, True)
            return None

        if state is _State.EXT2_1:
            self._state = _State.EXT2_2
            self._data = byte
            return None

        # _State.EXT2_2
        self._state = _State.START
        data = (self._data << 8) | byte
        if data == _SC_PAUSE_UP:
            return KeyEvent(Keycode.PAUSEBREAK, False)
        if data == _SC_PAUSE_DOWN:
            return KeyEvent(Keycode.PAUSEBREAK, True)
        return None

    def process_keyevent(self, event: KeyEvent) -> KeyChar:
        """Update modifier state from ``event`` and translate it to a character."""
        keycode = event.keycode
        raw = KeyChar(True, "", keycode)

        def char(ch: str) -> KeyChar:
            return KeyChar(False, ch, keycode)

        control = self.lctrl or self.rctrl or self.lalt or self.ralt
        shift = self.lshift or self.rshift
        upper = self.caps != shift

        modifier = {
            Keycode.LSHIFT: "lshift",
            Keycode.RSHIFT: "rshift",
            Keycode.LCTRL: "lctrl",
            Keycode.RCTRL: "rctrl",
            Keycode.LALT: "lalt",
            Keycode.RALT: "ralt",
        }.get(keycode)
        if modifier is not None:
            setattr(self, modifier, event.keydown)

        if not event.keydown:
            return raw

        if keycode is Keycode.CAPSLOCK:
            self.caps = not self.caps
        elif keycode is Keycode.SCROLLLOCK:
            self.scroll = not self.scroll
        elif keycode is Keycode.NUMLOCK:
            self.num = not self.num

        if not control:
            if keycode in _SHIFT_CHARS:
                plain, shifted = _SHIFT_CHARS[keycode]
                return char(shifted if shift else plain)
            if keycode in _LETTERS:
                lower = _LETTERS[keycode]
                return char(lower.upper() if upper else lower)
            if keycode in _PLAIN_CHARS:
                return char(_PLAIN_CHARS[keycode])

        if keycode is Keycode.NUMPAD5:
            return char("5") if self.num and not control else raw
        if keycode in _NUMPAD:
            digit, navigation = _NUMPAD[keycode]
            if not self.num:
                return KeyChar(True, "", navigation)
            return raw if control else char(digit)

        return raw


class Ps2Mouse:
    """Assembles three-byte PS/2 mouse packets into events."""

    def __init__(self) -> None:
        self._packet: list[int] = []

    def put_byte(self, byte: int) -> MouseEvent | None:
        """Feed one byte; return the event once a whole packet has arrived."""
        self._packet.append(_check_byte(byte))
        if len(self._packet) < 3:
            return None

        flags, raw_dx, raw_dy = self._packet
        self._packet = []

        # The movement is taken as a signed byte; the sign bits in the flags
        # byte only ever touch the high byte, which the conversion drops.
        def signed(value: int) -> int:
            return value - 0x100 if value & 0x80 else value

        return MouseEvent(
            dx=signed(raw_dx),
            dy=signed(raw_dy),
            left=bool(flags & 0x01),
            right=bool(flags & 0x02),
            middle=bool(flags & 0x04),
        )