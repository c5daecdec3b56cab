"""Keyboard-layout independent key codes."""

from __future__ import annotations

from enum import IntEnum


class Keycode(IntEnum):
    """Key codes, numbered row by row across a full-size keyboard."""

    ESCAPE = 0
    F1 = 1
    F2 = 2
    F3 = 3
    F4 = 4
    F5 = 5
    F6 = 6
    F7 = 7
    F8 = 8
    F9 = 9
    F10 = 10
    F11 = 11
    F12 = 12
    PRINTSCREEN = 13
    SYSRQ = 14
    SCROLLLOCK = 15
    PAUSEBREAK = 16

    OEM3 = 17
    OEM_TILDE = 17
    DIGIT1 = 18
    DIGIT2 = 19
    DIGIT3 = 20
    DIGIT4 = 21
    DIGIT5 = 22
    DIGIT6 = 23
    DIGIT7 = 24
    DIGIT8 = 25
    DIGIT9 = 26
    DIGIT0 = 27
    MINUS = 28
    PLUS = 29
    BACKSPACE = 30
    INSERT = 31
    HOME = 32
    PAGEUP = 33

    TAB = 34
    Q = 35
    W = 36
    E = 37
    R = 38
    T = 39
    Y = 40
    U = 41
    I = 42  # noqa: E741
    O = 43  # noqa: E741
    P = 44
    OEM4 = 45
    OEM_LBRACE = 45
    OEM6 = 46
    OEM_RBRACE = 46
    OEM5 = 47
    OEM_PIPE = 47
    DELETE = 48
    END = 49
    PAGEDOWN = 50

    CAPSLOCK = 51
    A = 52
    S = 53
    D = 54
    F = 55
    G = 56
    H = 57
    J = 58
    K = 59
    L = 60
    OEM1 = 61
    OEM_COLON = 61
    OEM7 = 62
    OEM_QUOTE = 62
    ENTER = 63

    LSHIFT = 64
    Z = 65
    X = 66
    C = 67
    V = 68
    B = 69
    N = 70
    M = 71
    COMMA = 72
    PERIOD = 73
    OEM2 = 74
    OEM_SLASH = 74
    RSHIFT = 75
    UP = 76

    LCTRL = 77
    LWIN = 78
    LALT = 79
    SPACE = 80
    RALT = 81
    RWIN = 82
    APPS = 83
    RCTRL = 84
    LEFT = 85
    DOWN = 86
    RIGHT = 87

    NUMLOCK = 88
    NUMPAD_DIV = 89
    NUMPAD_MUL = 90
    NUMPAD_SUB = 91
    NUMPAD7 = 92
    NUMPAD8 = 93
    NUMPAD9 = 94
    NUMPAD_ADD = 95
    NUMPAD4 = 96
    NUMPAD5 = 97
    NUMPAD6 = 98
    NUMPAD1 = 99
    NUMPAD2 = 100
    NUMPAD3 = 101
    NUMPAD_ENTER = 102
    NUMPAD0 = 103
    NUMPAD_PERIOD = 104

    MM_PREVTRACK = 105
    MM_NEXTTRACK = 106
    MM_MUTE = 107
    MM_CALCULATOR = 108
    MM_PLAYPAUSE = 109
    MM_STOP = 110
    MM_VOLUMEDOWN = 111
    MM_VOLUMEUP = 112
    MM_WWWHOME = 113
    MM_WWWSEARCH = 114
    MM_WWWFAVORITES = 115
    MM_WWWREFRESH = 116
    MM_WWWSTOP = 117
    MM_WWWFORWARD = 118
    MM_WWWBACK = 119
    MM_MYCOMPUTER = 120
    MM_EMAIL = 121
    MM_MEDIASELECT = 122

    ACPI_POWER = 123
    ACPI_SLEEP = 124
    ACPI_WAKE = 125

    UNKNOWN = 0xFF