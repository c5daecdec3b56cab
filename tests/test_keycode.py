import pytest

from buddyos.keycode import Keycode


def test_unknown_value():
    assert Keycode(0xFF) is Keycode.UNKNOWN


def test_first_code_is_escape():
    assert Keycode(0) is Keycode.ESCAPE


@pytest.mark.parametrize(
    ("alias", "canonical"),
    [
        ("OEM_TILDE", "OEM3"),
        ("OEM_LBRACE", "OEM4"),
        ("OEM_RBRACE", "OEM6"),
        ("OEM_PIPE", "OEM5"),
        ("OEM_COLON", "OEM1"),
        ("OEM_QUOTE", "OEM7"),
        ("OEM_SLASH", "OEM2"),
    ],
)
def test_aliases_share_members(alias, canonical):
    assert Keycode(Keycode[alias].value) is Keycode[canonical]


def test_codes_are_contiguous_before_unknown():
    count = len([k for k in Keycode if k is not Keycode.UNKNOWN])
    members = [Keycode(v) for v in range(count)]
    assert Keycode.UNKNOWN not in members
    assert sorted(k.value for k in Keycode if k is not Keycode.UNKNOWN) == list(range(count))
    with pytest.raises(ValueError):
        Keycode(count)


def test_function_keys_are_consecutive():
    fkeys = [Keycode(Keycode.F1 + i) for i in range(12)]
    assert [k.name for k in fkeys] == [f"F{n}" for n in range(1, 13)]
    assert Keycode(Keycode.ESCAPE + 1) is Keycode.F1


def test_digit_row_order():
    digits = [Keycode(Keycode.DIGIT1 + i) for i in range(10)]
    assert [k.name for k in digits] == [f"DIGIT{n}" for n in "1234567890"]
    assert Keycode(Keycode.OEM_TILDE + 1) is Keycode.DIGIT1
    assert Keycode(Keycode.DIGIT0 + 1) is Keycode.MINUS


@pytest.mark.parametrize("row", ["QWERTYUIOP", "ASDFGHJKL", "ZXCVBNM"])
def test_letter_rows_are_consecutive(row):
    first = Keycode[row[0]]
    assert [Keycode(first + i).name for i in range(len(row))] == list(row)


def test_lookup_by_value_round_trips():
    for key in Keycode:
        assert Keycode(key.value) is key