from input.keymap import DEFAULT_KEYMAP, resolve_keymap
from piano.keys import Keyboard


def test_default_keymap_covers_an_octave_from_middle_c():
    keys = resolve_keymap(DEFAULT_KEYMAP, Keyboard(3))
    names = sorted(k.note_name for k in keys.values())
    assert len(keys) == 13
    assert "C4" in names and "C5" in names


def test_offsets_off_the_keyboard_are_dropped():
    kb = Keyboard(1)   # A3 .. C5
    keys = resolve_keymap({1: -12, 2: 0, 3: 13}, kb)
    assert list(keys) == [2]
    assert keys[2].note_name == "C4"
