import pytest

from piano.keys import (Keyboard, KeyColour, InvalidConfiguration, OctaveKind, octave,
                        octave_key_num, key_colour, colour_index, note_name, lowest_midi_note)


def test_note_names_around_middle_c():
    assert note_name(60) == "C4"
    assert note_name(61) == "C#4"
    assert note_name(59) == "B3"
    assert note_name(21) == "A0"
    assert note_name(108) == "C8"


def test_first_key_is_an_a_in_octave_zero():
    assert octave(0) == 0
    assert octave_key_num(0) == 10
    assert key_colour(0) is KeyColour.WHITE
    assert colour_index(0) == 0
    assert key_colour(1) is KeyColour.BLACK
    assert colour_index(1) == 0
    assert octave(3) == 1 and octave_key_num(3) == 1


def test_one_octave_keyboard_counts():
    kb = Keyboard(1)
    assert kb.num_white == 10
    assert kb.num_black == 6
    assert len(kb) == 16
    assert len(kb.white_keys()) == 10
    assert len(kb.black_keys()) == 6
    assert kb[0].midi_note == 57
    assert kb[0].note_name == "A3"
    assert kb[-1].note_name == "C5"


@pytest.mark.parametrize("octaves", range(1, 8))
def test_colour_index_is_dense_per_colour(octaves):
    kb = Keyboard(octaves)
    assert kb.num_white == 7 * octaves + 3
    assert kb.num_black == 5 * octaves + 1
    for colour in KeyColour:
        keys = [k for k in kb.keys if k.colour is colour]
        assert [k.colour_index for k in keys] == list(range(len(keys)))
        assert all(k.colour_index == colour_index(k.index) for k in keys)


@pytest.mark.parametrize("octaves", range(1, 8))
def test_index_octave_position_is_bijective(octaves):
    kb = Keyboard(octaves)
    pairs = {(k.octave, k.octave_key_num) for k in kb.keys}
    assert len(pairs) == len(kb)
    assert kb[0].octave_kind is OctaveKind.LOW_BOUNDARY
    assert kb[-1].octave_kind is OctaveKind.HIGH_BOUNDARY
    assert kb[-1].octave_key_num == 1
    assert all(k.octave_kind is OctaveKind.REGULAR for k in kb.keys[3:-1])


def test_midi_range_is_centred_on_middle_c():
    assert lowest_midi_note(1) == 57
    assert lowest_midi_note(3) == 45
    kb = Keyboard(7)
    assert kb[0].midi_note == 21
    assert kb[-1].midi_note == 108
    assert kb.key_for_midi(60).note_name == "C4"
    assert kb.key_for_midi(20) is None
    assert kb.key_for_midi(109) is None


@pytest.mark.parametrize("octaves", [0, 8, -1, 2.5])
def test_span_outside_range_is_rejected(octaves):
    with pytest.raises(InvalidConfiguration):
        Keyboard(octaves)


def test_key_by_colour(keyboard):
    k = keyboard.key_by_colour(KeyColour.BLACK, 1)
    assert k.index == 4
    assert k.octave_key_num == 2
    assert k.note_name == "C#3"
