import pytest

from piano.geometry import KeyboardGeometry, BLACK_KEY_POS
from piano.keys import Keyboard, KeyColour


@pytest.fixture
def geo():
    # one octave: 10 white keys of 10px, black keys 60px tall
    return KeyboardGeometry(Keyboard(1), 10.0, 90.0)


def test_sizes(geo):
    assert geo.width == 100.0
    assert geo.black_width == 5.0
    assert geo.black_height == pytest.approx(60.0)


def test_key_to_x(geo):
    assert geo.key_to_x(KeyColour.WHITE, 0) == 0.0
    assert geo.key_to_x(KeyColour.WHITE, 3) == 30.0
    # A# in the partial low octave
    assert geo.key_to_x(KeyColour.BLACK, 0) == pytest.approx(8.75)
    # C# of the first full octave
    assert geo.key_to_x(KeyColour.BLACK, 1) == pytest.approx(10 * (2 + BLACK_KEY_POS[0]))


@pytest.mark.parametrize("octaves", range(1, 8))
@pytest.mark.parametrize("width", [1000.0, 1337.0])
def test_coord_to_key_inverts_key_to_x(octaves, width):
    kb = Keyboard(octaves)
    g = KeyboardGeometry.fit(kb, width, 150.0)
    y_band = {KeyColour.WHITE: 140.0, KeyColour.BLACK: 20.0}
    for key in kb.keys:
        x = g.key_to_x(key.colour, key.colour_index)
        assert g.coord_to_key(x, y_band[key.colour]) == key


def test_black_keys_win_where_they_overlap(geo):
    kb = geo.keyboard
    assert geo.coord_to_key(9.0, 30.0) == kb[1]     # A#
    assert geo.coord_to_key(9.0, 85.0) == kb[0]     # A below the black band
    assert geo.coord_to_key(12.0, 85.0) == kb[2]    # B


def test_black_band_gap_falls_back_to_white(geo):
    # left part of the first full-octave C, before C#
    assert geo.coord_to_key(22.0, 30.0) == geo.keyboard[3]
    assert geo.coord_to_key(5.0, 30.0) == geo.keyboard[0]


def test_top_octave_only_has_c(geo):
    top = geo.keyboard[-1]
    assert top.note_name == "C5"
    assert geo.coord_to_key(95.0, 10.0) == top
    assert geo.coord_to_key(95.0, 80.0) == top


@pytest.mark.parametrize("x, y, expected", [
    (-50.0, -5.0, 0),
    (-1.0, 85.0, 0),
    (10_000.0, 1_000.0, -1),
    (10_000.0, 0.0, -1),
    (100.0, 85.0, -1),
])
def test_out_of_range_coordinates_are_clamped(geo, x, y, expected):
    assert geo.coord_to_key(x, y) == geo.keyboard[expected]


def test_key_rect(geo):
    kb = geo.keyboard
    assert geo.key_rect(kb[0]) == (0.0, 0.0, 10.0, 90.0)
    x, y, w, h = geo.key_rect(kb[1])
    assert (x, y, w) == (pytest.approx(8.75), 0.0, 5.0)
    assert h == pytest.approx(60.0)


def test_rejects_empty_size():
    with pytest.raises(ValueError):
        KeyboardGeometry(Keyboard(1), 0, 10)
