# ========================= piano/keys.py =========================
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple
import logging

MIN_OCTAVES, MAX_OCTAVES = 1, 7
MIDI_MIDDLE_C = 60

# 八度內的相對鍵號 (1-indexed, C = 1)
WHITE_KEY_NUMBERS: Tuple[int, ...] = (1, 3, 5, 6, 8, 10, 12)
BLACK_KEY_NUMBERS: Tuple[int, ...] = (2, 4, 7, 9, 11)

NOTE_NAMES = ('C', 'C#', 'D', 'D#', 'E', 'F', 'F#', 'G', 'G#', 'A', 'A#', 'B')


class InvalidConfiguration(ValueError):
    pass


class KeyColour(Enum):
    WHITE = "white"
    BLACK = "black"


class OctaveKind(Enum):
    """Which octave key numbers an octave actually contains."""
    LOW_BOUNDARY = (10, 11, 12)          # A, A#, B below the first full octave
    REGULAR = tuple(range(1, 13))
    HIGH_BOUNDARY = (1,)                 # the top C

    @property
    def whites(self) -> Tuple[int, ...]:
        return tuple(n for n in self.value if n in WHITE_KEY_NUMBERS)

    @property
    def blacks(self) -> Tuple[int, ...]:
        return tuple(n for n in self.value if n in BLACK_KEY_NUMBERS)


def octave(index: int) -> int:
    return (index + 9) // 12

def octave_key_num(index: int) -> int:
    return (index + 9) % 12 + 1

def key_colour(index: int) -> KeyColour:
    return KeyColour.WHITE if octave_key_num(index) in WHITE_KEY_NUMBERS else KeyColour.BLACK

def colour_index(index: int) -> int:
    """0-indexed position among keys of the same colour (first white key = 0)."""
    o, n = octave(index), octave_key_num(index)
    if n in WHITE_KEY_NUMBERS:
        return WHITE_KEY_NUMBERS.index(n) + 7 * o - 5
    return BLACK_KEY_NUMBERS.index(n) + 5 * o - 4

def key_index(o: int, n: int) -> int:
    """Inverse of (octave, octave_key_num)."""
    return (n - 1) + 12 * o - 9

def lowest_midi_note(octaves: int) -> int:
    # 讓鍵盤大致以中央 C 為中心
    return MIDI_MIDDLE_C - (octaves // 2) * 12 - 3

def note_name(midi_note: int) -> str:
    delta = midi_note - MIDI_MIDDLE_C
    return NOTE_NAMES[delta % 12] + str(delta // 12 + 4)

def octave_kind(o: int, octaves: int) -> OctaveKind:
    if o == 0:
        return OctaveKind.LOW_BOUNDARY
    if o == octaves + 1:
        return OctaveKind.HIGH_BOUNDARY
    return OctaveKind.REGULAR


@dataclass(frozen=True)
class PianoKey:
    index: int
    midi_note: int
    octave: int
    octave_key_num: int
    colour: KeyColour
    colour_index: int
    note_name: str
    octave_kind: OctaveKind

    @property
    def is_white(self) -> bool:
        return self.colour is KeyColour.WHITE


def _table_colour_index(o: int, n: int, octaves: int) -> int:
    kind = octave_kind(o, octaves)
    if n in WHITE_KEY_NUMBERS:
        before = 0 if o == 0 else len(OctaveKind.LOW_BOUNDARY.whites) + 7 * (o - 1)
        return before + kind.whites.index(n)
    before = 0 if o == 0 else len(OctaveKind.LOW_BOUNDARY.blacks) + 5 * (o - 1)
    return before + kind.blacks.index(n)


class Keyboard:
    """All keys of one keyboard configuration, built once and never mutated."""

    def __init__(self, octaves: int):
        if not isinstance(octaves, int) or not MIN_OCTAVES <= octaves <= MAX_OCTAVES:
            raise InvalidConfiguration(
                f"The number of octaves must be between {MIN_OCTAVES} and {MAX_OCTAVES}, got {octaves!r}")
        self.octaves = octaves
        self.num_white = 7 * octaves + 3
        self.num_black = 5 * octaves + 1
        self.lowest_midi = lowest_midi_note(octaves)
        self.keys: List[PianoKey] = self._build_keys()
        self._by_colour: Dict[KeyColour, List[PianoKey]] = {
            KeyColour.WHITE: [k for k in self.keys if k.is_white],
            KeyColour.BLACK: [k for k in self.keys if not k.is_white],
        }
        self._validate()
        logging.debug("Keyboard built: octaves=%d, keys=%d, midi=[%d,%d]",
                      octaves, len(self.keys), self.keys[0].midi_note, self.keys[-1].midi_note)

    def _build_keys(self) -> List[PianoKey]:
        keys = []
        for i in range(self.num_white + self.num_black):
            o, n = octave(i), octave_key_num(i)
            midi = self.lowest_midi + i
            keys.append(PianoKey(
                index=i,
                midi_note=midi,
                octave=o,
                octave_key_num=n,
                colour=key_colour(i),
                colour_index=_table_colour_index(o, n, self.octaves),
                note_name=note_name(midi),
                octave_kind=octave_kind(o, self.octaves),
            ))
        return keys

    def _validate(self):
        for k in self.keys:
            if k.colour_index != colour_index(k.index):
                raise InvalidConfiguration(
                    f"colour index mismatch for key {k.index}: {k.colour_index} != {colour_index(k.index)}")
            if k.octave_key_num not in k.octave_kind.value:
                raise InvalidConfiguration(f"key {k.index} lies outside its {k.octave_kind.name} octave")
            if key_index(k.octave, k.octave_key_num) != k.index:
                raise InvalidConfiguration(f"key {k.index} does not invert from its octave position")
        for colour, keys in self._by_colour.items():
            if [k.colour_index for k in keys] != list(range(len(keys))):
                raise InvalidConfiguration(f"{colour.value} colour indices are not dense")

    def __len__(self) -> int:
        return len(self.keys)

    def __getitem__(self, index: int) -> PianoKey:
        return self.keys[index]

    def white_keys(self) -> List[PianoKey]:
        return list(self._by_colour[KeyColour.WHITE])

    def black_keys(self) -> List[PianoKey]:
        return list(self._by_colour[KeyColour.BLACK])

    def key_by_colour(self, colour: KeyColour, idx: int) -> PianoKey:
        return self._by_colour[colour][idx]

    def key_for_midi(self, midi_note: int) -> Optional[PianoKey]:
        i = midi_note - self.lowest_midi
        if 0 <= i < len(self.keys):
            return self.keys[i]
        return None

    def clamp_index(self, index: int) -> int:
        return min(max(index, 0), len(self.keys) - 1)
