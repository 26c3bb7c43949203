# ========================= piano/geometry.py =========================
import math
from typing import Tuple

from piano.keys import (Keyboard, KeyColour, PianoKey, WHITE_KEY_NUMBERS,
                        BLACK_KEY_NUMBERS, key_index)

BLACK_KEY_WIDTH_RATIO = 1 / 2
BLACK_KEY_HEIGHT_RATIO = 2 / 3

# Left edge of each black key relative to the start of an octave, in white key widths
BLACK_KEY_POS = (
    2 / 3,
    1 + 5 / 6,
    3 + 5 / 8,
    4 + 3 / 4,
    5 + 7 / 8,
)

_EPS = 1e-9


class KeyboardGeometry:
    """
    Pixel layout of a keyboard (origin at its top-left corner):
    - key_to_x(colour, colour_index) -> left edge of the key
    - coord_to_key(x, y) -> key under the point, black keys win where they overlap
    Out-of-range coordinates are clamped to the nearest key.
    """
    def __init__(self, keyboard: Keyboard, unit_width: float, white_height: float):
        if unit_width <= 0 or white_height <= 0:
            raise ValueError("keyboard geometry needs a positive size")
        self.keyboard = keyboard
        self.unit_width = float(unit_width)
        self.white_height = float(white_height)
        self.black_width = self.unit_width * BLACK_KEY_WIDTH_RATIO
        self.black_height = self.white_height * BLACK_KEY_HEIGHT_RATIO

    @classmethod
    def fit(cls, keyboard: Keyboard, width: float, height: float) -> "KeyboardGeometry":
        return cls(keyboard, width / keyboard.num_white, height)

    @property
    def width(self) -> float:
        return self.unit_width * self.keyboard.num_white

    # ---- key -> x ----
    def key_to_x(self, colour: KeyColour, colour_index: int) -> float:
        if colour is KeyColour.WHITE:
            return self.unit_width * colour_index
        k = (colour_index + 4) % 5             # which of the 5 black keys in an octave
        o = (colour_index - 1) // 5            # first full octave is 0 here
        return self.unit_width * (BLACK_KEY_POS[k] + o * 7 + 2)

    def key_rect(self, key: PianoKey) -> Tuple[float, float, float, float]:
        x = self.key_to_x(key.colour, key.colour_index)
        if key.is_white:
            return x, 0.0, self.unit_width, self.white_height
        return x, 0.0, self.black_width, self.black_height

    # ---- (x, y) -> key ----
    def coord_to_key(self, x: float, y: float) -> PianoKey:
        kb = self.keyboard
        # 超出範圍時 clamp 到最近的鍵
        ux = min(max(x / self.unit_width, 0.0), kb.num_white - _EPS)
        nearest = round(ux)
        if abs(ux - nearest) < _EPS:
            ux = float(nearest)
        y = min(max(y, 0.0), self.white_height)

        o = math.floor((ux + 5) / 7)
        dx = ux - (o - 1) * 7 - 2

        if y > self.black_height:
            return self._white_key(o, dx)
        if o == kb.octaves + 1:
            # 最高八度只有一個 C
            return kb[key_index(o, 1)]
        for i, pos in enumerate(BLACK_KEY_POS):
            if o == 0 and i < 4:
                continue
            if pos - _EPS <= dx <= pos + BLACK_KEY_WIDTH_RATIO + _EPS:
                return kb[key_index(o, BLACK_KEY_NUMBERS[i])]
        return self._white_key(o, dx)

    def _white_key(self, o: int, dx: float) -> PianoKey:
        n = min(max(math.floor(dx), 0), len(WHITE_KEY_NUMBERS) - 1)
        return self.keyboard[self.keyboard.clamp_index(key_index(o, WHITE_KEY_NUMBERS[n]))]
