# ========================= input/keymap.py =========================
import pygame
from typing import Dict

from piano.keys import Keyboard, PianoKey, MIDI_MIDDLE_C

# 電腦鍵 -> 相對中央 C 的半音數
DEFAULT_KEYMAP: Dict[int, int] = {
    pygame.K_z: 0,   # C4
    pygame.K_s: 1,
    pygame.K_x: 2,
    pygame.K_d: 3,
    pygame.K_c: 4,
    pygame.K_v: 5,
    pygame.K_g: 6,
    pygame.K_b: 7,
    pygame.K_h: 8,
    pygame.K_n: 9,
    pygame.K_j: 10,
    pygame.K_m: 11,
    pygame.K_COMMA: 12,  # C5
}

def resolve_keymap(kmap: Dict[int, int], keyboard: Keyboard) -> Dict[int, PianoKey]:
    """keycode -> key on this keyboard; offsets that fall off the keyboard are dropped."""
    out: Dict[int, PianoKey] = {}
    for kc, semis in kmap.items():
        key = keyboard.key_for_midi(MIDI_MIDDLE_C + int(semis))
        if key is not None:
            out[kc] = key
    return out
