# notes/model.py
from dataclasses import dataclass

@dataclass(frozen=True)
class Note:
    key_index: int   # absolute key number on the keyboard
    position: int    # transport position in ticks
