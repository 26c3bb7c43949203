# ========================= notes/history.py =========================
from collections import deque
from typing import Deque, Iterator, List, Optional
from notes.model import Note

class NoteHistory:
    """Append-only log of played notes, in the order they were appended.

    With `maxlen` set, the oldest notes are dropped once the cap is reached.
    """
    def __init__(self, maxlen: Optional[int] = None):
        self._notes: Deque[Note] = deque(maxlen=maxlen)

    def append(self, note: Note) -> None:
        self._notes.append(note)

    def query(self, start: int) -> List[Note]:
        """Every note with position >= start, in insertion order (no upper bound)."""
        return [n for n in tuple(self._notes) if n.position >= start]

    def latest(self) -> Optional[Note]:
        return self._notes[-1] if self._notes else None

    def clear(self) -> None:
        self._notes.clear()

    def __len__(self) -> int:
        return len(self._notes)

    def __iter__(self) -> Iterator[Note]:
        return iter(tuple(self._notes))
