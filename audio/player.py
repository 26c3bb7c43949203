# ========================= audio/player.py =========================
import heapq, itertools
from typing import Callable, List, Optional, Set, Tuple

from config import AudioConfig
from notes.history import NoteHistory
from notes.model import Note
from piano.keys import PianoKey
from timeline.transport import Transport

NoteListener = Callable[[PianoKey, int], None]

class NotePlayer:
    """Playback sink: sounds a key, records it in the history, tells listeners.

    Release times are wall-clock seconds, advanced by update(dt) from the frame loop.
    """
    def __init__(self, synth, history: NoteHistory, transport: Transport, cfg: AudioConfig):
        self.synth = synth
        self.history = history
        self.transport = transport
        self.cfg = cfg
        self.listeners: List[NoteListener] = []
        self._time = 0.0
        self._seq = itertools.count()
        self._active: List[Tuple[float, int, int, object]] = []  # (release_at, seq, key_index, token)

    def add_listener(self, cb: NoteListener):
        self.listeners.append(cb)

    def trigger(self, key: PianoKey, position: Optional[int] = None) -> int:
        if position is None:
            position = self.transport.position
        token = self.synth.note_on(key.midi_note, self.cfg.velocity)
        heapq.heappush(self._active, (self._time + self.cfg.note_seconds, next(self._seq), key.index, token))
        self.history.append(Note(key.index, position))
        for cb in self.listeners:
            cb(key, position)
        return position

    def update(self, dt: float):
        self._time += dt
        while self._active and self._active[0][0] <= self._time:
            _, _, _, token = heapq.heappop(self._active)
            self.synth.note_off(token)

    def sounding(self) -> Set[int]:
        return {k for _, _, k, _ in self._active}

    def release_all(self):
        while self._active:
            _, _, _, token = heapq.heappop(self._active)
            self.synth.note_off(token)
