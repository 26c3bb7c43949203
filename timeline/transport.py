# timeline/transport.py
import heapq, itertools, logging
from typing import Callable, List, Tuple

TransportCallback = Callable[[int], None]

class Transport:
    """Musical clock counted in ticks. The app advances it with step(dt);
    one-shot callbacks fire (in position order) once the playhead reaches them.
    """
    def __init__(self, bpm: float = 120.0, ppq: int = 192):
        self.bpm = float(bpm)
        self.ppq = int(ppq)
        self.playing = False
        self._ticks = 0.0
        self._seq = itertools.count()
        self._events: List[Tuple[int, int, TransportCallback]] = []  # (position, seq, cb)

    @property
    def position(self) -> int:
        return int(self._ticks)

    @property
    def pending(self) -> int:
        return len(self._events)

    def beats_to_ticks(self, beats: float) -> int:
        return int(round(beats * self.ppq))

    def seconds_to_ticks(self, seconds: float) -> float:
        return seconds * self.bpm / 60.0 * self.ppq

    def ticks_to_seconds(self, ticks: float) -> float:
        return ticks * 60.0 / (self.bpm * self.ppq)

    def start(self):
        if not self.playing:
            self.playing = True
            logging.info("Transport started at tick %d", self.position)

    def stop(self):
        self.playing = False

    def schedule_once(self, position: int, callback: TransportCallback) -> None:
        heapq.heappush(self._events, (int(position), next(self._seq), callback))

    def step(self, dt: float) -> int:
        """Advance by dt seconds and fire what became due. Returns the number fired."""
        if not self.playing:
            return 0
        self._ticks += self.seconds_to_ticks(dt)
        now = self.position
        fired = 0
        while self._events and self._events[0][0] <= now:
            pos, _, cb = heapq.heappop(self._events)
            try:
                cb(pos)
            except Exception:
                logging.exception("Transport callback at tick %d failed", pos)
            fired += 1
        return fired
