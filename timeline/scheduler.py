# ========================= timeline/scheduler.py =========================
import asyncio
import logging
from typing import Optional, Set

from config import SchedulerConfig
from generator.models import NoteModel, coerce_notes
from notes.history import NoteHistory
from notes.model import Note
from piano.keys import Keyboard
from timeline.transport import Transport


class CancelToken:
    """Owned by one Running period of the scheduler; ticks capture it at start."""
    def __init__(self):
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ModelScheduler:
    """
    Every `interval_seconds` while running:
    window = [max(0, now - lookback), now] -> history.query -> await model
    -> if still the same running period, schedule the returned notes on the transport.
    Notes already handed to the transport keep firing after stop().
    """
    def __init__(self, transport: Transport, history: NoteHistory, model: NoteModel,
                 keyboard: Keyboard, player, cfg: Optional[SchedulerConfig] = None):
        self.transport = transport
        self.history = history
        self.model = model
        self.keyboard = keyboard
        self.player = player
        self.cfg = cfg or SchedulerConfig()

        self.last_window_end: Optional[int] = None
        self._token: Optional[CancelToken] = None
        self._loop_task: Optional[asyncio.Task] = None
        self._inflight: Set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._token is not None

    @property
    def lookback_ticks(self) -> int:
        return self.transport.beats_to_ticks(self.cfg.lookback_beats)

    @property
    def buffer_ticks(self) -> int:
        return self.transport.beats_to_ticks(self.cfg.buffer_beats)

    # ---------- state ----------
    def start(self):
        if self.running:
            return
        token = CancelToken()
        self._token = token
        self._loop_task = asyncio.get_running_loop().create_task(self._run(token))
        logging.info("Model scheduler started (every %.2fs)", self.cfg.interval_seconds)

    def stop(self):
        if not self.running:
            return
        self._token.cancel()
        self._token = None
        if self._loop_task is not None:
            self._loop_task.cancel()
            self._loop_task = None
        logging.info("Model scheduler stopped")

    async def drain(self):
        """Wait for ticks that are still waiting on the model."""
        while True:
            pending = [t for t in self._inflight if not t.done()]
            if not pending:
                return
            await asyncio.gather(*pending)

    # ---------- loop ----------
    async def _run(self, token: CancelToken):
        while not token.cancelled:
            await asyncio.sleep(self.cfg.interval_seconds)
            if token.cancelled:
                break
            t = asyncio.get_running_loop().create_task(self._tick(token))
            self._inflight.add(t)
            t.add_done_callback(self._inflight.discard)

    async def tick(self) -> int:
        """Run one tick now. Returns the number of notes scheduled."""
        if self._token is None:
            return 0
        return await self._tick(self._token)

    async def _tick(self, token: CancelToken) -> int:
        end = self.transport.position
        start = max(0, end - self.lookback_ticks)
        recent = self.history.query(start)
        try:
            generated = coerce_notes(
                await self.model.generate_notes(recent, start, end, self.buffer_ticks))
        except asyncio.CancelledError:
            raise
        except Exception:
            logging.warning("Model invocation failed for window [%d, %d]; nothing generated",
                            start, end, exc_info=True)
            return 0
        self.last_window_end = end

        # 模型回來之前已經被停止：丟棄結果
        if token.cancelled:
            logging.debug("Discarding %d notes from a stopped scheduler", len(generated))
            return 0

        scheduled = 0
        now = self.transport.position
        for note in generated:
            if not 0 <= note.key_index < len(self.keyboard):
                logging.warning("Model returned key %d outside keyboard, skipped", note.key_index)
                continue
            if note.position < now:
                logging.debug("Model note %r is already in the past, skipped", note)
                continue
            self._schedule(note)
            scheduled += 1
        logging.debug("Tick [%d, %d]: %d context notes, %d scheduled",
                      start, end, len(recent), scheduled)
        return scheduled

    def _schedule(self, note: Note):
        key = self.keyboard[note.key_index]
        self.transport.schedule_once(note.position, lambda pos: self.player.trigger(key, pos))
