# ========================= generator/models.py =========================
import asyncio
import random
from typing import Iterable, List, Optional, Sequence

from config import ModelConfig
from notes.model import Note
from piano.keys import Keyboard


class ModelInvocationFailure(RuntimeError):
    pass


def coerce_notes(raw: Iterable) -> List[Note]:
    """Accept Note, {"key_index"|"keyIndex", "position"} dicts or (key_index, position) pairs."""
    if raw is None:
        raise ModelInvocationFailure("model returned None")
    if not isinstance(raw, Iterable) or isinstance(raw, (str, bytes, dict)):
        raise ModelInvocationFailure(f"model returned {type(raw).__name__}, expected a sequence of notes")
    out: List[Note] = []
    for item in raw:
        try:
            if isinstance(item, Note):
                out.append(item)
            elif isinstance(item, dict):
                k = item["key_index"] if "key_index" in item else item["keyIndex"]
                out.append(Note(int(k), int(item["position"])))
            else:
                k, p = item
                out.append(Note(int(k), int(p)))
        except (KeyError, TypeError, ValueError) as e:
            raise ModelInvocationFailure(f"malformed note from model: {item!r}") from e
    return out


class NoteModel:
    """Generates notes to play after `end + buffer`, given the notes since `start`."""
    latency_seconds: float = 0.0

    async def generate_notes(self, recent: Sequence[Note], start: int, end: int,
                             buffer: int) -> List[Note]:
        if self.latency_seconds > 0:
            await asyncio.sleep(self.latency_seconds)
        return coerce_notes(self.generate(list(recent), start, end, buffer))

    def generate(self, recent: List[Note], start: int, end: int, buffer: int) -> Iterable:
        raise NotImplementedError


class EchoModel(NoteModel):
    """Call and response: replay the lookback window right after the buffer."""
    def __init__(self, keyboard: Keyboard, transpose: int = 0, latency_seconds: float = 0.0):
        self.keyboard = keyboard
        self.transpose = transpose
        self.latency_seconds = latency_seconds

    def generate(self, recent, start, end, buffer):
        shift = (end - start) + buffer
        out = []
        for n in recent:
            k = n.key_index + self.transpose
            if 0 <= k < len(self.keyboard):
                out.append(Note(k, n.position + shift))
        return out


class RandomWalkModel(NoteModel):
    """Wander over the white keys starting from the last key played."""
    def __init__(self, keyboard: Keyboard, notes_per_call: int = 8, seed: Optional[int] = None,
                 latency_seconds: float = 0.0):
        self.keyboard = keyboard
        self.notes_per_call = max(0, notes_per_call)
        self.rng = random.Random(seed)
        self.latency_seconds = latency_seconds
        self._whites = [k.index for k in keyboard.white_keys()]

    def generate(self, recent, start, end, buffer):
        if not recent or self.notes_per_call == 0:
            return []
        last = recent[-1].key_index
        # nearest white key to the last one played
        w = min(range(len(self._whites)), key=lambda i: abs(self._whites[i] - last))
        step = max(1, (end - start) // self.notes_per_call)
        out = []
        for i in range(self.notes_per_call):
            w = min(max(w + self.rng.choice((-2, -1, 1, 2)), 0), len(self._whites) - 1)
            out.append(Note(self._whites[w], end + buffer + i * step))
        return out


def make_model(cfg: ModelConfig, keyboard: Keyboard) -> NoteModel:
    if cfg.mode == "random_walk":
        return RandomWalkModel(keyboard, cfg.notes_per_call, cfg.seed, cfg.latency_seconds)
    if cfg.mode != "echo":
        raise ValueError(f"Unknown model mode: {cfg.mode}")
    return EchoModel(keyboard, cfg.transpose, cfg.latency_seconds)
