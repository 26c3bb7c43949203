# audio/synth.py
import logging
import pygame.midi

from config import AudioConfig

DRUM_CH = 9  # GM: ch10(索引9)為打擊，避免使用

class Synth:
    """
    系統 MIDI 音源，每次觸發配一個 token：
    - note_on(pitch, vel) -> token (None when no output device)
    - note_off(token) 精準關閉該次觸發
    """
    def __init__(self, cfg: AudioConfig):
        self.cfg = cfg
        self.midi_out = None
        self.channels = [ch for ch in range(16) if ch != DRUM_CH]
        self._rr_index = 0
        self._next_token = 1
        self._tokens = {}  # token -> (ch, pitch)

        try:
            pygame.midi.init()
            dev = pygame.midi.get_default_output_id()
            if dev != -1:
                self.midi_out = pygame.midi.Output(dev)
                for ch in self.channels:
                    self.midi_out.set_instrument(cfg.program, ch)
                logging.info("Synth using system MIDI out (device %d)", dev)
            else:
                logging.warning("Synth: no MIDI output device found, notes will be silent")
        except Exception:
            logging.warning("Synth: MIDI init failed, notes will be silent", exc_info=True)

    @property
    def available(self) -> bool:
        return self.midi_out is not None

    def close(self):
        if self.midi_out is not None:
            self.all_notes_off()
            self.midi_out.close()
        pygame.midi.quit()
        self.midi_out = None

    def _alloc_channel(self) -> int:
        ch = self.channels[self._rr_index % len(self.channels)]
        self._rr_index += 1
        return ch

    def note_on(self, pitch: int, vel: int = 100):
        if not self.available:
            return None
        ch = self._alloc_channel()
        self.midi_out.note_on(int(pitch), max(1, min(int(vel), 127)), ch)
        t = self._next_token; self._next_token += 1
        self._tokens[t] = (ch, int(pitch))
        return t

    def note_off(self, token):
        if not self.available or token is None:
            return
        ch, p = self._tokens.pop(token, (None, None))
        if ch is not None:
            self.midi_out.note_off(p, 0, ch)

    def all_notes_off(self):
        if not self.available:
            return
        for ch, p in list(self._tokens.values()):
            self.midi_out.note_off(p, 0, ch)
        self._tokens.clear()
