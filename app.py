# app.py
import asyncio
import logging
import pygame
from typing import Optional

from config import AppConfig
from audio.player import NotePlayer
from audio.synth import Synth
from generator.models import make_model
from input.keymap import DEFAULT_KEYMAP, resolve_keymap
from input.session import InputSession
from midi.io import load_history, save_history
from notes.history import NoteHistory
from piano.keys import Keyboard
from render.renderer import Renderer
from timeline.scheduler import ModelScheduler
from timeline.transport import Transport
from utils.crashlog import install_async_handler, log_exception

FPS = 60
ROLL_BEATS = 16

class App:
    def __init__(self, cfg: AppConfig):
        self.cfg = cfg
        self.keyboard = Keyboard(cfg.keyboard.octaves)  # InvalidConfiguration 直接往外丟
        self.transport = Transport(cfg.transport.bpm, cfg.transport.ppq)
        self.history = NoteHistory(cfg.history.maxlen)
        self.renderer = Renderer(cfg.keyboard, self.keyboard)
        self.synth = Synth(cfg.audio)
        self.player = NotePlayer(self.synth, self.history, self.transport, cfg.audio)
        self.model = make_model(cfg.model, self.keyboard)
        self.scheduler = ModelScheduler(self.transport, self.history, self.model,
                                        self.keyboard, self.player, cfg.scheduler)
        self.session = InputSession(self.renderer.geometry, self.player,
                                    on_first_interaction=self._first_interaction)
        self.shortcuts = resolve_keymap(DEFAULT_KEYMAP, self.keyboard)
        self.last_played: Optional[str] = None
        self.player.add_listener(self._on_note)

        if cfg.history.seed_midi:
            self._seed_history(cfg.history.seed_midi)

    def _seed_history(self, path: str):
        try:
            for n in load_history(path, self.keyboard, self.transport.ppq):
                self.history.append(n)
            logging.info("Seeded history with %d notes from %s", len(self.history), path)
        except (OSError, ValueError, EOFError) as e:
            log_exception("seed_midi", e)
            logging.warning("Could not read %s, starting with an empty history", path)

    def _on_note(self, key, position: int):
        self.last_played = f"{key.note_name}@{position}"

    def _first_interaction(self):
        self.transport.start()
        self.scheduler.start()

    def _toggle_model(self):
        if self.scheduler.running:
            self.scheduler.stop()
        else:
            self.transport.start()
            self.scheduler.start()

    # ---------- events ----------
    def _handle_event(self, e) -> bool:
        if e.type == pygame.QUIT:
            return False
        if e.type == pygame.KEYDOWN:
            if e.key == pygame.K_ESCAPE:
                return False
            if e.key == pygame.K_SPACE:
                self._toggle_model()
            elif e.key in self.shortcuts:
                self.session.press_keys([self.shortcuts[e.key]])
        elif e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
            local = self.renderer.to_keyboard(e.pos)
            if local is not None:
                self.session.press(*local)
        elif e.type == pygame.MOUSEBUTTONUP and e.button == 1:
            self.session.release()
        elif e.type == pygame.MOUSEMOTION:
            local = self.renderer.to_keyboard(e.pos)
            if local is None:
                self.session.leave()
            else:
                self.session.move(*local)
        elif e.type == pygame.WINDOWLEAVE:
            self.session.leave()
            self.session.release()
        return True

    def _status_text(self) -> str:
        fields = [
            f"MODEL: {'ON' if self.scheduler.running else 'OFF'} ({self.cfg.model.mode})",
            f"TICK: {self.transport.position}",
            f"OCTAVES: {self.keyboard.octaves}",
            f"NOTES: {len(self.history)}",
            f"QUEUED: {self.transport.pending}",
        ]
        if self.last_played:
            fields.append(f"LAST: {self.last_played}")
        hover = self.session.hover_key
        if hover is not None:
            fields.append(f"{hover.note_name} (midi {hover.midi_note})")
        return "  |  ".join(fields)

    # ---------- main loop ----------
    async def run(self):
        install_async_handler(asyncio.get_running_loop())
        running = True
        try:
            while running:
                dt = self.renderer.tick()
                for e in pygame.event.get():
                    running = self._handle_event(e) and running
                if not running:
                    break

                self.transport.step(dt)
                self.player.update(dt)

                self.renderer.begin_frame()
                self.renderer.draw_status_bar(self._status_text())
                self.renderer.draw_notes(self.history, self.transport.position,
                                         self.transport.beats_to_ticks(ROLL_BEATS))
                self.renderer.draw_keyboard(hover=self.session.hover_key, active=self.player.sounding())
                self.renderer.end_frame()

                await asyncio.sleep(1 / FPS)
        finally:
            self.scheduler.stop()
            self.player.release_all()
            self.synth.close()
            self._record()
            pygame.quit()

    def _record(self):
        path: Optional[str] = self.cfg.history.record_midi
        if not path or not len(self.history):
            return
        try:
            save_history(path, self.history, self.keyboard, self.transport.ppq, self.transport.bpm)
        except OSError as e:
            log_exception("record_midi", e)
            logging.error("Could not write %s", path)
