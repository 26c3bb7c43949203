# render/renderer.py
import logging
import pygame
from typing import Iterable, Optional, Set

from config import KeyboardConfig
from notes.model import Note
from piano.geometry import KeyboardGeometry
from piano.keys import Keyboard, PianoKey

STATUS_H = 36
KEY_FILL = {
    'white': {'inactive': (254, 254, 254), 'active': (254, 243, 176)},
    'black': {'inactive': (89, 89, 89), 'active': (192, 146, 0)},
}
OUTLINE = (40, 40, 44)

class Renderer:
    def __init__(self, cfg: KeyboardConfig, keyboard: Keyboard):
        pygame.init()
        self.cfg = cfg
        self.keyboard = keyboard
        self.screen = pygame.display.set_mode((cfg.window_w, cfg.window_h))
        pygame.display.set_caption("model piano")
        self.font_small = pygame.font.SysFont("consolas", 14)
        self.clock = pygame.time.Clock()

        self.keyboard_h = max(1, int(cfg.window_w * cfg.keyboard_ratio))
        self.keyboard_y = cfg.window_h - self.keyboard_h
        self.geometry = KeyboardGeometry.fit(keyboard, cfg.window_w, self.keyboard_h)
        logging.debug("Renderer layout: unit=%.2fpx, keyboard_y=%d", self.geometry.unit_width, self.keyboard_y)

    def to_keyboard(self, pos) -> Optional[tuple]:
        """Window coordinate -> keyboard-local coordinate, None when above the keyboard."""
        x, y = pos
        if y < self.keyboard_y:
            return None
        return x, y - self.keyboard_y

    def tick(self) -> float:
        return self.clock.tick() / 1000.0

    def begin_frame(self):
        self.screen.fill((12, 12, 14))

    def end_frame(self):
        pygame.display.flip()

    def draw_status_bar(self, text: str):
        pygame.draw.rect(self.screen, (24, 24, 28), (0, 0, self.cfg.window_w, STATUS_H))
        pygame.draw.line(self.screen, (60, 60, 66), (0, STATUS_H), (self.cfg.window_w, STATUS_H), 1)
        surf = self.font_small.render(text, True, (200, 200, 210))
        self.screen.blit(surf, (10, (STATUS_H - surf.get_height()) // 2))

    # ------- note roll -------
    def draw_notes(self, notes: Iterable[Note], now: int, span_ticks: int):
        """Notes rise from the keyboard; a note `span_ticks` old reaches the status bar."""
        roll_h = self.keyboard_y - STATUS_H
        if roll_h <= 0 or span_ticks <= 0:
            return
        px_per_tick = roll_h / span_ticks
        bar_h = max(2, roll_h // 32)
        for n in notes:
            age = now - n.position
            if age < 0 or age > span_ticks:
                continue
            key = self.keyboard[n.key_index]
            x, _, w, _ = self.geometry.key_rect(key)
            y = self.keyboard_y - age * px_per_tick - bar_h
            color = (90, 160, 255) if not key.is_white else (80, 200, 120)
            pygame.draw.rect(self.screen, color, (x, y, w, bar_h), border_radius=3)

    # ------- piano -------
    def draw_keyboard(self, hover: Optional[PianoKey] = None, active: Optional[Set[int]] = None):
        active = active or set()
        oy = self.keyboard_y
        # 先畫白鍵，黑鍵蓋在上面
        for keys, fill in ((self.keyboard.white_keys(), KEY_FILL['white']),
                           (self.keyboard.black_keys(), KEY_FILL['black'])):
            for key in keys:
                x, y, w, h = self.geometry.key_rect(key)
                lit = key.index in active or (hover is not None and hover.index == key.index)
                rect = (x, oy + y, w, h)
                pygame.draw.rect(self.screen, fill['active'] if lit else fill['inactive'], rect)
                pygame.draw.rect(self.screen, OUTLINE, rect, 1)
