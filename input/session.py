# input/session.py
from typing import Callable, List, Optional

from piano.geometry import KeyboardGeometry
from piano.keys import PianoKey

class InputSession:
    """Pointer state for one keyboard surface. Coordinates are keyboard-local."""
    def __init__(self, geometry: KeyboardGeometry, player,
                 on_first_interaction: Optional[Callable[[], None]] = None):
        self.geometry = geometry
        self.player = player
        self.on_first_interaction = on_first_interaction
        self.pointer_down = False
        self.hover_key: Optional[PianoKey] = None
        self.interacted = False

    def _interact(self):
        if not self.interacted:
            self.interacted = True
            if self.on_first_interaction is not None:
                self.on_first_interaction()

    def press(self, x: float, y: float) -> PianoKey:
        self._interact()
        self.pointer_down = True
        key = self.geometry.coord_to_key(x, y)
        self.hover_key = key
        self.player.trigger(key)
        return key

    def release(self):
        self.pointer_down = False

    def move(self, x: float, y: float) -> PianoKey:
        key = self.geometry.coord_to_key(x, y)
        if self.hover_key is None or self.hover_key.index != key.index:
            # 拖曳經過新的鍵才重新觸發
            if self.pointer_down:
                self.player.trigger(key)
            self.hover_key = key
        return key

    def leave(self):
        self.hover_key = None

    def press_keys(self, keys: List[PianoKey]):
        """Computer-keyboard shortcuts count as interaction too."""
        self._interact()
        for key in keys:
            self.player.trigger(key)
