import pytest

from config import AudioConfig
from audio.player import NotePlayer
from notes.history import NoteHistory
from piano.keys import Keyboard
from timeline.transport import Transport


class FakeSynth:
    def __init__(self):
        self.on = []
        self.off = []
        self._next = 0

    def note_on(self, pitch, vel=100):
        self._next += 1
        self.on.append((pitch, vel))
        return self._next

    def note_off(self, token):
        self.off.append(token)


@pytest.fixture
def keyboard():
    return Keyboard(3)


@pytest.fixture
def transport():
    return Transport(bpm=120.0, ppq=192)


@pytest.fixture
def history():
    return NoteHistory()


@pytest.fixture
def synth():
    return FakeSynth()


@pytest.fixture
def player(synth, history, transport):
    return NotePlayer(synth, history, transport, AudioConfig(note_seconds=0.25))
