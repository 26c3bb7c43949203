import app as app_module
from config import AppConfig, KeyboardConfig
from piano.geometry import KeyboardGeometry


class HeadlessRenderer:
    def __init__(self, cfg, keyboard):
        self.geometry = KeyboardGeometry.fit(keyboard, cfg.window_w, 100)


def make_app(monkeypatch, synth):
    monkeypatch.setattr(app_module, "Renderer", HeadlessRenderer)
    monkeypatch.setattr(app_module, "Synth", lambda cfg: synth)
    return app_module.App(AppConfig(keyboard=KeyboardConfig(octaves=1)))


def test_status_bar_follows_played_notes(monkeypatch, synth):
    a = make_app(monkeypatch, synth)
    assert "LAST:" not in a._status_text()
    a.player.trigger(a.keyboard.key_for_midi(60), 96)
    assert a.last_played == "C4@96"
    assert "LAST: C4@96" in a._status_text()


def test_scheduled_notes_reach_the_status_bar(monkeypatch, synth):
    a = make_app(monkeypatch, synth)
    key = a.keyboard[0]
    a.transport.schedule_once(10, lambda pos: a.player.trigger(key, pos))
    a.transport.start()
    a.transport.step(1.0)
    assert a.last_played == f"{key.note_name}@10"
