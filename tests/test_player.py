from notes.model import Note


def test_trigger_records_and_sounds(player, synth, history, transport, keyboard):
    key = keyboard[4]
    heard = []
    player.add_listener(lambda k, pos: heard.append((k.index, pos)))
    pos = player.trigger(key, 96)
    assert pos == 96
    assert synth.on == [(key.midi_note, 100)]
    assert list(history) == [Note(4, 96)]
    assert heard == [(4, 96)]


def test_trigger_defaults_to_transport_position(player, history, transport, keyboard):
    transport.start()
    transport.step(0.5)
    player.trigger(keyboard[0])
    assert history.latest() == Note(0, transport.position)


def test_notes_release_after_note_seconds(player, synth, keyboard):
    player.trigger(keyboard[1])
    assert player.sounding() == {1}
    player.update(0.1)
    assert synth.off == []
    player.update(0.2)
    assert synth.off == [1]
    assert player.sounding() == set()


def test_release_all(player, synth, keyboard):
    player.trigger(keyboard[1])
    player.trigger(keyboard[2])
    player.release_all()
    assert sorted(synth.off) == [1, 2]
