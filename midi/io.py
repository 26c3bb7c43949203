# midi/io.py
import logging
import mido
from typing import Iterable, List
from notes.model import Note
from piano.keys import Keyboard

def history_to_midi(notes: Iterable[Note], keyboard: Keyboard, ppq: int = 192,
                    bpm: float = 120.0, note_ticks: int = 48) -> mido.MidiFile:
    mid = mido.MidiFile(ticks_per_beat=ppq)
    track = mido.MidiTrack()
    mid.tracks.append(track)
    track.append(mido.MetaMessage('set_tempo', tempo=mido.bpm2tempo(bpm), time=0))

    events = []  # (abs_tick, order, msg); note_off sorts before note_on on the same tick
    for n in notes:
        if not 0 <= n.key_index < len(keyboard):
            continue
        pitch = keyboard[n.key_index].midi_note
        events.append((n.position, 1, mido.Message('note_on', note=pitch, velocity=100)))
        events.append((n.position + note_ticks, 0, mido.Message('note_off', note=pitch, velocity=0)))
    events.sort(key=lambda e: (e[0], e[1]))

    now = 0
    for tick, _, msg in events:
        track.append(msg.copy(time=tick - now))
        now = tick
    track.append(mido.MetaMessage('end_of_track', time=0))
    return mid

def save_history(path: str, notes: Iterable[Note], keyboard: Keyboard, ppq: int = 192,
                 bpm: float = 120.0, note_ticks: int = 48):
    history_to_midi(notes, keyboard, ppq, bpm, note_ticks).save(path)
    logging.info("Note history written to %s", path)

def load_history(path: str, keyboard: Keyboard, ppq: int = 192) -> List[Note]:
    """Note-ons of a MIDI file as Notes on `keyboard`, positions rescaled to `ppq`."""
    mid = mido.MidiFile(path)
    scale = ppq / mid.ticks_per_beat
    tick = 0
    notes: List[Note] = []
    skipped = 0
    for msg in mido.merge_tracks(mid.tracks):
        tick += msg.time
        if msg.type == 'note_on' and msg.velocity > 0:
            key = keyboard.key_for_midi(msg.note)
            if key is None:
                skipped += 1
                continue
            notes.append(Note(key.index, int(round(tick * scale))))
    if skipped:
        logging.warning("%d notes in %s are outside the keyboard and were skipped", skipped, path)
    notes.sort(key=lambda n: n.position)
    return notes
