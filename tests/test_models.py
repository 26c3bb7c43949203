import asyncio

import pytest

from config import ModelConfig
from generator.models import (EchoModel, RandomWalkModel, ModelInvocationFailure,
                              coerce_notes, make_model)
from notes.model import Note


def test_echo_replays_window_after_buffer(keyboard):
    m = EchoModel(keyboard)
    recent = [Note(5, 100), Note(7, 200)]
    out = asyncio.run(m.generate_notes(recent, 0, 768, 384))
    assert out == [Note(5, 100 + 768 + 384), Note(7, 200 + 768 + 384)]


def test_echo_transpose_drops_keys_off_the_keyboard(keyboard):
    m = EchoModel(keyboard, transpose=12)
    last = len(keyboard) - 1
    out = asyncio.run(m.generate_notes([Note(0, 0), Note(last, 0)], 0, 10, 5))
    assert out == [Note(12, 15)]


def test_random_walk_is_seeded_and_in_range(keyboard):
    a = RandomWalkModel(keyboard, notes_per_call=6, seed=7)
    b = RandomWalkModel(keyboard, notes_per_call=6, seed=7)
    recent = [Note(10, 50)]
    out_a = asyncio.run(a.generate_notes(recent, 0, 768, 384))
    out_b = asyncio.run(b.generate_notes(recent, 0, 768, 384))
    assert out_a == out_b
    assert len(out_a) == 6
    whites = {k.index for k in keyboard.white_keys()}
    assert all(n.key_index in whites for n in out_a)
    assert all(n.position >= 768 + 384 for n in out_a)


def test_random_walk_needs_context(keyboard):
    m = RandomWalkModel(keyboard, seed=1)
    assert asyncio.run(m.generate_notes([], 0, 768, 384)) == []


def test_coerce_notes_accepts_dicts_and_pairs():
    assert coerce_notes([{"key_index": 1, "position": 2}, (3, 4), Note(5, 6)]) == \
        [Note(1, 2), Note(3, 4), Note(5, 6)]


@pytest.mark.parametrize("raw", [None, [{"key": 1}], [(1,)], ["xy"]])
def test_coerce_notes_rejects_malformed(raw):
    with pytest.raises(ModelInvocationFailure):
        coerce_notes(raw)


def test_make_model(keyboard):
    assert isinstance(make_model(ModelConfig(), keyboard), EchoModel)
    assert isinstance(make_model(ModelConfig(mode="random_walk"), keyboard), RandomWalkModel)
    with pytest.raises(ValueError):
        make_model(ModelConfig(mode="nope"), keyboard)


@pytest.mark.parametrize("raw", [42, "notes", {"key_index": 1, "position": 2}])
def test_coerce_notes_rejects_non_sequences(raw):
    with pytest.raises(ModelInvocationFailure):
        coerce_notes(raw)


def test_coerce_notes_accepts_camel_case_records():
    assert coerce_notes([{"keyIndex": 2, "position": 9}]) == [Note(2, 9)]
