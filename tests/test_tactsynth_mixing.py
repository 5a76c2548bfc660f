import numpy as np
import pytest

from tactsynth.mixing import concat_beats, mix_beat, mix_measure
from tactsynth.synth import render_tone


def test_two_identical_notes_match_one_note() -> None:
    note = render_tone(440.0, 0.7, 0.25)
    assert np.allclose(mix_beat([note, note]), note)
    assert np.allclose(mix_beat([note]), note)


def test_beat_is_equal_weight_average() -> None:
    a = np.array([0.3, 0.6, -0.9], dtype=np.float32)
    b = np.array([0.0, 0.3, 0.3], dtype=np.float32)
    c = np.array([0.6, 0.0, 0.0], dtype=np.float32)
    assert np.allclose(mix_beat([a, b, c]), [0.3, 0.3, -0.2])


def test_beat_truncates_to_shortest_note() -> None:
    long = np.ones(6, dtype=np.float32)
    short = np.zeros(4, dtype=np.float32)
    mixed = mix_beat([long, short])
    assert len(mixed) == 4
    assert np.allclose(mixed, 0.5)


def test_empty_beat_is_rejected() -> None:
    with pytest.raises(ValueError):
        mix_beat([])


def test_measure_sums_without_normalization() -> None:
    a = np.array([0.25, 0.5, 0.75, 1.0], dtype=np.float32)
    b = np.array([0.5, 0.5, -0.25], dtype=np.float32)
    mixed = mix_measure([a, b])
    assert mixed.dtype == np.float32
    assert len(mixed) == 3
    assert np.allclose(mixed, [0.75, 1.0, 0.5])


def test_measure_length_is_minimum_channel_length() -> None:
    channels = [render_tone(440.0, 0.5, seconds) for seconds in (0.5, 0.2, 0.3)]
    mixed = mix_measure(channels)
    assert len(mixed) == min(len(channel) for channel in channels)
    expected = sum(channel[: len(mixed)] for channel in channels)
    assert np.allclose(mixed, expected, atol=1e-6)


def test_empty_measure_is_empty() -> None:
    assert len(mix_measure([])) == 0


def test_concat_beats_keeps_order() -> None:
    first = np.array([1.0], dtype=np.float32)
    second = np.array([2.0, 3.0], dtype=np.float32)
    assert concat_beats([first, second]).tolist() == [1.0, 2.0, 3.0]
    assert len(concat_beats([])) == 0
