"""
Sine tone primitives.

Every tone is a sine oscillator shaped by a linear envelope that falls from
full gain at the start of the note to half gain at its end. Buffers are mono
float32 at a fixed 44.1 kHz.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TypeAlias

import numpy as np
from numpy.typing import NDArray

from .errors import InvalidDurationError

SAMPLE_RATE = 44_100
REFERENCE_FREQUENCY = 440.0
ENVELOPE_DROP = 0.5

FloatArray: TypeAlias = NDArray[np.float32]
TimeArray: TypeAlias = NDArray[np.float64]


def frequency_of(semitones: float, reference: float = REFERENCE_FREQUENCY) -> float:
    """Equal-tempered frequency ``semitones`` away from the reference pitch."""
    return reference * 2 ** (semitones / 12)


def envelope(t: TimeArray | float, length: float) -> TimeArray | float:
    """Linear gain ramp from 1.0 at ``t=0`` to 0.5 at ``t=length``."""
    return 1.0 - (ENVELOPE_DROP / length) * t


def time_cursor(duration: float, sr: int = SAMPLE_RATE) -> TimeArray:
    """Sample times from 0, stepped by ``1/sr``, strictly below ``duration``.

    The cursor is accumulated step by step (not computed as ``k / sr``), so
    the number of samples may differ from ``round(duration * sr)`` by one.
    """
    step = 1.0 / sr
    # two extra slots guarantee the running sum passes ``duration``
    limit = int(math.ceil(duration * sr)) + 2
    cursor = np.empty(limit, dtype=np.float64)
    cursor[0] = 0.0
    np.cumsum(np.full(limit - 1, step, dtype=np.float64), out=cursor[1:])
    return cursor[cursor < duration]


def render_tone(frequency: float, volume: float, duration: float) -> FloatArray:
    """Render ``duration`` seconds of an enveloped sine at ``frequency``.

    ``volume`` is applied as-is; a frequency of 0 yields silence of the same
    length.
    """
    if not duration > 0 or math.isinf(duration):
        raise InvalidDurationError(
            f"Note duration must be a positive number of seconds, got {duration!r}"
        )
    t = time_cursor(duration)
    samples = volume * np.sin(2 * np.pi * frequency * t) * envelope(t, duration)
    return samples.astype(np.float32)


@dataclass(frozen=True, slots=True)
class ToneSynthesizer:
    """Turns semitone offsets into enveloped sine buffers."""

    reference_frequency: float = REFERENCE_FREQUENCY

    @property
    def sample_rate(self) -> int:
        return SAMPLE_RATE

    def frequency_of(self, semitones: float) -> float:
        return frequency_of(semitones, self.reference_frequency)

    def render(self, frequency: float, volume: float, duration: float) -> FloatArray:
        return render_tone(frequency, volume, duration)

    def render_note(self, semitones: int | None, volume: float, duration: float) -> FloatArray:
        """Render a pitched note, or a rest when ``semitones`` is ``None``."""
        frequency = 0.0 if semitones is None else self.frequency_of(semitones)
        return self.render(frequency, volume, duration)
